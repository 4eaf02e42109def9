"""
Alert Routes - trainer alerts raised by client check-ins.
"""
from fastapi import APIRouter, Depends
from typing import Optional
from auth import get_current_trainer
from models_orm import UserORM
from service_modules.alert_service import AlertService, get_alert_service

router = APIRouter(tags=["Alerts"])


@router.get("/api/trainer/alerts")
async def get_alerts(
    unread_only: bool = False,
    limit: Optional[int] = 50,
    trainer: UserORM = Depends(get_current_trainer),
    service: AlertService = Depends(get_alert_service)
):
    return service.get_alerts(trainer.id, unread_only, limit)


@router.get("/api/trainer/alerts/unread-count")
async def get_unread_count(
    trainer: UserORM = Depends(get_current_trainer),
    service: AlertService = Depends(get_alert_service)
):
    return service.get_unread_count(trainer.id)


@router.put("/api/trainer/alerts/read-all")
async def mark_all_read(
    trainer: UserORM = Depends(get_current_trainer),
    service: AlertService = Depends(get_alert_service)
):
    return service.mark_all_read(trainer.id)


@router.put("/api/trainer/alerts/{alert_id}/read")
async def mark_read(
    alert_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: AlertService = Depends(get_alert_service)
):
    return service.mark_read(trainer.id, alert_id)


@router.delete("/api/trainer/alerts/{alert_id}")
async def delete_alert(
    alert_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: AlertService = Depends(get_alert_service)
):
    return service.delete_alert(trainer.id, alert_id)
