"""
Analytics Routes - trainer dashboard figures and the alerts widget.
"""
from fastapi import APIRouter, Depends
from auth import get_current_trainer
from models_orm import UserORM
from service_modules.analytics_service import AnalyticsService, get_analytics_service

router = APIRouter(tags=["Analytics"])


@router.get("/api/trainer/analytics")
async def get_analytics(
    days: str = "30",
    trainer: UserORM = Depends(get_current_trainer),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Financial, client, workout and check-in figures for the last `days` days (or "all")."""
    return service.get_analytics(trainer.id, days)


@router.get("/api/trainer/analytics/alerts-widget")
async def get_alerts_widget(
    trainer: UserORM = Depends(get_current_trainer),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_alerts_widget(trainer.id)
