"""
Schedule Routes - API endpoints for training sessions and trainer availability.
"""
from fastapi import APIRouter, Depends
from typing import Optional
from auth import get_current_trainer, get_current_client
from models import (
    CreateSessionRequest, UpdateSessionRequest, CancelSessionRequest,
    WorkoutSessionsUpdate, AvailabilityRequest
)
from models_orm import UserORM
from service_modules.schedule_service import ScheduleService, get_schedule_service

router = APIRouter()


# --- TRAINER ---

@router.get("/api/schedule/trainer/upcoming")
async def get_trainer_upcoming(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    limit: Optional[int] = 100,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Scheduled and confirmed sessions from today (or startDate) on."""
    return service.get_trainer_upcoming(trainer.id, startDate, endDate, limit)


@router.get("/api/schedule/trainer/calendar")
async def get_trainer_calendar(
    start: Optional[str] = None,
    end: Optional[str] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_trainer_calendar(trainer.id, start, end)


@router.get("/api/schedule/trainer/clients/{client_id}/sessions")
async def get_client_sessions(
    client_id: str,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_client_sessions(trainer.id, client_id, startDate, endDate)


@router.post("/api/schedule/trainer/sessions", status_code=201)
async def create_session(
    data: CreateSessionRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Create a single session or a recurring series."""
    return service.create_session(trainer.id, data)


@router.put("/api/schedule/trainer/sessions/{session_id}")
async def update_session(
    session_id: str,
    data: UpdateSessionRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.update_session(trainer.id, session_id, data)


@router.post("/api/schedule/trainer/sessions/{session_id}/cancel")
async def cancel_session(
    session_id: str,
    series: bool = False,
    data: Optional[CancelSessionRequest] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Cancel a session; ?series=true also cancels the later sessions of its series."""
    return service.cancel_session(trainer.id, session_id, data.reason if data else None, series)


@router.get("/api/schedule/trainer/workout/{workout_id}/sessions")
async def get_workout_sessions(
    workout_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_workout_sessions(trainer.id, workout_id)


@router.put("/api/schedule/trainer/workout/{workout_id}/sessions")
async def update_workout_sessions(
    workout_id: str,
    data: WorkoutSessionsUpdate,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.update_workout_sessions(trainer.id, workout_id, data)


@router.get("/api/schedule/trainer/availability")
async def get_availability(
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_availability(trainer.id)


@router.post("/api/schedule/trainer/availability", status_code=201)
async def set_availability(
    data: AvailabilityRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.set_availability(trainer.id, data)


# --- CLIENT ---

@router.get("/api/schedule/client/upcoming")
async def get_client_upcoming(
    client: UserORM = Depends(get_current_client),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_client_upcoming(client.id)


@router.get("/api/schedule/client/today-completed")
async def get_today_completed(
    client: UserORM = Depends(get_current_client),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_today_completed(client.id)
