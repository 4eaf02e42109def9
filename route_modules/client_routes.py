"""
Client Routes - API endpoints for clients: check-ins, progress, nutrition,
finding a trainer and the onboarding profile.
"""
from fastapi import APIRouter, Depends, Query, Response
from typing import List, Optional
from auth import get_current_client
from models import (
    CheckInRequest, ProgressEntryRequest, NutritionLogRequest,
    TrainerConnectRequest, ClientProfileUpdate
)
from models_orm import UserORM
from service_modules.client_service import ClientService, get_client_service
from sockets import manager

router = APIRouter()


def _split(values: Optional[List[str]]) -> Optional[List[str]]:
    """Accept both repeated query params and comma-separated values."""
    if not values:
        return None
    return [v.strip() for value in values for v in value.split(",") if v.strip()]


# --- CHECK-INS ---

@router.post("/api/client/check-in")
async def submit_check_in(
    data: CheckInRequest,
    response: Response,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    """Create or update today's check-in (201 on create, 200 on update)."""
    result = service.submit_check_in(client.id, data)
    response.status_code = 201 if result["created"] else 200

    for alert in result["alerts"]:
        await manager.send_to_user(result["trainer_id"], {
            "type": "new_alert",
            "alert": alert,
            "client_name": client.name
        })
    return result["check_in"]


@router.get("/api/client/check-in/today")
async def get_today_check_in(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_today_check_in(client.id)


@router.get("/api/client/check-ins")
async def get_check_ins(
    limit: int = 30,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_check_ins(client.id, limit)


# --- PROGRESS ---

@router.get("/api/client/progress/recent")
async def get_recent_progress(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_recent_progress(client.id)


@router.get("/api/client/progress")
async def get_progress(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    """Progress entries and completed check-ins, newest first."""
    return service.get_progress(client.id)


@router.post("/api/client/progress", status_code=201)
async def create_progress_entry(
    data: ProgressEntryRequest,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.create_progress_entry(client.id, data)


# --- NUTRITION ---

@router.get("/api/client/nutrition/goals")
async def get_nutrition_goals(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_nutrition_goals(client.id)


@router.get("/api/client/nutrition/logs")
async def get_nutrition_logs(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_nutrition_logs(client.id, start_date, end_date)


@router.post("/api/client/nutrition/logs", status_code=201)
async def create_nutrition_log(
    data: NutritionLogRequest,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.create_nutrition_log(client.id, data)


# --- TRAINER ---

@router.get("/api/client/trainer")
async def get_trainer(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_trainer(client.id)


@router.delete("/api/client/trainer")
async def disconnect_trainer(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.disconnect_trainer(client.id)


@router.get("/api/client/trainers/search")
async def search_trainers(
    q: Optional[str] = None,
    specialties: Optional[List[str]] = Query(None),
    fitness_goals: Optional[List[str]] = Query(None),
    client_age_ranges: Optional[List[str]] = Query(None),
    special_needs: Optional[List[str]] = Query(None),
    location: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    """Search trainers by name, bio and profile tags."""
    return service.search_trainers(
        q=q,
        specialties=_split(specialties),
        fitness_goals=_split(fitness_goals),
        client_age_ranges=_split(client_age_ranges),
        special_needs=_split(special_needs),
        location=location
    )


@router.post("/api/client/trainer/request", status_code=201)
async def request_trainer(
    data: TrainerConnectRequest,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    """Ask a trainer to take the client on."""
    result = service.request_trainer(client.id, data)
    await manager.send_to_user(data.trainer_id, {
        "type": "new_trainer_request",
        "request": result["request"],
        "client_name": client.name
    })
    return result


@router.get("/api/client/trainer/requests")
async def get_trainer_requests(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_trainer_requests(client.id)


# --- ONBOARDING PROFILE ---

@router.get("/api/client/profile")
async def get_profile(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_profile(client.id)


@router.put("/api/client/profile")
async def update_profile(
    data: ClientProfileUpdate,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    """Save onboarding answers and mark onboarding complete."""
    return service.update_profile(client.id, data)


@router.get("/api/client/profile/onboarding-status")
async def get_onboarding_status(
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.get_onboarding_status(client.id)
