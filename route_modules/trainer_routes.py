"""
Trainer Routes - API endpoints for trainers managing clients, workouts and
connection requests.
"""
from fastapi import APIRouter, Depends
from typing import Optional
from auth import get_current_trainer
from models import (
    CreateClientRequest, CreateWorkoutRequest, AssignWorkoutRequest,
    RespondToRequestBody, ClientMetricRequest, ClientProfileUpdate
)
from models_orm import UserORM
from service_modules.trainer_service import TrainerService, get_trainer_service
from sockets import manager

router = APIRouter()


# --- CLIENTS ---

@router.get("/api/trainer/clients")
async def get_clients(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    """Get all clients linked to the trainer."""
    return service.get_clients(trainer.id)


@router.post("/api/trainer/clients", status_code=201)
async def create_client(
    data: CreateClientRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    """Create a client account already linked to the trainer."""
    return service.create_client(trainer.id, data)


@router.get("/api/trainer/clients/{client_id}")
async def get_client(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_client(trainer.id, client_id)


@router.get("/api/trainer/clients/{client_id}/workouts")
async def get_client_workouts(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_client_workouts(trainer.id, client_id)


@router.get("/api/trainer/clients/{client_id}/metrics")
async def get_client_metrics(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    """Progress entries and check-ins for a client."""
    return service.get_client_metrics(trainer.id, client_id)


@router.post("/api/trainer/clients/{client_id}/metrics", status_code=201)
async def add_client_metric(
    client_id: str,
    data: ClientMetricRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.add_client_metric(trainer.id, client_id, data)


@router.put("/api/trainer/clients/{client_id}/onboarding")
async def update_client_onboarding(
    client_id: str,
    data: ClientProfileUpdate,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.update_client_onboarding(trainer.id, client_id, data)


# --- WORKOUTS ---

@router.get("/api/trainer/workouts")
async def get_workouts(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_workouts(trainer.id)


@router.post("/api/trainer/workouts", status_code=201)
async def create_workout(
    data: CreateWorkoutRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.create_workout(trainer.id, data)


@router.post("/api/trainer/workouts/{workout_id}/assign", status_code=201)
async def assign_workout(
    workout_id: str,
    data: AssignWorkoutRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    """Assign a workout to one of the trainer's clients."""
    return service.assign_workout(trainer.id, workout_id, data)


# --- CONNECTION REQUESTS ---

@router.get("/api/trainer/requests")
async def get_pending_requests(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_requests(trainer.id, pending_only=True)


@router.get("/api/trainer/requests/all")
async def get_all_requests(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_requests(trainer.id, pending_only=False)


@router.get("/api/trainer/requests/unread-count")
async def get_unread_request_count(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.get_unread_request_count(trainer.id)


@router.put("/api/trainer/requests/mark-read")
async def mark_requests_read(
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return service.mark_requests_read(trainer.id)


async def _respond(trainer: UserORM, request_id: str, accept: bool, body: Optional[RespondToRequestBody],
                   service: TrainerService) -> dict:
    result = service.respond_to_request(
        trainer.id, request_id, accept, body.trainer_response if body else None
    )
    await manager.send_to_user(result["request"]["client_id"], {
        "type": "trainer_request_update",
        "status": result["request"]["status"],
        "trainer_id": trainer.id,
        "trainer_name": trainer.name
    })
    return result


@router.post("/api/trainer/requests/{request_id}/accept")
async def accept_request(
    request_id: str,
    body: Optional[RespondToRequestBody] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    """Accept a pending request; the client becomes the trainer's client."""
    return await _respond(trainer, request_id, True, body, service)


@router.post("/api/trainer/requests/{request_id}/reject")
async def reject_request(
    request_id: str,
    body: Optional[RespondToRequestBody] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service)
):
    return await _respond(trainer, request_id, False, body, service)
