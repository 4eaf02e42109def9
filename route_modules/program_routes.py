"""
Program Routes - multi-week programs, templates, the exercise library and
the sessions a program puts on the calendar.

Static paths are declared before /api/programs/{program_id}.
"""
from fastapi import APIRouter, Depends
from typing import Optional
from auth import get_current_user, get_current_trainer, get_current_client
from models import (
    CreateProgramRequest, UpdateProgramRequest, WeekNameRequest, AssignProgramRequest,
    CreateSessionsRequest, CompleteProgramWorkoutRequest, RecommendProgramRequest,
    FromTemplateRequest
)
from models_orm import UserORM
from service_modules.program_service import ProgramService, get_program_service
from sockets import manager

router = APIRouter(tags=["Programs"])


@router.post("/api/programs", status_code=201)
async def create_program(
    data: CreateProgramRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    """Create a program with its workouts and exercises."""
    return service.create_program(trainer.id, data)


@router.get("/api/programs/trainer")
async def get_trainer_programs(
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_trainer_programs(trainer.id)


@router.get("/api/programs/client/assigned")
async def get_my_programs(
    client: UserORM = Depends(get_current_client),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_client_programs(client.id)


@router.get("/api/programs/client/{client_id}/assigned")
async def get_client_programs(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_trainer_client_programs(trainer.id, client_id)


# --- TEMPLATES ---

@router.get("/api/programs/templates/all")
async def get_templates(
    experience_level: Optional[str] = None,
    goal: Optional[str] = None,
    equipment: Optional[str] = None,
    split_type: Optional[str] = None,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    """System templates first, then the user's own."""
    return service.get_templates(user.id, experience_level, goal, equipment, split_type)


@router.get("/api/programs/templates/{template_id}")
async def get_template(
    template_id: str,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_template(template_id)


@router.post("/api/programs/from-template/{template_id}", status_code=201)
async def create_from_template(
    template_id: str,
    data: Optional[FromTemplateRequest] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    """Copy a template into a new program owned by the trainer."""
    return service.create_from_template(trainer.id, template_id, data or FromTemplateRequest())


@router.post("/api/programs/recommend")
async def recommend_templates(
    data: RecommendProgramRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    """Top three templates for a client's experience, goal, schedule and equipment."""
    return service.recommend_templates(data)


# --- EXERCISE LIBRARY ---

@router.get("/api/programs/exercises/search")
async def search_exercises(
    search: Optional[str] = None,
    q: Optional[str] = None,
    muscle_group: Optional[str] = None,
    movement_pattern: Optional[str] = None,
    equipment: Optional[str] = None,
    difficulty: Optional[str] = None,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    return service.search_exercises(search or q, muscle_group, movement_pattern, equipment, difficulty)


@router.get("/api/programs/exercises/{exercise_name}/substitutions")
async def get_substitutions(
    exercise_name: str,
    equipment: Optional[str] = None,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_substitutions(exercise_name, equipment)


# --- CLIENT COMPLETION ---

@router.post("/api/programs/workout/{workout_id}/complete")
async def complete_program_workout(
    workout_id: str,
    data: Optional[CompleteProgramWorkoutRequest] = None,
    client: UserORM = Depends(get_current_client),
    service: ProgramService = Depends(get_program_service)
):
    return service.complete_workout(client.id, workout_id, data or CompleteProgramWorkoutRequest())


# --- SINGLE PROGRAM ---

@router.get("/api/programs/{program_id}")
async def get_program(
    program_id: str,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    """Program with week names and workouts ordered by week, day and position."""
    return service.get_program(user, program_id)


@router.put("/api/programs/{program_id}")
async def update_program(
    program_id: str,
    data: UpdateProgramRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.update_program(trainer.id, program_id, data)


@router.delete("/api/programs/{program_id}")
async def delete_program(
    program_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.delete_program(trainer.id, program_id)


@router.put("/api/programs/{program_id}/week/{week_number}/name")
async def update_week_name(
    program_id: str,
    week_number: int,
    data: WeekNameRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.update_week_name(trainer.id, program_id, week_number, data.week_name)


@router.post("/api/programs/{program_id}/assign")
async def assign_program(
    program_id: str,
    data: AssignProgramRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    """Assign the program and schedule a session for each of its workouts."""
    result = service.assign_program(trainer.id, program_id, data)
    await manager.send_to_user(data.client_id, {
        "type": "program_assigned",
        "program_id": program_id,
        "sessions_created": result["sessionsCreated"]
    })
    return result


@router.get("/api/programs/{program_id}/assigned-clients")
async def get_assigned_clients(
    program_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.get_assigned_clients(trainer.id, program_id)


@router.post("/api/programs/{program_id}/workout/{workout_id}/create-sessions")
async def create_workout_sessions(
    program_id: str,
    workout_id: str,
    data: CreateSessionsRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: ProgramService = Depends(get_program_service)
):
    return service.create_workout_sessions(trainer.id, program_id, workout_id, data)


@router.get("/api/programs/{program_id}/calendar")
async def get_program_calendar(
    program_id: str,
    client_id: Optional[str] = None,
    user: UserORM = Depends(get_current_user),
    service: ProgramService = Depends(get_program_service)
):
    """Program workouts on calendar dates, grouped with the client's sessions."""
    return service.get_program_calendar(user, program_id, client_id)
