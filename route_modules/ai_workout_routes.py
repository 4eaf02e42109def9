"""
AI Workout Routes - generated and customized workouts for a trainer's client.
"""
from fastapi import APIRouter, Depends
from auth import get_current_trainer
from models import GenerateWorkoutRequest, CustomizeWorkoutRequest
from models_orm import UserORM
from service_modules.ai_workout_service import AIWorkoutService, get_ai_workout_service

router = APIRouter(tags=["AI Workouts"])


@router.post("/api/trainer/workouts/ai/generate")
async def generate_workout(
    data: GenerateWorkoutRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: AIWorkoutService = Depends(get_ai_workout_service)
):
    """Draft a workout from the client's onboarding data and the given preferences."""
    return service.generate_workout(trainer.id, data)


@router.post("/api/trainer/workouts/ai/customize")
async def customize_workout(
    data: CustomizeWorkoutRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: AIWorkoutService = Depends(get_ai_workout_service)
):
    return service.customize_workout(trainer.id, data)
