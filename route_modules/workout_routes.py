"""
Workout Routes - API endpoints for viewing and completing assigned workouts.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
from auth import get_current_user
from models import CompleteWorkoutRequest
from models_orm import UserORM
from service_modules.workout_service import WorkoutService, get_workout_service

router = APIRouter()


@router.get("/api/workouts/{workout_id}")
async def get_workout(
    workout_id: str,
    user: UserORM = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service)
):
    """Get a workout with its exercises in order."""
    return service.get_workout(workout_id)


@router.post("/api/workouts/{workout_id}/complete")
async def complete_workout(
    workout_id: str,
    data: Optional[CompleteWorkoutRequest] = None,
    user: UserORM = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service)
):
    """Mark an assigned workout as complete and log it."""
    if user.role != "client":
        raise HTTPException(status_code=403, detail="Only clients can complete workouts")
    return service.complete_workout(user.id, workout_id, data or CompleteWorkoutRequest())
