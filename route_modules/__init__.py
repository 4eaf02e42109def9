"""
Routes package - organized API routes.

This package provides modular route definitions.
Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .auth_routes import router as auth_router
from .profile_routes import router as profile_router
from .trainer_routes import router as trainer_router
from .alert_routes import router as alert_router
from .analytics_routes import router as analytics_router
from .ai_workout_routes import router as ai_workout_router
from .workout_routes import router as workout_router
from .client_routes import router as client_router
from .message_routes import router as message_router
from .payment_routes import router as payment_router
from .program_routes import router as program_router
from .schedule_routes import router as schedule_router
from .nutrition_routes import router as nutrition_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(auth_router, tags=["auth"])
combined_router.include_router(profile_router, tags=["profile"])
combined_router.include_router(trainer_router, tags=["trainer"])
combined_router.include_router(alert_router, tags=["alerts"])
combined_router.include_router(analytics_router, tags=["analytics"])
combined_router.include_router(ai_workout_router, tags=["ai-workouts"])
combined_router.include_router(workout_router, tags=["workouts"])
combined_router.include_router(client_router, tags=["client"])
combined_router.include_router(message_router, tags=["messages"])
combined_router.include_router(payment_router, tags=["payments"])
combined_router.include_router(program_router, tags=["programs"])
combined_router.include_router(schedule_router, tags=["schedule"])
combined_router.include_router(nutrition_router, tags=["nutrition"])

__all__ = [
    'combined_router', 'auth_router', 'profile_router', 'trainer_router', 'alert_router',
    'analytics_router', 'ai_workout_router', 'workout_router', 'client_router', 'message_router',
    'payment_router', 'program_router', 'schedule_router', 'nutrition_router'
]
