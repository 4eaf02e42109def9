"""
Profile Routes - API endpoints for the signed-in user's account profile.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import ProfileUpdateRequest
from models_orm import UserORM
from service_modules.profile_service import ProfileService, get_profile_service

router = APIRouter(tags=["Profile"])


@router.get("/api/profile")
async def get_profile(
    user: UserORM = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """User fields, plus the trainer profile and session defaults for trainers."""
    return service.get_profile(user.id)


@router.put("/api/profile")
async def update_profile(
    data: ProfileUpdateRequest,
    user: UserORM = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.update_profile(user.id, data)
