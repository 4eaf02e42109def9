"""
Auth Routes - registration, login and the current user.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import RegisterRequest, LoginRequest
from models_orm import UserORM
from service_modules.auth_service import AuthService, get_auth_service

router = APIRouter()


@router.post("/api/auth/register", status_code=201)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create a trainer or client account and return a token."""
    return service.register_user(data)


@router.post("/api/auth/login")
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.login(data)


@router.get("/api/auth/me")
async def get_me(
    user: UserORM = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Current user; trainers also get bio, certifications and specialties."""
    return service.get_me(user.id)
