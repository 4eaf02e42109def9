"""
Nutrition Routes - calculator, client nutrition profiles, foods, plans,
logs and meal recommendations.

Static paths (/plans/active, /plans/trainer, /logs/totals) are declared
before their parameterised siblings.
"""
from fastapi import APIRouter, Body, Depends, Response
from typing import Any, Dict, Optional
from auth import get_current_user, get_current_trainer, get_current_client
from models import (
    BMRRequest, TDEERequest, MacrosRequest, FullCalculationRequest,
    NutritionPlanRequest, NutritionLogRequest, MealRecommendationRequest, MealSelectRequest
)
from models_orm import UserORM
from service_modules.nutrition_service import NutritionService, get_nutrition_service
from service_modules.client_service import ClientService, get_client_service

router = APIRouter(tags=["Nutrition"])


# --- CALCULATOR ---

@router.post("/api/nutrition/calculate/bmr")
async def calculate_bmr(
    data: BMRRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    """Mifflin-St Jeor basal metabolic rate."""
    return service.calculate_bmr(data)


@router.post("/api/nutrition/calculate/tdee")
async def calculate_tdee(
    data: TDEERequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.calculate_tdee(data)


@router.post("/api/nutrition/calculate/macros")
async def calculate_macros(
    data: MacrosRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.calculate_macros(data)


@router.post("/api/nutrition/calculate")
async def calculate_all(
    data: FullCalculationRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    """BMR, TDEE and macro targets in one call."""
    return service.calculate_all(data)


# --- PROFILES ---

@router.get("/api/nutrition/profiles/{client_id}")
async def get_profile(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_profile(trainer.id, client_id)


@router.post("/api/nutrition/profiles/{client_id}")
async def save_profile(
    client_id: str,
    response: Response,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    """Create (201) or update (200) a client's nutrition profile."""
    profile, created = service.save_profile(trainer.id, client_id, payload)
    response.status_code = 201 if created else 200
    return profile


# --- FOODS ---

@router.get("/api/nutrition/foods/search")
async def search_foods(
    search: Optional[str] = None,
    category: Optional[str] = None,
    is_vegetarian: Optional[str] = None,
    is_vegan: Optional[str] = None,
    is_gluten_free: Optional[str] = None,
    is_dairy_free: Optional[str] = None,
    is_nut_free: Optional[str] = None,
    user: UserORM = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service)
):
    flags = {
        "is_vegetarian": is_vegetarian,
        "is_vegan": is_vegan,
        "is_gluten_free": is_gluten_free,
        "is_dairy_free": is_dairy_free,
        "is_nut_free": is_nut_free,
    }
    return service.search_foods(search, category, flags)


@router.get("/api/nutrition/foods/{food_id}")
async def get_food(
    food_id: str,
    user: UserORM = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_food(food_id)


# --- PLANS ---

@router.post("/api/nutrition/plans", status_code=201)
async def create_plan(
    data: NutritionPlanRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    """Create a plan (optionally with meals and foods); it becomes the client's active plan."""
    return service.create_plan(trainer.id, data)


@router.get("/api/nutrition/plans/client/{client_id}")
async def get_client_plans(
    client_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_client_plans(trainer.id, client_id)


@router.get("/api/nutrition/plans/active")
async def get_active_plan(
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_active_plan(client.id)


@router.get("/api/nutrition/plans/trainer")
async def get_trainer_plans(
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_trainer_plans(trainer.id)


@router.get("/api/nutrition/plans/{plan_id}")
async def get_plan(
    plan_id: str,
    user: UserORM = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_plan(user, plan_id)


@router.put("/api/nutrition/plans/{plan_id}")
async def update_plan(
    plan_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.update_plan(trainer.id, plan_id, payload)


@router.delete("/api/nutrition/plans/{plan_id}")
async def delete_plan(
    plan_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.delete_plan(trainer.id, plan_id)


# --- LOGS ---

@router.get("/api/nutrition/logs")
async def get_logs(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_logs(client.id, start_date, end_date)


@router.post("/api/nutrition/logs", status_code=201)
async def create_log(
    data: NutritionLogRequest,
    client: UserORM = Depends(get_current_client),
    service: ClientService = Depends(get_client_service)
):
    return service.create_nutrition_log(client.id, data)


@router.get("/api/nutrition/logs/totals")
async def get_log_totals(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    """Per-day calorie and macro totals, newest first."""
    return service.get_log_totals(client.id, start_date, end_date)


@router.delete("/api/nutrition/logs/{log_id}")
async def delete_log(
    log_id: str,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.delete_log(client.id, log_id)


# --- MEAL RECOMMENDATIONS ---

@router.post("/api/nutrition/meals/recommendations", status_code=201)
async def create_recommendation(
    data: MealRecommendationRequest,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.create_recommendation(trainer.id, data)


@router.get("/api/nutrition/meals/recommendations/{client_id}")
async def get_recommendations(
    client_id: str,
    category: Optional[str] = None,
    type: Optional[str] = None,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_recommendations(trainer.id, client_id, category, type)


@router.put("/api/nutrition/meals/recommendations/{recommendation_id}")
async def update_recommendation(
    recommendation_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.update_recommendation(trainer.id, recommendation_id, payload)


@router.delete("/api/nutrition/meals/recommendations/{recommendation_id}")
async def delete_recommendation(
    recommendation_id: str,
    trainer: UserORM = Depends(get_current_trainer),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.delete_recommendation(trainer.id, recommendation_id)


@router.get("/api/nutrition/meals/recommended")
async def get_recommended_meals(
    category: Optional[str] = None,
    date: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    """Meals the trainer recommended: assigned ones, flexible ones by category, and all."""
    return service.get_recommended_meals(client.id, category, date)


@router.post("/api/nutrition/meals/select", status_code=201)
async def select_meal(
    data: MealSelectRequest,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.select_meal(client.id, data)


@router.get("/api/nutrition/meals/weekly")
async def get_weekly_meals(
    week_start: Optional[str] = None,
    client: UserORM = Depends(get_current_client),
    service: NutritionService = Depends(get_nutrition_service)
):
    return service.get_weekly_meals(client.id, week_start)
