"""
Nutrition Service - macro calculator, client nutrition profiles, the food
database, nutrition plans, logs and trainer meal recommendations.
"""
from typing import Any, Dict, List, Optional

from .base import (
    HTTPException, uuid, json, logging,
    get_db_session, UserORM, ClientORM,
    to_dict, load_json, now_iso, today_iso
)
from models_orm import (
    NutritionProfileORM, FoodORM, NutritionPlanORM, MealPlanMealORM, MealPlanFoodORM,
    NutritionLogORM, MealRecommendationORM, MealSelectionORM
)
from models import (
    BMRRequest, TDEERequest, MacrosRequest, FullCalculationRequest,
    NutritionPlanRequest, MealRecommendationRequest, MealSelectRequest
)
from .nutrition_calculator import (
    calculate_bmr, calculate_tdee, calculate_macros, calculate_full_plan, round_half_up
)
from .program_calendar import week_dates
from .trainer_service import get_owned_client

logger = logging.getLogger("trainr")

# Nutrition profile columns grouped by how incoming values are cleaned
PROFILE_LIST_FIELDS = ("allergies", "dislikes", "previous_diet_attempts")
PROFILE_BOOL_FIELDS = ("kitchen_access", "food_as_reward")
PROFILE_INT_FIELDS = ("age", "training_frequency", "training_duration", "steps_per_day")
PROFILE_FLOAT_FIELDS = ("current_weight", "height_cm", "body_fat_percentage", "waist_circumference",
                        "sleep_hours", "target_weight")
PROFILE_STR_FIELDS = (
    "biological_sex", "weight_trend", "training_type", "daily_activity_level", "sleep_quality",
    "current_eating_habits", "nutrition_challenges", "food_relationship", "dietary_framework",
    "religious_restrictions", "cooking_skill_level", "meal_prep_time", "primary_goal",
    "rate_of_change", "timeline_expectations", "upcoming_events", "budget_level",
    "family_situation", "social_eating_frequency", "travel_frequency", "food_storage_options",
    "stress_eating_patterns", "adherence_personality", "accountability_preference"
)
PROFILE_FIELDS = PROFILE_LIST_FIELDS + PROFILE_BOOL_FIELDS + PROFILE_INT_FIELDS + PROFILE_FLOAT_FIELDS + PROFILE_STR_FIELDS

PLAN_UPDATE_FIELDS = (
    "plan_name", "daily_calories", "daily_protein", "daily_carbs", "daily_fats",
    "nutrition_approach", "meal_frequency", "notes", "is_active", "start_date", "end_date"
)

RECOMMENDATION_UPDATE_FIELDS = (
    "meal_name", "meal_description", "meal_category", "meal_type",
    "calories_per_serving", "protein_per_serving", "carbs_per_serving", "fats_per_serving",
    "is_assigned", "assigned_day_number", "assigned_date", "assigned_meal_slot",
    "recommendation_type", "priority", "notes", "is_active"
)

FOOD_FLAGS = ("is_vegetarian", "is_vegan", "is_gluten_free", "is_dairy_free", "is_nut_free")


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def clean_profile_data(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Keep known profile fields with a non-empty value, coerced to the column type."""
    cleaned = {}
    for field in PROFILE_FIELDS:
        value = payload.get(field)
        if value is None or value == "":
            continue
        if field in PROFILE_LIST_FIELDS:
            cleaned[field] = json.dumps(value) if isinstance(value, list) else str(value)
        elif field in PROFILE_BOOL_FIELDS:
            if isinstance(value, str):
                cleaned[field] = value.strip().lower() not in ("false", "0", "no")
            else:
                cleaned[field] = bool(value)
        elif field in PROFILE_INT_FIELDS:
            number = _to_float(value)
            cleaned[field] = round_half_up(number) if number is not None else None
        elif field in PROFILE_FLOAT_FIELDS:
            cleaned[field] = _to_float(value)
        else:
            cleaned[field] = str(value)
    return cleaned


def profile_payload(profile: NutritionProfileORM) -> dict:
    data = to_dict(profile)
    for field in PROFILE_LIST_FIELDS:
        data[field] = load_json(data.get(field), data.get(field))
    return data


def _missing(*values) -> bool:
    return any(v is None or v == "" for v in values)


class NutritionService:
    """Service for nutrition planning and tracking."""

    # --- CALCULATOR ---

    def calculate_bmr(self, data: BMRRequest) -> dict:
        if _missing(data.weight_kg, data.height_cm, data.age, data.biological_sex):
            raise HTTPException(status_code=400, detail="Missing required fields: weight_kg, height_cm, age, biological_sex")
        bmr = calculate_bmr(data.weight_kg, data.height_cm, data.age, data.biological_sex)
        return {"bmr": bmr, "formula": "Mifflin-St Jeor"}

    def calculate_tdee(self, data: TDEERequest) -> dict:
        if _missing(data.bmr, data.activity_level):
            raise HTTPException(status_code=400, detail="Missing required fields: bmr, activity_level")
        return calculate_tdee(data.bmr, data.activity_level)

    def calculate_macros(self, data: MacrosRequest) -> dict:
        if _missing(data.weight_lbs, data.tdee, data.goal):
            raise HTTPException(status_code=400, detail="Missing required fields: weight_lbs, tdee, goal")
        return calculate_macros(
            weight_lbs=data.weight_lbs,
            tdee=data.tdee,
            goal=data.goal,
            rate_of_change=data.rate_of_change,
            biological_sex=data.biological_sex,
            in_deficit=data.in_deficit
        )

    def calculate_all(self, data: FullCalculationRequest) -> dict:
        if _missing(data.weight_kg, data.height_cm, data.age, data.biological_sex, data.goal):
            raise HTTPException(
                status_code=400,
                detail="Missing required fields: weight_kg, height_cm, age, biological_sex, goal"
            )
        return calculate_full_plan(
            data.weight_kg, data.height_cm, data.age, data.biological_sex,
            data.activity_level, data.goal, data.rate_of_change
        )

    # --- PROFILES ---

    def get_profile(self, trainer_id: str, client_id: str) -> Optional[dict]:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            profile = db.query(NutritionProfileORM).filter(NutritionProfileORM.client_id == client_id).first()
            return profile_payload(profile) if profile else None
        finally:
            db.close()

    def save_profile(self, trainer_id: str, client_id: str, payload: Dict[str, Any]):
        """Upsert a client's nutrition profile. Returns (profile, created)."""
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            cleaned = clean_profile_data(payload or {})
            profile = db.query(NutritionProfileORM).filter(NutritionProfileORM.client_id == client_id).first()
            created = profile is None

            if not cleaned:
                detail = "No valid fields to create profile" if created else "No valid fields to update"
                raise HTTPException(status_code=400, detail=detail)

            if created:
                profile = NutritionProfileORM(
                    id=str(uuid.uuid4()),
                    client_id=client_id,
                    trainer_id=trainer_id,
                    created_at=now_iso()
                )
                db.add(profile)
            for field, value in cleaned.items():
                setattr(profile, field, value)
            profile.updated_at = now_iso()

            db.commit()
            db.refresh(profile)
            logger.info(f"Nutrition profile {'created' if created else 'updated'} for client {client_id}")
            return profile_payload(profile), created
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving nutrition profile for {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to save nutrition profile: {str(e)}")
        finally:
            db.close()

    # --- FOODS ---

    def search_foods(self, search: Optional[str] = None, category: Optional[str] = None,
                     flags: Optional[Dict[str, Optional[str]]] = None) -> List[dict]:
        """Flags only narrow the search when passed as the string 'true'."""
        db = get_db_session()
        try:
            query = db.query(FoodORM)
            if search:
                query = query.filter(FoodORM.name.ilike(f"%{search}%"))
            if category:
                query = query.filter(FoodORM.category == category)
            for flag, value in (flags or {}).items():
                if flag in FOOD_FLAGS and str(value).lower() == "true":
                    query = query.filter(getattr(FoodORM, flag) == True)
            return [to_dict(f) for f in query.order_by(FoodORM.name).limit(100).all()]
        finally:
            db.close()

    def get_food(self, food_id: str) -> dict:
        db = get_db_session()
        try:
            food = db.query(FoodORM).filter(FoodORM.id == food_id).first()
            if not food:
                raise HTTPException(status_code=404, detail="Food not found")
            return to_dict(food)
        finally:
            db.close()

    # --- PLANS ---

    def _plan_with_meals(self, db, plan: NutritionPlanORM) -> dict:
        meals = db.query(MealPlanMealORM).filter(
            MealPlanMealORM.nutrition_plan_id == plan.id
        ).order_by(MealPlanMealORM.day_number, MealPlanMealORM.meal_number).all()
        result = []
        for meal in meals:
            foods = db.query(MealPlanFoodORM).filter(
                MealPlanFoodORM.meal_plan_meal_id == meal.id
            ).order_by(MealPlanFoodORM.order_index).all()
            result.append(to_dict(meal, foods=[to_dict(f) for f in foods]))
        return to_dict(plan, meals=result)

    def create_plan(self, trainer_id: str, data: NutritionPlanRequest) -> dict:
        """Create a plan and make it the client's only active one."""
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, data.client_id)

            deactivated = db.query(NutritionPlanORM).filter(
                NutritionPlanORM.client_id == data.client_id,
                NutritionPlanORM.is_active == True
            ).update({"is_active": False, "updated_at": now_iso()}, synchronize_session=False)

            values = data.model_dump(exclude={"meals", "meal_distribution"})
            values["start_date"] = data.start_date or today_iso()
            plan = NutritionPlanORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                meal_distribution_json=json.dumps(data.meal_distribution) if data.meal_distribution is not None else None,
                is_active=True,
                created_at=now_iso(),
                **values
            )
            db.add(plan)

            for meal in data.meals or []:
                meal_row = MealPlanMealORM(
                    id=str(uuid.uuid4()),
                    nutrition_plan_id=plan.id,
                    alternative_options_json=json.dumps(meal.alternative_options) if meal.alternative_options else None,
                    **meal.model_dump(exclude={"foods", "alternative_options"})
                )
                db.add(meal_row)
                for i, food in enumerate(meal.foods):
                    db.add(MealPlanFoodORM(
                        id=str(uuid.uuid4()),
                        meal_plan_meal_id=meal_row.id,
                        order_index=i,
                        **food.model_dump()
                    ))

            db.commit()
            logger.info(
                f"Trainer {trainer_id} created nutrition plan {plan.id} for {data.client_id} "
                f"({deactivated} previous plan(s) deactivated)"
            )
            return self._plan_with_meals(db, plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating nutrition plan: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create nutrition plan: {str(e)}")
        finally:
            db.close()

    def get_client_plans(self, trainer_id: str, client_id: str) -> List[dict]:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            plans = db.query(NutritionPlanORM).filter(
                NutritionPlanORM.client_id == client_id
            ).order_by(NutritionPlanORM.created_at.desc()).all()
            return [to_dict(p) for p in plans]
        finally:
            db.close()

    def get_active_plan(self, client_id: str) -> Optional[dict]:
        db = get_db_session()
        try:
            plan = db.query(NutritionPlanORM).filter(
                NutritionPlanORM.client_id == client_id,
                NutritionPlanORM.is_active == True
            ).order_by(NutritionPlanORM.created_at.desc()).first()
            return self._plan_with_meals(db, plan) if plan else None
        finally:
            db.close()

    def get_trainer_plans(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(NutritionPlanORM, UserORM).join(
                ClientORM, NutritionPlanORM.client_id == ClientORM.user_id
            ).join(
                UserORM, ClientORM.user_id == UserORM.id
            ).filter(
                NutritionPlanORM.trainer_id == trainer_id
            ).order_by(NutritionPlanORM.created_at.desc()).all()
            return [to_dict(p, client_name=u.name, client_email=u.email) for p, u in rows]
        finally:
            db.close()

    def get_plan(self, user: UserORM, plan_id: str) -> dict:
        db = get_db_session()
        try:
            plan = db.query(NutritionPlanORM).filter(NutritionPlanORM.id == plan_id).first()
            if not plan or user.id not in (plan.trainer_id, plan.client_id):
                raise HTTPException(status_code=404, detail="Nutrition plan not found")
            return self._plan_with_meals(db, plan)
        finally:
            db.close()

    def _get_owned_plan(self, db, trainer_id: str, plan_id: str) -> NutritionPlanORM:
        plan = db.query(NutritionPlanORM).filter(
            NutritionPlanORM.id == plan_id,
            NutritionPlanORM.trainer_id == trainer_id
        ).first()
        if not plan:
            raise HTTPException(status_code=404, detail="Nutrition plan not found")
        return plan

    def update_plan(self, trainer_id: str, plan_id: str, payload: Dict[str, Any]) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, trainer_id, plan_id)
            updates = {k: v for k, v in (payload or {}).items() if k in PLAN_UPDATE_FIELDS}
            if not updates:
                raise HTTPException(status_code=400, detail="No valid fields to update")
            for field, value in updates.items():
                setattr(plan, field, value)
            plan.updated_at = now_iso()
            db.commit()
            db.refresh(plan)
            return to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating nutrition plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update nutrition plan: {str(e)}")
        finally:
            db.close()

    def delete_plan(self, trainer_id: str, plan_id: str) -> dict:
        db = get_db_session()
        try:
            self._get_owned_plan(db, trainer_id, plan_id)
            meal_ids = [m.id for m in db.query(MealPlanMealORM.id).filter(
                MealPlanMealORM.nutrition_plan_id == plan_id
            ).all()]
            if meal_ids:
                db.query(MealPlanFoodORM).filter(
                    MealPlanFoodORM.meal_plan_meal_id.in_(meal_ids)
                ).delete(synchronize_session=False)
                db.query(NutritionLogORM).filter(
                    NutritionLogORM.meal_plan_meal_id.in_(meal_ids)
                ).update({"meal_plan_meal_id": None}, synchronize_session=False)
                db.query(MealPlanMealORM).filter(
                    MealPlanMealORM.nutrition_plan_id == plan_id
                ).delete(synchronize_session=False)
            db.query(MealRecommendationORM).filter(
                MealRecommendationORM.nutrition_plan_id == plan_id
            ).update({"nutrition_plan_id": None}, synchronize_session=False)
            db.query(NutritionPlanORM).filter(NutritionPlanORM.id == plan_id).delete(synchronize_session=False)
            db.commit()
            logger.info(f"Nutrition plan {plan_id} deleted")
            return {"message": "Nutrition plan deleted successfully"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting nutrition plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete nutrition plan: {str(e)}")
        finally:
            db.close()

    # --- LOGS ---

    def get_logs(self, client_id: str, start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(NutritionLogORM).filter(NutritionLogORM.client_id == client_id)
            if start_date:
                query = query.filter(NutritionLogORM.log_date >= start_date)
            if end_date:
                query = query.filter(NutritionLogORM.log_date <= end_date)
            rows = query.order_by(NutritionLogORM.log_date.desc(), NutritionLogORM.created_at.desc()).all()
            return [to_dict(r) for r in rows]
        finally:
            db.close()

    def get_log_totals(self, client_id: str, start_date: Optional[str] = None,
                       end_date: Optional[str] = None) -> List[dict]:
        """Daily sums of logged calories and macros, newest day first."""
        totals: Dict[str, dict] = {}
        for log in self.get_logs(client_id, start_date, end_date):
            day = totals.setdefault(log["log_date"], {
                "log_date": log["log_date"],
                "total_calories": 0, "total_protein": 0, "total_carbs": 0, "total_fats": 0,
                "log_count": 0,
            })
            for macro in ("calories", "protein", "carbs", "fats"):
                day[f"total_{macro}"] += log[macro] or 0
            day["log_count"] += 1
        return sorted(totals.values(), key=lambda d: d["log_date"], reverse=True)

    def delete_log(self, client_id: str, log_id: str) -> dict:
        db = get_db_session()
        try:
            log = db.query(NutritionLogORM).filter(
                NutritionLogORM.id == log_id,
                NutritionLogORM.client_id == client_id
            ).first()
            if not log:
                raise HTTPException(status_code=404, detail="Log not found")
            db.delete(log)
            db.commit()
            return {"message": "Log deleted successfully"}
        finally:
            db.close()

    # --- MEAL RECOMMENDATIONS ---

    def get_recommendations(self, trainer_id: str, client_id: str, category: Optional[str] = None,
                            recommendation_type: Optional[str] = None) -> List[dict]:
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, client_id)
            query = db.query(MealRecommendationORM).filter(
                MealRecommendationORM.client_id == client_id,
                MealRecommendationORM.trainer_id == trainer_id,
                MealRecommendationORM.is_active == True
            )
            if category:
                query = query.filter(MealRecommendationORM.meal_category == category)
            if recommendation_type:
                query = query.filter(MealRecommendationORM.recommendation_type == recommendation_type)
            rows = query.order_by(
                MealRecommendationORM.priority.desc(), MealRecommendationORM.created_at.desc()
            ).all()
            return [to_dict(r) for r in rows]
        finally:
            db.close()

    def create_recommendation(self, trainer_id: str, data: MealRecommendationRequest) -> dict:
        if not data.meal_name:
            raise HTTPException(status_code=400, detail="Meal name is required")
        db = get_db_session()
        try:
            get_owned_client(db, trainer_id, data.client_id)
            values = data.model_dump()
            values["recommendation_type"] = data.recommendation_type or "flexible"
            values["priority"] = data.priority or 0
            recommendation = MealRecommendationORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer_id,
                is_active=True,
                created_at=now_iso(),
                **values
            )
            db.add(recommendation)
            db.commit()
            db.refresh(recommendation)
            return to_dict(recommendation)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating meal recommendation: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create meal recommendation: {str(e)}")
        finally:
            db.close()

    def _get_owned_recommendation(self, db, trainer_id: str, recommendation_id: str) -> MealRecommendationORM:
        recommendation = db.query(MealRecommendationORM).filter(
            MealRecommendationORM.id == recommendation_id,
            MealRecommendationORM.trainer_id == trainer_id
        ).first()
        if not recommendation:
            raise HTTPException(status_code=404, detail="Recommendation not found")
        return recommendation

    def update_recommendation(self, trainer_id: str, recommendation_id: str, payload: Dict[str, Any]) -> dict:
        db = get_db_session()
        try:
            recommendation = self._get_owned_recommendation(db, trainer_id, recommendation_id)
            updates = {k: v for k, v in (payload or {}).items() if k in RECOMMENDATION_UPDATE_FIELDS}
            if not updates:
                raise HTTPException(status_code=400, detail="No valid fields to update")
            for field, value in updates.items():
                setattr(recommendation, field, value)
            recommendation.updated_at = now_iso()
            db.commit()
            db.refresh(recommendation)
            return to_dict(recommendation)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating meal recommendation {recommendation_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update meal recommendation: {str(e)}")
        finally:
            db.close()

    def delete_recommendation(self, trainer_id: str, recommendation_id: str) -> dict:
        db = get_db_session()
        try:
            recommendation = self._get_owned_recommendation(db, trainer_id, recommendation_id)
            db.query(MealSelectionORM).filter(
                MealSelectionORM.recommendation_id == recommendation_id
            ).update({"recommendation_id": None}, synchronize_session=False)
            db.delete(recommendation)
            db.commit()
            return {"message": "Recommendation deleted successfully"}
        finally:
            db.close()

    def get_recommended_meals(self, client_id: str, category: Optional[str] = None,
                              on_date: Optional[str] = None) -> dict:
        """Client view: date-assigned meals first, flexible ones grouped by category."""
        db = get_db_session()
        try:
            query = db.query(MealRecommendationORM).filter(
                MealRecommendationORM.client_id == client_id,
                MealRecommendationORM.is_active == True
            )
            if category:
                query = query.filter(MealRecommendationORM.meal_category == category)
            if on_date:
                query = query.filter(
                    (MealRecommendationORM.assigned_date == on_date) | (MealRecommendationORM.assigned_date.is_(None))
                )
            rows = [to_dict(r) for r in query.order_by(
                MealRecommendationORM.is_assigned.desc(),
                MealRecommendationORM.priority.desc(),
                MealRecommendationORM.created_at.desc()
            ).all()]

            flexible: Dict[str, List[dict]] = {}
            for meal in rows:
                if not meal["is_assigned"]:
                    flexible.setdefault(meal["meal_category"] or "other", []).append(meal)
            return {
                "assigned": [m for m in rows if m["is_assigned"]],
                "flexible": flexible,
                "all": rows,
            }
        finally:
            db.close()

    def select_meal(self, client_id: str, data: MealSelectRequest) -> dict:
        """Record a chosen meal and log its macros scaled by servings."""
        db = get_db_session()
        try:
            recommendation = db.query(MealRecommendationORM).filter(
                MealRecommendationORM.id == data.recommendation_id,
                MealRecommendationORM.client_id == client_id
            ).first() if data.recommendation_id else None
            if not recommendation:
                raise HTTPException(status_code=404, detail="Meal not found")

            servings = data.servings or 1.0
            selected_date = data.selected_date or today_iso()
            macros = {
                macro: (getattr(recommendation, f"{macro}_per_serving") or 0) * servings
                for macro in ("calories", "protein", "carbs", "fats")
            }

            selection = MealSelectionORM(
                id=str(uuid.uuid4()),
                client_id=client_id,
                recommendation_id=recommendation.id,
                meal_name=recommendation.meal_name,
                selected_date=selected_date,
                meal_category=data.meal_category or recommendation.meal_category,
                meal_slot=data.meal_slot,
                servings=servings,
                actual_calories=macros["calories"],
                actual_protein=macros["protein"],
                actual_carbs=macros["carbs"],
                actual_fats=macros["fats"],
                created_at=now_iso()
            )
            db.add(selection)
            db.add(NutritionLogORM(
                id=str(uuid.uuid4()),
                client_id=client_id,
                log_date=selected_date,
                meal_type=data.meal_slot or selection.meal_category,
                food_name=recommendation.meal_name,
                quantity=servings,
                unit="serving",
                calories=macros["calories"],
                protein=macros["protein"],
                carbs=macros["carbs"],
                fats=macros["fats"],
                created_at=now_iso()
            ))
            db.commit()
            db.refresh(selection)
            logger.info(f"Client {client_id} selected meal {recommendation.id} for {selected_date}")
            return to_dict(selection)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error selecting meal for {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to select meal: {str(e)}")
        finally:
            db.close()

    def get_weekly_meals(self, client_id: str, week_start: Optional[str] = None) -> dict:
        days = week_dates(week_start)
        db = get_db_session()
        try:
            plan = db.query(NutritionPlanORM).filter(
                NutritionPlanORM.client_id == client_id,
                NutritionPlanORM.is_active == True
            ).order_by(NutritionPlanORM.created_at.desc()).first()
            assigned_meals = self._plan_with_meals(db, plan)["meals"] if plan else []

            selections = [to_dict(s) for s in db.query(MealSelectionORM).filter(
                MealSelectionORM.client_id == client_id,
                MealSelectionORM.selected_date >= days[0],
                MealSelectionORM.selected_date <= days[-1]
            ).order_by(MealSelectionORM.selected_date, MealSelectionORM.meal_slot).all()]

            days_logged = len({s["selected_date"] for s in selections})
            averages = {"days_logged": days_logged}
            for macro in ("calories", "protein", "carbs", "fats"):
                total = sum(s[f"actual_{macro}"] or 0 for s in selections)
                averages[macro] = round_half_up(total / days_logged) if days_logged else 0

            return {
                "week_start": days[0],
                "week_end": days[-1],
                "assigned_meals": assigned_meals,
                "client_selections": selections,
                "weekly_averages": averages,
            }
        finally:
            db.close()


# Singleton instance
nutrition_service = NutritionService()

def get_nutrition_service() -> NutritionService:
    """Dependency injection helper."""
    return nutrition_service
