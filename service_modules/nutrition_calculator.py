"""
Nutrition Calculator - BMR, TDEE and macro targets.
Pure functions, no database access.
"""
import math
from typing import Optional

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extremely_active": 1.9,
}

# kcal per day added to TDEE, by goal and rate of change
GOAL_ADJUSTMENTS = {
    "lose_fat": {"aggressive": -1000, "moderate": -750, "conservative": -500},
    "build_muscle": {"aggressive": 500, "moderate": 300, "conservative": 200},
    "maintain": {"aggressive": 0, "moderate": 0, "conservative": 0},
    "performance": {"aggressive": 300, "moderate": 200, "conservative": 100},
}

MIN_CALORIES_FEMALE = 1200
MIN_CALORIES_MALE = 1500
KG_TO_LBS = 2.20462


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() uses banker's rounding)."""
    return math.floor(value + 0.5)


def calculate_bmr(weight_kg: float, height_cm: float, age: float, biological_sex: str) -> int:
    """Mifflin-St Jeor. Anything other than 'male' uses the female constant."""
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if biological_sex == "male":
        return round_half_up(base + 5)
    return round_half_up(base - 161)


def get_activity_multiplier(activity_level: Optional[str]) -> float:
    return ACTIVITY_MULTIPLIERS.get(activity_level, 1.2)


def calculate_tdee(bmr: float, activity_level: Optional[str]) -> dict:
    multiplier = get_activity_multiplier(activity_level)
    return {
        "tdee": round_half_up(bmr * multiplier),
        "activity_multiplier": multiplier,
        "activity_level": activity_level,
    }


def get_goal_adjustment(goal: str, rate_of_change: Optional[str] = None) -> int:
    return GOAL_ADJUSTMENTS.get(goal, {}).get(rate_of_change or "moderate", 0)


def calculate_macros(
    weight_lbs: float,
    tdee: float,
    goal: str,
    rate_of_change: Optional[str] = None,
    biological_sex: Optional[str] = None,
    in_deficit: bool = False,
) -> dict:
    """
    Daily calorie and macro targets.

    Calories are TDEE plus the goal adjustment, floored at 1200 (female) or
    1500 (everyone else). Protein is 1.0 g/lb when cutting or building and
    0.8 g/lb otherwise; fat is 0.4 g/lb for women and 0.35 g/lb otherwise.
    Carbs take whatever calories remain.
    """
    target_calories = tdee + get_goal_adjustment(goal, rate_of_change)

    min_calories = MIN_CALORIES_FEMALE if biological_sex == "female" else MIN_CALORIES_MALE
    if target_calories < min_calories:
        target_calories = min_calories

    protein_per_lb = 0.8
    if goal in ("lose_fat", "build_muscle") or in_deficit:
        protein_per_lb = 1.0
    target_protein = round_half_up(weight_lbs * protein_per_lb)

    fat_per_lb = 0.4 if biological_sex == "female" else 0.35
    target_fats = round_half_up(weight_lbs * fat_per_lb)

    protein_cals = target_protein * 4
    fat_cals = target_fats * 9
    remaining_cals = target_calories - protein_cals - fat_cals
    target_carbs = max(0, round_half_up(remaining_cals / 4))

    return {
        "target_calories": round_half_up(target_calories),
        "target_protein": target_protein,
        "target_carbs": target_carbs,
        "target_fats": target_fats,
        "breakdown": {
            "protein_percent": round_half_up(protein_cals / target_calories * 100),
            "carbs_percent": round_half_up(target_carbs * 4 / target_calories * 100),
            "fats_percent": round_half_up(fat_cals / target_calories * 100),
        },
    }


def calculate_full_plan(
    weight_kg: float,
    height_cm: float,
    age: float,
    biological_sex: str,
    activity_level: Optional[str],
    goal: str,
    rate_of_change: Optional[str] = None,
) -> dict:
    """BMR -> TDEE -> macros in one go. Bodyweight is converted to lbs for the macro step."""
    bmr = calculate_bmr(weight_kg, height_cm, age, biological_sex)
    tdee_result = calculate_tdee(bmr, activity_level)
    macros = calculate_macros(
        weight_lbs=weight_kg * KG_TO_LBS,
        tdee=tdee_result["tdee"],
        goal=goal,
        rate_of_change=rate_of_change,
        biological_sex=biological_sex,
    )
    return {
        "bmr": bmr,
        "tdee": tdee_result["tdee"],
        "activity_multiplier": tdee_result["activity_multiplier"],
        "goal_adjustment": get_goal_adjustment(goal, rate_of_change),
        **macros,
    }
