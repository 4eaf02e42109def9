from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union

# Several request bodies use camelCase keys; fields stay snake_case with an alias.
# populate_by_name lets tests and internal callers use either spelling.


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


Numeric = Union[int, float, str]

# --- AUTH ---
class RegisterRequest(CamelModel):
    # Optional so missing fields produce the domain 400, not a 422
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

# --- PROFILE ---
class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    certifications: Optional[List[str]] = None
    specialties: Optional[List[str]] = None
    hourly_rate: Optional[Numeric] = None
    phone_number: Optional[str] = None
    fitness_goals: Optional[List[str]] = None
    client_age_ranges: Optional[List[str]] = None
    location: Optional[str] = None
    default_session_time: Optional[str] = None
    default_session_duration: Optional[int] = None
    default_session_type: Optional[str] = None
    default_session_location: Optional[str] = None
    day_specific_session_times: Optional[Dict[str, str]] = None
    day_specific_session_durations: Optional[Dict[str, int]] = None

# --- TRAINER ---
class CreateClientRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class WorkoutExerciseInput(BaseModel):
    name: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[Union[str, int]] = None
    weight: Optional[Union[str, int, float]] = None
    rest: Optional[Union[str, int]] = None
    notes: Optional[str] = None
    order: Optional[int] = None

class CreateWorkoutRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    exercises: List[WorkoutExerciseInput] = []

class AssignWorkoutRequest(CamelModel):
    client_id: Optional[str] = Field(default=None, alias="clientId")
    due_date: Optional[str] = Field(default=None, alias="dueDate")

class RespondToRequestBody(CamelModel):
    trainer_response: Optional[str] = Field(default=None, alias="trainerResponse")

class ClientMetricRequest(CamelModel):
    date: Optional[str] = None
    weight: Optional[float] = None
    body_fat: Optional[float] = Field(default=None, alias="bodyFat")
    measurements: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None

# --- WORKOUTS ---
class CompleteWorkoutRequest(BaseModel):
    duration: Optional[int] = None
    notes: Optional[str] = None

# --- CLIENT ---
class CheckInRequest(BaseModel):
    workout_completed: Optional[bool] = None
    diet_stuck_to: Optional[bool] = None
    workout_rating: Optional[int] = None
    notes: Optional[str] = None
    workout_duration: Optional[int] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[int] = None
    energy_level: Optional[int] = None
    pain_experienced: Optional[bool] = None
    pain_location: Optional[str] = None
    pain_intensity: Optional[int] = None
    progress_photo: Optional[str] = None

class ProgressEntryRequest(ClientMetricRequest):
    pass

class NutritionLogRequest(BaseModel):
    log_date: Optional[str] = None
    meal_type: Optional[str] = None
    food_name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    notes: Optional[str] = None
    meal_plan_meal_id: Optional[str] = None

class TrainerConnectRequest(CamelModel):
    trainer_id: Optional[str] = Field(default=None, alias="trainerId")
    message: Optional[str] = None

class ClientProfileUpdate(BaseModel):
    height: Optional[Union[str, float]] = None
    weight: Optional[Union[str, float]] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    previous_experience: Optional[str] = None
    average_daily_eating: Optional[str] = None
    primary_goal: Optional[str] = None
    goal_target: Optional[str] = None
    goal_timeframe: Optional[str] = None
    secondary_goals: Optional[List[str]] = None
    barriers: Optional[str] = None
    training_preference: Optional[str] = None
    communication_preference: Optional[str] = None
    activity_level: Optional[str] = None
    available_dates: Optional[List[Any]] = None
    location: Optional[str] = None
    nutrition_habits: Optional[str] = None
    nutrition_experience: Optional[str] = None
    injuries: Optional[str] = None
    sleep_hours: Optional[Union[str, float]] = None
    stress_level: Optional[str] = None
    lifestyle_activity: Optional[str] = None
    psychological_barriers: Optional[str] = None
    mindset: Optional[str] = None
    motivation_why: Optional[str] = None
    training_experience: Optional[str] = None
    training_days_per_week: Optional[int] = None
    equipment_access: Optional[str] = None
    session_duration_minutes: Optional[int] = None

# --- MESSAGES ---
class SendMessageRequest(CamelModel):
    receiver_id: Optional[str] = Field(default=None, alias="receiverId")
    content: Optional[str] = None

# --- PAYMENTS ---
class PaymentIntentRequest(CamelModel):
    trainer_id: Optional[str] = Field(default=None, alias="trainerId")
    amount: Optional[float] = None
    currency: str = "usd"
    description: Optional[str] = None

class SubscriptionRequest(PaymentIntentRequest):
    billing_cycle: str = Field(default="monthly", alias="billingCycle")

# --- AI WORKOUTS ---
class WorkoutPreferences(BaseModel):
    goal: Optional[str] = None
    duration: int = 60
    intensity: str = "moderate"
    focus: str = "full body"
    equipment: str = "gym"
    notes: Optional[str] = None

class GenerateWorkoutRequest(CamelModel):
    client_id: Optional[str] = Field(default=None, alias="clientId")
    workout_preferences: WorkoutPreferences = Field(default_factory=WorkoutPreferences, alias="workoutPreferences")

class CustomizeWorkoutRequest(CamelModel):
    workout_id: Optional[str] = Field(default=None, alias="workoutId")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    modifications: Optional[str] = None

# --- PROGRAMS ---
class ProgramExerciseInput(BaseModel):
    exercise_name: Optional[str] = None
    exercise_type: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[Union[str, int]] = None
    weight: Optional[Union[str, int, float]] = None
    duration: Optional[Union[str, int]] = None
    rest: Optional[Union[str, int]] = None
    tempo: Optional[str] = None
    notes: Optional[str] = None
    order_index: Optional[int] = None

class ProgramWorkoutInput(BaseModel):
    workout_name: Optional[str] = None
    week_number: Optional[int] = None
    day_number: Optional[int] = None
    order_index: Optional[int] = None
    exercises: List[ProgramExerciseInput] = []

class CreateProgramRequest(BaseModel):
    name: str
    description: Optional[str] = None
    split_type: Optional[str] = None
    duration_weeks: Optional[int] = None
    client_id: Optional[str] = None
    is_template: bool = False
    start_date: Optional[str] = None
    workouts: Optional[List[ProgramWorkoutInput]] = None

class UpdateProgramRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    split_type: Optional[str] = None
    duration_weeks: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    workouts: Optional[List[ProgramWorkoutInput]] = None

class WeekNameRequest(BaseModel):
    week_name: Optional[str] = None

class AssignProgramRequest(BaseModel):
    client_id: Optional[str] = None
    start_date: Optional[str] = None

class CreateSessionsRequest(CamelModel):
    session_date: Optional[str] = Field(default=None, alias="sessionDate")
    session_time: Optional[str] = Field(default=None, alias="sessionTime")
    duration: Optional[int] = None
    session_type: Optional[str] = Field(default=None, alias="sessionType")
    location: Optional[str] = None
    meeting_link: Optional[str] = Field(default=None, alias="meetingLink")
    repeat: bool = False
    repeat_pattern: Optional[str] = Field(default=None, alias="repeatPattern")
    repeat_end_date: Optional[str] = Field(default=None, alias="repeatEndDate")
    client_ids: List[str] = Field(default_factory=list, alias="clientIds")

class CompleteProgramWorkoutRequest(BaseModel):
    exercises_completed: Optional[Any] = None
    notes: Optional[str] = None
    duration: Optional[int] = None

class RecommendProgramRequest(BaseModel):
    client_id: Optional[str] = None

class FromTemplateRequest(BaseModel):
    client_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

# --- SCHEDULE ---
class CreateSessionRequest(CamelModel):
    client_id: Optional[str] = Field(default=None, alias="clientId")
    session_date: Optional[str] = Field(default=None, alias="sessionDate")
    session_time: Optional[str] = Field(default=None, alias="sessionTime")
    duration: Optional[int] = None
    session_type: Optional[str] = Field(default=None, alias="sessionType")
    location: Optional[str] = None
    meeting_link: Optional[str] = Field(default=None, alias="meetingLink")
    notes: Optional[str] = None
    is_recurring: bool = Field(default=False, alias="isRecurring")
    recurring_pattern: Optional[str] = Field(default=None, alias="recurringPattern")
    recurring_end_date: Optional[str] = Field(default=None, alias="recurringEndDate")
    day_of_week: Optional[int] = Field(default=None, alias="dayOfWeek")

class UpdateSessionRequest(CamelModel):
    session_date: Optional[str] = Field(default=None, alias="sessionDate")
    session_time: Optional[str] = Field(default=None, alias="sessionTime")
    duration: Optional[int] = None
    session_type: Optional[str] = Field(default=None, alias="sessionType")
    location: Optional[str] = None
    meeting_link: Optional[str] = Field(default=None, alias="meetingLink")
    notes: Optional[str] = None
    status: Optional[str] = None
    reason: Optional[str] = None

class CancelSessionRequest(BaseModel):
    reason: Optional[str] = None

class WorkoutSessionsUpdate(CamelModel):
    session_time: Optional[str] = Field(default=None, alias="sessionTime")
    duration: Optional[int] = None
    location: Optional[str] = None
    session_type: Optional[str] = Field(default=None, alias="sessionType")
    meeting_link: Optional[str] = Field(default=None, alias="meetingLink")

class AvailabilityRequest(CamelModel):
    day_of_week: Optional[int] = Field(default=None, alias="dayOfWeek")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    is_available: Optional[bool] = Field(default=None, alias="isAvailable")

# --- NUTRITION ---
class BMRRequest(BaseModel):
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age: Optional[float] = None
    biological_sex: Optional[str] = None

class TDEERequest(BaseModel):
    bmr: Optional[float] = None
    activity_level: Optional[str] = None

class MacrosRequest(BaseModel):
    weight_lbs: Optional[float] = None
    tdee: Optional[float] = None
    goal: Optional[str] = None
    rate_of_change: Optional[str] = None
    biological_sex: Optional[str] = None
    in_deficit: bool = False

class FullCalculationRequest(BMRRequest):
    activity_level: Optional[str] = None
    goal: Optional[str] = None
    rate_of_change: Optional[str] = None

class MealPlanFoodInput(BaseModel):
    food_id: Optional[str] = None
    food_name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None

class MealPlanMealInput(BaseModel):
    day_number: int = 1
    meal_number: int = 1
    meal_name: Optional[str] = None
    meal_time: Optional[str] = None
    target_calories: Optional[int] = None
    target_protein: Optional[int] = None
    target_carbs: Optional[int] = None
    target_fats: Optional[int] = None
    custom_meal: Optional[str] = None
    alternative_options: Optional[List[Any]] = None
    foods: List[MealPlanFoodInput] = []

class NutritionPlanRequest(BaseModel):
    client_id: Optional[str] = None
    plan_name: Optional[str] = None
    daily_calories: Optional[int] = None
    daily_protein: Optional[int] = None
    daily_carbs: Optional[int] = None
    daily_fats: Optional[int] = None
    nutrition_approach: Optional[str] = None
    meal_frequency: Optional[int] = None
    calculation_method: Optional[str] = None
    activity_multiplier: Optional[float] = None
    bmr: Optional[int] = None
    tdee: Optional[int] = None
    goal_adjustment: Optional[int] = None
    plan_type: Optional[str] = None
    rate_of_change: Optional[str] = None
    meal_distribution: Optional[Any] = None
    notes: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    meals: Optional[List[MealPlanMealInput]] = None

class MealRecommendationRequest(BaseModel):
    client_id: Optional[str] = None
    nutrition_plan_id: Optional[str] = None
    meal_name: Optional[str] = None
    meal_description: Optional[str] = None
    meal_category: Optional[str] = None
    meal_type: Optional[str] = None
    calories_per_serving: Optional[float] = None
    protein_per_serving: Optional[float] = None
    carbs_per_serving: Optional[float] = None
    fats_per_serving: Optional[float] = None
    is_assigned: bool = False
    assigned_day_number: Optional[int] = None
    assigned_date: Optional[str] = None
    assigned_meal_slot: Optional[str] = None
    recommendation_type: Optional[str] = None
    priority: Optional[int] = None
    notes: Optional[str] = None

class MealSelectRequest(BaseModel):
    recommendation_id: Optional[str] = None
    selected_date: Optional[str] = None
    meal_category: Optional[str] = None
    meal_slot: Optional[str] = None
    servings: Optional[float] = None
