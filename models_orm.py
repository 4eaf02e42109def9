from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, Text
from database import Base
from datetime import datetime, date

# --- CORE MODELS ---

class UserORM(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    role = Column(String, index=True)  # trainer, client
    profile_image = Column(String, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class TrainerORM(Base):
    __tablename__ = "trainers"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), unique=True, index=True)
    bio = Column(Text, nullable=True)
    certifications_json = Column(Text, nullable=True)  # JSON list
    specialties_json = Column(Text, nullable=True)  # JSON list
    hourly_rate = Column(Float, nullable=True)
    phone_number = Column(String, nullable=True)
    total_clients = Column(Integer, default=0)
    active_clients = Column(Integer, default=0)

    # Matching filters used by client-side trainer search
    fitness_goals_json = Column(Text, nullable=True)
    client_age_ranges_json = Column(Text, nullable=True)
    location = Column(String, nullable=True)

    # Session defaults applied when a program is assigned
    default_session_time = Column(String, nullable=True)  # HH:MM
    default_session_duration = Column(Integer, nullable=True)  # minutes
    default_session_type = Column(String, nullable=True)  # in_person, virtual
    default_session_location = Column(String, nullable=True)
    day_specific_session_times_json = Column(Text, nullable=True)  # {"1": "07:00", ...} 1=Mon
    day_specific_session_durations_json = Column(Text, nullable=True)

    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class ClientORM(Base):
    __tablename__ = "clients"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), unique=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)  # trainer's user id
    start_date = Column(String, default=lambda: date.today().isoformat())
    status = Column(String, default="active")

    # Onboarding questionnaire
    height = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    previous_experience = Column(String, nullable=True)
    average_daily_eating = Column(Text, nullable=True)
    primary_goal = Column(String, nullable=True)
    goal_target = Column(String, nullable=True)
    goal_timeframe = Column(String, nullable=True)
    secondary_goals_json = Column(Text, nullable=True)
    barriers = Column(Text, nullable=True)
    training_preference = Column(String, nullable=True)
    communication_preference = Column(String, nullable=True)
    activity_level = Column(String, nullable=True)
    available_dates_json = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    nutrition_habits = Column(Text, nullable=True)
    nutrition_experience = Column(String, nullable=True)
    injuries = Column(Text, nullable=True)
    sleep_hours = Column(String, nullable=True)
    stress_level = Column(String, nullable=True)
    lifestyle_activity = Column(String, nullable=True)
    psychological_barriers = Column(Text, nullable=True)
    mindset = Column(Text, nullable=True)
    motivation_why = Column(Text, nullable=True)

    # Program recommendation inputs
    training_experience = Column(String, nullable=True)  # beginner, intermediate, advanced
    training_days_per_week = Column(Integer, nullable=True)
    equipment_access = Column(String, nullable=True)  # full_gym, home_gym, dumbbells_only, bodyweight_only
    session_duration_minutes = Column(Integer, nullable=True)

    onboarding_data_json = Column(Text, nullable=True)  # raw questionnaire answers
    onboarding_completed = Column(Boolean, default=False)

    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class TrainerRequestORM(Base):
    __tablename__ = "trainer_requests"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    status = Column(String, default="pending", index=True)  # pending, accepted, rejected
    message = Column(Text, nullable=True)
    trainer_response = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)

# --- STANDALONE WORKOUTS ---

class WorkoutORM(Base):
    __tablename__ = "workouts"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    name = Column(String)
    description = Column(Text, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class WorkoutExerciseORM(Base):
    __tablename__ = "workout_exercises"

    id = Column(String, primary_key=True, index=True)
    workout_id = Column(String, ForeignKey("workouts.id"), index=True)
    exercise_name = Column(String)
    sets = Column(Integer, nullable=True)
    reps = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    rest = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, default=0)


class WorkoutAssignmentORM(Base):
    __tablename__ = "workout_assignments"

    id = Column(String, primary_key=True, index=True)
    workout_id = Column(String, ForeignKey("workouts.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    assigned_date = Column(String, default=lambda: date.today().isoformat())
    due_date = Column(String, nullable=True)
    status = Column(String, default="assigned")  # assigned, completed
    completed_date = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class WorkoutLogORM(Base):
    __tablename__ = "workout_logs"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    workout_id = Column(String, ForeignKey("workouts.id"), index=True)
    completed_date = Column(String, default=lambda: datetime.utcnow().isoformat())
    duration = Column(Integer, nullable=True)  # minutes
    notes = Column(Text, nullable=True)

# --- CHECK-INS & PROGRESS ---

class DailyCheckInORM(Base):
    __tablename__ = "daily_check_ins"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    check_in_date = Column(String, index=True)  # YYYY-MM-DD, one per client per day
    workout_completed = Column(Boolean, nullable=True)
    diet_stuck_to = Column(Boolean, nullable=True)
    workout_rating = Column(Integer, nullable=True)  # 1-10
    notes = Column(Text, nullable=True)
    workout_duration = Column(Integer, nullable=True)
    sleep_hours = Column(Float, nullable=True)
    sleep_quality = Column(Integer, nullable=True)  # 1-10
    energy_level = Column(Integer, nullable=True)  # 1-10
    pain_experienced = Column(Boolean, default=False)
    pain_location = Column(String, nullable=True)
    pain_intensity = Column(Integer, nullable=True)  # 1-10
    progress_photo = Column(String, nullable=True)
    trainer_response = Column(Text, nullable=True)
    status = Column(String, default="completed")
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class ProgressEntryORM(Base):
    __tablename__ = "progress_entries"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    date = Column(String, index=True)
    weight = Column(Float, nullable=True)
    body_fat = Column(Float, nullable=True)
    measurements_json = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    photos_json = Column(Text, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class TrainerAlertORM(Base):
    __tablename__ = "trainer_alerts"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    alert_type = Column(String)  # low_rating, pain_report
    title = Column(String)
    message = Column(Text)
    severity = Column(String)  # high, urgent
    related_checkin_id = Column(String, ForeignKey("daily_check_ins.id"), nullable=True)
    metadata_json = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False, index=True)
    read_at = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- MESSAGING ---

class MessageORM(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True, index=True)
    sender_id = Column(String, ForeignKey("users.id"), index=True)
    receiver_id = Column(String, ForeignKey("users.id"), index=True)
    content = Column(Text)
    timestamp = Column(String, default=lambda: datetime.utcnow().isoformat(), index=True)
    read_status = Column(Boolean, default=False)

# --- PROGRAMS ---

class ProgramORM(Base):
    __tablename__ = "programs"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)
    name = Column(String)
    description = Column(Text, nullable=True)
    split_type = Column(String, nullable=True)  # full_body, upper_lower, push_pull_legs
    duration_weeks = Column(Integer, default=4)
    is_template = Column(Boolean, default=False)
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class ProgramWeekORM(Base):
    __tablename__ = "program_weeks"

    id = Column(String, primary_key=True, index=True)
    program_id = Column(String, ForeignKey("programs.id"), index=True)
    week_number = Column(Integer)  # unique per program
    week_name = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class ProgramWorkoutORM(Base):
    __tablename__ = "program_workouts"

    id = Column(String, primary_key=True, index=True)
    program_id = Column(String, ForeignKey("programs.id"), index=True)
    workout_name = Column(String)
    week_number = Column(Integer, default=1)
    day_number = Column(Integer, default=1)  # 1=Monday ... 7=Sunday
    order_index = Column(Integer, default=0)


class ProgramWorkoutExerciseORM(Base):
    __tablename__ = "program_workout_exercises"

    id = Column(String, primary_key=True, index=True)
    program_workout_id = Column(String, ForeignKey("program_workouts.id"), index=True)
    exercise_name = Column(String)
    exercise_type = Column(String, nullable=True)  # REGULAR, SUPERSET, CIRCUIT, ...
    sets = Column(Integer, nullable=True)
    reps = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    duration = Column(String, nullable=True)
    rest = Column(String, nullable=True)
    tempo = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, default=0)


class ProgramAssignmentORM(Base):
    __tablename__ = "program_assignments"

    id = Column(String, primary_key=True, index=True)
    program_id = Column(String, ForeignKey("programs.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)  # unique with program_id
    assigned_date = Column(String, default=lambda: date.today().isoformat())
    start_date = Column(String, nullable=True)
    status = Column(String, default="active")
    updated_at = Column(String, nullable=True)


class ProgramWorkoutCompletionORM(Base):
    __tablename__ = "program_workout_completions"

    id = Column(String, primary_key=True, index=True)
    program_workout_id = Column(String, ForeignKey("program_workouts.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    completed_date = Column(String, default=lambda: date.today().isoformat())
    exercises_completed_json = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- TEMPLATES & EXERCISE LIBRARY (system seeded) ---

class ProgramTemplateORM(Base):
    __tablename__ = "program_templates"

    id = Column(String, primary_key=True, index=True)
    name = Column(String)
    description = Column(Text, nullable=True)
    split_type = Column(String, nullable=True)
    duration_weeks = Column(Integer, default=4)
    target_experience_level = Column(String, nullable=True)
    target_goal = Column(String, nullable=True)
    target_days_per_week = Column(Integer, nullable=True)
    target_equipment = Column(String, nullable=True)
    target_session_duration = Column(Integer, nullable=True)
    progression_type = Column(String, nullable=True)  # linear, undulating, block
    is_system_template = Column(Boolean, default=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class TemplateWorkoutORM(Base):
    __tablename__ = "template_workouts"

    id = Column(String, primary_key=True, index=True)
    template_id = Column(String, ForeignKey("program_templates.id"), index=True)
    workout_name = Column(String)
    week_number = Column(Integer, default=1)
    day_number = Column(Integer, default=1)
    order_index = Column(Integer, default=0)


class TemplateWorkoutExerciseORM(Base):
    __tablename__ = "template_workout_exercises"

    id = Column(String, primary_key=True, index=True)
    template_workout_id = Column(String, ForeignKey("template_workouts.id"), index=True)
    exercise_id = Column(String, ForeignKey("exercises.id"), nullable=True)
    exercise_name = Column(String)
    exercise_type = Column(String, nullable=True)
    sets = Column(Integer, nullable=True)
    reps = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    duration = Column(String, nullable=True)
    rest = Column(String, nullable=True)
    tempo = Column(String, nullable=True)
    rpe = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, default=0)


class ExerciseORM(Base):
    __tablename__ = "exercises"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, index=True)
    primary_muscle_group = Column(String, index=True)
    secondary_muscle_groups_json = Column(Text, nullable=True)
    movement_pattern = Column(String, index=True)  # squat, hinge, horizontal_push, ...
    equipment_required = Column(String, nullable=True)
    difficulty_level = Column(String, nullable=True)  # beginner, intermediate, advanced
    form_cues = Column(Text, nullable=True)
    common_mistakes = Column(Text, nullable=True)

# --- SCHEDULING ---

class SessionORM(Base):
    __tablename__ = "sessions"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    program_id = Column(String, ForeignKey("programs.id"), nullable=True, index=True)
    program_workout_id = Column(String, ForeignKey("program_workouts.id"), nullable=True, index=True)
    session_date = Column(String, index=True)  # YYYY-MM-DD
    session_time = Column(String)  # HH:MM
    duration = Column(Integer, default=60)
    session_type = Column(String, default="in_person")
    location = Column(String, nullable=True)
    meeting_link = Column(String, nullable=True)
    status = Column(String, default="scheduled", index=True)  # scheduled, confirmed, completed, cancelled
    notes = Column(Text, nullable=True)

    # Recurrence: the first session of a series is the parent
    is_recurring = Column(Boolean, default=False)
    recurring_pattern = Column(String, nullable=True)  # weekly, biweekly, monthly
    recurring_end_date = Column(String, nullable=True)
    recurring_parent_id = Column(String, ForeignKey("sessions.id"), nullable=True, index=True)
    day_of_week = Column(Integer, nullable=True)

    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class SessionChangeORM(Base):
    __tablename__ = "session_changes"

    id = Column(String, primary_key=True, index=True)
    session_id = Column(String, ForeignKey("sessions.id"), index=True)
    change_type = Column(String)  # cancelled, rescheduled
    original_date = Column(String, nullable=True)
    original_time = Column(String, nullable=True)
    new_date = Column(String, nullable=True)
    new_time = Column(String, nullable=True)
    reason = Column(Text, nullable=True)
    requested_by = Column(String, ForeignKey("users.id"))
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class TrainerAvailabilityORM(Base):
    __tablename__ = "trainer_availability"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    day_of_week = Column(Integer)  # 0=Sunday ... 6=Saturday
    start_time = Column(String)  # HH:MM, unique with trainer_id + day_of_week
    end_time = Column(String)
    is_available = Column(Boolean, default=True)
    updated_at = Column(String, nullable=True)

# --- NUTRITION ---

class NutritionProfileORM(Base):
    __tablename__ = "client_nutrition_profiles"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), unique=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)

    current_weight = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)
    age = Column(Integer, nullable=True)
    biological_sex = Column(String, nullable=True)
    body_fat_percentage = Column(Float, nullable=True)
    waist_circumference = Column(Float, nullable=True)
    weight_trend = Column(String, nullable=True)
    training_frequency = Column(Integer, nullable=True)
    training_type = Column(String, nullable=True)
    training_duration = Column(Integer, nullable=True)
    daily_activity_level = Column(String, nullable=True)
    steps_per_day = Column(Integer, nullable=True)
    sleep_hours = Column(Float, nullable=True)
    sleep_quality = Column(String, nullable=True)
    current_eating_habits = Column(Text, nullable=True)
    previous_diet_attempts = Column(Text, nullable=True)  # JSON list
    nutrition_challenges = Column(Text, nullable=True)
    food_relationship = Column(String, nullable=True)
    dietary_framework = Column(String, nullable=True)
    religious_restrictions = Column(String, nullable=True)
    allergies = Column(Text, nullable=True)  # JSON list
    dislikes = Column(Text, nullable=True)  # JSON list
    cooking_skill_level = Column(String, nullable=True)
    meal_prep_time = Column(String, nullable=True)
    primary_goal = Column(String, nullable=True)
    rate_of_change = Column(String, nullable=True)
    target_weight = Column(Float, nullable=True)
    timeline_expectations = Column(String, nullable=True)
    upcoming_events = Column(Text, nullable=True)
    budget_level = Column(String, nullable=True)
    family_situation = Column(String, nullable=True)
    social_eating_frequency = Column(String, nullable=True)
    travel_frequency = Column(String, nullable=True)
    kitchen_access = Column(Boolean, nullable=True)
    food_storage_options = Column(String, nullable=True)
    food_as_reward = Column(Boolean, nullable=True)
    stress_eating_patterns = Column(String, nullable=True)
    adherence_personality = Column(String, nullable=True)
    accountability_preference = Column(String, nullable=True)

    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class FoodORM(Base):
    __tablename__ = "foods"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, index=True)
    category = Column(String, index=True)  # protein, carb, fat, vegetable, fruit
    serving_size = Column(Float)
    serving_unit = Column(String)
    calories = Column(Float)
    protein = Column(Float, default=0)
    carbs = Column(Float, default=0)
    fats = Column(Float, default=0)
    fiber = Column(Float, default=0)
    quality_tier = Column(String, default="moderate_fat")
    is_vegetarian = Column(Boolean, default=True)
    is_vegan = Column(Boolean, default=False)
    is_gluten_free = Column(Boolean, default=False)
    is_dairy_free = Column(Boolean, default=False)
    is_nut_free = Column(Boolean, default=True)


class NutritionPlanORM(Base):
    __tablename__ = "nutrition_plans"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    plan_name = Column(String)
    daily_calories = Column(Integer, nullable=True)
    daily_protein = Column(Integer, nullable=True)
    daily_carbs = Column(Integer, nullable=True)
    daily_fats = Column(Integer, nullable=True)
    nutrition_approach = Column(String, nullable=True)  # macro_tracking, meal_plan, portion_control, hybrid
    meal_frequency = Column(Integer, nullable=True)
    calculation_method = Column(String, nullable=True)
    activity_multiplier = Column(Float, nullable=True)
    bmr = Column(Integer, nullable=True)
    tdee = Column(Integer, nullable=True)
    goal_adjustment = Column(Integer, nullable=True)
    plan_type = Column(String, nullable=True)
    rate_of_change = Column(String, nullable=True)
    meal_distribution_json = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class MealPlanMealORM(Base):
    __tablename__ = "meal_plan_meals"

    id = Column(String, primary_key=True, index=True)
    nutrition_plan_id = Column(String, ForeignKey("nutrition_plans.id"), index=True)
    day_number = Column(Integer, default=1)
    meal_number = Column(Integer, default=1)
    meal_name = Column(String)
    meal_time = Column(String, nullable=True)
    target_calories = Column(Integer, nullable=True)
    target_protein = Column(Integer, nullable=True)
    target_carbs = Column(Integer, nullable=True)
    target_fats = Column(Integer, nullable=True)
    custom_meal = Column(Text, nullable=True)
    alternative_options_json = Column(Text, nullable=True)


class MealPlanFoodORM(Base):
    __tablename__ = "meal_plan_foods"

    id = Column(String, primary_key=True, index=True)
    meal_plan_meal_id = Column(String, ForeignKey("meal_plan_meals.id"), index=True)
    food_id = Column(String, ForeignKey("foods.id"), nullable=True)
    food_name = Column(String)
    quantity = Column(Float, nullable=True)
    unit = Column(String, nullable=True)
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fats = Column(Float, nullable=True)
    order_index = Column(Integer, default=0)


class NutritionLogORM(Base):
    __tablename__ = "nutrition_logs"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    log_date = Column(String, index=True)
    meal_type = Column(String, nullable=True)  # breakfast, lunch, dinner, snack
    food_name = Column(String)
    quantity = Column(Float, nullable=True)
    unit = Column(String, nullable=True)
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fats = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    meal_plan_meal_id = Column(String, ForeignKey("meal_plan_meals.id"), nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class MealRecommendationORM(Base):
    __tablename__ = "trainer_meal_recommendations"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    nutrition_plan_id = Column(String, ForeignKey("nutrition_plans.id"), nullable=True)
    meal_name = Column(String)
    meal_description = Column(Text, nullable=True)
    meal_category = Column(String, nullable=True)  # breakfast, lunch, dinner, snack
    meal_type = Column(String, nullable=True)
    calories_per_serving = Column(Float, nullable=True)
    protein_per_serving = Column(Float, nullable=True)
    carbs_per_serving = Column(Float, nullable=True)
    fats_per_serving = Column(Float, nullable=True)
    is_assigned = Column(Boolean, default=False)
    assigned_day_number = Column(Integer, nullable=True)
    assigned_date = Column(String, nullable=True)
    assigned_meal_slot = Column(String, nullable=True)
    recommendation_type = Column(String, default="flexible")
    priority = Column(Integer, default=0)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)


class MealSelectionORM(Base):
    __tablename__ = "client_meal_selections"

    id = Column(String, primary_key=True, index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    recommendation_id = Column(String, ForeignKey("trainer_meal_recommendations.id"), nullable=True)
    meal_name = Column(String, nullable=True)
    selected_date = Column(String, index=True)
    meal_category = Column(String, nullable=True)
    meal_slot = Column(String, nullable=True)
    servings = Column(Float, default=1.0)
    actual_calories = Column(Float, default=0)
    actual_protein = Column(Float, default=0)
    actual_carbs = Column(Float, default=0)
    actual_fats = Column(Float, default=0)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- PAYMENTS (Stripe Connect, trainer receives directly) ---

class TrainerStripeAccountORM(Base):
    __tablename__ = "trainer_stripe_accounts"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), unique=True, index=True)
    stripe_account_id = Column(String)
    stripe_account_type = Column(String, default="express")
    onboarding_completed = Column(Boolean, default=False)
    charges_enabled = Column(Boolean, default=False)
    payouts_enabled = Column(Boolean, default=False)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


class PaymentORM(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    subscription_id = Column(String, ForeignKey("subscriptions.id"), nullable=True)
    amount = Column(Float)
    currency = Column(String, default="usd")
    payment_type = Column(String)  # one-time, subscription
    stripe_payment_intent_id = Column(String, nullable=True)
    stripe_connect_account_id = Column(String, nullable=True)
    status = Column(String, default="pending", index=True)  # pending, completed, failed
    description = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    completed_at = Column(String, nullable=True)


class SubscriptionORM(Base):
    __tablename__ = "subscriptions"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    amount = Column(Float)
    currency = Column(String, default="usd")
    billing_cycle = Column(String, default="monthly")  # weekly, monthly, yearly
    stripe_subscription_id = Column(String, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    stripe_connect_account_id = Column(String, nullable=True)
    status = Column(String, default="active", index=True)  # active, cancelled
    current_period_start = Column(String, nullable=True)
    current_period_end = Column(String, nullable=True)
    cancelled_at = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
