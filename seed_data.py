"""
System seed data: exercise library, program templates and the food database.
seed_system_data() is idempotent and runs on every startup.
"""
import json
import uuid
import logging

from database import get_db_session
from models_orm import (
    ExerciseORM, ProgramTemplateORM, TemplateWorkoutORM, TemplateWorkoutExerciseORM, FoodORM
)

logger = logging.getLogger("trainr")


def uid():
    return str(uuid.uuid4())


# name, primary muscle, secondary muscles, movement pattern, equipment, difficulty, form cues, common mistakes
EXERCISES = [
    # Squat
    ("Goblet Squat", "quadriceps", ["glutes", "core"], "squat", "dumbbell", "beginner",
     "Hold the weight at chest height, sit between the hips, chest up.", "Heels lifting, knees caving in."),
    ("Bodyweight Squat", "quadriceps", ["glutes"], "squat", "bodyweight", "beginner",
     "Feet shoulder width, push knees out, full depth.", "Rounding the lower back at the bottom."),
    ("Leg Press", "quadriceps", ["glutes", "hamstrings"], "squat", "machine", "beginner",
     "Lower under control until hips just stay on the pad.", "Locking the knees out hard at the top."),
    ("Barbell Back Squat", "quadriceps", ["glutes", "hamstrings", "core"], "squat", "barbell", "intermediate",
     "Brace before descending, bar over mid-foot.", "Good-morning out of the hole."),
    ("Front Squat", "quadriceps", ["core", "upper_back"], "squat", "barbell", "advanced",
     "Elbows high, stay upright.", "Elbows dropping and bar rolling forward."),
    # Hinge
    ("Glute Bridge", "glutes", ["hamstrings"], "hinge", "bodyweight", "beginner",
     "Drive through the heels, squeeze at the top.", "Arching the lower back instead of extending the hips."),
    ("Dumbbell Romanian Deadlift", "hamstrings", ["glutes", "lower_back"], "hinge", "dumbbell", "beginner",
     "Push the hips back, soft knees, weights close to the legs.", "Squatting the weight down."),
    ("Romanian Deadlift", "hamstrings", ["glutes", "lower_back"], "hinge", "barbell", "intermediate",
     "Hinge until a hamstring stretch, neutral spine.", "Rounding the back to reach lower."),
    ("Hip Thrust", "glutes", ["hamstrings"], "hinge", "barbell", "intermediate",
     "Chin tucked, ribs down, full hip lockout.", "Hyperextending the lower back."),
    ("Kettlebell Swing", "glutes", ["hamstrings", "core"], "hinge", "kettlebell", "intermediate",
     "Snap the hips, arms are just ropes.", "Lifting with the arms or squatting the swing."),
    ("Conventional Deadlift", "back", ["glutes", "hamstrings", "forearms"], "hinge", "barbell", "advanced",
     "Bar over mid-foot, pull the slack out, push the floor away.", "Jerking the bar off the floor."),
    # Horizontal push
    ("Push-Up", "chest", ["triceps", "shoulders", "core"], "horizontal_push", "bodyweight", "beginner",
     "Body in a straight line, elbows about 45 degrees.", "Sagging hips."),
    ("Dumbbell Bench Press", "chest", ["triceps", "shoulders"], "horizontal_push", "dumbbell", "beginner",
     "Shoulder blades pinned, lower to chest level.", "Flaring elbows to 90 degrees."),
    ("Incline Dumbbell Press", "chest", ["shoulders", "triceps"], "horizontal_push", "dumbbell", "intermediate",
     "Bench at 30 degrees, press up and slightly in.", "Bench set too steep."),
    ("Barbell Bench Press", "chest", ["triceps", "shoulders"], "horizontal_push", "barbell", "intermediate",
     "Feet planted, touch the lower chest.", "Bouncing the bar off the chest."),
    # Vertical push
    ("Dumbbell Shoulder Press", "shoulders", ["triceps"], "vertical_push", "dumbbell", "beginner",
     "Ribs down, press straight overhead.", "Leaning back excessively."),
    ("Pike Push-Up", "shoulders", ["triceps"], "vertical_push", "bodyweight", "intermediate",
     "Hips high, head travels in front of the hands.", "Turning it into a regular push-up."),
    ("Overhead Press", "shoulders", ["triceps", "core"], "vertical_push", "barbell", "intermediate",
     "Squeeze glutes, move the head back then through.", "Pressing the bar forward around the face."),
    # Horizontal pull
    ("Dumbbell Row", "back", ["biceps", "rear_delts"], "horizontal_pull", "dumbbell", "beginner",
     "Pull the elbow to the hip, flat back.", "Rotating the torso to move the weight."),
    ("Inverted Row", "back", ["biceps"], "horizontal_pull", "bodyweight", "beginner",
     "Body rigid, pull the chest to the bar.", "Letting the hips sag."),
    ("Seated Cable Row", "back", ["biceps"], "horizontal_pull", "cable", "beginner",
     "Tall chest, squeeze the shoulder blades.", "Rocking the torso back and forth."),
    ("Barbell Row", "back", ["biceps", "rear_delts", "lower_back"], "horizontal_pull", "barbell", "intermediate",
     "Hinge to 45 degrees, pull to the lower ribs.", "Standing up as the set goes on."),
    # Vertical pull
    ("Lat Pulldown", "back", ["biceps"], "vertical_pull", "cable", "beginner",
     "Pull the bar to the upper chest, elbows down.", "Leaning far back and using momentum."),
    ("Chin-Up", "back", ["biceps"], "vertical_pull", "bodyweight", "intermediate",
     "Full hang at the bottom, chin over the bar.", "Half reps."),
    ("Pull-Up", "back", ["biceps", "core"], "vertical_pull", "bodyweight", "advanced",
     "Start from a dead hang, drive the elbows down.", "Kipping when strict reps were asked for."),
    # Lunge
    ("Reverse Lunge", "quadriceps", ["glutes"], "lunge", "bodyweight", "beginner",
     "Step back, back knee just above the floor.", "Front knee collapsing inward."),
    ("Walking Lunge", "quadriceps", ["glutes", "hamstrings"], "lunge", "dumbbell", "beginner",
     "Long steps, torso upright.", "Short choppy steps."),
    ("Bulgarian Split Squat", "quadriceps", ["glutes"], "lunge", "dumbbell", "intermediate",
     "Rear foot on the bench, most weight on the front leg.", "Standing too close to the bench."),
    # Core
    ("Plank", "core", ["shoulders"], "core", "bodyweight", "beginner",
     "Squeeze glutes, push the floor away.", "Hips too high or sagging."),
    ("Dead Bug", "core", [], "core", "bodyweight", "beginner",
     "Lower back pressed into the floor throughout.", "Moving too fast."),
    ("Hanging Leg Raise", "core", ["hip_flexors"], "core", "bodyweight", "advanced",
     "Posterior pelvic tilt at the top, no swinging.", "Using momentum."),
    # Isolation
    ("Dumbbell Biceps Curl", "biceps", ["forearms"], "isolation", "dumbbell", "beginner",
     "Elbows pinned to the sides.", "Swinging the weight up."),
    ("Triceps Pushdown", "triceps", [], "isolation", "cable", "beginner",
     "Elbows fixed, full lockout.", "Elbows drifting forward."),
    ("Lateral Raise", "shoulders", [], "isolation", "dumbbell", "beginner",
     "Lead with the elbows, stop at shoulder height.", "Shrugging the weight up."),
    ("Leg Curl", "hamstrings", [], "isolation", "machine", "beginner",
     "Control the lowering phase.", "Hips lifting off the pad."),
    ("Standing Calf Raise", "calves", [], "isolation", "machine", "beginner",
     "Full stretch at the bottom, pause at the top.", "Bouncing."),
    # Conditioning
    ("Mountain Climber", "core", ["shoulders", "hip_flexors"], "conditioning", "bodyweight", "beginner",
     "Hands under shoulders, drive the knees fast.", "Hips bouncing up."),
    ("Burpee", "full_body", ["chest", "quadriceps"], "conditioning", "bodyweight", "intermediate",
     "Chest to floor, jump with full hip extension.", "Skipping the push-up portion."),
    ("Jump Squat", "quadriceps", ["glutes", "calves"], "conditioning", "bodyweight", "intermediate",
     "Land softly, absorb into the next rep.", "Landing with locked knees."),
]


def _ex(name, sets, reps, rest, exercise_type="REGULAR"):
    return {"name": name, "sets": sets, "reps": reps, "rest": rest, "exercise_type": exercise_type}


_FULL_BODY = [
    _ex("Goblet Squat", 3, "10-12", "90 sec"),
    _ex("Dumbbell Bench Press", 3, "10-12", "90 sec"),
    _ex("Dumbbell Row", 3, "10-12", "90 sec"),
    _ex("Dumbbell Shoulder Press", 3, "10-12", "60 sec"),
    _ex("Plank", 3, "30-45 sec", "60 sec"),
]

_UPPER_A = [
    _ex("Barbell Bench Press", 4, "6-8", "120 sec"),
    _ex("Barbell Row", 4, "6-8", "120 sec"),
    _ex("Overhead Press", 3, "8-10", "90 sec"),
    _ex("Lat Pulldown", 3, "10-12", "90 sec"),
    _ex("Dumbbell Biceps Curl", 3, "10-12", "60 sec"),
]
_LOWER_A = [
    _ex("Barbell Back Squat", 4, "6-8", "150 sec"),
    _ex("Romanian Deadlift", 3, "8-10", "120 sec"),
    _ex("Walking Lunge", 3, "10 each", "90 sec"),
    _ex("Leg Curl", 3, "10-12", "60 sec"),
    _ex("Standing Calf Raise", 4, "12-15", "60 sec"),
]
_UPPER_B = [
    _ex("Incline Dumbbell Press", 4, "8-10", "90 sec"),
    _ex("Seated Cable Row", 4, "10-12", "90 sec"),
    _ex("Dumbbell Shoulder Press", 3, "10-12", "90 sec"),
    _ex("Chin-Up", 3, "6-10", "120 sec"),
    _ex("Triceps Pushdown", 3, "12-15", "60 sec"),
]
_LOWER_B = [
    _ex("Hip Thrust", 4, "8-10", "120 sec"),
    _ex("Leg Press", 3, "10-12", "120 sec"),
    _ex("Bulgarian Split Squat", 3, "8-10 each", "90 sec"),
    _ex("Leg Curl", 3, "12-15", "60 sec"),
    _ex("Hanging Leg Raise", 3, "10-12", "60 sec"),
]

_PUSH = [
    _ex("Barbell Bench Press", 4, "6-8", "150 sec"),
    _ex("Overhead Press", 4, "8-10", "120 sec"),
    _ex("Incline Dumbbell Press", 3, "10-12", "90 sec"),
    _ex("Lateral Raise", 4, "12-15", "60 sec"),
    _ex("Triceps Pushdown", 3, "12-15", "60 sec"),
]
_PULL = [
    _ex("Conventional Deadlift", 3, "5", "180 sec"),
    _ex("Pull-Up", 4, "6-10", "120 sec"),
    _ex("Barbell Row", 4, "8-10", "120 sec"),
    _ex("Seated Cable Row", 3, "10-12", "90 sec"),
    _ex("Dumbbell Biceps Curl", 4, "10-12", "60 sec"),
]
_LEGS = [
    _ex("Barbell Back Squat", 4, "6-8", "180 sec"),
    _ex("Romanian Deadlift", 4, "8-10", "120 sec"),
    _ex("Bulgarian Split Squat", 3, "10 each", "90 sec"),
    _ex("Leg Curl", 3, "12-15", "60 sec"),
    _ex("Standing Calf Raise", 4, "12-15", "60 sec"),
]

_HOME_A = [
    _ex("Goblet Squat", 3, "12-15", "60 sec"),
    _ex("Push-Up", 3, "8-15", "60 sec"),
    _ex("Dumbbell Row", 3, "10-12", "60 sec"),
    _ex("Glute Bridge", 3, "15", "60 sec"),
    _ex("Plank", 3, "30-45 sec", "45 sec"),
]
_HOME_B = [
    _ex("Reverse Lunge", 3, "10 each", "60 sec"),
    _ex("Dumbbell Shoulder Press", 3, "10-12", "60 sec"),
    _ex("Dumbbell Romanian Deadlift", 3, "10-12", "60 sec"),
    _ex("Inverted Row", 3, "8-12", "60 sec"),
    _ex("Dead Bug", 3, "10 each", "45 sec"),
]
_HOME_C = [
    _ex("Bodyweight Squat", 3, "15-20", "45 sec"),
    _ex("Dumbbell Bench Press", 3, "10-12", "60 sec"),
    _ex("Walking Lunge", 3, "10 each", "60 sec"),
    _ex("Pike Push-Up", 3, "6-10", "60 sec"),
    _ex("Mountain Climber", 3, "30 sec", "45 sec"),
]

_CIRCUIT_A = [
    _ex("Kettlebell Swing", 3, "15", "15 sec", "CIRCUIT"),
    _ex("Push-Up", 3, "12", "15 sec", "CIRCUIT"),
    _ex("Goblet Squat", 3, "15", "15 sec", "CIRCUIT"),
    _ex("Mountain Climber", 3, "40 sec", "90 sec", "CIRCUIT"),
]
_CIRCUIT_B = [
    _ex("Jump Squat", 3, "12", "15 sec", "CIRCUIT"),
    _ex("Dumbbell Row", 3, "12 each", "15 sec", "CIRCUIT"),
    _ex("Walking Lunge", 3, "10 each", "15 sec", "CIRCUIT"),
    _ex("Burpee", 3, "10", "90 sec", "CIRCUIT"),
]
_CIRCUIT_C = [
    _ex("Dumbbell Romanian Deadlift", 3, "12", "15 sec", "CIRCUIT"),
    _ex("Dumbbell Shoulder Press", 3, "12", "15 sec", "CIRCUIT"),
    _ex("Reverse Lunge", 3, "10 each", "15 sec", "CIRCUIT"),
    _ex("Plank", 3, "45 sec", "90 sec", "CIRCUIT"),
]

PROGRAM_TEMPLATES = [
    {
        "name": "Beginner Full Body",
        "description": "Perfect for those new to training. Full body workouts 3x per week focusing on fundamental movements.",
        "split_type": "full_body", "duration_weeks": 4, "target_experience_level": "beginner",
        "target_goal": "general_fitness", "target_days_per_week": 3, "target_equipment": "full_gym",
        "target_session_duration": 60, "progression_type": "linear",
        "workouts": [("Full Body A", 1, _FULL_BODY), ("Full Body B", 3, _FULL_BODY), ("Full Body C", 5, _FULL_BODY)],
    },
    {
        "name": "Intermediate Upper/Lower",
        "description": "4-day split alternating upper and lower body. Great for building muscle and strength.",
        "split_type": "upper_lower", "duration_weeks": 6, "target_experience_level": "intermediate",
        "target_goal": "build_muscle", "target_days_per_week": 4, "target_equipment": "full_gym",
        "target_session_duration": 60, "progression_type": "undulating",
        "workouts": [("Upper A", 1, _UPPER_A), ("Lower A", 2, _LOWER_A), ("Upper B", 4, _UPPER_B), ("Lower B", 5, _LOWER_B)],
    },
    {
        "name": "Advanced Push/Pull/Legs",
        "description": "6-day PPL split for advanced trainees. High volume for maximum muscle growth.",
        "split_type": "push_pull_legs", "duration_weeks": 8, "target_experience_level": "advanced",
        "target_goal": "build_muscle", "target_days_per_week": 6, "target_equipment": "full_gym",
        "target_session_duration": 75, "progression_type": "block",
        "workouts": [("Push A", 1, _PUSH), ("Pull A", 2, _PULL), ("Legs A", 3, _LEGS),
                     ("Push B", 4, _PUSH), ("Pull B", 5, _PULL), ("Legs B", 6, _LEGS)],
    },
    {
        "name": "Home Workout Program",
        "description": "Full body workouts using bodyweight and dumbbells. Perfect for home gyms.",
        "split_type": "full_body", "duration_weeks": 4, "target_experience_level": "beginner",
        "target_goal": "general_fitness", "target_days_per_week": 3, "target_equipment": "dumbbells_only",
        "target_session_duration": 45, "progression_type": "linear",
        "workouts": [("Home Full Body A", 1, _HOME_A), ("Home Full Body B", 3, _HOME_B), ("Home Full Body C", 5, _HOME_C)],
    },
    {
        "name": "Fat Loss Circuit Training",
        "description": "High-intensity circuit training for fat loss. Combines strength and cardio.",
        "split_type": "full_body", "duration_weeks": 6, "target_experience_level": "intermediate",
        "target_goal": "lose_fat", "target_days_per_week": 5, "target_equipment": "full_gym",
        "target_session_duration": 45, "progression_type": "linear",
        "workouts": [("Circuit A", 1, _CIRCUIT_A), ("Circuit B", 2, _CIRCUIT_B), ("Circuit C", 3, _CIRCUIT_C),
                     ("Circuit A", 4, _CIRCUIT_A), ("Circuit B", 5, _CIRCUIT_B)],
    },
]


def _food(name, category, size, unit, cal, p, c, f, tier, fiber=0, **flags):
    row = {
        "name": name, "category": category, "serving_size": size, "serving_unit": unit,
        "calories": cal, "protein": p, "carbs": c, "fats": f, "fiber": fiber, "quality_tier": tier,
        "is_vegetarian": True, "is_vegan": False, "is_gluten_free": False,
        "is_dairy_free": False, "is_nut_free": True,
    }
    row.update(flags)
    return row


_MEAT = {"is_vegetarian": False, "is_vegan": False}
_PLANT = {"is_vegetarian": True, "is_vegan": True}
_PLANT_GF = {"is_vegetarian": True, "is_vegan": True, "is_gluten_free": True}

FOODS = [
    # Poultry
    _food("Chicken Breast (skinless, boneless)", "protein", 113, "g", 187, 35, 0, 4, "lean", **_MEAT),
    _food("Chicken Thigh (skinless, boneless)", "protein", 113, "g", 209, 26, 0, 10, "moderate_fat", **_MEAT),
    _food("Turkey Breast (skinless)", "protein", 113, "g", 135, 30, 0, 1, "lean", **_MEAT),
    _food("Ground Turkey (93% lean)", "protein", 113, "g", 176, 24, 0, 8, "lean", **_MEAT),
    _food("Duck Breast", "protein", 113, "g", 201, 19, 0, 13, "moderate_fat", **_MEAT),
    # Beef & pork
    _food("Beef Sirloin (lean)", "protein", 113, "g", 207, 26, 0, 10, "moderate_fat", **_MEAT),
    _food("Ground Beef (93% lean)", "protein", 113, "g", 200, 23, 0, 11, "moderate_fat", **_MEAT),
    _food("Ground Beef (80% lean)", "protein", 113, "g", 254, 20, 0, 18, "high_fat", **_MEAT),
    _food("Beef Tenderloin", "protein", 113, "g", 179, 25, 0, 8, "lean", **_MEAT),
    _food("Beef Ribeye", "protein", 113, "g", 291, 23, 0, 21, "high_fat", **_MEAT),
    _food("Pork Tenderloin", "protein", 113, "g", 143, 26, 0, 3, "lean", **_MEAT),
    _food("Pork Chop (boneless)", "protein", 113, "g", 231, 26, 0, 12, "moderate_fat", **_MEAT),
    _food("Ground Pork (85% lean)", "protein", 113, "g", 212, 20, 0, 14, "moderate_fat", **_MEAT),
    # Fish & seafood
    _food("Salmon (Atlantic, farmed)", "protein", 113, "g", 206, 23, 0, 12, "moderate_fat", **_MEAT),
    _food("Salmon (wild)", "protein", 113, "g", 182, 25, 0, 8, "moderate_fat", **_MEAT),
    _food("Tuna (yellowfin, fresh)", "protein", 113, "g", 108, 24, 0, 1, "lean", **_MEAT),
    _food("Tuna (canned in water)", "protein", 113, "g", 99, 22, 0, 1, "lean", **_MEAT),
    _food("Cod", "protein", 113, "g", 82, 18, 0, 1, "lean", **_MEAT),
    _food("Tilapia", "protein", 113, "g", 128, 26, 0, 3, "lean", **_MEAT),
    _food("Shrimp (cooked)", "protein", 113, "g", 99, 24, 0, 0, "lean", **_MEAT),
    _food("Scallops", "protein", 113, "g", 94, 18, 4, 1, "lean", **_MEAT),
    _food("Crab (cooked)", "protein", 113, "g", 97, 20, 0, 1, "lean", **_MEAT),
    _food("Lobster (cooked)", "protein", 113, "g", 98, 21, 1, 1, "lean", **_MEAT),
    # Eggs & dairy
    _food("Egg (whole, large)", "protein", 1, "piece", 72, 6, 0, 5, "moderate_fat"),
    _food("Egg White (large)", "protein", 1, "piece", 17, 4, 0, 0, "lean"),
    _food("Greek Yogurt (0% fat)", "protein", 170, "g", 100, 17, 7, 0, "lean"),
    _food("Greek Yogurt (2% fat)", "protein", 170, "g", 130, 17, 7, 3, "moderate_fat"),
    _food("Cottage Cheese (1% fat)", "protein", 113, "g", 81, 14, 3, 1, "lean"),
    _food("Cottage Cheese (4% fat)", "protein", 113, "g", 111, 13, 3, 5, "moderate_fat"),
    _food("Milk (skim)", "protein", 240, "ml", 83, 8, 12, 0, "lean"),
    _food("Milk (2%)", "protein", 240, "ml", 122, 8, 12, 5, "moderate_fat"),
    _food("Milk (whole)", "protein", 240, "ml", 149, 8, 12, 8, "moderate_fat"),
    # Plant proteins
    _food("Tofu (firm)", "protein", 113, "g", 94, 10, 2, 5, "moderate_fat", **_PLANT),
    _food("Tempeh", "protein", 113, "g", 193, 19, 9, 11, "moderate_fat", **_PLANT),
    _food("Seitan", "protein", 113, "g", 104, 21, 4, 1, "lean", **_PLANT),
    _food("Edamame (shelled, cooked)", "protein", 113, "g", 122, 11, 10, 5, "moderate_fat", **_PLANT),
    _food("Lentils (cooked)", "protein", 198, "g", 230, 18, 40, 1, "lean", **_PLANT),
    _food("Black Beans (cooked)", "protein", 172, "g", 227, 15, 41, 1, "lean", **_PLANT),
    _food("Chickpeas (cooked)", "protein", 164, "g", 269, 15, 45, 4, "lean", **_PLANT),
    _food("Kidney Beans (cooked)", "protein", 177, "g", 225, 15, 40, 1, "lean", **_PLANT),
    _food("Pinto Beans (cooked)", "protein", 171, "g", 245, 15, 45, 1, "lean", **_PLANT),
    # Protein powders
    _food("Whey Protein Powder", "protein", 30, "g", 120, 25, 3, 1.5, "lean"),
    _food("Casein Protein Powder", "protein", 30, "g", 120, 24, 3, 1, "lean"),
    _food("Pea Protein Powder", "protein", 30, "g", 110, 24, 2, 1, "lean", **_PLANT),
    _food("Hemp Protein Powder", "protein", 30, "g", 120, 15, 8, 3, "moderate_fat", **_PLANT),
    # Grains
    _food("White Rice (cooked)", "carb", 158, "g", 205, 4, 45, 0, "whole_food", **_PLANT_GF),
    _food("Brown Rice (cooked)", "carb", 195, "g", 216, 5, 45, 2, "whole_food", fiber=4, **_PLANT_GF),
    _food("Jasmine Rice (cooked)", "carb", 158, "g", 205, 4, 45, 0, "whole_food", **_PLANT_GF),
    _food("Quinoa (cooked)", "carb", 185, "g", 222, 8, 39, 4, "whole_food", fiber=5, **_PLANT_GF),
    _food("Oats (dry)", "carb", 40, "g", 150, 5, 27, 3, "whole_food", fiber=4, **_PLANT),
    _food("Oatmeal (cooked)", "carb", 234, "g", 166, 6, 28, 4, "whole_food", fiber=4, **_PLANT),
    _food("Pasta (white, cooked)", "carb", 140, "g", 221, 8, 43, 1, "processed", **_PLANT),
    _food("Whole Wheat Pasta (cooked)", "carb", 140, "g", 174, 7, 37, 1, "whole_food", fiber=6, **_PLANT),
    _food("Bread (white)", "carb", 28, "g", 75, 2, 14, 1, "processed", **_PLANT),
    _food("Whole Wheat Bread", "carb", 28, "g", 69, 4, 12, 1, "whole_food", fiber=2, **_PLANT),
    _food("Bagel (plain)", "carb", 105, "g", 289, 11, 56, 2, "processed", **_PLANT),
    # Potatoes & starches
    _food("Potato (white, baked)", "carb", 173, "g", 161, 4, 37, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Sweet Potato (baked)", "carb", 200, "g", 180, 4, 41, 0, "whole_food", fiber=6, **_PLANT_GF),
    _food("Corn (cooked)", "carb", 164, "g", 143, 5, 31, 2, "whole_food", fiber=4, **_PLANT_GF),
    _food("Peas (cooked)", "carb", 160, "g", 134, 9, 25, 0, "whole_food", fiber=9, **_PLANT_GF),
    # Fruits
    _food("Banana (medium)", "carb", 118, "g", 105, 1, 27, 0, "whole_food", fiber=3, **_PLANT_GF),
    _food("Apple (medium)", "carb", 182, "g", 95, 0, 25, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Orange (medium)", "carb", 131, "g", 62, 1, 15, 0, "whole_food", fiber=3, **_PLANT_GF),
    _food("Berries (mixed)", "carb", 150, "g", 85, 1, 21, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Strawberries", "carb", 144, "g", 46, 1, 11, 0, "whole_food", fiber=3, **_PLANT_GF),
    _food("Blueberries", "carb", 148, "g", 84, 1, 21, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Grapes", "carb", 150, "g", 104, 1, 27, 0, "whole_food", fiber=1, **_PLANT_GF),
    _food("Mango", "carb", 165, "g", 99, 1, 25, 0, "whole_food", fiber=3, **_PLANT_GF),
    # Nuts & seeds
    _food("Almonds", "fat", 28, "g", 164, 6, 6, 14, "moderate_fat", fiber=4, is_nut_free=False, **_PLANT),
    _food("Peanuts", "fat", 28, "g", 161, 7, 5, 14, "moderate_fat", fiber=2, is_nut_free=False, **_PLANT),
    _food("Walnuts", "fat", 28, "g", 185, 4, 4, 18, "moderate_fat", fiber=2, is_nut_free=False, **_PLANT),
    _food("Cashews", "fat", 28, "g", 157, 5, 9, 12, "moderate_fat", fiber=1, is_nut_free=False, **_PLANT),
    _food("Peanut Butter", "fat", 32, "g", 188, 8, 6, 16, "moderate_fat", fiber=2, is_nut_free=False, **_PLANT),
    _food("Almond Butter", "fat", 32, "g", 196, 7, 6, 18, "moderate_fat", fiber=3, is_nut_free=False, **_PLANT),
    _food("Chia Seeds", "fat", 28, "g", 138, 5, 12, 9, "moderate_fat", fiber=10, **_PLANT_GF),
    _food("Flax Seeds", "fat", 28, "g", 150, 5, 8, 12, "moderate_fat", fiber=8, **_PLANT_GF),
    _food("Pumpkin Seeds", "fat", 28, "g", 158, 9, 3, 14, "moderate_fat", fiber=1, **_PLANT_GF),
    # Oils, avocado, cheese
    _food("Olive Oil", "fat", 14, "g", 119, 0, 0, 14, "moderate_fat", **_PLANT_GF),
    _food("Coconut Oil", "fat", 14, "g", 117, 0, 0, 14, "moderate_fat", **_PLANT_GF),
    _food("Avocado Oil", "fat", 14, "g", 120, 0, 0, 14, "moderate_fat", **_PLANT_GF),
    _food("Butter", "fat", 14, "g", 102, 0, 0, 12, "moderate_fat"),
    _food("Avocado (medium)", "fat", 150, "g", 240, 3, 13, 22, "moderate_fat", fiber=10, **_PLANT_GF),
    _food("Cheddar Cheese", "fat", 28, "g", 113, 7, 1, 9, "moderate_fat"),
    _food("Mozzarella Cheese", "fat", 28, "g", 85, 6, 1, 6, "moderate_fat"),
    _food("Feta Cheese", "fat", 28, "g", 75, 4, 1, 6, "moderate_fat"),
    # Vegetables
    _food("Broccoli (cooked)", "vegetable", 156, "g", 55, 4, 11, 1, "whole_food", fiber=5, **_PLANT_GF),
    _food("Spinach (raw)", "vegetable", 30, "g", 7, 1, 1, 0, "whole_food", fiber=1, **_PLANT_GF),
    _food("Kale (raw)", "vegetable", 67, "g", 33, 3, 6, 1, "whole_food", fiber=1, **_PLANT_GF),
    _food("Asparagus (cooked)", "vegetable", 180, "g", 40, 4, 8, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Brussels Sprouts (cooked)", "vegetable", 156, "g", 56, 4, 11, 1, "whole_food", fiber=4, **_PLANT_GF),
    _food("Cauliflower (cooked)", "vegetable", 124, "g", 29, 2, 6, 0, "whole_food", fiber=3, **_PLANT_GF),
    _food("Zucchini (cooked)", "vegetable", 180, "g", 27, 2, 5, 0, "whole_food", fiber=2, **_PLANT_GF),
    _food("Bell Peppers (raw)", "vegetable", 149, "g", 31, 1, 7, 0, "whole_food", fiber=3, **_PLANT_GF),
    _food("Carrots (raw)", "vegetable", 128, "g", 52, 1, 12, 0, "whole_food", fiber=4, **_PLANT_GF),
    _food("Cucumber (raw)", "vegetable", 119, "g", 16, 1, 4, 0, "whole_food", fiber=1, **_PLANT_GF),
    _food("Tomatoes (raw)", "vegetable", 180, "g", 32, 2, 7, 0, "whole_food", fiber=2, **_PLANT_GF),
    _food("Mushrooms (cooked)", "vegetable", 156, "g", 44, 3, 8, 0, "whole_food", fiber=2, **_PLANT_GF),
    _food("Onions (raw)", "vegetable", 160, "g", 64, 2, 15, 0, "whole_food", fiber=3, **_PLANT_GF),
    # Combination foods
    _food("Pizza Slice (cheese)", "combination", 107, "g", 272, 12, 33, 10, "processed"),
    _food("Burger (beef patty, bun)", "combination", 150, "g", 354, 19, 33, 15, "processed", **_MEAT),
    _food("Chicken Sandwich", "combination", 200, "g", 350, 25, 35, 12, "processed", **_MEAT),
]


def seed_exercises(db) -> int:
    existing = {name for (name,) in db.query(ExerciseORM.name).all()}
    inserted = 0
    for name, primary, secondary, pattern, equipment, difficulty, cues, mistakes in EXERCISES:
        if name in existing:
            continue
        db.add(ExerciseORM(
            id=uid(),
            name=name,
            primary_muscle_group=primary,
            secondary_muscle_groups_json=json.dumps(secondary),
            movement_pattern=pattern,
            equipment_required=equipment,
            difficulty_level=difficulty,
            form_cues=cues,
            common_mistakes=mistakes,
        ))
        inserted += 1
    db.flush()
    return inserted


def seed_program_templates(db) -> int:
    exercise_ids = {name: ex_id for (ex_id, name) in db.query(ExerciseORM.id, ExerciseORM.name).all()}
    existing = {
        name for (name,) in db.query(ProgramTemplateORM.name)
        .filter(ProgramTemplateORM.is_system_template == True).all()
    }
    inserted = 0
    for template in PROGRAM_TEMPLATES:
        if template["name"] in existing:
            continue
        template_id = uid()
        fields = {k: v for k, v in template.items() if k != "workouts"}
        db.add(ProgramTemplateORM(id=template_id, is_system_template=True, **fields))

        for order, (workout_name, day_number, exercises) in enumerate(template["workouts"]):
            workout_id = uid()
            db.add(TemplateWorkoutORM(
                id=workout_id,
                template_id=template_id,
                workout_name=workout_name,
                week_number=1,
                day_number=day_number,
                order_index=order,
            ))
            for i, ex in enumerate(exercises):
                db.add(TemplateWorkoutExerciseORM(
                    id=uid(),
                    template_workout_id=workout_id,
                    exercise_id=exercise_ids.get(ex["name"]),
                    exercise_name=ex["name"],
                    exercise_type=ex["exercise_type"],
                    sets=ex["sets"],
                    reps=ex["reps"],
                    rest=ex["rest"],
                    order_index=i,
                ))
        inserted += 1
    db.flush()
    return inserted


def seed_foods(db) -> int:
    existing = {name for (name,) in db.query(FoodORM.name).all()}
    inserted = 0
    for food in FOODS:
        if food["name"] in existing:
            continue
        db.add(FoodORM(id=uid(), **food))
        inserted += 1
    db.flush()
    return inserted


def seed_system_data():
    db = get_db_session()
    try:
        exercises = seed_exercises(db)
        templates = seed_program_templates(db)
        foods = seed_foods(db)
        db.commit()
        if exercises or templates or foods:
            logger.info(f"Seeded {exercises} exercises, {templates} program templates, {foods} foods")
    except Exception as e:
        db.rollback()
        logger.error(f"Error seeding system data: {e}")
        raise
    finally:
        db.close()
