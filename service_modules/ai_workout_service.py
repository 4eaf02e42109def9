"""
AI Workout Service - personalised workouts from a client's onboarding data.

Gemini writes the workout when GEMINI_API_KEY is set. Without a key, or
when the model call fails, a rule-based generator builds one from the
exercise pools below so trainers always get a usable draft.
"""
import os
from typing import List, Optional

from .base import (
    HTTPException, json, logging, datetime,
    get_db_session, UserORM, ClientORM,
    WorkoutORM, WorkoutExerciseORM, WorkoutAssignmentORM, WorkoutLogORM,
    load_json
)
from models import GenerateWorkoutRequest, CustomizeWorkoutRequest, WorkoutPreferences

logger = logging.getLogger("trainr")

GEMINI_MODEL = 'models/gemini-2.0-flash'

# focus -> (gym exercises, bodyweight/home exercises)
EXERCISE_POOLS = {
    "upper body": (
        ["Barbell Bench Press", "Bent-Over Barbell Row", "Overhead Press", "Lat Pulldown",
         "Dumbbell Lateral Raise", "Cable Triceps Pushdown", "Dumbbell Biceps Curl"],
        ["Push-Up", "Inverted Row", "Pike Push-Up", "Bench Dip", "Plank Shoulder Tap", "Superman"],
    ),
    "lower body": (
        ["Barbell Back Squat", "Romanian Deadlift", "Walking Lunge", "Leg Press",
         "Leg Curl", "Standing Calf Raise", "Hip Thrust"],
        ["Bodyweight Squat", "Reverse Lunge", "Glute Bridge", "Bulgarian Split Squat",
         "Single-Leg Romanian Deadlift", "Calf Raise"],
    ),
    "core": (
        ["Cable Crunch", "Hanging Knee Raise", "Pallof Press", "Ab Wheel Rollout", "Plank"],
        ["Plank", "Dead Bug", "Bicycle Crunch", "Side Plank", "Mountain Climber"],
    ),
    "cardio": (
        ["Rowing Machine Intervals", "Assault Bike Sprint", "Kettlebell Swing", "Box Jump", "Battle Ropes"],
        ["Jumping Jacks", "Burpee", "High Knees", "Mountain Climber", "Skater Hops"],
    ),
    "full body": (
        ["Barbell Back Squat", "Barbell Bench Press", "Romanian Deadlift", "Bent-Over Barbell Row",
         "Overhead Press", "Walking Lunge", "Plank"],
        ["Bodyweight Squat", "Push-Up", "Glute Bridge", "Inverted Row", "Reverse Lunge",
         "Pike Push-Up", "Plank"],
    ),
}

# goal keyword -> (sets, reps, rest)
GOAL_SCHEMES = [
    (("strength", "power"), (5, "3-5", "180 seconds")),
    (("muscle", "hypertrophy", "bulk", "size"), (4, "8-12", "90 seconds")),
    (("fat", "weight loss", "lose", "lean", "tone"), (3, "12-15", "45 seconds")),
    (("endurance", "cardio", "conditioning", "stamina"), (3, "15-20", "30 seconds")),
]
DEFAULT_SCHEME = (3, "10-12", "60 seconds")

# injury keyword -> exercises to drop
INJURY_EXCLUSIONS = {
    "knee": ("Squat", "Lunge", "Box Jump", "Leg Press", "Skater", "Jump"),
    "shoulder": ("Overhead Press", "Pike Push-Up", "Bench Press", "Lateral Raise", "Dip"),
    "back": ("Deadlift", "Bent-Over", "Good Morning", "Superman"),
    "wrist": ("Push-Up", "Plank Shoulder Tap", "Burpee"),
}

BODYWEIGHT_EQUIPMENT = ("bodyweight", "none", "home", "no equipment", "minimal")


def _clean_json_text(text: str) -> str:
    text = text.strip()
    # Clean up markdown if present
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _call_gemini(prompt: str) -> Optional[dict]:
    """Send a prompt to Gemini and parse its JSON reply. None when not configured."""
    gemini_key = os.environ.get("GEMINI_API_KEY")
    if not gemini_key:
        return None

    import google.generativeai as genai

    genai.configure(api_key=gemini_key)
    model = genai.GenerativeModel(GEMINI_MODEL)
    response = model.generate_content(prompt)
    data = json.loads(_clean_json_text(response.text))
    logger.info(f"Gemini returned workout with {len(data.get('exercises') or [])} exercises")
    return data


def _scheme_for(goal: Optional[str], intensity: str):
    sets, reps, rest = DEFAULT_SCHEME
    goal_text = (goal or "").lower()
    for keywords, scheme in GOAL_SCHEMES:
        if any(k in goal_text for k in keywords):
            sets, reps, rest = scheme
            break
    if intensity == "high":
        sets += 1
    elif intensity == "low":
        sets = max(sets - 1, 2)
    return sets, reps, rest


def _excluded_by_injuries(name: str, injuries: Optional[str]) -> bool:
    text = (injuries or "").lower()
    for keyword, blocked in INJURY_EXCLUSIONS.items():
        if keyword in text and any(b.lower() in name.lower() for b in blocked):
            return True
    return False


def _pool_for(focus: str, equipment: str) -> List[str]:
    focus_key = next((k for k in EXERCISE_POOLS if k in (focus or "").lower()), "full body")
    gym, bodyweight = EXERCISE_POOLS[focus_key]
    if any(word in (equipment or "").lower() for word in BODYWEIGHT_EQUIPMENT):
        return bodyweight
    return gym


def build_rules_workout(client_name: str, client: dict, prefs: WorkoutPreferences) -> dict:
    """Deterministic workout from focus, equipment, goal, intensity and injuries."""
    goal = prefs.goal or client.get("primary_goal")
    sets, reps, rest = _scheme_for(goal, prefs.intensity)
    beginner = (client.get("previous_experience") or client.get("training_experience") or "").lower().startswith("beginner")
    if beginner:
        sets = min(sets, 3)

    # Roughly 8 minutes per exercise after a 10 minute warm-up/cool-down
    count = max(3, min(8, (int(prefs.duration or 60) - 10) // 8))
    candidates = [
        name for name in _pool_for(prefs.focus, prefs.equipment)
        if not _excluded_by_injuries(name, client.get("injuries"))
    ]

    exercises = [{
        "name": "Dynamic Warm-Up",
        "sets": 1,
        "reps": "5 minutes",
        "weight": "bodyweight",
        "rest": "0 seconds",
        "notes": "Light cardio and mobility for the joints used today",
    }]
    for name in candidates[:count]:
        exercises.append({
            "name": name,
            "sets": sets,
            "reps": reps,
            "weight": "moderate, leave 2 reps in reserve" if beginner else "challenging for the target reps",
            "rest": rest,
            "notes": "Controlled tempo, full range of motion",
        })
    exercises.append({
        "name": "Cool-Down Stretch",
        "sets": 1,
        "reps": "5 minutes",
        "weight": "bodyweight",
        "rest": "0 seconds",
        "notes": "Static stretches for the muscles trained",
    })

    focus_title = (prefs.focus or "full body").title()
    return {
        "name": f"{focus_title} Workout for {client_name}",
        "description": f"{prefs.duration}-minute {prefs.intensity} intensity {prefs.focus} session"
                       + (f" targeting {goal}" if goal else ""),
        "category": focus_title,
        "exercises": exercises,
    }


def apply_rules_modifications(exercises: List[dict], client: dict, modifications: Optional[str]) -> List[dict]:
    """Adjust volume from the request text and drop exercises the client's injuries rule out."""
    text = (modifications or "").lower()
    injuries = " ".join(filter(None, [client.get("injuries"), text]))
    result = []
    for ex in exercises:
        if _excluded_by_injuries(ex.get("name") or "", injuries):
            continue
        ex = dict(ex)
        sets = ex.get("sets")
        if isinstance(sets, int):
            if any(w in text for w in ("easier", "beginner", "lighter", "less volume")):
                ex["sets"] = max(sets - 1, 1)
            elif any(w in text for w in ("harder", "advanced", "more volume", "challenging")):
                ex["sets"] = sets + 1
        result.append(ex)
    return result


def build_workout_prompt(client_name: str, client: dict, history: List[dict], prefs: WorkoutPreferences) -> str:
    history_lines = "\n".join(
        f"- {h['name']}: {h['status']} ({'Completed' if h.get('completed_date') else 'Not completed'})"
        for h in history
    ) or "No previous workouts"
    return f"""You are an expert personal trainer. Generate a personalized workout plan for this client.

CLIENT PROFILE:
- Name: {client_name}
- Age: {client.get('age') or 'Not specified'}
- Gender: {client.get('gender') or 'Not specified'}
- Height: {client.get('height') or 'Not specified'}
- Weight: {client.get('weight') or 'Not specified'}
- Experience Level: {client.get('previous_experience') or 'Not specified'}
- Activity Level: {client.get('activity_level') or 'Not specified'}

GOALS:
- Primary Goal: {prefs.goal or client.get('primary_goal') or 'Not specified'}
- Goal Target: {client.get('goal_target') or 'Not specified'}
- Secondary Goals: {json.dumps(client.get('secondary_goals')) if client.get('secondary_goals') else 'None'}

HEALTH & LIMITATIONS:
- Injuries: {client.get('injuries') or 'None reported'}
- Sleep: {client.get('sleep_hours') or 'Not specified'} hours per night
- Stress Level: {client.get('stress_level') or 'Not specified'}

SESSION:
- Equipment: {prefs.equipment}
- Duration: {prefs.duration} minutes
- Intensity: {prefs.intensity}
- Focus: {prefs.focus}
{f'- Notes: {prefs.notes}' if prefs.notes else ''}

RECENT WORKOUT HISTORY:
{history_lines}

Respect the injuries, include a warm-up and cool-down and fit the duration.
Return ONLY a raw JSON object (no markdown) in this format:
{{"name": "Workout Name", "description": "Short description", "category": "Strength/Cardio/HIIT/Full Body/Upper Body/Lower Body/Core",
 "exercises": [{{"name": "Exercise", "sets": 3, "reps": "10-12", "weight": "suggested load", "rest": "60 seconds", "notes": "Form cues"}}]}}"""


def build_customization_prompt(workout: dict, client: dict, modifications: Optional[str]) -> str:
    return f"""Modify the following workout for a client.

CURRENT WORKOUT:
{workout['name']}
{workout.get('description') or ''}
Exercises:
{json.dumps(workout['exercises'], indent=2)}

CLIENT PROFILE:
- Experience: {client.get('previous_experience') or 'Not specified'}
- Injuries: {client.get('injuries') or 'None'}
- Goals: {client.get('primary_goal') or 'Not specified'}

MODIFICATIONS REQUESTED:
{modifications or 'General customization based on client profile'}

Return ONLY a raw JSON object: {{"exercises": [...same fields as above...], "modifications": "summary of changes"}}"""


class AIWorkoutService:
    """Service for generating and customising workouts."""

    def _load_client(self, db, trainer_id: str, client_id: str, not_found: str):
        row = db.query(ClientORM, UserORM).join(
            UserORM, ClientORM.user_id == UserORM.id
        ).filter(
            ClientORM.user_id == client_id,
            ClientORM.trainer_id == trainer_id
        ).first()
        if not row:
            raise HTTPException(status_code=404, detail=not_found)
        client, user = row
        data = {c.name: getattr(client, c.name) for c in client.__table__.columns}
        data["secondary_goals"] = load_json(client.secondary_goals_json, [])
        return user.name, data

    def generate_workout(self, trainer_id: str, data: GenerateWorkoutRequest) -> dict:
        if not data.client_id:
            raise HTTPException(status_code=400, detail="Client ID is required")

        prefs = data.workout_preferences
        db = get_db_session()
        try:
            client_name, client = self._load_client(
                db, trainer_id, data.client_id, "Client not found or not assigned to you"
            )
            rows = db.query(WorkoutAssignmentORM, WorkoutORM).join(
                WorkoutORM, WorkoutAssignmentORM.workout_id == WorkoutORM.id
            ).filter(
                WorkoutAssignmentORM.client_id == data.client_id
            ).order_by(WorkoutAssignmentORM.assigned_date.desc()).limit(5).all()
            history = []
            for assignment, workout in rows:
                log = db.query(WorkoutLogORM).filter(
                    WorkoutLogORM.workout_id == workout.id,
                    WorkoutLogORM.client_id == data.client_id
                ).first()
                history.append({
                    "name": workout.name,
                    "status": assignment.status,
                    "completed_date": assignment.completed_date,
                    "duration": log.duration if log else None,
                })
        finally:
            db.close()

        source = "rules"
        generated = None
        try:
            generated = _call_gemini(build_workout_prompt(client_name, client, history, prefs))
            if generated:
                source = "gemini"
        except Exception as e:
            logger.error(f"Gemini Error: {e}")
        if not generated:
            generated = build_rules_workout(client_name, client, prefs)

        return {
            "name": generated.get("name") or "AI Generated Workout",
            "description": generated.get("description") or "",
            "category": generated.get("category") or "General",
            "exercises": generated.get("exercises") or [],
            "ai_generated": True,
            "ai_metadata": {
                "client_id": data.client_id,
                "generated_at": datetime.utcnow().isoformat(),
                "model": GEMINI_MODEL if source == "gemini" else "rules",
                "source": source,
                "preferences": prefs.model_dump(),
            },
        }

    def customize_workout(self, trainer_id: str, data: CustomizeWorkoutRequest) -> dict:
        if not data.workout_id or not data.client_id:
            raise HTTPException(status_code=400, detail="Workout ID and Client ID are required")

        db = get_db_session()
        try:
            workout = db.query(WorkoutORM).filter(
                WorkoutORM.id == data.workout_id,
                WorkoutORM.trainer_id == trainer_id
            ).first()
            if not workout:
                raise HTTPException(status_code=404, detail="Workout not found")
            exercises = [{
                "id": e.id,
                "name": e.exercise_name,
                "sets": e.sets,
                "reps": e.reps,
                "weight": e.weight,
                "rest": e.rest,
                "notes": e.notes,
                "order": e.order_index,
            } for e in db.query(WorkoutExerciseORM).filter(
                WorkoutExerciseORM.workout_id == workout.id
            ).order_by(WorkoutExerciseORM.order_index).all()]
            result = {
                "id": workout.id,
                "trainer_id": workout.trainer_id,
                "name": workout.name,
                "description": workout.description,
                "created_at": workout.created_at,
                "exercises": exercises,
            }
            _, client = self._load_client(db, trainer_id, data.client_id, "Client not found")
        finally:
            db.close()

        customized = None
        try:
            customized = _call_gemini(build_customization_prompt(result, client, data.modifications))
        except Exception as e:
            logger.error(f"Gemini Error: {e}")

        if customized:
            result["exercises"] = customized.get("exercises") or exercises
            result["modifications"] = customized.get("modifications") or data.modifications
            result["source"] = "gemini"
        else:
            result["exercises"] = apply_rules_modifications(exercises, client, data.modifications)
            result["modifications"] = data.modifications
            result["source"] = "rules"
        return result


# Singleton instance
ai_workout_service = AIWorkoutService()

def get_ai_workout_service() -> AIWorkoutService:
    """Dependency injection helper."""
    return ai_workout_service
