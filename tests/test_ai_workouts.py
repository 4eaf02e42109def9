from unittest.mock import patch

from service_modules.ai_workout_service import (
    GEMINI_MODEL, _clean_json_text, apply_rules_modifications, build_rules_workout
)
from models import WorkoutPreferences


def _generate(api, trainer, client, **prefs):
    return api.post("/api/trainer/workouts/ai/generate", json={
        "clientId": client["id"], "workoutPreferences": prefs
    }, headers=trainer["headers"])


def test_generate_without_gemini_uses_rules(api, trainer, linked_client):
    response = _generate(api, trainer, linked_client, goal="build muscle")
    assert response.status_code == 200
    workout = response.json()
    assert workout["ai_generated"] is True
    assert workout["ai_metadata"]["source"] == "rules"
    assert workout["ai_metadata"]["model"] == "rules"
    assert workout["ai_metadata"]["client_id"] == linked_client["id"]
    assert workout["category"] == "Full Body"

    exercises = workout["exercises"]
    assert exercises[0]["name"] == "Dynamic Warm-Up"
    assert exercises[-1]["name"] == "Cool-Down Stretch"
    # 60 minutes leaves room for six main exercises
    main = exercises[1:-1]
    assert len(main) == 6
    assert {(e["sets"], e["reps"]) for e in main} == {(4, "8-12")}


def test_generate_respects_injuries(api, trainer, linked_client):
    api.put(f"/api/trainer/clients/{linked_client['id']}/onboarding", json={"injuries": "Old knee surgery"},
            headers=trainer["headers"])
    names = [e["name"] for e in _generate(api, trainer, linked_client, focus="lower body").json()["exercises"]]
    assert not any("Squat" in n or "Lunge" in n or "Leg Press" in n for n in names)
    assert "Romanian Deadlift" in names


def test_generate_for_bodyweight_equipment(api, trainer, linked_client):
    workout = _generate(api, trainer, linked_client, focus="upper body", equipment="bodyweight",
                        duration=30).json()
    names = [e["name"] for e in workout["exercises"][1:-1]]
    assert names == ["Push-Up", "Inverted Row", "Pike Push-Up"]


def test_generate_requires_own_client(api, trainer, other_trainer, linked_client):
    response = _generate(api, other_trainer, linked_client)
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found or not assigned to you"

    response = api.post("/api/trainer/workouts/ai/generate", json={}, headers=trainer["headers"])
    assert response.status_code == 400


def _workout(api, trainer):
    return api.post("/api/trainer/workouts", json={
        "name": "Mixed",
        "exercises": [
            {"name": "Goblet Squat", "sets": 3, "reps": 10},
            {"name": "Push-Up", "sets": 1, "reps": 15},
        ]
    }, headers=trainer["headers"]).json()["workoutId"]


def test_customize_with_rules(api, trainer, linked_client):
    workout_id = _workout(api, trainer)

    easier = api.post("/api/trainer/workouts/ai/customize", json={
        "workoutId": workout_id, "clientId": linked_client["id"], "modifications": "make it easier"
    }, headers=trainer["headers"]).json()
    assert easier["source"] == "rules"
    assert [e["sets"] for e in easier["exercises"]] == [2, 1]
    assert easier["modifications"] == "make it easier"

    harder = api.post("/api/trainer/workouts/ai/customize", json={
        "workoutId": workout_id, "clientId": linked_client["id"], "modifications": "harder please, sore knee"
    }, headers=trainer["headers"]).json()
    assert [(e["name"], e["sets"]) for e in harder["exercises"]] == [("Push-Up", 2)]


def test_customize_validation(api, trainer, linked_client):
    response = api.post("/api/trainer/workouts/ai/customize", json={"workoutId": "x"}, headers=trainer["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Workout ID and Client ID are required"

    response = api.post("/api/trainer/workouts/ai/customize", json={
        "workoutId": "missing", "clientId": linked_client["id"]
    }, headers=trainer["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Workout not found"


def test_rules_workout_for_beginner_caps_sets():
    workout = build_rules_workout(
        "Sam", {"training_experience": "beginner"}, WorkoutPreferences(goal="strength", intensity="high")
    )
    assert {e["sets"] for e in workout["exercises"][1:-1]} == {3}
    assert workout["name"] == "Full Body Workout for Sam"


def test_rules_modifications_keep_at_least_one_set():
    result = apply_rules_modifications([{"name": "Plank", "sets": 1}], {}, "lighter")
    assert result == [{"name": "Plank", "sets": 1}]


def test_generate_uses_gemini_reply(api, trainer, linked_client):
    reply = {
        "name": "Gemini Push",
        "description": "From the model",
        "category": "Upper Body",
        "exercises": [{"name": "Dips", "sets": 3, "reps": "8", "weight": "bodyweight", "rest": "90 seconds"}],
    }
    with patch("service_modules.ai_workout_service._call_gemini", return_value=reply) as call:
        workout = _generate(api, trainer, linked_client, focus="upper body").json()

    assert workout["name"] == "Gemini Push"
    assert workout["ai_metadata"]["source"] == "gemini"
    assert workout["ai_metadata"]["model"] == GEMINI_MODEL
    assert "Focus: upper body" in call.call_args.args[0]


def test_generate_falls_back_when_gemini_fails(api, trainer, linked_client):
    with patch("service_modules.ai_workout_service._call_gemini", side_effect=ValueError("bad json")):
        workout = _generate(api, trainer, linked_client).json()
    assert workout["ai_metadata"]["source"] == "rules"
    assert workout["exercises"][0]["name"] == "Dynamic Warm-Up"


def test_clean_json_text_strips_markdown_fences():
    assert _clean_json_text('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert _clean_json_text('```{"a": 1}```') == '{"a": 1}'
