from datetime import date

from conftest import add_client, register

# 2030-01-07 is a Monday
START = "2030-01-07"


def _workout(name, week, day, *exercises):
    return {
        "workout_name": name,
        "week_number": week,
        "day_number": day,
        "exercises": [{"exercise_name": e, "sets": 3, "reps": 10} for e in exercises],
    }


def _create_program(api, trainer, **overrides):
    payload = {
        "name": "Strength Block",
        "description": "Three sessions",
        "split_type": "full_body",
        "duration_weeks": 2,
        "workouts": [
            _workout("Day A", 1, 1, "Goblet Squat", "Push-Up"),
            _workout("Day B", 1, 3, "Dumbbell Row"),
            _workout("Day C", 2, 5, "Glute Bridge"),
        ],
    }
    payload.update(overrides)
    response = api.post("/api/programs", json=payload, headers=trainer["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_create_program_returns_nested_workouts(api, trainer):
    program = _create_program(api, trainer)
    assert program["duration_weeks"] == 2
    assert [w["workout_name"] for w in program["workouts"]] == ["Day A", "Day B", "Day C"]
    assert [e["exercise_name"] for e in program["workouts"][0]["exercises"]] == ["Goblet Squat", "Push-Up"]
    assert program["workouts"][0]["exercises"][0]["reps"] == "10"

    listed = api.get("/api/programs/trainer", headers=trainer["headers"]).json()
    assert listed[0]["workout_count"] == 3
    assert listed[0]["assigned_clients_count"] == 0


def test_program_visibility(api, trainer, other_trainer, linked_client):
    program = _create_program(api, trainer)

    assert api.get(f"/api/programs/{program['id']}", headers=trainer["headers"]).status_code == 200

    response = api.get(f"/api/programs/{program['id']}", headers=other_trainer["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to view this program"

    assert api.get(f"/api/programs/{program['id']}", headers=linked_client["headers"]).status_code == 403
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])
    visible = api.get(f"/api/programs/{program['id']}", headers=linked_client["headers"])
    assert visible.status_code == 200
    assert visible.json()["trainer_name"] == trainer["name"]

    assert api.get("/api/programs/does-not-exist", headers=trainer["headers"]).status_code == 404


def test_only_owner_can_change_program(api, trainer, other_trainer):
    program = _create_program(api, trainer)
    response = api.put(f"/api/programs/{program['id']}", json={"name": "Mine now"},
                       headers=other_trainer["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to update this program"

    response = api.delete(f"/api/programs/{program['id']}", headers=other_trainer["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to delete this program"


def test_assign_program_schedules_every_workout(api, trainer, linked_client):
    program = _create_program(api, trainer)
    response = api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])
    assert response.status_code == 200
    result = response.json()
    assert result["sessionsCreated"] == 3
    assert result["conflictsDetected"] == 0
    assert result["totalWorkouts"] == 3

    calendar = api.get("/api/schedule/trainer/calendar", params={
        "start": "2030-01-01", "end": "2030-01-31"
    }, headers=trainer["headers"]).json()
    assert list(calendar) == ["2030-01-07", "2030-01-09", "2030-01-18"]
    session = calendar["2030-01-07"][0]
    assert session["session_time"] == "18:00"
    assert session["duration"] == 60
    assert session["client_name"] == linked_client["name"]
    assert session["notes"] == "From Strength Block - Week 1, Day 1"

    assigned = api.get(f"/api/programs/{program['id']}/assigned-clients", headers=trainer["headers"]).json()
    assert [c["id"] for c in assigned] == [linked_client["id"]]
    assert assigned[0]["start_date"] == START


def test_assign_uses_trainer_session_defaults(api, trainer, linked_client):
    api.put("/api/profile", json={
        "default_session_time": "7:30",
        "default_session_duration": 45,
        "day_specific_session_times": {"3": "12:00"},
    }, headers=trainer["headers"])
    program = _create_program(api, trainer)
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])

    calendar = api.get("/api/schedule/trainer/calendar", params={
        "start": "2030-01-01", "end": "2030-01-31"
    }, headers=trainer["headers"]).json()
    assert calendar["2030-01-07"][0]["session_time"] == "07:30"
    assert calendar["2030-01-07"][0]["duration"] == 45
    assert calendar["2030-01-09"][0]["session_time"] == "12:00"


def test_assign_counts_conflicts_and_skips_duplicates(api, trainer, linked_client):
    second = add_client(api, trainer)
    program = _create_program(api, trainer)
    url = f"/api/programs/{program['id']}/assign"

    api.post(url, json={"client_id": linked_client["id"], "start_date": START}, headers=trainer["headers"])
    clash = api.post(url, json={"client_id": second["id"], "start_date": START}, headers=trainer["headers"]).json()
    assert clash["sessionsCreated"] == 3
    assert clash["conflictsDetected"] == 3

    again = api.post(url, json={"client_id": linked_client["id"], "start_date": START},
                     headers=trainer["headers"]).json()
    assert again["sessionsCreated"] == 0


def test_assign_rejects_unknown_client(api, trainer):
    program = _create_program(api, trainer)
    response = api.post(f"/api/programs/{program['id']}/assign", json={"client_id": "nobody"},
                        headers=trainer["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid client_id"


def test_start_mid_week_places_earlier_days_before_start(api, trainer, linked_client):
    program = _create_program(api, trainer)
    # Wednesday start: the Monday slot of week 1 falls two days earlier
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": "2030-01-09"
    }, headers=trainer["headers"])
    calendar = api.get("/api/schedule/trainer/calendar", params={
        "start": "2030-01-01", "end": "2030-01-31"
    }, headers=trainer["headers"]).json()
    assert list(calendar) == ["2030-01-07", "2030-01-09", "2030-01-18"]


def test_client_program_views_and_calendar(api, trainer, linked_client):
    program = _create_program(api, trainer)
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])

    mine = api.get("/api/programs/client/assigned", headers=linked_client["headers"]).json()
    assert mine[0]["id"] == program["id"]
    assert mine[0]["start_date"] == START
    assert mine[0]["workout_count"] == 3

    via_trainer = api.get(f"/api/programs/client/{linked_client['id']}/assigned", headers=trainer["headers"]).json()
    assert [p["id"] for p in via_trainer] == [program["id"]]

    calendar = api.get(f"/api/programs/{program['id']}/calendar", headers=linked_client["headers"]).json()
    assert calendar["client_id"] == linked_client["id"]
    assert calendar["start_date"] == START
    first_day = calendar["days"][0]
    assert first_day["date"] == "2030-01-07"
    assert [i["kind"] for i in first_day["items"]] == ["session", "workout"]
    assert first_day["items"][1]["completed"] is False


def test_program_calendar_needs_start_date(api, trainer):
    program = _create_program(api, trainer)
    response = api.get(f"/api/programs/{program['id']}/calendar", headers=trainer["headers"])
    assert response.status_code == 400


def test_complete_program_workout(api, trainer, linked_client):
    program = _create_program(api, trainer)
    workout_id = program["workouts"][0]["id"]

    denied = api.post(f"/api/programs/workout/{workout_id}/complete", json={}, headers=linked_client["headers"])
    assert denied.status_code == 404

    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])
    done = api.post(f"/api/programs/workout/{workout_id}/complete", json={
        "exercises_completed": {"Goblet Squat": [10, 10, 8]}, "duration": 50
    }, headers=linked_client["headers"])
    assert done.status_code == 200

    today = api.get("/api/schedule/client/today-completed", headers=linked_client["headers"]).json()
    assert today["hasCompletedWorkout"] is True
    assert today["hasCompleted"] is True
    assert today["hasCompletedSession"] is False


def test_calendar_marks_workout_completed_on_another_day(api, trainer, linked_client):
    program = _create_program(api, trainer)
    day_a, day_b = program["workouts"][0]["id"], program["workouts"][1]["id"]
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])

    # Day A is scheduled for START but logged today
    api.post(f"/api/programs/workout/{day_a}/complete", json={}, headers=linked_client["headers"])

    calendar = api.get(f"/api/programs/{program['id']}/calendar", headers=linked_client["headers"]).json()
    workouts = {
        i["program_workout_id"]: i for day in calendar["days"] for i in day["items"] if i["kind"] == "workout"
    }
    assert workouts[day_a]["date"] == START
    assert workouts[day_a]["completed"] is True
    assert workouts[day_a]["completed_date"] == date.today().isoformat()
    assert workouts[day_b]["completed"] is False
    assert workouts[day_b]["completed_date"] is None


def test_update_program_replaces_workouts(api, trainer):
    program = _create_program(api, trainer)
    response = api.put(f"/api/programs/{program['id']}", json={
        "name": "Renamed",
        "workouts": [{
            "workout_name": "Only Day", "week_number": 1, "day_number": 2,
            "exercises": [{"exercise_name": "Plank"}, {"exercise_name": "  "}],
        }],
    }, headers=trainer["headers"])
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Renamed"
    assert [w["workout_name"] for w in updated["workouts"]] == ["Only Day"]
    assert [e["exercise_name"] for e in updated["workouts"][0]["exercises"]] == ["Plank"]

    bad = api.put(f"/api/programs/{program['id']}", json={
        "workouts": [{"workout_name": " ", "exercises": []}]
    }, headers=trainer["headers"])
    assert bad.status_code == 400


def test_week_names(api, trainer):
    program = _create_program(api, trainer)
    response = api.put(f"/api/programs/{program['id']}/week/1/name", json={"week_name": "Foundation"},
                       headers=trainer["headers"])
    assert response.status_code == 200
    fetched = api.get(f"/api/programs/{program['id']}", headers=trainer["headers"]).json()
    assert fetched["week_names"] == {"1": "Foundation"}


def test_delete_program_keeps_sessions(api, trainer, linked_client):
    program = _create_program(api, trainer)
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": START
    }, headers=trainer["headers"])

    assert api.delete(f"/api/programs/{program['id']}", headers=trainer["headers"]).status_code == 200
    assert api.get(f"/api/programs/{program['id']}", headers=trainer["headers"]).status_code == 404

    sessions = api.get(f"/api/schedule/trainer/clients/{linked_client['id']}/sessions",
                       headers=trainer["headers"]).json()
    assert len(sessions) == 3
    assert all(s["program_id"] is None for s in sessions)


def test_create_workout_sessions_for_clients(api, trainer, linked_client):
    second = add_client(api, trainer)
    program = _create_program(api, trainer, start_date=START)
    workout_id = program["workouts"][1]["id"]

    response = api.post(f"/api/programs/{program['id']}/workout/{workout_id}/create-sessions", json={
        "sessionTime": "9:00",
        "repeat": True,
        "repeatPattern": "weekly",
        "repeatEndDate": "2030-01-23",
        "clientIds": [linked_client["id"], second["id"]],
    }, headers=trainer["headers"])
    assert response.status_code == 200
    assert response.json()["sessionsCreated"] == 6
    assert response.json()["totalSessions"] == 6

    sessions = api.get(f"/api/schedule/trainer/workout/{workout_id}/sessions", headers=trainer["headers"]).json()
    assert sorted({s["session_date"] for s in sessions}) == ["2030-01-09", "2030-01-16", "2030-01-23"]
    assert {s["session_time"] for s in sessions} == {"09:00"}


def test_create_workout_sessions_needs_a_start_date(api, trainer, linked_client):
    program = _create_program(api, trainer)
    workout_id = program["workouts"][0]["id"]
    response = api.post(f"/api/programs/{program['id']}/workout/{workout_id}/create-sessions", json={
        "clientIds": [linked_client["id"]]
    }, headers=trainer["headers"])
    assert response.status_code == 400


def test_templates_and_from_template(api, trainer):
    templates = api.get("/api/programs/templates/all", headers=trainer["headers"]).json()
    assert len(templates) == 5

    muscle = api.get("/api/programs/templates/all", params={"goal": "build_muscle"},
                     headers=trainer["headers"]).json()
    assert {t["name"] for t in muscle} == {"Intermediate Upper/Lower", "Advanced Push/Pull/Legs"}

    beginner = next(t for t in templates if t["name"] == "Beginner Full Body")
    detail = api.get(f"/api/programs/templates/{beginner['id']}", headers=trainer["headers"]).json()
    assert [w["workout_name"] for w in detail["workouts"]] == ["Full Body A", "Full Body B", "Full Body C"]

    program = api.post(f"/api/programs/from-template/{beginner['id']}", headers=trainer["headers"])
    assert program.status_code == 201
    body = program.json()
    assert body["name"] == "Beginner Full Body"
    assert body["is_template"] is False
    assert len(body["workouts"]) == 3
    assert len(body["workouts"][0]["exercises"]) == len(detail["workouts"][0]["exercises"])

    renamed = api.post(f"/api/programs/from-template/{beginner['id']}", json={"name": "Custom"},
                       headers=trainer["headers"]).json()
    assert renamed["name"] == "Custom"

    assert api.get("/api/programs/templates/nope", headers=trainer["headers"]).status_code == 404


def test_recommend_templates(api, trainer, linked_client):
    api.put(f"/api/trainer/clients/{linked_client['id']}/onboarding", json={
        "training_experience": "intermediate",
        "primary_goal": "build_muscle",
        "training_days_per_week": 4,
        "equipment_access": "full_gym",
        "session_duration_minutes": 60,
    }, headers=trainer["headers"])

    response = api.post("/api/programs/recommend", json={"client_id": linked_client["id"]},
                        headers=trainer["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["client_profile"]["days_per_week"] == 4
    names = [r["name"] for r in data["recommendations"]]
    assert names == ["Intermediate Upper/Lower", "Advanced Push/Pull/Legs", "Fat Loss Circuit Training"]
    assert data["recommendations"][0]["match_score"] == 41
    assert "Targets build muscle" in data["recommendations"][0]["match_reasons"]


def test_recommend_unknown_client(api, trainer):
    response = api.post("/api/programs/recommend", json={"client_id": "ghost"}, headers=trainer["headers"])
    assert response.status_code == 404


def test_exercise_search(api, trainer):
    squats = api.get("/api/programs/exercises/search", params={"search": "squat"},
                     headers=trainer["headers"]).json()
    names = [e["name"] for e in squats]
    assert "Goblet Squat" in names
    assert "Bulgarian Split Squat" in names
    assert all("squat" in n.lower() for n in names)

    planks = api.get("/api/programs/exercises/search", params={"q": "plank"}, headers=trainer["headers"]).json()
    assert [e["name"] for e in planks] == ["Plank"]

    pulls = api.get("/api/programs/exercises/search", params={
        "movement_pattern": "vertical_pull", "difficulty": "beginner"
    }, headers=trainer["headers"]).json()
    assert [e["name"] for e in pulls] == ["Lat Pulldown"]


def test_exercise_substitutions(api, trainer):
    response = api.get("/api/programs/exercises/Barbell Back Squat/substitutions", headers=trainer["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["original"]["name"] == "Barbell Back Squat"
    assert [e["name"] for e in data["alternatives"]] == ["Bodyweight Squat", "Goblet Squat", "Leg Press"]

    dumbbell = api.get("/api/programs/exercises/Barbell Back Squat/substitutions",
                       params={"equipment": "dumbbell"}, headers=trainer["headers"]).json()
    assert [e["name"] for e in dumbbell["alternatives"]] == ["Goblet Squat"]

    assert api.get("/api/programs/exercises/Nope/substitutions", headers=trainer["headers"]).status_code == 404


def test_client_cannot_create_program(api, client_user):
    response = api.post("/api/programs", json={"name": "Nope"}, headers=client_user["headers"])
    assert response.status_code == 403


def test_exercise_library_is_open_to_clients(api):
    client = register(api, "client")
    response = api.get("/api/programs/exercises/search", params={"search": "row"}, headers=client["headers"])
    assert response.status_code == 200
    assert len(response.json()) >= 3
