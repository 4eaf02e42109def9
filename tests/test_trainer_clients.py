import json
import uuid

from conftest import add_client, register
from database import get_db_session
from models_orm import TrainerORM, UserORM


def _onboard(api, client, **overrides):
    profile = {
        "primary_goal": "build_muscle",
        "training_experience": "intermediate",
        "training_days_per_week": 4,
        "equipment_access": "full_gym",
        "session_duration_minutes": 60,
    }
    profile.update(overrides)
    response = api.put("/api/client/profile", json=profile, headers=client["headers"])
    assert response.status_code == 200
    return profile


def test_create_client_without_password_returns_temporary_one(api, trainer):
    response = api.post("/api/trainer/clients", json={
        "name": "New Client", "email": "new@example.com"
    }, headers=trainer["headers"])
    assert response.status_code == 201
    data = response.json()
    assert data["temporaryPassword"]
    assert data["client"]["status"] == "active"

    login = api.post("/api/auth/login", json={
        "email": "new@example.com", "password": data["temporaryPassword"]
    })
    assert login.status_code == 200


def test_create_client_requires_name_and_email(api, trainer):
    response = api.post("/api/trainer/clients", json={"name": "No Email"}, headers=trainer["headers"])
    assert response.status_code == 400


def test_clients_are_scoped_to_their_trainer(api, trainer, other_trainer, linked_client):
    mine = api.get("/api/trainer/clients", headers=trainer["headers"]).json()
    assert [c["id"] for c in mine] == [linked_client["id"]]

    theirs = api.get("/api/trainer/clients", headers=other_trainer["headers"]).json()
    assert theirs == []

    response = api.get(f"/api/trainer/clients/{linked_client['id']}", headers=other_trainer["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


def test_client_metrics(api, trainer, linked_client):
    response = api.post(f"/api/trainer/clients/{linked_client['id']}/metrics", json={
        "date": "2030-01-01", "weight": 82.5, "bodyFat": 18.0, "measurements": {"waist": 84}
    }, headers=trainer["headers"])
    assert response.status_code == 201
    assert response.json()["measurements"] == {"waist": 84}

    metrics = api.get(f"/api/trainer/clients/{linked_client['id']}/metrics", headers=trainer["headers"]).json()
    assert len(metrics["progress"]) == 1
    assert metrics["progress"][0]["body_fat"] == 18.0
    assert metrics["check_ins"] == []


def test_trainer_updates_client_onboarding(api, trainer, linked_client):
    response = api.put(f"/api/trainer/clients/{linked_client['id']}/onboarding", json={
        "primary_goal": "lose_fat", "secondary_goals": ["sleep better"], "weight": "90"
    }, headers=trainer["headers"])
    assert response.status_code == 200

    client = api.get(f"/api/trainer/clients/{linked_client['id']}", headers=trainer["headers"]).json()
    assert client["primary_goal"] == "lose_fat"
    assert client["secondary_goals"] == ["sleep better"]
    assert client["weight"] == "90"


def test_workout_create_assign_complete(api, trainer, linked_client):
    created = api.post("/api/trainer/workouts", json={
        "name": "Push Day",
        "exercises": [
            {"name": "Bench Press", "sets": 4, "reps": 8, "weight": 60},
            {"name": "Push-Up", "sets": 3, "reps": "AMRAP"},
        ]
    }, headers=trainer["headers"])
    assert created.status_code == 201
    workout_id = created.json()["workoutId"]

    assign = api.post(f"/api/trainer/workouts/{workout_id}/assign", json={
        "clientId": linked_client["id"], "dueDate": "2030-01-05"
    }, headers=trainer["headers"])
    assert assign.status_code == 201

    workout = api.get(f"/api/workouts/{workout_id}", headers=linked_client["headers"]).json()
    assert [e["name"] for e in workout["exercises"]] == ["Bench Press", "Push-Up"]
    assert workout["exercises"][0]["reps"] == "8"

    denied = api.post(f"/api/workouts/{workout_id}/complete", json={}, headers=trainer["headers"])
    assert denied.status_code == 403
    assert denied.json()["detail"] == "Only clients can complete workouts"

    done = api.post(f"/api/workouts/{workout_id}/complete", json={"duration": 45},
                    headers=linked_client["headers"])
    assert done.status_code == 200

    history = api.get(f"/api/trainer/clients/{linked_client['id']}/workouts", headers=trainer["headers"]).json()
    assert history[0]["status"] == "completed"
    assert history[0]["workout_name"] == "Push Day"


def test_create_workout_requires_exercises(api, trainer):
    response = api.post("/api/trainer/workouts", json={"name": "Empty"}, headers=trainer["headers"])
    assert response.status_code == 400


def test_assign_workout_to_foreign_client(api, trainer, other_trainer):
    stranger = add_client(api, other_trainer)
    workout_id = api.post("/api/trainer/workouts", json={
        "name": "Legs", "exercises": [{"name": "Squat", "sets": 5, "reps": 5}]
    }, headers=trainer["headers"]).json()["workoutId"]

    response = api.post(f"/api/trainer/workouts/{workout_id}/assign", json={
        "clientId": stranger["id"]
    }, headers=trainer["headers"])
    assert response.status_code == 404


def test_request_requires_onboarding(api, trainer, client_user):
    response = api.post("/api/client/trainer/request", json={
        "trainerId": trainer["id"], "message": "Hi"
    }, headers=client_user["headers"])
    assert response.status_code == 403
    assert response.json()["detail"]["requires_onboarding"] is True


def test_request_accept_flow(api, trainer, client_user):
    _onboard(api, client_user)
    assert api.get("/api/client/profile/onboarding-status",
                   headers=client_user["headers"]).json() == {"onboarding_completed": True}

    sent = api.post("/api/client/trainer/request", json={
        "trainerId": trainer["id"], "message": "Can you coach me?"
    }, headers=client_user["headers"])
    assert sent.status_code == 201

    duplicate = api.post("/api/client/trainer/request", json={"trainerId": trainer["id"]},
                         headers=client_user["headers"])
    assert duplicate.status_code == 400

    assert api.get("/api/trainer/requests/unread-count", headers=trainer["headers"]).json() == {"count": 1}
    pending = api.get("/api/trainer/requests", headers=trainer["headers"]).json()
    assert len(pending) == 1
    assert pending[0]["primaryGoal"] == "build_muscle"
    assert pending[0]["onboardingCompleted"] is True

    accepted = api.post(f"/api/trainer/requests/{pending[0]['id']}/accept",
                        json={"trainerResponse": "Welcome aboard"}, headers=trainer["headers"])
    assert accepted.status_code == 200
    assert accepted.json()["request"]["status"] == "accepted"

    again = api.post(f"/api/trainer/requests/{pending[0]['id']}/reject", headers=trainer["headers"])
    assert again.status_code == 400

    my_trainer = api.get("/api/client/trainer", headers=client_user["headers"]).json()
    assert my_trainer["id"] == trainer["id"]
    assert my_trainer["active_clients"] == 1

    clients = api.get("/api/trainer/clients", headers=trainer["headers"]).json()
    assert [c["id"] for c in clients] == [client_user["id"]]

    assert api.get("/api/trainer/requests", headers=trainer["headers"]).json() == []
    assert len(api.get("/api/trainer/requests/all", headers=trainer["headers"]).json()) == 1


def test_reject_leaves_client_unassigned(api, trainer, client_user):
    _onboard(api, client_user)
    api.post("/api/client/trainer/request", json={"trainerId": trainer["id"]}, headers=client_user["headers"])
    request_id = api.get("/api/trainer/requests", headers=trainer["headers"]).json()[0]["id"]

    response = api.post(f"/api/trainer/requests/{request_id}/reject", headers=trainer["headers"])
    assert response.status_code == 200

    assert api.get("/api/client/trainer", headers=client_user["headers"]).status_code == 404
    requests = api.get("/api/client/trainer/requests", headers=client_user["headers"]).json()
    assert requests[0]["status"] == "rejected"


def test_mark_requests_read(api, trainer, client_user):
    _onboard(api, client_user)
    api.post("/api/client/trainer/request", json={"trainerId": trainer["id"]}, headers=client_user["headers"])
    api.put("/api/trainer/requests/mark-read", headers=trainer["headers"])
    assert api.get("/api/trainer/requests/unread-count", headers=trainer["headers"]).json() == {"count": 0}


def test_disconnect_trainer(api, trainer, linked_client):
    response = api.delete("/api/client/trainer", headers=linked_client["headers"])
    assert response.status_code == 200
    assert api.get("/api/trainer/clients", headers=trainer["headers"]).json() == []
    assert api.delete("/api/client/trainer", headers=linked_client["headers"]).status_code == 404


def test_search_trainers(api, client_user):
    coach = register(api, "trainer", name="Sam Strong")
    api.put("/api/profile", json={
        "specialties": ["Powerlifting", "Mobility"], "location": "Austin, TX",
        "fitness_goals": ["build_muscle"]
    }, headers=coach["headers"])
    register(api, "trainer", name="Yoga Yan")

    by_name = api.get("/api/client/trainers/search", params={"q": "sam"}, headers=client_user["headers"]).json()
    assert [t["name"] for t in by_name] == ["Sam Strong"]

    by_specialty = api.get("/api/client/trainers/search", params={"specialties": "yoga,powerlifting"},
                           headers=client_user["headers"]).json()
    assert [t["user_id"] for t in by_specialty] == [coach["id"]]

    by_location = api.get("/api/client/trainers/search", params={"location": "austin"},
                          headers=client_user["headers"]).json()
    assert len(by_location) == 1

    everyone = api.get("/api/client/trainers/search", headers=client_user["headers"]).json()
    assert len(everyone) == 2


def test_search_trainers_combines_filters_and_caps_results(api, client_user):
    db = get_db_session()
    try:
        for i in range(55):
            user_id = str(uuid.uuid4())
            db.add(UserORM(id=user_id, name=f"Coach {i:02d}", email=f"coach{i}@example.com", role="trainer"))
            db.add(TrainerORM(
                id=str(uuid.uuid4()), user_id=user_id,
                location="Denver, CO" if i % 2 == 0 else "Boulder, CO",
                specialties_json=json.dumps(["HIIT"] if i < 40 else ["Pilates"]),
            ))
        db.commit()
    finally:
        db.close()

    capped = api.get("/api/client/trainers/search", params={"q": "coach"}, headers=client_user["headers"]).json()
    assert len(capped) == 50
    assert capped[0]["name"] == "Coach 00"
    assert capped[-1]["name"] == "Coach 49"

    denver_pilates = api.get("/api/client/trainers/search", params={
        "location": "DENVER", "specialties": "pilates"
    }, headers=client_user["headers"]).json()
    assert [t["name"] for t in denver_pilates] == [
        "Coach 40", "Coach 42", "Coach 44", "Coach 46", "Coach 48", "Coach 50", "Coach 52", "Coach 54"
    ]
