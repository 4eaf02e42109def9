def test_check_in_created_then_updated(api, linked_client):
    first = api.post("/api/client/check-in", json={
        "workout_completed": True, "workout_rating": 8, "sleep_quality": 7, "energy_level": 6
    }, headers=linked_client["headers"])
    assert first.status_code == 201
    assert first.json()["status"] == "completed"

    second = api.post("/api/client/check-in", json={
        "workout_completed": True, "workout_rating": 9, "notes": "Felt great"
    }, headers=linked_client["headers"])
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    today = api.get("/api/client/check-in/today", headers=linked_client["headers"]).json()
    assert today["workout_rating"] == 9
    assert len(api.get("/api/client/check-ins", headers=linked_client["headers"]).json()) == 1


def test_no_check_in_today(api, linked_client):
    response = api.get("/api/client/check-in/today", headers=linked_client["headers"])
    assert response.json() == {"checked_in": False}


def test_check_in_range_validation(api, linked_client):
    response = api.post("/api/client/check-in", json={
        "workout_completed": True, "workout_rating": 11
    }, headers=linked_client["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Workout rating must be between 1 and 10"

    response = api.post("/api/client/check-in", json={"energy_level": 0}, headers=linked_client["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Energy level must be between 1 and 10"


def test_rating_ignored_when_workout_skipped(api, linked_client):
    response = api.post("/api/client/check-in", json={
        "workout_completed": False, "workout_rating": 42
    }, headers=linked_client["headers"])
    assert response.status_code == 201


def test_pain_intensity_only_checked_with_pain(api, linked_client):
    response = api.post("/api/client/check-in", json={
        "pain_experienced": True, "pain_intensity": 12
    }, headers=linked_client["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Pain intensity must be between 1 and 10"


def test_low_rating_and_pain_raise_alerts(api, trainer, linked_client):
    api.post("/api/client/check-in", json={
        "workout_completed": True, "workout_rating": 3,
        "pain_experienced": True, "pain_location": "left knee", "pain_intensity": 6
    }, headers=linked_client["headers"])

    alerts = api.get("/api/trainer/alerts", headers=trainer["headers"]).json()
    by_type = {a["alert_type"]: a for a in alerts}
    assert set(by_type) == {"low_rating", "pain_report"}
    assert by_type["low_rating"]["severity"] == "high"
    assert by_type["low_rating"]["metadata"]["rating"] == 3
    assert by_type["pain_report"]["severity"] == "urgent"
    assert "left knee" in by_type["pain_report"]["message"]
    assert by_type["pain_report"]["client_name"] == linked_client["name"]

    assert api.get("/api/trainer/alerts/unread-count", headers=trainer["headers"]).json() == {"count": 2}


def test_good_check_in_raises_no_alert(api, trainer, linked_client):
    api.post("/api/client/check-in", json={"workout_completed": True, "workout_rating": 5},
             headers=linked_client["headers"])
    assert api.get("/api/trainer/alerts", headers=trainer["headers"]).json() == []


def test_alert_read_and_delete(api, trainer, linked_client):
    api.post("/api/client/check-in", json={"workout_completed": True, "workout_rating": 2},
             headers=linked_client["headers"])
    api.post("/api/client/check-in", json={"pain_experienced": True}, headers=linked_client["headers"])
    alerts = api.get("/api/trainer/alerts", headers=trainer["headers"]).json()
    assert len(alerts) == 2

    first = alerts[0]["id"]
    assert api.put(f"/api/trainer/alerts/{first}/read", headers=trainer["headers"]).status_code == 200
    unread = api.get("/api/trainer/alerts", params={"unread_only": True}, headers=trainer["headers"]).json()
    assert [a["id"] for a in unread] == [alerts[1]["id"]]

    api.put("/api/trainer/alerts/read-all", headers=trainer["headers"])
    assert api.get("/api/trainer/alerts/unread-count", headers=trainer["headers"]).json() == {"count": 0}

    assert api.delete(f"/api/trainer/alerts/{first}", headers=trainer["headers"]).status_code == 200
    assert api.delete(f"/api/trainer/alerts/{first}", headers=trainer["headers"]).status_code == 404


def test_alerts_belong_to_their_trainer(api, trainer, other_trainer, linked_client):
    api.post("/api/client/check-in", json={"workout_completed": True, "workout_rating": 1},
             headers=linked_client["headers"])
    alert_id = api.get("/api/trainer/alerts", headers=trainer["headers"]).json()[0]["id"]
    response = api.put(f"/api/trainer/alerts/{alert_id}/read", headers=other_trainer["headers"])
    assert response.status_code == 404


def test_progress_entries_and_timeline(api, linked_client):
    created = api.post("/api/client/progress", json={
        "date": "2020-01-01", "weight": 80, "notes": "Start"
    }, headers=linked_client["headers"])
    assert created.status_code == 201

    api.post("/api/client/check-in", json={"workout_completed": True, "workout_rating": 7},
             headers=linked_client["headers"])

    recent = api.get("/api/client/progress/recent", headers=linked_client["headers"]).json()
    assert recent[0]["weight"] == 80

    timeline = api.get("/api/client/progress", headers=linked_client["headers"]).json()
    assert [e["entry_type"] for e in timeline] == ["checkin", "progress"]


def test_client_nutrition_goals_and_logs(api, trainer, linked_client):
    assert api.get("/api/client/nutrition/goals", headers=linked_client["headers"]).json() is None

    api.post("/api/nutrition/plans", json={
        "client_id": linked_client["id"], "plan_name": "Cut", "daily_calories": 2000, "daily_protein": 180
    }, headers=trainer["headers"])
    goals = api.get("/api/client/nutrition/goals", headers=linked_client["headers"]).json()
    assert goals["daily_calories"] == 2000

    log = api.post("/api/client/nutrition/logs", json={
        "food_name": "Oats", "calories": 300, "log_date": "2030-01-01"
    }, headers=linked_client["headers"])
    assert log.status_code == 201
    missing = api.post("/api/client/nutrition/logs", json={"calories": 10}, headers=linked_client["headers"])
    assert missing.status_code == 400

    logs = api.get("/api/client/nutrition/logs", params={
        "start_date": "2030-01-01", "end_date": "2030-01-31"
    }, headers=linked_client["headers"]).json()
    assert [l["food_name"] for l in logs] == ["Oats"]
