def _paid_month(api, trainer, client):
    api.post("/api/payments/trainer/connect/setup", headers=trainer["headers"])
    intent = api.post("/api/payments/create-payment-intent", json={"trainerId": trainer["id"], "amount": 100},
                      headers=client["headers"]).json()
    api.post(f"/api/payments/payments/{intent['paymentId']}/confirm", headers=client["headers"])
    api.post("/api/payments/create-payment-intent", json={"trainerId": trainer["id"], "amount": 40},
             headers=client["headers"])
    api.post("/api/payments/create-subscription", json={"trainerId": trainer["id"], "amount": 50},
             headers=client["headers"])


def test_empty_analytics(api, trainer):
    data = api.get("/api/trainer/analytics", headers=trainer["headers"]).json()
    assert set(data) == {"financial", "clients", "workouts", "checkIns"}
    assert data["financial"]["totalRevenue"] == 0
    assert data["financial"]["topClients"] == []
    assert data["clients"]["totalClients"] == 0
    assert data["clients"]["retentionRate"] == 0
    assert data["workouts"]["completionRate"] == 0
    assert data["checkIns"]["totalCheckIns"] == 0


def test_financial_figures(api, trainer, linked_client):
    _paid_month(api, trainer, linked_client)
    financial = api.get("/api/trainer/analytics", params={"days": "30"}, headers=trainer["headers"]).json()["financial"]
    assert financial["totalRevenue"] == 100
    assert financial["oneTimeRevenue"] == 100
    assert financial["totalPayments"] == 2
    assert financial["paymentSuccessRate"] == 50
    assert financial["monthlyRecurringRevenue"] == 50
    assert financial["activeSubscriptions"] == 1
    assert financial["churnRate"] == 0
    assert financial["topClients"] == [
        {"id": linked_client["id"], "name": linked_client["name"], "totalRevenue": 100}
    ]


def test_client_workout_and_check_in_figures(api, trainer, linked_client):
    workout_id = api.post("/api/trainer/workouts", json={
        "name": "Legs", "exercises": [{"name": "Goblet Squat", "sets": 3, "reps": 10}]
    }, headers=trainer["headers"]).json()["workoutId"]
    api.post(f"/api/trainer/workouts/{workout_id}/assign", json={"clientId": linked_client["id"]},
             headers=trainer["headers"])
    api.post(f"/api/workouts/{workout_id}/complete", json={"duration": 40}, headers=linked_client["headers"])
    api.post("/api/client/check-in", json={
        "workout_completed": True, "workout_rating": 8, "energy_level": 6, "sleep_hours": 7.5,
        "workout_duration": 40
    }, headers=linked_client["headers"])

    data = api.get("/api/trainer/analytics", params={"days": "all"}, headers=trainer["headers"]).json()
    assert data["clients"]["totalClients"] == 1
    assert data["clients"]["activeClients"] == 1
    assert data["clients"]["retentionRate"] == 100
    assert data["workouts"]["totalAssigned"] == 1
    assert data["workouts"]["totalCompleted"] == 1
    assert data["workouts"]["completionRate"] == 100
    assert data["workouts"]["avgRating"] == 8
    assert data["checkIns"]["totalCheckIns"] == 1
    assert data["checkIns"]["avgEnergyLevel"] == 6
    assert data["checkIns"]["completionRate"] == 100
    assert data["checkIns"]["painReports"] == 0


def test_alerts_widget(api, trainer, linked_client, client_user):
    api.post("/api/client/check-in", json={"workout_completed": True, "workout_rating": 2},
             headers=linked_client["headers"])
    api.put("/api/client/profile", json={"primary_goal": "lose_fat"}, headers=client_user["headers"])
    api.post("/api/client/trainer/request", json={"trainerId": trainer["id"]}, headers=client_user["headers"])

    widget = api.get("/api/trainer/analytics/alerts-widget", headers=trainer["headers"]).json()
    assert widget["counts"] == {"alerts": 1, "requests": 1, "checkIns": 1, "total": 3}
    assert {item["type"] for item in widget["items"]} == {"alert", "request", "checkin"}


def test_analytics_is_trainer_only(api, linked_client):
    assert api.get("/api/trainer/analytics", headers=linked_client["headers"]).status_code == 403
