from conftest import add_client


def test_calculator_endpoints(api, trainer):
    bmr = api.post("/api/nutrition/calculate/bmr", json={
        "weight_kg": 80, "height_cm": 180, "age": 30, "biological_sex": "male"
    }, headers=trainer["headers"])
    assert bmr.json() == {"bmr": 1780, "formula": "Mifflin-St Jeor"}

    tdee = api.post("/api/nutrition/calculate/tdee", json={"bmr": 1780, "activity_level": "moderately_active"},
                    headers=trainer["headers"]).json()
    assert tdee["tdee"] == 2759
    assert tdee["activity_multiplier"] == 1.55

    macros = api.post("/api/nutrition/calculate/macros", json={
        "weight_lbs": 176, "tdee": 2759, "goal": "lose_fat", "rate_of_change": "moderate", "biological_sex": "male"
    }, headers=trainer["headers"]).json()
    assert (macros["target_calories"], macros["target_protein"], macros["target_fats"], macros["target_carbs"]) == (
        2009, 176, 62, 187
    )


def test_full_calculation(api, trainer):
    result = api.post("/api/nutrition/calculate", json={
        "weight_kg": 80, "height_cm": 180, "age": 30, "biological_sex": "male",
        "activity_level": "moderately_active", "goal": "lose_fat", "rate_of_change": "moderate"
    }, headers=trainer["headers"]).json()
    assert result["bmr"] == 1780
    assert result["tdee"] == 2759
    assert result["goal_adjustment"] == -750
    assert result["target_calories"] == 2009
    assert result["target_protein"] == 176


def test_calculator_missing_fields(api, trainer):
    response = api.post("/api/nutrition/calculate/bmr", json={"weight_kg": 80}, headers=trainer["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: weight_kg, height_cm, age, biological_sex"

    response = api.post("/api/nutrition/calculate", json={
        "weight_kg": 80, "height_cm": 180, "age": 30, "biological_sex": "male"
    }, headers=trainer["headers"])
    assert response.status_code == 400


def test_calculator_is_trainer_only(api, client_user):
    response = api.post("/api/nutrition/calculate/tdee", json={"bmr": 1500, "activity_level": "sedentary"},
                        headers=client_user["headers"])
    assert response.status_code == 403


def test_nutrition_profile_upsert(api, trainer, linked_client):
    url = f"/api/nutrition/profiles/{linked_client['id']}"
    assert api.get(url, headers=trainer["headers"]).json() is None

    empty = api.post(url, json={"unknown": "x", "age": ""}, headers=trainer["headers"])
    assert empty.status_code == 400
    assert empty.json()["detail"] == "No valid fields to create profile"

    created = api.post(url, json={
        "age": "34.5",
        "current_weight": "82.4",
        "allergies": ["peanuts", "shellfish"],
        "kitchen_access": "false",
        "primary_goal": "lose_fat",
    }, headers=trainer["headers"])
    assert created.status_code == 201
    profile = created.json()
    assert profile["age"] == 35
    assert profile["current_weight"] == 82.4
    assert profile["allergies"] == ["peanuts", "shellfish"]
    assert profile["kitchen_access"] is False

    updated = api.post(url, json={"steps_per_day": 8000}, headers=trainer["headers"])
    assert updated.status_code == 200
    assert updated.json()["steps_per_day"] == 8000
    assert updated.json()["primary_goal"] == "lose_fat"

    no_fields = api.post(url, json={}, headers=trainer["headers"])
    assert no_fields.json()["detail"] == "No valid fields to update"


def test_nutrition_profile_of_foreign_client(api, other_trainer, linked_client):
    response = api.get(f"/api/nutrition/profiles/{linked_client['id']}", headers=other_trainer["headers"])
    assert response.status_code == 404


def test_food_search(api, client_user):
    salmon = api.get("/api/nutrition/foods/search", params={"search": "salmon"},
                     headers=client_user["headers"]).json()
    assert [f["name"] for f in salmon] == ["Salmon (Atlantic, farmed)", "Salmon (wild)"]

    vegan_powders = api.get("/api/nutrition/foods/search", params={
        "search": "protein powder", "is_vegan": "true"
    }, headers=client_user["headers"]).json()
    assert [f["name"] for f in vegan_powders] == ["Hemp Protein Powder", "Pea Protein Powder"]

    # Any value other than "true" leaves the flag out of the filter
    all_powders = api.get("/api/nutrition/foods/search", params={
        "search": "protein powder", "is_vegan": "false"
    }, headers=client_user["headers"]).json()
    assert len(all_powders) == 4

    food = api.get(f"/api/nutrition/foods/{salmon[0]['id']}", headers=client_user["headers"]).json()
    assert food["calories"] == 206
    assert api.get("/api/nutrition/foods/missing", headers=client_user["headers"]).status_code == 404


def _plan(api, trainer, client, **overrides):
    payload = {
        "client_id": client["id"],
        "plan_name": "Cut",
        "daily_calories": 2000,
        "daily_protein": 180,
        "daily_carbs": 180,
        "daily_fats": 60,
        "meal_distribution": {"breakfast": 0.3, "lunch": 0.4, "dinner": 0.3},
        "meals": [{
            "day_number": 1, "meal_number": 1, "meal_name": "Breakfast",
            "alternative_options": ["Oats"],
            "foods": [{"food_name": "Egg White (large)", "quantity": 4, "unit": "piece", "calories": 68}],
        }],
    }
    payload.update(overrides)
    response = api.post("/api/nutrition/plans", json=payload, headers=trainer["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_plan_lifecycle(api, trainer, linked_client):
    first = _plan(api, trainer, linked_client)
    assert first["is_active"] is True
    assert first["meal_distribution"] == {"breakfast": 0.3, "lunch": 0.4, "dinner": 0.3}
    assert first["meals"][0]["alternative_options"] == ["Oats"]
    assert first["meals"][0]["foods"][0]["food_name"] == "Egg White (large)"

    second = _plan(api, trainer, linked_client, plan_name="Maintenance", daily_calories=2400, meals=[])
    plans = api.get(f"/api/nutrition/plans/client/{linked_client['id']}", headers=trainer["headers"]).json()
    active = {p["plan_name"]: p["is_active"] for p in plans}
    assert active == {"Cut": False, "Maintenance": True}

    mine = api.get("/api/nutrition/plans/active", headers=linked_client["headers"]).json()
    assert mine["id"] == second["id"]

    listed = api.get("/api/nutrition/plans/trainer", headers=trainer["headers"]).json()
    assert {p["client_name"] for p in listed} == {linked_client["name"]}

    updated = api.put(f"/api/nutrition/plans/{second['id']}", json={"daily_calories": 2300, "bogus": 1},
                      headers=trainer["headers"])
    assert updated.json()["daily_calories"] == 2300

    assert api.delete(f"/api/nutrition/plans/{first['id']}", headers=trainer["headers"]).status_code == 200
    assert api.get(f"/api/nutrition/plans/{first['id']}", headers=trainer["headers"]).status_code == 404


def test_plan_visibility(api, trainer, other_trainer, linked_client, client_user):
    plan = _plan(api, trainer, linked_client)
    assert api.get(f"/api/nutrition/plans/{plan['id']}", headers=linked_client["headers"]).status_code == 200

    for outsider in (other_trainer, client_user):
        response = api.get(f"/api/nutrition/plans/{plan['id']}", headers=outsider["headers"])
        assert response.status_code == 404
        assert response.json()["detail"] == "Nutrition plan not found"

    response = api.put(f"/api/nutrition/plans/{plan['id']}", json={"notes": "x"}, headers=other_trainer["headers"])
    assert response.status_code == 404


def test_plan_for_unlinked_client(api, trainer, client_user):
    response = api.post("/api/nutrition/plans", json={"client_id": client_user["id"], "plan_name": "Nope"},
                        headers=trainer["headers"])
    assert response.status_code == 404


def _recommendation(api, trainer, client, **overrides):
    payload = {
        "client_id": client["id"],
        "meal_name": "Chicken Rice Bowl",
        "meal_category": "lunch",
        "calories_per_serving": 450,
        "protein_per_serving": 40,
        "carbs_per_serving": 50,
        "fats_per_serving": 10,
    }
    payload.update(overrides)
    return api.post("/api/nutrition/meals/recommendations", json=payload, headers=trainer["headers"])


def test_recommendations(api, trainer, linked_client):
    assert _recommendation(api, trainer, linked_client, meal_name="").json()["detail"] == "Meal name is required"

    flexible = _recommendation(api, trainer, linked_client)
    assert flexible.status_code == 201
    assert flexible.json()["recommendation_type"] == "flexible"
    assert flexible.json()["priority"] == 0

    _recommendation(api, trainer, linked_client, meal_name="Overnight Oats", meal_category="breakfast",
                    is_assigned=True, assigned_date="2030-04-01", priority=5)
    _recommendation(api, trainer, linked_client, meal_name="Steak Dinner", meal_category="dinner",
                    is_assigned=True, assigned_date="2030-04-02")

    listed = api.get(f"/api/nutrition/meals/recommendations/{linked_client['id']}",
                     headers=trainer["headers"]).json()
    assert listed[0]["meal_name"] == "Overnight Oats"
    lunches = api.get(f"/api/nutrition/meals/recommendations/{linked_client['id']}", params={"category": "lunch"},
                      headers=trainer["headers"]).json()
    assert [r["meal_name"] for r in lunches] == ["Chicken Rice Bowl"]

    recommended = api.get("/api/nutrition/meals/recommended", params={"date": "2030-04-01"},
                          headers=linked_client["headers"]).json()
    assert [m["meal_name"] for m in recommended["assigned"]] == ["Overnight Oats"]
    assert list(recommended["flexible"]) == ["lunch"]
    assert len(recommended["all"]) == 2

    updated = api.put(f"/api/nutrition/meals/recommendations/{flexible.json()['id']}",
                      json={"is_active": False}, headers=trainer["headers"])
    assert updated.json()["is_active"] is False
    remaining = api.get(f"/api/nutrition/meals/recommendations/{linked_client['id']}",
                        headers=trainer["headers"]).json()
    assert len(remaining) == 2

    deleted = api.delete(f"/api/nutrition/meals/recommendations/{flexible.json()['id']}",
                         headers=trainer["headers"])
    assert deleted.status_code == 200


def test_select_meal_logs_scaled_macros(api, trainer, linked_client):
    recommendation = _recommendation(api, trainer, linked_client).json()

    missing = api.post("/api/nutrition/meals/select", json={"recommendation_id": "nope"},
                       headers=linked_client["headers"])
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Meal not found"

    selected = api.post("/api/nutrition/meals/select", json={
        "recommendation_id": recommendation["id"], "selected_date": "2030-04-01",
        "meal_slot": "lunch", "servings": 2
    }, headers=linked_client["headers"])
    assert selected.status_code == 201
    assert selected.json()["actual_calories"] == 900
    assert selected.json()["actual_protein"] == 80

    logs = api.get("/api/nutrition/logs", params={"start_date": "2030-04-01", "end_date": "2030-04-01"},
                   headers=linked_client["headers"]).json()
    assert len(logs) == 1
    assert logs[0]["food_name"] == "Chicken Rice Bowl"
    assert logs[0]["quantity"] == 2
    assert logs[0]["unit"] == "serving"
    assert logs[0]["calories"] == 900


def test_other_clients_cannot_select_meal(api, trainer, linked_client):
    recommendation = _recommendation(api, trainer, linked_client).json()
    other = add_client(api, trainer)
    response = api.post("/api/nutrition/meals/select", json={"recommendation_id": recommendation["id"]},
                        headers=other["headers"])
    assert response.status_code == 404


def test_log_totals_and_delete(api, client_user):
    for day, calories in (("2030-04-01", 500), ("2030-04-01", 300), ("2030-04-02", 700)):
        api.post("/api/nutrition/logs", json={
            "log_date": day, "food_name": "Meal", "calories": calories, "protein": 30
        }, headers=client_user["headers"])

    totals = api.get("/api/nutrition/logs/totals", headers=client_user["headers"]).json()
    assert [(t["log_date"], t["total_calories"], t["log_count"]) for t in totals] == [
        ("2030-04-02", 700, 1), ("2030-04-01", 800, 2)
    ]
    assert totals[1]["total_protein"] == 60

    log_id = api.get("/api/nutrition/logs", headers=client_user["headers"]).json()[0]["id"]
    assert api.delete(f"/api/nutrition/logs/{log_id}", headers=client_user["headers"]).status_code == 200
    assert api.delete(f"/api/nutrition/logs/{log_id}", headers=client_user["headers"]).status_code == 404


def test_weekly_meals(api, trainer, linked_client):
    _plan(api, trainer, linked_client)
    recommendation = _recommendation(api, trainer, linked_client).json()
    for day, servings in (("2030-04-01", 2), ("2030-04-02", 1), ("2030-04-09", 1)):
        api.post("/api/nutrition/meals/select", json={
            "recommendation_id": recommendation["id"], "selected_date": day, "servings": servings
        }, headers=linked_client["headers"])

    weekly = api.get("/api/nutrition/meals/weekly", params={"week_start": "2030-04-03"},
                     headers=linked_client["headers"]).json()
    assert weekly["week_start"] == "2030-04-01"
    assert weekly["week_end"] == "2030-04-07"
    assert len(weekly["assigned_meals"]) == 1
    assert len(weekly["client_selections"]) == 2
    averages = weekly["weekly_averages"]
    assert averages["days_logged"] == 2
    assert averages["calories"] == 675
    assert averages["protein"] == 60
