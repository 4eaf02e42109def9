from conftest import add_client


def _session(api, trainer, client, date, time, **extra):
    payload = {"clientId": client["id"], "sessionDate": date, "sessionTime": time}
    payload.update(extra)
    return api.post("/api/schedule/trainer/sessions", json=payload, headers=trainer["headers"])


def test_session_requires_client_date_and_time(api, trainer, linked_client):
    response = api.post("/api/schedule/trainer/sessions", json={"clientId": linked_client["id"]},
                        headers=trainer["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Client ID, date, and time are required"


def test_session_for_foreign_client(api, trainer, other_trainer, linked_client):
    response = _session(api, other_trainer, linked_client, "2030-03-04", "10:00")
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


def test_overlapping_sessions_are_rejected(api, trainer, linked_client):
    other = add_client(api, trainer, name="Olive Overlap")
    first = _session(api, trainer, linked_client, "2030-03-04", "10:00", duration=60)
    assert first.status_code == 201
    assert first.json()["status"] == "scheduled"
    assert first.json()["session_type"] == "in_person"

    clash = _session(api, trainer, other, "2030-03-04", "10:30")
    assert clash.status_code == 400
    assert clash.json()["detail"] == (
        f"This session overlaps with an existing session for {linked_client['name']} at 10:00"
    )

    # Back-to-back sessions share an endpoint but do not overlap
    adjacent = _session(api, trainer, other, "2030-03-04", "11:00")
    assert adjacent.status_code == 201

    short = _session(api, trainer, other, "2030-03-04", "9:30", duration=30)
    assert short.status_code == 201
    assert short.json()["session_time"] == "09:30"


def test_cancelled_sessions_do_not_block(api, trainer, linked_client):
    first = _session(api, trainer, linked_client, "2030-03-04", "10:00").json()
    cancelled = api.post(f"/api/schedule/trainer/sessions/{first['id']}/cancel", json={"reason": "sick"},
                         headers=trainer["headers"])
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert "cancelledCount" not in cancelled.json()

    assert _session(api, trainer, linked_client, "2030-03-04", "10:00").status_code == 201


def test_weekly_recurring_series(api, trainer, linked_client):
    response = _session(api, trainer, linked_client, "2030-03-04", "07:00",
                        isRecurring=True, recurringPattern="weekly", recurringEndDate="2030-03-25")
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Created 4 recurring sessions"
    assert [s["session_date"] for s in data["sessions"]] == [
        "2030-03-04", "2030-03-11", "2030-03-18", "2030-03-25"
    ]
    assert data["sessions"][0]["id"] == data["parentId"]
    assert all(s["recurring_parent_id"] == data["parentId"] for s in data["sessions"][1:])
    assert "conflicts" not in data


def test_recurring_series_skips_conflicting_dates(api, trainer, linked_client):
    other = add_client(api, trainer, name="Blocker Client")
    _session(api, trainer, other, "2030-03-18", "07:30")

    data = _session(api, trainer, linked_client, "2030-03-04", "07:00",
                    isRecurring=True, recurringEndDate="2030-03-25").json()
    assert [s["session_date"] for s in data["sessions"]] == ["2030-03-04", "2030-03-11", "2030-03-25"]
    assert data["conflicts"] == ["2030-03-18"]
    assert data["message"] == "Created 3 recurring sessions. 1 date skipped due to conflicts: 2030-03-18"


def test_recurring_series_fails_when_first_date_clashes(api, trainer, linked_client):
    other = add_client(api, trainer, name="Early Bird")
    _session(api, trainer, other, "2030-03-04", "07:00")

    response = _session(api, trainer, linked_client, "2030-03-04", "07:00",
                        isRecurring=True, recurringEndDate="2030-03-25")
    assert response.status_code == 400
    assert response.json()["detail"].startswith("The first session overlaps")

    calendar = api.get("/api/schedule/trainer/calendar", params={"start": "2030-03-01", "end": "2030-03-31"},
                       headers=trainer["headers"]).json()
    assert list(calendar) == ["2030-03-04"]


def test_monthly_series_clamps_to_month_end(api, trainer, linked_client):
    data = _session(api, trainer, linked_client, "2030-01-31", "08:00",
                    isRecurring=True, recurringPattern="monthly", recurringEndDate="2030-04-30").json()
    assert [s["session_date"] for s in data["sessions"]] == [
        "2030-01-31", "2030-02-28", "2030-03-31", "2030-04-30"
    ]


def test_reschedule_session(api, trainer, linked_client):
    session = _session(api, trainer, linked_client, "2030-03-04", "10:00").json()

    empty = api.put(f"/api/schedule/trainer/sessions/{session['id']}", json={}, headers=trainer["headers"])
    assert empty.status_code == 400
    assert empty.json()["detail"] == "No fields to update"

    moved = api.put(f"/api/schedule/trainer/sessions/{session['id']}", json={
        "sessionDate": "2030-03-05", "sessionTime": "8:15", "reason": "Client asked"
    }, headers=trainer["headers"])
    assert moved.status_code == 200
    assert moved.json()["session_date"] == "2030-03-05"
    assert moved.json()["session_time"] == "08:15"

    # Moving within its own slot does not clash with itself
    longer = api.put(f"/api/schedule/trainer/sessions/{session['id']}", json={"duration": 90},
                     headers=trainer["headers"])
    assert longer.status_code == 200

    missing = api.put("/api/schedule/trainer/sessions/nope", json={"notes": "x"}, headers=trainer["headers"])
    assert missing.status_code == 404


def test_reschedule_into_a_clash(api, trainer, linked_client):
    _session(api, trainer, linked_client, "2030-03-04", "10:00")
    later = _session(api, trainer, linked_client, "2030-03-04", "14:00").json()
    response = api.put(f"/api/schedule/trainer/sessions/{later['id']}", json={"sessionTime": "10:15"},
                       headers=trainer["headers"])
    assert response.status_code == 400


def test_cancel_rest_of_series(api, trainer, linked_client):
    data = _session(api, trainer, linked_client, "2030-03-04", "07:00",
                    isRecurring=True, recurringEndDate="2030-03-25").json()
    third = data["sessions"][2]

    response = api.post(f"/api/schedule/trainer/sessions/{third['id']}/cancel", params={"series": "true"},
                        headers=trainer["headers"])
    assert response.status_code == 200
    assert response.json()["cancelledCount"] == 2

    sessions = api.get(f"/api/schedule/trainer/clients/{linked_client['id']}/sessions",
                       headers=trainer["headers"]).json()
    assert [s["status"] for s in sessions] == ["scheduled", "scheduled", "cancelled", "cancelled"]


def test_upcoming_and_calendar(api, trainer, linked_client):
    _session(api, trainer, linked_client, "2030-05-02", "09:00")
    _session(api, trainer, linked_client, "2030-05-01", "09:00")
    _session(api, trainer, linked_client, "2030-06-01", "09:00")

    upcoming = api.get("/api/schedule/trainer/upcoming", params={"endDate": "2030-05-31"},
                       headers=trainer["headers"]).json()
    assert [s["session_date"] for s in upcoming] == ["2030-05-01", "2030-05-02"]
    assert upcoming[0]["client_name"] == linked_client["name"]

    calendar = api.get("/api/schedule/trainer/calendar", params={"start": "2030-05-01", "end": "2030-06-30"},
                       headers=trainer["headers"]).json()
    assert list(calendar) == ["2030-05-01", "2030-05-02", "2030-06-01"]

    ranged = api.get(f"/api/schedule/trainer/clients/{linked_client['id']}/sessions",
                     params={"startDate": "2030-05-01", "endDate": "2030-05-31"},
                     headers=trainer["headers"]).json()
    assert len(ranged) == 2


def test_client_upcoming_lists_program_sessions_only(api, trainer, linked_client):
    _session(api, trainer, linked_client, "2030-05-01", "09:00")
    program = api.post("/api/programs", json={
        "name": "Block", "workouts": [{"workout_name": "Legs", "week_number": 1, "day_number": 1}]
    }, headers=trainer["headers"]).json()
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": "2030-01-07"
    }, headers=trainer["headers"])

    upcoming = api.get("/api/schedule/client/upcoming", headers=linked_client["headers"]).json()
    assert len(upcoming) == 1
    assert upcoming[0]["workout_name"] == "Legs"
    assert upcoming[0]["program_name"] == "Block"
    assert upcoming[0]["trainer_name"] == trainer["name"]


def test_update_program_workout_sessions(api, trainer, linked_client):
    program = api.post("/api/programs", json={
        "name": "Block", "workouts": [{"workout_name": "Legs", "week_number": 1, "day_number": 1}]
    }, headers=trainer["headers"]).json()
    workout_id = program["workouts"][0]["id"]
    api.post(f"/api/programs/{program['id']}/assign", json={
        "client_id": linked_client["id"], "start_date": "2030-01-07"
    }, headers=trainer["headers"])

    response = api.put(f"/api/schedule/trainer/workout/{workout_id}/sessions", json={
        "sessionTime": "6:45", "location": ""
    }, headers=trainer["headers"])
    assert response.json() == {"message": "Updated 1 session(s)", "updatedCount": 1}

    sessions = api.get(f"/api/schedule/trainer/workout/{workout_id}/sessions", headers=trainer["headers"]).json()
    assert sessions[0]["session_time"] == "06:45"
    assert sessions[0]["location"] is None

    empty = api.put(f"/api/schedule/trainer/workout/{workout_id}/sessions", json={}, headers=trainer["headers"])
    assert empty.status_code == 400


def test_availability(api, trainer):
    missing = api.post("/api/schedule/trainer/availability", json={"dayOfWeek": 1}, headers=trainer["headers"])
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Day of week, start time, and end time are required"

    created = api.post("/api/schedule/trainer/availability", json={
        "dayOfWeek": 1, "startTime": "9:00", "endTime": "12:00"
    }, headers=trainer["headers"])
    assert created.status_code == 201
    assert created.json()["is_available"] is True

    # Same day and start time updates the slot in place
    api.post("/api/schedule/trainer/availability", json={
        "dayOfWeek": 1, "startTime": "09:00", "endTime": "13:00", "isAvailable": False
    }, headers=trainer["headers"])
    api.post("/api/schedule/trainer/availability", json={
        "dayOfWeek": 0, "startTime": "10:00", "endTime": "11:00"
    }, headers=trainer["headers"])

    slots = api.get("/api/schedule/trainer/availability", headers=trainer["headers"]).json()
    assert [(s["day_of_week"], s["start_time"], s["end_time"]) for s in slots] == [
        (0, "10:00", "11:00"), (1, "09:00", "13:00")
    ]
    assert slots[1]["is_available"] is False


def test_today_completed_defaults(api, linked_client):
    response = api.get("/api/schedule/client/today-completed", headers=linked_client["headers"])
    assert response.json() == {"hasCompleted": False, "hasCompletedSession": False, "hasCompletedWorkout": False}
