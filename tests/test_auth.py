from conftest import register


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Trainr API"}


def test_unknown_route_returns_json_404(api):
    response = api.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json()["detail"] == "Route not found"


def test_register_trainer_returns_token_and_user(api):
    response = api.post("/api/auth/register", json={
        "name": "Tara", "email": "tara@example.com", "password": "secret123",
        "role": "trainer", "phoneNumber": "555-0100"
    })
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["role"] == "trainer"
    assert data["user"]["email"] == "tara@example.com"
    assert "hashed_password" not in data["user"]


def test_register_trainer_requires_phone(api):
    response = api.post("/api/auth/register", json={
        "name": "Tara", "email": "tara@example.com", "password": "secret123", "role": "trainer"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Phone number is required for trainers"


def test_register_rejects_unknown_role(api):
    response = api.post("/api/auth/register", json={
        "name": "Root", "email": "root@example.com", "password": "secret123", "role": "admin"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid role"


def test_register_rejects_missing_fields(api):
    response = api.post("/api/auth/register", json={"email": "x@example.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "All fields are required"


def test_register_duplicate_email(api):
    payload = {"name": "Casey", "email": "casey@example.com", "password": "secret123", "role": "client"}
    assert api.post("/api/auth/register", json=payload).status_code == 201
    response = api.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_login_and_me(api, trainer):
    response = api.post("/api/auth/login", json={"email": trainer["email"], "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["token"]

    me = api.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    data = me.json()
    assert data["id"] == trainer["id"]
    assert data["role"] == "trainer"
    assert data["specialties"] == []
    assert data["certifications"] == []


def test_login_wrong_password(api, trainer):
    response = api.post("/api/auth/login", json={"email": trainer["email"], "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_requires_credentials(api):
    response = api.post("/api/auth/login", json={"email": "someone@example.com"})
    assert response.status_code == 400


def test_me_requires_token(api):
    response = api.get("/api/auth/me")
    assert response.status_code == 401


def test_me_rejects_garbage_token(api):
    response = api.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_client_cannot_use_trainer_routes(api, client_user):
    response = api.get("/api/trainer/clients", headers=client_user["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_profile_update_for_trainer(api, trainer):
    response = api.put("/api/profile", json={
        "bio": "Strength coach", "specialties": ["strength", "mobility"], "hourly_rate": 75
    }, headers=trainer["headers"])
    assert response.status_code == 200

    me = api.get("/api/auth/me", headers=trainer["headers"]).json()
    assert me["bio"] == "Strength coach"
    assert me["specialties"] == ["strength", "mobility"]


def test_register_helper_creates_client_role(api):
    client = register(api, "client")
    me = api.get("/api/auth/me", headers=client["headers"]).json()
    assert me["role"] == "client"
    assert "specialties" not in me
