from conftest import register_and_login


def test_register_login_and_me(client):
    headers = register_and_login(client, email="Founder@Example.com")
    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "founder@example.com"
    assert me.json()["display_name"] == "Asha"


def test_register_validation(client):
    response = client.post("/api/auth/register", json={"name": "A", "email": "a@example.com", "password": "123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 6 characters"

    response = client.post("/api/auth/register", json={"name": " ", "email": "a@example.com", "password": "secret1"})
    assert response.json()["detail"] == "Please fill in all fields"

    register_and_login(client, email="a@example.com")
    response = client.post("/api/auth/register", json={"name": "A", "email": "a@example.com", "password": "secret1"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_wrong_password_is_unauthorized(client):
    register_and_login(client)
    response = client.post("/api/auth/login", json={"email": "founder@example.com", "password": "wrong-one"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_oauth2_form_login(client):
    register_and_login(client)
    response = client.post(
        "/api/auth/login/oauth2", data={"username": "founder@example.com", "password": "secret123"}
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_protected_routes_need_a_valid_access_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401

    register_and_login(client)
    refresh = client.post(
        "/api/auth/login", json={"email": "founder@example.com", "password": "secret123"}
    ).json()["refresh_token"]
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {refresh}"}).status_code == 401


def test_update_profile_name(client, auth_headers):
    response = client.put("/api/auth/profile", json={"name": "Asha Rao"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["display_name"] == "Asha Rao"


def test_public_endpoints(client):
    assert client.get("/health").json()["status"] == "healthy"
    info = client.get("/api/info").json()
    assert info["pitchScenarios"] == 4
    assert info["achievements"] == 11
    assert len(info["features"]) == 4
