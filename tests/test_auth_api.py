import jwt

from conftest import TEST_SECRET, auth_headers, register


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_register_returns_user_and_token(client):
    resp = register(client, "alice", "alice@example.com")

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]
    payload = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
    assert int(payload["sub"]) == body["user"]["id"]


def test_register_duplicate_email_fails(client):
    assert register(client, "alice", "alice@example.com").status_code == 201

    dup = register(client, "alice2", "alice@example.com")
    assert dup.status_code == 400, dup.text
    assert dup.json() == {"error": "Email already exists"}


def test_register_duplicate_username_fails(client):
    assert register(client, "alice", "alice@example.com").status_code == 201

    dup = register(client, "alice", "other@example.com")
    assert dup.status_code == 400
    assert dup.json() == {"error": "Username already exists"}


def test_register_validation(client):
    resp = register(client, "al", "alice@example.com")
    assert resp.status_code == 400
    assert "error" in resp.json()

    resp = client.post("/api/auth/register", json={"username": "alice"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username, email, and password are required"}


def test_login_success(client):
    register(client, "charlie", "charlie@example.com")

    resp = _login(client, "charlie@example.com", "secret123")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["message"] == "Login successful"
    assert data["user"]["email"] == "charlie@example.com"
    assert isinstance(data["token"], str) and data["token"]


def test_login_invalid_credentials(client):
    register(client, "charlie", "charlie@example.com")

    wrong_password = _login(client, "charlie@example.com", "wrong-password")
    unknown_email = _login(client, "ghost@example.com", "secret123")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_login_with_registered_mixed_case_email(client):
    assert register(client, "dave", "Dave@Example.COM").status_code == 201

    resp = _login(client, "Dave@Example.COM", "secret123")
    assert resp.status_code == 200, resp.text
    assert resp.json()["user"]["username"] == "dave"

    malformed = _login(client, "Dave@", "secret123")
    assert malformed.status_code == 401
    assert malformed.json() == {"error": "Invalid email or password"}


def test_profile_requires_token(client):
    resp = client.get("/api/auth/profile")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or missing authentication token"}
    assert resp.headers["www-authenticate"] == "Bearer"


def test_rejections_look_the_same(client):
    headers = auth_headers(client, "dave", "dave@example.com")
    forged = jwt.encode({"sub": "1", "exp": 9999999999}, "some-other-secret-of-decent-length", algorithm="HS256")
    dangling = jwt.encode({"sub": "4242", "exp": 9999999999}, TEST_SECRET, algorithm="HS256")

    responses = [
        client.get("/api/auth/profile"),
        client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"}),
        client.get("/api/auth/profile", headers={"Authorization": f"Bearer {forged}"}),
        client.get("/api/auth/profile", headers={"Authorization": f"Bearer {dangling}"}),
    ]
    assert {r.status_code for r in responses} == {401}
    assert len({r.text for r in responses}) == 1

    assert client.get("/api/auth/profile", headers=headers).status_code == 200


def test_get_and_update_profile(client):
    headers = auth_headers(client, "erin", "erin@example.com")

    resp = client.get("/api/auth/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "erin"

    resp = client.put("/api/auth/profile", json={"username": "erin_k"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["message"] == "Profile updated successfully"
    assert resp.json()["user"]["username"] == "erin_k"
    assert resp.json()["user"]["email"] == "erin@example.com"

    resp = client.put("/api/auth/profile", json={}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "No valid fields to update"}


def test_change_password(client):
    headers = auth_headers(client, "frank", "frank@example.com")

    resp = client.put(
        "/api/auth/change-password",
        json={"currentPassword": "wrong-one", "newPassword": "another123"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Current password is incorrect"}

    resp = client.put(
        "/api/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": "123"},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.put(
        "/api/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": "another123"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Password changed successfully"}
    assert _login(client, "frank@example.com", "another123").status_code == 200


def test_delete_account_invalidates_session(client):
    headers = auth_headers(client, "grace", "grace@example.com")

    resp = client.delete("/api/auth/account", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Account deleted successfully"}

    assert client.get("/api/auth/profile", headers=headers).status_code == 401
    assert _login(client, "grace@example.com", "secret123").status_code == 401


def test_verify(client):
    headers = auth_headers(client, "heidi", "heidi@example.com")

    resp = client.get("/api/auth/verify", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["valid"] is True
    assert resp.json()["user"]["username"] == "heidi"

    resp = client.get("/api/auth/verify", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.json() == {"valid": False, "error": "Invalid or missing authentication token"}
