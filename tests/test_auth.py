from conftest import headers_for


def test_register_and_login(client):
    response = client.post(
        "/auth/register",
        json={"name": "מיכל אברהם", "email": "Michal@Example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["userId"] > 0

    login = client.post("/auth/login", json={"email": "michal@example.com", "password": "secret123"})
    assert login.status_code == 200
    data = login.json()
    assert data["tokenType"] == "bearer"
    assert data["user"]["email"] == "michal@example.com"

    profile = client.get("/user/profile", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert profile.status_code == 200
    assert profile.json()["name"] == "מיכל אברהם"


def test_register_duplicate_email(client, user):
    response = client.post(
        "/auth/register",
        json={"name": "Someone", "email": user.email, "password": "secret123"},
    )
    assert response.status_code == 400


def test_register_short_password(client):
    response = client.post(
        "/auth/register",
        json={"name": "Someone", "email": "someone@example.com", "password": "123"},
    )
    assert response.status_code == 422


def test_login_wrong_password(client, user):
    response = client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_profile_requires_token(client):
    assert client.get("/user/profile").status_code == 401
    bad = client.get("/user/profile", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_token_for_deleted_user_is_rejected(client, db_session, user):
    headers = headers_for(user)
    db_session.delete(user)
    db_session.commit()
    assert client.get("/user/profile", headers=headers).status_code == 401


def test_update_profile(client, auth_headers):
    response = client.put(
        "/user/profile",
        headers=auth_headers,
        json={"name": "  ", "phone": "052-7654321", "license": "27-12345"},
    )
    assert response.status_code == 200
    body = response.json()
    # Blank name keeps the current one
    assert body["name"] == "ד\"ר רונית לוי"
    assert body["phone"] == "052-7654321"
    assert body["license"] == "27-12345"


def test_update_profile_invalid_phone(client, auth_headers):
    response = client.put("/user/profile", headers=auth_headers, json={"phone": "abc"})
    assert response.status_code == 422


def test_notification_settings_upsert(client, auth_headers):
    response = client.put(
        "/user/notification-settings",
        headers=auth_headers,
        json={
            "emailEnabled": True,
            "pushEnabled": False,
            "morningTime": "07:30",
            "eveningTime": "21:00",
            "debtThresholdDays": 14,
            "monthlyReminderDay": 28,
        },
    )
    assert response.status_code == 200
    settings = {s["channel"]: s for s in response.json()}
    assert settings["email"]["enabled"] is True
    assert settings["push"]["enabled"] is False
    assert settings["push"]["morningTime"] == "07:30"
    assert settings["email"]["debtThresholdDays"] == 14
    assert settings["email"]["monthlyReminderDay"] == 28

    listed = client.get("/user/notification-settings", headers=auth_headers).json()
    assert len(listed) == 2


def test_notification_settings_invalid_time(client, auth_headers):
    response = client.put(
        "/user/notification-settings",
        headers=auth_headers,
        json={"morningTime": "25:00"},
    )
    assert response.status_code == 422


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_security_headers(client, auth_headers):
    response = client.get("/user/profile", headers=auth_headers)
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "microphone=(self)" in response.headers["Permissions-Policy"]
    assert response.headers["Cache-Control"] == "no-store, no-cache, must-revalidate"
    assert "Strict-Transport-Security" not in response.headers
