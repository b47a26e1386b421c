# ============================================================================
# FILE: tests/test_api.py
# ============================================================================
API = "/api/v1/users"


def register(client, username="ada", email="ada@mail.test", cover=False):
    files = {"avatar": ("avatar.png", b"png-bytes", "image/png")}
    if cover:
        files["coverImage"] = ("cover.png", b"png-bytes", "image/png")
    return client.post(
        f"{API}/register",
        data={"fullname": "Ada Lovelace", "email": email, "username": username, "password": "secret123"},
        files=files,
    )


def login(client, username="ada", password="secret123"):
    return client.post(f"{API}/login", json={"username": username, "password": password})


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_returns_envelope(client):
    response = register(client, cover=True)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    assert body["data"]["username"] == "ada"
    assert body["data"]["cover_image"].startswith("https://media.test/")
    assert "hashed_password" not in body["data"]
    assert "refresh_token" not in body["data"]


def test_register_twice_is_conflict(client):
    register(client)
    response = register(client, email="another@mail.test")

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["message"] == "User already registered"


def test_register_without_avatar(client):
    response = client.post(
        f"{API}/register",
        data={"fullname": "Ada", "email": "ada@mail.test", "username": "ada", "password": "secret123"},
    )
    assert response.status_code == 400


def test_login_sets_cookies_and_authenticates(client):
    register(client)
    response = login(client)

    assert response.status_code == 200
    data = response.json()["data"]
    assert response.cookies.get("accessToken") == data["access_token"]
    assert response.cookies.get("refreshToken") == data["refresh_token"]

    me = client.get(f"{API}/current-user")
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "ada"


def test_bearer_header_authenticates(client):
    register(client)
    access_token = login(client).json()["data"]["access_token"]
    client.cookies.clear()

    me = client.get(f"{API}/current-user", headers={"Authorization": f"Bearer {access_token}"})
    assert me.status_code == 200


def test_protected_route_requires_token(client):
    response = client.get(f"{API}/current-user")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


def test_refresh_rotation_over_http(client):
    register(client)
    old_refresh = login(client).json()["data"]["refresh_token"]

    rotated = client.post(f"{API}/refresh-token")
    assert rotated.status_code == 200
    assert rotated.json()["data"]["refresh_token"] != old_refresh

    client.cookies.clear()
    replay = client.post(f"{API}/refresh-token", json={"refresh_token": old_refresh})
    assert replay.status_code == 401


def test_logout_then_refresh_fails(client):
    register(client)
    refresh_token = login(client).json()["data"]["refresh_token"]

    assert client.post(f"{API}/logout").status_code == 200

    client.cookies.clear()
    response = client.post(f"{API}/refresh-token", json={"refresh_token": refresh_token})
    assert response.status_code == 401


def test_update_account_requires_field(client):
    register(client)
    login(client)

    response = client.patch(f"{API}/update-account", json={})
    assert response.status_code == 400

    response = client.patch(f"{API}/update-account", json={"fullname": "Countess"})
    assert response.json()["data"]["fullname"] == "Countess"


def test_change_password_flow(client):
    register(client)
    login(client)

    wrong = client.post(f"{API}/change-password", json={"old_password": "bad", "new_password": "fresh456"})
    assert wrong.status_code == 400

    ok = client.post(f"{API}/change-password", json={"old_password": "secret123", "new_password": "fresh456"})
    assert ok.status_code == 200

    assert login(client, password="secret123").status_code == 401
    assert login(client, password="fresh456").status_code == 200


def test_channel_profile_anonymous_and_missing(client):
    register(client)

    response = client.get(f"{API}/c/ADA")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["subscribers_count"] == 0
    assert data["is_subscribed"] is False

    assert client.get(f"{API}/c/ghost").status_code == 404


def test_watch_history_empty(client):
    register(client)
    login(client)

    response = client.get(f"{API}/history")
    assert response.status_code == 200
    assert response.json()["data"] == []
