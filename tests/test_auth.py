import pytest

from cafe_api.exceptions import UnauthorizedError
from cafe_api.security import Authenticator, hash_password, verify_password


def test_password_hash_round_trip():
    hashed = hash_password("s3cret", rounds=4)
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", "not-a-hash")


def test_token_carries_user_id():
    auth = Authenticator("k1")
    token = auth.issue_token(42, "Alice", "alice@example.com")
    assert auth.verify_token(token) == 42


def test_token_from_other_secret_is_rejected():
    token = Authenticator("k1").issue_token(1, "Alice", "alice@example.com")
    with pytest.raises(UnauthorizedError):
        Authenticator("k2").verify_token(token)


def test_expired_token_is_rejected():
    auth = Authenticator("k1", expires_minutes=-1)
    with pytest.raises(UnauthorizedError):
        auth.verify_token(auth.issue_token(1, "Alice", "alice@example.com"))


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        Authenticator("")


def test_register_and_login(client):
    payload = {"name": "Alice", "email": "alice@example.com", "password": "pw123456"}
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert "password" not in user

    assert client.post("/api/auth/register", json=payload).status_code == 409
    assert client.post("/api/auth/register", json={"email": "x@example.com"}).status_code == 400

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid credentials."}

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "pw123456"})
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}
    me = client.get("/api/auth/me", headers=headers).json()
    assert (me["id"], me["email"]) == (user["id"], "alice@example.com")


def test_profile_update_and_picture(client, make_user):
    user_id, headers = make_user("Alice")

    resp = client.put("/api/auth/update", json={"bio": "Espresso fan", "location": "Lisbon"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["bio"] == "Espresso fan"
    assert resp.json()["user"]["name"] == "Alice"

    assert client.put("/api/auth/update", json={"name": " "}, headers=headers).status_code == 400

    resp = client.post(
        "/api/auth/upload-pic",
        files={"profile_pic": ("me.png", b"\x89PNG", "image/png")},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["url"].startswith("/uploads/profile-")
    assert resp.json()["url"].endswith(".png")
    assert client.post("/api/auth/upload-pic", headers=headers).status_code == 400

    profile = client.get(f"/api/profile/{user_id}").json()["profile"]
    assert profile["location"] == "Lisbon"
    assert profile["profile_pic"] == resp.json()["url"]
    assert client.get("/api/profile/999").status_code == 404
    assert client.get("/api/profile", headers=headers).json()["profile"]["id"] == user_id


def test_token_for_deleted_user_is_rejected(client, app_authenticator):
    token = app_authenticator.issue_token(999, "Ghost", "ghost@example.com")
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"
