import asyncio
import io
import os

import pytest
from fastapi import UploadFile
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from cafe_api import crud
from cafe_api.config import settings
from cafe_api.exceptions import InternalError, InvalidArgumentError
from cafe_api.services.blob_store import LocalBlobStore


def _store_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


def test_store_failure_maps_to_internal_error(db, monkeypatch):
    monkeypatch.setattr(db, "query", _store_down)

    with pytest.raises(InternalError):
        crud.get_cafes(db)
    with pytest.raises(InternalError):
        crud.get_cafe(db, 1)
    with pytest.raises(InternalError):
        crud.get_user(db, 1)


def test_store_failure_on_public_route_is_json_500(client, monkeypatch):
    monkeypatch.setattr(Session, "query", _store_down)

    resp = client.get("/api/cafes")

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"detail": "Internal server error"}


def test_store_failure_during_authentication_is_json_500(client, app_authenticator, monkeypatch):
    token = app_authenticator.issue_token(1, "Alice", "alice@example.com")
    monkeypatch.setattr(Session, "query", _store_down)

    resp = client.get("/api/friends", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


def test_unexpected_error_in_route_is_json_500(client, make_user, monkeypatch):
    user_id, headers = make_user("Alice")

    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(crud, "get_user_or_404", broken)
    monkeypatch.setattr(crud, "get_cafe", broken)

    for path in ("/api/auth/me", "/api/profile", f"/api/profile/{user_id}", "/api/cafes/1"):
        resp = client.get(path, headers=headers)
        assert resp.status_code == 500, path
        assert resp.json() == {"detail": "Internal server error"}


@pytest.mark.parametrize("path, payload", [
    ("/api/friends", {"friend_id": "abc"}),
    ("/api/messages", {"receiver_id": "abc", "text": "hi"}),
])
def test_malformed_json_is_invalid_argument(client, make_user, path, payload):
    _, headers = make_user("Alice")

    resp = client.post(path, json=payload, headers=headers)

    assert resp.status_code == 400
    assert isinstance(resp.json()["detail"], str)
    assert "Invalid" in resp.json()["detail"]


def test_malformed_form_field_is_invalid_argument(client, make_user, make_cafe):
    _, headers = make_user("Alice")
    cafe_id = make_cafe()

    resp = client.post("/api/reviews", data={"cafe_id": cafe_id, "text": "ok", "rating": "five"}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid rating")


def _upload_files():
    return set(os.listdir(settings.UPLOAD_DIR))


def test_rejected_review_update_stores_no_photos(client, make_user, make_cafe):
    _, author = make_user("Author")
    _, other = make_user("Other")
    cafe_id = make_cafe()
    review_id = client.post(
        "/api/reviews", data={"cafe_id": cafe_id, "text": "Nice", "rating": 4}, headers=author
    ).json()["review"]["id"]
    photo = [("photos", ("latte.jpg", b"\xff\xd8jpeg", "image/jpeg"))]
    before = _upload_files()

    resp = client.put(f"/api/reviews/{review_id}", data={"rating": 1}, files=photo, headers=other)
    assert resp.status_code == 403
    resp = client.put("/api/reviews/999", data={"rating": 1}, files=photo, headers=other)
    assert resp.status_code == 404

    assert _upload_files() == before


def test_oversized_upload_is_rejected_without_writing(tmp_path):
    store = LocalBlobStore(str(tmp_path), "/uploads", max_bytes=8)
    upload = UploadFile(io.BytesIO(b"x" * 100_000), filename="big.jpg")

    with pytest.raises(InvalidArgumentError):
        asyncio.run(store.save(upload, prefix="review"))
    assert os.listdir(tmp_path) == []


def test_saved_upload_can_be_discarded(tmp_path):
    store = LocalBlobStore(str(tmp_path), "/uploads", max_bytes=1024)

    url = asyncio.run(store.save(UploadFile(io.BytesIO(b"beans"), filename="a.PNG"), prefix="profile"))

    assert url.startswith("/uploads/profile-") and url.endswith(".png")
    assert (tmp_path / os.path.basename(url)).read_bytes() == b"beans"
    store.discard([url, "/uploads/missing.png"])
    assert os.listdir(tmp_path) == []
