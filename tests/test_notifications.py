import pytest

from cafe_api import crud
from cafe_api.database import get_session_local
from cafe_api.exceptions import NotFoundError
from cafe_api.services.notification_outbox import NotificationOutbox


def test_notifications_newest_first(db, make_db_user):
    user = make_db_user("Alice")
    crud.notify(db, user.id, "first")
    crud.notify(db, user.id, "second")

    assert [n.message for n in crud.get_notifications(db, user.id)] == ["second", "first"]


def test_dismiss_only_own_notification(db, make_db_user):
    alice = make_db_user("Alice")
    bob = make_db_user("Bob")
    note = crud.notify(db, alice.id, "hello")

    with pytest.raises(NotFoundError):
        crud.dismiss_notification(db, note.id, bob.id)

    crud.dismiss_notification(db, note.id, alice.id)
    assert crud.get_notifications(db, alice.id) == []

    with pytest.raises(NotFoundError):
        crud.dismiss_notification(db, note.id, alice.id)


def test_outbox_flush_delivers_and_empties(db, make_db_user):
    alice = make_db_user("Alice")
    outbox = NotificationOutbox()
    outbox.enqueue(alice.id, "one")
    outbox.enqueue(alice.id, "two")

    assert outbox.flush() == 2
    assert outbox.pending == []
    assert outbox.flush() == 0
    assert len(crud.get_notifications(db, alice.id)) == 2


def test_outbox_failures_are_dropped(db, make_db_user, monkeypatch):
    alice = make_db_user("Alice")
    calls = []

    def flaky_notify(session, user_id, message):
        calls.append(message)
        if message == "bad":
            raise RuntimeError("store unavailable")
        return crud.notify(session, user_id, message)

    monkeypatch.setattr("cafe_api.services.notification_outbox.notify", flaky_notify)

    outbox = NotificationOutbox()
    outbox.enqueue(alice.id, "bad")
    outbox.enqueue(alice.id, "good")

    assert outbox.flush(get_session_local()) == 1
    assert calls == ["bad", "good"]
    assert [n.message for n in crud.get_notifications(db, alice.id)] == ["good"]


def test_failed_notification_does_not_fail_primary_action(client, make_user, monkeypatch):
    def broken_notify(session, user_id, message):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr("cafe_api.services.notification_outbox.notify", broken_notify)
    _, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")

    resp = client.post("/api/friends", json={"friend_id": bob_id}, headers=alice)

    assert resp.status_code == 201
    assert client.get("/api/notifications", headers=bob).json() == []


def test_notifications_api(client, make_user):
    _, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    client.post("/api/friends", json={"friend_id": bob_id}, headers=alice)

    notes = client.get("/api/notifications", headers=bob).json()
    assert [n["message"] for n in notes] == ["Alice added you as a friend."]

    assert client.delete(f"/api/notifications/{notes[0]['id']}", headers=alice).status_code == 404
    resp = client.delete(f"/api/notifications/{notes[0]['id']}", headers=bob)
    assert resp.json() == {"message": "Notification removed"}
    assert client.get("/api/notifications", headers=bob).json() == []
