import pytest

from cafe_api import crud
from cafe_api.crud.friends import FriendsCRUD
from cafe_api.exceptions import InvalidArgumentError, ForbiddenError, NotFoundError


@pytest.fixture
def friends(db, outbox, make_db_user):
    alice = make_db_user("Alice")
    bob = make_db_user("Bob")
    FriendsCRUD.add_friend(db, alice.id, bob.id, outbox)
    return alice, bob


def test_send_message_stores_trimmed_unread_text(db, friends):
    alice, bob = friends

    message = crud.send_message(db, alice.id, bob.id, "  hi there  ")

    assert message.text == "hi there"
    assert message.is_read is False
    assert (message.sender_id, message.receiver_id) == (alice.id, bob.id)


@pytest.mark.parametrize("text", ["hello", "", "   ", None])
def test_send_message_to_non_friend_is_forbidden_whatever_the_text(db, make_db_user, text):
    alice = make_db_user("Alice")
    carol = make_db_user("Carol")

    with pytest.raises(ForbiddenError):
        crud.send_message(db, alice.id, carol.id, text)


def test_send_message_validation_order(db, friends):
    alice, bob = friends

    with pytest.raises(InvalidArgumentError):
        crud.send_message(db, alice.id, None, "hi")
    with pytest.raises(InvalidArgumentError):
        crud.send_message(db, alice.id, alice.id, "hi")
    with pytest.raises(NotFoundError):
        crud.send_message(db, alice.id, 999, "hi")
    with pytest.raises(InvalidArgumentError):
        crud.send_message(db, alice.id, bob.id, "   ")


def test_get_conversation_marks_read_only_incoming(db, friends):
    alice, bob = friends
    crud.send_message(db, alice.id, bob.id, "from alice")
    crud.send_message(db, bob.id, alice.id, "from bob")

    first = crud.get_conversation(db, alice.id, bob.id)
    assert [m.text for m in first] == ["from alice", "from bob"]
    assert [m.is_read for m in first] == [False, False]

    second = crud.get_conversation(db, alice.id, bob.id)
    assert [m.is_read for m in second] == [False, True]

    third = crud.get_conversation(db, alice.id, bob.id)
    assert [(m.id, m.is_read) for m in third] == [(m.id, m.is_read) for m in second]


def test_get_conversation_requires_friendship(db, make_db_user):
    alice = make_db_user("Alice")
    carol = make_db_user("Carol")

    with pytest.raises(ForbiddenError):
        crud.get_conversation(db, alice.id, carol.id)
    with pytest.raises(ForbiddenError):
        crud.get_conversation(db, alice.id, 999)


def test_delete_message_only_by_sender(db, friends):
    alice, bob = friends
    message = crud.send_message(db, alice.id, bob.id, "oops")

    with pytest.raises(NotFoundError):
        crud.delete_message(db, message.id, bob.id)

    crud.delete_message(db, message.id, alice.id)
    assert crud.get_conversation(db, bob.id, alice.id) == []

    with pytest.raises(NotFoundError):
        crud.delete_message(db, message.id, alice.id)


def test_conversations_list_orders_by_latest_message(db, outbox, make_db_user):
    alice = make_db_user("Alice")
    bob = make_db_user("Bob")
    carol = make_db_user("Carol")
    dave = make_db_user("Dave")
    for other in (bob, carol, dave):
        FriendsCRUD.add_friend(db, alice.id, other.id, outbox)

    crud.send_message(db, bob.id, alice.id, "one")
    crud.send_message(db, carol.id, alice.id, "two")
    crud.send_message(db, carol.id, alice.id, "three")
    crud.send_message(db, alice.id, bob.id, "four")

    rows = crud.get_conversations(db, alice.id)

    assert [r.friend_id for r in rows] == [bob.id, carol.id, dave.id]
    unread = {r.friend_id: r.unread_count for r in rows}
    assert unread == {bob.id: 1, carol.id: 2, dave.id: 0}
    assert rows[-1].last_message_time is None


def test_end_to_end_direct_messages(client, make_user):
    a_id, a = make_user("Alice")
    b_id, b = make_user("Bob")
    assert (a_id, b_id) == (1, 2)

    assert client.post("/api/friends", json={"friend_id": b_id}, headers=a).status_code == 201
    assert client.get(f"/api/friends/check/{b_id}", headers=a).json()["is_friend"] is True

    resp = client.post("/api/messages", json={"receiver_id": b_id, "text": "hi"}, headers=a)
    assert resp.status_code == 201
    message_id = resp.json()["id"]

    convo = client.get(f"/api/messages/conversation/{b_id}", headers=a).json()
    assert [(m["text"], m["is_read"]) for m in convo] == [("hi", False)]

    summary = client.get("/api/messages", headers=b).json()
    assert [(s["friend_id"], s["unread_count"]) for s in summary] == [(a_id, 1)]

    client.get(f"/api/messages/conversation/{a_id}", headers=b)
    convo = client.get(f"/api/messages/conversation/{a_id}", headers=b).json()
    assert [m["is_read"] for m in convo] == [True]
    assert client.get("/api/messages", headers=b).json()[0]["unread_count"] == 0

    resp = client.delete(f"/api/messages/{message_id}", headers=b)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Message not found or not yours"}


def test_messages_api_errors(client, make_user):
    a_id, a = make_user("Alice")
    c_id, _ = make_user("Carol")

    resp = client.post("/api/messages", json={"receiver_id": c_id, "text": "hi"}, headers=a)
    assert resp.status_code == 403
    assert client.post("/api/messages", json={"text": "hi"}, headers=a).status_code == 400
    assert client.post("/api/messages", json={"receiver_id": a_id, "text": "hi"}, headers=a).status_code == 400
    assert client.get(f"/api/messages/conversation/{c_id}", headers=a).status_code == 403
