from datetime import datetime

from blogchat.models import Emoji, Message, User


async def seed_conversation():
    await User(username="alice", email="a@example.com", password="x", online=True).insert()
    await User(username="bob", email="b@example.com", password="x").insert()
    for minute, (sender, to) in enumerate([("alice", "bob"), ("bob", "alice"), ("alice", "bob"), ("alice", "carol")]):
        await Message(
            sender=sender, to=to, type="text", content=f"m{minute}",
            createdAt=datetime(2024, 1, 1, 12, minute),
        ).insert()


async def test_conversation_both_directions_oldest_first(client):
    await seed_conversation()
    await Emoji(shortcode=":b:", unicode="B", sortOrder=2).insert()
    await Emoji(shortcode=":a:", unicode="A", sortOrder=1).insert()

    response = await client.get("/api/messages", params={"user1": "alice", "user2": "bob"})
    assert response.status_code == 200
    body = response.json()

    assert [m["content"] for m in body["messages"]] == ["m0", "m1", "m2"]
    assert body["messages"][1]["from"] == "bob"
    assert body["hasMore"] is False
    participants = {p["username"]: p for p in body["participants"]}
    assert participants["alice"]["online"] is True
    assert set(participants) == {"alice", "bob"}
    assert [e["shortcode"] for e in body["emojis"]] == [":a:", ":b:"]


async def test_conversation_limit_and_before(client):
    await seed_conversation()

    body = (await client.get("/api/messages", params={"user1": "alice", "user2": "bob", "limit": 2})).json()
    assert [m["content"] for m in body["messages"]] == ["m1", "m2"]
    assert body["hasMore"] is True

    older = (await client.get("/api/messages", params={
        "user1": "alice", "user2": "bob", "limit": 2, "before": "2024-01-01T12:01:00"
    })).json()
    assert [m["content"] for m in older["messages"]] == ["m0"]
    assert older["hasMore"] is False


async def test_conversation_requires_both_users(client):
    assert (await client.get("/api/messages", params={"user1": "alice"})).status_code == 400


async def test_latest_messages(client):
    await seed_conversation()
    response = await client.get("/api/messages/latest", params={"user": "alice", "targets": "bob,carol,dave"})
    latest = response.json()["latest"]

    assert [(item["partner"], item["content"]) for item in latest] == [("carol", "m3"), ("bob", "m2")]


async def test_send_update_delete_message(client):
    response = await client.post("/api/messages", json={
        "from": "alice", "to": "bob", "type": "file", "content": "/uploads/x.pdf", "fileName": "x.pdf"
    })
    assert response.status_code == 201
    message = response.json()["message"]
    assert message["from"] == "alice"
    assert message["fileName"] == "x.pdf"

    stored = await Message.find_one({"from": "alice"})
    assert stored.to == "bob"

    updated = await client.put(f"/api/messages/{message['id']}", json={"content": "edited"})
    assert updated.json()["message"]["content"] == "edited"

    deleted = await client.delete(f"/api/messages/{message['id']}")
    assert deleted.json() == {"success": True}
    assert (await client.delete(f"/api/messages/{message['id']}")).status_code == 404
    assert (await client.put("/api/messages/bad-id", json={"content": "x"})).status_code == 404


async def test_send_message_rejects_unknown_type(client):
    response = await client.post("/api/messages", json={
        "from": "alice", "to": "bob", "type": "video", "content": "x"
    })
    assert response.status_code == 400
