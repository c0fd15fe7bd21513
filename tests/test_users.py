import base64
from datetime import datetime

from blogchat.models import Comment, Message, Post, Reply, User


async def test_list_and_get_users(client, signup):
    await signup("bob")
    await signup("alice")

    users = (await client.get("/api/users")).json()["users"]
    assert [u["username"] for u in users] == ["alice", "bob"]
    assert "password" not in users[0]
    assert "email" not in users[0]

    response = await client.get("/api/users/alice")
    assert response.json()["user"]["username"] == "alice"
    assert (await client.get("/api/users/ghost")).status_code == 404


async def test_admin_account_is_always_admin(client, signup):
    await signup("admin")
    user = (await client.get("/api/users/admin")).json()["user"]
    assert user["isAdmin"] is True


async def test_user_image_endpoint(client, signup):
    data = b"avatar-bytes"
    await signup("alice", image="data:image/png;base64," + base64.b64encode(data).decode())

    response = await client.get("/api/users/alice/image")
    assert response.status_code == 200
    assert response.content == data
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == "public, max-age=86400"


async def test_user_image_missing_returns_404(client, signup):
    await signup("alice")
    assert (await client.get("/api/users/alice/image")).status_code == 404
    assert (await client.get("/api/users/ghost/image")).status_code == 404


async def test_update_user_requires_requester(client, signup):
    await signup("alice")
    response = await client.put("/api/users/alice", json={"online": True})
    assert response.status_code == 401


async def test_update_user_forbidden_for_other_user(client, signup):
    await signup("alice")
    await signup("bob")
    response = await client.put("/api/users/alice", json={"online": True}, headers={"X-User": "bob"})
    assert response.status_code == 403


async def test_update_own_profile(client, signup):
    await signup("alice")
    data = b"new-avatar"
    image = base64.b64encode(data).decode()

    response = await client.put(
        "/api/users/alice",
        json={"online": True, "image": image},
        headers={"Authorization": "Bearer alice"},
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["online"] is True
    assert user["image"].startswith("data:")

    stored = await User.find_one({"username": "alice"})
    assert bytes(stored.imageData) == data

    # image rỗng nghĩa là xóa ảnh
    response = await client.put("/api/users/alice", json={"image": ""}, headers={"X-Username": "alice"})
    assert response.json()["user"]["image"] is None


async def test_update_user_rejects_non_boolean_online(client, signup):
    await signup("alice")
    response = await client.put("/api/users/alice", json={"online": "yes"}, headers={"X-User": "alice"})
    assert response.status_code == 400


async def test_rename_onto_existing_username_returns_409(client, signup):
    await signup("alice")
    await signup("bob")
    response = await client.put("/api/users/alice", json={"username": "bob"}, headers={"X-User": "alice"})
    assert response.status_code == 409


async def test_admin_can_update_other_user(client, signup):
    await signup("admin")
    await signup("alice")
    response = await client.put("/api/users/alice", json={"online": True}, headers={"X-User": "admin"})
    assert response.status_code == 200


async def test_only_admin_may_touch_admin_account(client, signup):
    await signup("admin")
    await signup("alice")
    await client.patch("/api/users/alice/admin", json={"isAdmin": True}, headers={"X-User": "admin"})

    response = await client.delete("/api/users/admin", headers={"X-User": "alice"})
    assert response.status_code == 403


async def test_set_admin(client, signup):
    await signup("admin")
    await signup("alice")

    forbidden = await client.patch("/api/users/alice/admin", json={"isAdmin": True}, headers={"X-User": "alice"})
    assert forbidden.status_code == 403

    response = await client.post("/api/users/alice/admin", json={"isAdmin": True}, headers={"X-User": "admin"})
    assert response.status_code == 200
    assert response.json()["user"]["isAdmin"] is True


async def test_update_status_with_jwt(client, signup):
    await signup("alice")
    signin = await client.post("/api/auth/signin", json={"email": "alice@example.com", "password": "secret123"})
    token = signin.json()["access_token"]

    response = await client.patch(
        "/api/users/status", json={"online": True}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "online": True}
    assert (await User.find_one({"username": "alice"})).online is True

    assert (await client.patch("/api/users/status", json={"online": True})).status_code == 401
    bad = await client.patch("/api/users/status", json={"online": "on"}, headers={"Authorization": f"Bearer {token}"})
    assert bad.status_code == 400


async def test_delete_user_cascades(client, signup):
    await signup("alice")
    await signup("bob")

    alice_post = await Post(title="A", content="c", author="alice").insert()
    bob_post = await Post(title="B", content="c", author="bob").insert()
    await Comment(postId=alice_post.id, author="bob", text="on alice post").insert()
    await Comment(postId=bob_post.id, author="alice", text="by alice").insert()
    kept = await Comment(
        postId=bob_post.id,
        author="bob",
        text="kept",
        replies=[Reply(author="alice", text="reply"), Reply(author="bob", text="mine")],
    ).insert()
    await Message(sender="alice", to="bob", type="text", content="hi", createdAt=datetime(2024, 1, 1)).insert()
    await Message(sender="bob", to="alice", type="text", content="yo").insert()
    await Message(sender="bob", to="carol", type="text", content="other").insert()

    response = await client.delete("/api/users/alice", headers={"X-User": "alice"})
    assert response.json() == {"success": True}

    assert await User.find_one({"username": "alice"}) is None
    assert [p.title for p in await Post.find({}).to_list()] == ["B"]
    comments = await Comment.find({}).to_list()
    assert [c.text for c in comments] == ["kept"]
    assert [r.author for r in comments[0].replies] == ["bob"]
    assert comments[0].id == kept.id
    assert [m.content for m in await Message.find({}).to_list()] == ["other"]
