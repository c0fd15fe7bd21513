from datetime import datetime

from beanie import PydanticObjectId

from blogchat.models import Comment


async def create_post(client):
    response = await client.post("/api/posts", json={"title": "T", "content": "c", "author": "alice"})
    return response.json()["post"]["id"]


async def create_comment(client, post_id, author="bob", text="  nice post  "):
    response = await client.post("/api/comments", json={"postId": post_id, "author": author, "text": text})
    assert response.status_code == 201, response.text
    return response.json()["comment"]


async def test_create_and_list_comments(client):
    post_id = await create_post(client)
    await Comment(postId=PydanticObjectId(post_id), author="carol", text="second",
                  createdAt=datetime(2030, 1, 1)).insert()
    comment = await create_comment(client, post_id)

    assert comment["text"] == "nice post"
    assert comment["postId"] == post_id
    assert comment["replies"] == []

    response = await client.get("/api/comments", params={"postId": post_id})
    assert [c["text"] for c in response.json()["comments"]] == ["nice post", "second"]


async def test_list_comments_requires_post_id(client):
    assert (await client.get("/api/comments")).status_code == 400


async def test_create_comment_for_missing_post_returns_400(client):
    response = await client.post("/api/comments", json={
        "postId": "64b7f0c2a1b2c3d4e5f60718", "author": "bob", "text": "hi"
    })
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Failed to create comment")


async def test_create_comment_blank_text_returns_400(client):
    post_id = await create_post(client)
    response = await client.post("/api/comments", json={"postId": post_id, "author": "bob", "text": "   "})
    assert response.status_code == 400


async def test_reply_is_appended(client):
    post_id = await create_post(client)
    comment = await create_comment(client, post_id)

    await client.post(f"/api/comments/{comment['id']}", json={"author": "alice", "text": "thanks"})
    response = await client.post(f"/api/comments/{comment['id']}", json={"author": "bob", "text": "welcome"})

    assert response.status_code == 200
    replies = response.json()["comment"]["replies"]
    assert [(r["author"], r["text"]) for r in replies] == [("alice", "thanks"), ("bob", "welcome")]


async def test_reply_to_missing_comment_returns_404(client):
    response = await client.post("/api/comments/64b7f0c2a1b2c3d4e5f60718", json={"author": "a", "text": "b"})
    assert response.status_code == 404


async def test_comment_reaction_is_exclusive_per_user(client):
    post_id = await create_post(client)
    comment = await create_comment(client, post_id)
    url = f"/api/comments/{comment['id']}"

    await client.patch(url, json={"action": "like", "username": "alice"})
    await client.patch(url, json={"action": "like", "username": "alice"})
    response = await client.patch(url, json={"action": "dislike", "username": "alice"})

    assert response.json()["comment"] == {"id": comment["id"], "likes": 1, "dislikes": 0}
