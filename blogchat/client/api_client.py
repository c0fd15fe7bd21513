import logging
import re
from typing import Any, Dict, Iterable, Optional
import httpx
from ..configs import API_BASE_URL

logger = logging.getLogger(__name__)

ABSOLUTE_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


class ApiClient:
    """Lớp bọc httpx.AsyncClient cho REST API của BlogChat. Mã trạng thái khác 2xx ném httpx.HTTPStatusError."""

    def __init__(self, base_url: str = API_BASE_URL, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def resolve_url(self, path: str) -> str:
        if ABSOLUTE_URL_PATTERN.match(path):
            return path
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"

    async def request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._client.request(method, self.resolve_url(path), **kwargs)
        response.raise_for_status()
        return response.json() if response.content else None

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # Auth
    async def signup(self, username: str, email: str, password: str, image: Optional[str] = None):
        return await self.request("POST", "/api/auth/signup", json={
            "username": username, "email": email, "password": password, "image": image
        })

    async def signin(self, email: str, password: str):
        return await self.request("POST", "/api/auth/signin", json={"email": email, "password": password})

    # Users
    async def list_users(self):
        return await self.get("/api/users")

    async def get_user(self, username: str):
        return await self.get(f"/api/users/{username}")

    async def update_user(self, username: str, requester: str, **changes):
        return await self.request("PUT", f"/api/users/{username}", json=changes, headers={"X-User": requester})

    async def delete_user(self, username: str, requester: str):
        return await self.request("DELETE", f"/api/users/{username}", headers={"X-User": requester})

    async def set_admin(self, username: str, requester: str, is_admin: bool):
        return await self.request("PATCH", f"/api/users/{username}/admin",
                                  json={"isAdmin": is_admin}, headers={"X-User": requester})

    async def set_status(self, access_token: str, online: bool):
        return await self.request("PATCH", "/api/users/status", json={"online": online},
                                  headers={"Authorization": f"Bearer {access_token}"})

    # Posts
    async def get_posts(self, author: Optional[str] = None, limit: Optional[int] = None, skip: Optional[int] = None):
        params = {k: v for k, v in {"author": author, "limit": limit, "skip": skip}.items() if v is not None}
        return await self.get("/api/posts", params=params)

    async def get_post(self, post_id: str):
        return await self.get(f"/api/posts/{post_id}")

    async def create_post(self, title: str, content: str, author: str,
                          image: Optional[str] = None, image_edits: Optional[dict] = None):
        return await self.request("POST", "/api/posts", json={
            "title": title, "content": content, "author": author, "image": image, "imageEdits": image_edits
        })

    async def react_to_post(self, post_id: str, action: str, username: str):
        return await self.request("PATCH", f"/api/posts/{post_id}", json={"action": action, "username": username})

    async def delete_post(self, post_id: str):
        return await self.request("DELETE", f"/api/posts/{post_id}")

    # Comments
    async def get_comments(self, post_id: str):
        return await self.get("/api/comments", params={"postId": post_id})

    async def create_comment(self, post_id: str, author: str, text: str):
        return await self.request("POST", "/api/comments", json={"postId": post_id, "author": author, "text": text})

    async def add_reply(self, comment_id: str, author: str, text: str):
        return await self.request("POST", f"/api/comments/{comment_id}", json={"author": author, "text": text})

    async def react_to_comment(self, comment_id: str, action: str, username: str):
        return await self.request("PATCH", f"/api/comments/{comment_id}", json={"action": action, "username": username})

    # Messages
    async def get_conversation(self, user1: str, user2: str, limit: Optional[int] = None,
                               before: Optional[str] = None):
        params = {"user1": user1, "user2": user2}
        if limit is not None:
            params["limit"] = limit
        if before:
            params["before"] = before
        return await self.get("/api/messages", params=params)

    async def get_latest_messages(self, user: str, targets: Iterable[str]):
        return await self.get("/api/messages/latest", params={"user": user, "targets": ",".join(targets)})

    async def send_message(self, sender: str, to: str, content: str, type: str = "text",
                           file_name: Optional[str] = None):
        return await self.request("POST", "/api/messages", json={
            "from": sender, "to": to, "type": type, "content": content, "fileName": file_name
        })

    async def update_message(self, message_id: str, content: str):
        return await self.request("PUT", f"/api/messages/{message_id}", json={"content": content})

    async def delete_message(self, message_id: str):
        return await self.request("DELETE", f"/api/messages/{message_id}")

    # Friends
    async def add_friend(self, user: str, friend: str):
        return await self.request("POST", "/api/friends", json={"user": user, "friend": friend})

    async def get_friends(self, username: str):
        return await self.get("/api/friends", params={"username": username})

    async def get_friend_directory(self, username: str, limit: Optional[int] = None, cursor: Optional[str] = None):
        params = {"username": username}
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        return await self.get("/api/friends/directory", params=params)

    # Uploads
    async def upload_file(self, name: str, data: bytes, content_type: str = "application/octet-stream"):
        return await self.request("POST", "/uploads", files={"file": (name, data, content_type)})
