import asyncio
import logging
import uuid
from datetime import datetime
from typing import Optional
from urllib.parse import quote
import httpx
from .api_client import ApiClient
from .cache import ApiCache, CacheResult, DEFAULT_STALE_TIME
from .optimistic import OptimisticMutation

logger = logging.getLogger(__name__)

POSTS_URL = "/api/posts"
USERS_URL = "/api/users"

# action -> (trường đếm, danh sách username)
REACTION_FIELDS = {
    "like": ("likes", "likedBy"),
    "dislike": ("dislikes", "dislikedBy"),
}


def comments_url(post_id: str) -> str:
    return f"/api/comments?postId={quote(post_id)}"


def directory_url(username: str) -> str:
    return f"/api/friends/directory?username={quote(username)}"


def _posts_of(payload):
    return (payload or {}).get("posts") or []


def _users_of(payload):
    return (payload or {}).get("users") or []


def _comments_of(payload):
    return (payload or {}).get("comments") or []


def _with_reaction(item: dict, action: str, username: str, exclusive: bool = False) -> dict:
    """Bản sao của post/comment với reaction của 'username'; lặp lại cùng reaction thì giữ nguyên."""
    counter, members = REACTION_FIELDS[action]
    reacted = item.get("likedBy", []) + item.get("dislikedBy", []) if exclusive else item.get(members, [])
    if username in reacted:
        return item
    return {**item, counter: item.get(counter, 0) + 1, members: item.get(members, []) + [username]}


def _replace_by_id(items, item_id: str, update):
    if items is None:
        return None
    return [update(item) if item.get("id") == item_id else item for item in items]


class BlogChatClient:
    """
    Client bất đồng bộ cho giao diện BlogChat: đọc qua ApiCache, ghi bằng cập nhật lạc quan.
    """

    def __init__(self, api: Optional[ApiClient] = None, cache: Optional[ApiCache] = None,
                 stale_time: float = DEFAULT_STALE_TIME):
        self.api = api or ApiClient()
        self.cache = cache or ApiCache(self.api.get, stale_time=stale_time)

    async def aclose(self):
        await self.api.aclose()

    # Đọc dữ liệu qua cache
    async def posts(self) -> CacheResult:
        return await self.cache.get(POSTS_URL, fallback=[], transform=_posts_of)

    async def users(self) -> CacheResult:
        return await self.cache.get(USERS_URL, fallback=[], transform=_users_of)

    async def comments(self, post_id: str) -> CacheResult:
        return await self.cache.get(comments_url(post_id), fallback=[], transform=_comments_of)

    async def friend_directory(self, username: str) -> CacheResult:
        return await self.cache.get(directory_url(username))

    async def warm_home(self):
        """Tải trước người dùng và bài đăng (ví dụ ngay sau khi đăng nhập)."""
        return await asyncio.gather(
            self.cache.prefetch(USERS_URL, fallback=[], transform=_users_of),
            self.cache.prefetch(POSTS_URL, fallback=[], transform=_posts_of),
        )

    # Cập nhật lạc quan
    async def like_post(self, post_id: str, username: str):
        return await self._react_to_post(post_id, "like", username)

    async def dislike_post(self, post_id: str, username: str):
        return await self._react_to_post(post_id, "dislike", username)

    async def _react_to_post(self, post_id: str, action: str, username: str):
        def reconcile(posts, response):
            counts = response["post"]
            return _replace_by_id(posts, post_id, lambda post: {
                **post, "likes": counts["likes"], "dislikes": counts["dislikes"]
            })

        return await OptimisticMutation(
            self.cache,
            POSTS_URL,
            apply=lambda posts: _replace_by_id(posts, post_id, lambda post: _with_reaction(post, action, username)),
            request=lambda: self.api.react_to_post(post_id, action, username),
            reconcile=reconcile,
        ).run()

    async def like_comment(self, post_id: str, comment_id: str, username: str):
        """Thích một bình luận. Mỗi người chỉ có một reaction trên một bình luận."""
        def reconcile(comments, response):
            counts = response["comment"]
            return _replace_by_id(comments, comment_id, lambda comment: {
                **comment, "likes": counts["likes"], "dislikes": counts["dislikes"]
            })

        return await OptimisticMutation(
            self.cache,
            comments_url(post_id),
            apply=lambda comments: _replace_by_id(
                comments, comment_id, lambda comment: _with_reaction(comment, "like", username, exclusive=True)
            ),
            request=lambda: self.api.react_to_comment(comment_id, "like", username),
            reconcile=reconcile,
        ).run()

    async def add_comment(self, post_id: str, author: str, text: str):
        now = datetime.utcnow().isoformat()
        placeholder = {
            "id": f"temp-{uuid.uuid4().hex}",
            "postId": post_id,
            "author": author,
            "text": text.strip(),
            "likes": 0,
            "dislikes": 0,
            "likedBy": [],
            "dislikedBy": [],
            "replies": [],
            "createdAt": now,
            "updatedAt": now,
        }

        def reconcile(comments, response):
            # Thay bình luận tạm bằng bản ghi thật từ server
            return _replace_by_id(comments, placeholder["id"], lambda _: response["comment"])

        return await OptimisticMutation(
            self.cache,
            comments_url(post_id),
            apply=lambda comments: (comments or []) + [placeholder],
            request=lambda: self.api.create_comment(post_id, author, text),
            reconcile=reconcile,
        ).run()

    async def add_reply(self, post_id: str, comment_id: str, author: str, text: str):
        now = datetime.utcnow().isoformat()
        reply = {"author": author, "text": text, "createdAt": now, "updatedAt": now}

        return await OptimisticMutation(
            self.cache,
            comments_url(post_id),
            apply=lambda comments: _replace_by_id(comments, comment_id, lambda comment: {
                **comment, "replies": comment.get("replies", []) + [reply]
            }),
            request=lambda: self.api.add_reply(comment_id, author, text),
            reconcile=lambda comments, response: _replace_by_id(comments, comment_id, lambda _: response["comment"]),
        ).run()

    async def add_friend(self, username: str, friend: str):
        def apply(directory):
            if directory is None:
                return None
            friends = directory.get("friends") or []
            if any(item.get("username") == friend for item in friends):
                return directory
            profile = {"username": friend, "image": None, "friends": [username], "online": False, "isAdmin": False}
            return {
                **directory,
                "friends": sorted(friends + [profile], key=lambda item: item["username"]),
                "total": directory.get("total", len(friends)) + 1,
            }

        return await OptimisticMutation(
            self.cache,
            directory_url(username),
            apply=apply,
            request=lambda: self.api.add_friend(username, friend),
        ).run()

    async def poll_conversation(self, user1: str, user2: str, interval: float = 3.0, limit: Optional[int] = None):
        """
        Thăm dò hội thoại giữa hai người dùng mỗi 'interval' giây, trả về từng payload mới.
        Lỗi được ghi log và việc thăm dò vẫn tiếp tục.
        """
        while True:
            try:
                yield await self.api.get_conversation(user1, user2, limit=limit)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("Polling conversation %s/%s failed: %s", user1, user2, e)
            await asyncio.sleep(interval)
