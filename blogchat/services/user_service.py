import asyncio
import logging
from typing import Optional
from ..configs import ADMIN_USERNAME, MAX_IMAGE_BYTES
from ..models import User, Post, Comment, Message
from ..websocket import manager, run_in_background
from ..utils import extract_image_payload, encode_image_to_data_url, decode_data_url
from .errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_LIMIT = 50
MAX_DIRECTORY_LIMIT = 200

class UserService:

    @staticmethod
    async def is_admin(username: Optional[str]) -> bool:
        """Tài khoản ADMIN_USERNAME luôn là admin; các tài khoản khác dựa vào cờ isAdmin."""
        if not username:
            return False
        if username == ADMIN_USERNAME:
            return True
        user = await User.find_one({"username": username})
        return bool(user and user.isAdmin)

    @staticmethod
    async def ensure_can_manage(requester: str, target: str):
        """
        Requester phải là chính chủ hoặc admin.
        Riêng tài khoản admin chỉ admin mới được sửa / xóa.
        """
        if target == ADMIN_USERNAME and requester != ADMIN_USERNAME:
            raise PermissionError("Bạn không có quyền thao tác trên tài khoản này.")
        if requester != target and not await UserService.is_admin(requester):
            raise PermissionError("Bạn không có quyền thao tác trên tài khoản này.")

    @staticmethod
    async def list_users():
        """Lấy tất cả người dùng, sắp xếp theo username."""
        return await User.find({}, sort="username").to_list()

    @staticmethod
    async def get_user(username: str):
        return await User.find_one({"username": username})

    @staticmethod
    async def get_user_image(username: str):
        """
        Trả về (bytes, content_type) của ảnh đại diện.
        Ưu tiên dữ liệu nhị phân, sau đó giải mã data URL lưu trong 'image'.
        Ném ValueError nếu không có người dùng hoặc không có ảnh.
        """
        user = await User.find_one({"username": username})
        if not user:
            raise ValueError("Không tìm thấy người dùng.")

        if user.imageData:
            return user.imageData, user.imageContentType or "application/octet-stream"

        decoded = decode_data_url(user.image)
        if decoded:
            return decoded

        raise ValueError("Không tìm thấy ảnh.")

    @staticmethod
    async def update_user(target: str, requester: str, changes: dict):
        """
        Cập nhật hồ sơ: username, online, image.
        'changes' chỉ chứa các trường client thực sự gửi lên.
        """
        await UserService.ensure_can_manage(requester, target)

        user = await User.find_one({"username": target})
        if not user:
            raise NotFoundError("Không tìm thấy người dùng.")

        image_payload = extract_image_payload(changes.get("image"), provided="image" in changes)
        if image_payload and image_payload.error == "too_large":
            raise ValueError(f"Ảnh đại diện phải nhỏ hơn hoặc bằng {MAX_IMAGE_BYTES // (1024 * 1024)}MB.")
        if image_payload and image_payload.error == "invalid":
            raise ValueError("Dữ liệu ảnh đại diện không hợp lệ.")

        new_username = changes.get("username")
        if new_username and new_username != target:
            if await User.find_one({"username": new_username}):
                raise ConflictError("Tên người dùng đã tồn tại.")
            user.username = new_username

        previous_online = user.online
        if changes.get("online") is not None:
            user.online = changes["online"]

        if image_payload:
            if image_payload.remove:
                user.image = None
                user.imageData = None
                user.imageContentType = None
            elif image_payload.data:
                user.image = encode_image_to_data_url(image_payload.data, image_payload.content_type)
                user.imageData = image_payload.data
                user.imageContentType = image_payload.content_type

        await user.save()

        if user.online != previous_online:
            UserService._broadcast_presence(user.username, user.online)

        return user

    @staticmethod
    async def set_status(user_id: str, online: bool):
        """Cập nhật trạng thái online cho người dùng đã xác thực bằng JWT."""
        user = await User.get(user_id)
        if not user:
            raise ValueError("Không tìm thấy người dùng.")

        user.online = online
        await user.save()
        UserService._broadcast_presence(user.username, online)
        return user

    @staticmethod
    async def set_admin(target: str, requester: str, is_admin: bool):
        """Bật / tắt quyền admin. Tài khoản ADMIN_USERNAME luôn giữ quyền admin."""
        if not await UserService.is_admin(requester):
            raise PermissionError("Bạn không có quyền quản trị.")

        user = await User.find_one({"username": target})
        if not user:
            raise ValueError("Không tìm thấy người dùng.")

        user.isAdmin = True if target == ADMIN_USERNAME else is_admin
        await user.save()
        return user

    @staticmethod
    async def delete_user(target: str, requester: str):
        """
        Xóa tài khoản và dữ liệu liên quan (best-effort, không dùng transaction):
        bài đăng, bình luận của người dùng hoặc trên bài đăng của họ,
        tin nhắn gửi / nhận, và các reply của họ trong bình luận khác.
        """
        await UserService.ensure_can_manage(requester, target)

        post_ids = [post.id for post in await Post.find({"author": target}).to_list()]
        comment_query = (
            {"$or": [{"author": target}, {"postId": {"$in": post_ids}}]}
            if post_ids else {"author": target}
        )

        await asyncio.gather(
            User.find({"username": target}).delete(),
            Message.find({"$or": [{"from": target}, {"to": target}]}).delete(),
            Post.find({"author": target}).delete(),
            Comment.find(comment_query).delete(),
            Comment.find({"replies.author": target}).update(
                {"$pull": {"replies": {"author": target}}}
            ),
        )
        logger.info("Deleted user %s and related content", target)
        return {"success": True}

    @staticmethod
    async def add_friend(username: str, friend: str):
        """
        Kết bạn hai chiều: cập nhật danh sách bạn của cả hai người trong cùng một request.
        Mỗi phía được kiểm tra trước để không thêm trùng.
        """
        if username == friend:
            raise ValueError("Không thể tự kết bạn với chính mình.")

        user, other = await asyncio.gather(
            User.find_one({"username": username}),
            User.find_one({"username": friend}),
        )
        if not user or not other:
            raise NotFoundError("Không tìm thấy người dùng.")

        if friend not in user.friends:
            await user.update({"$addToSet": {"friends": friend}})
        if username not in other.friends:
            await other.update({"$addToSet": {"friends": username}})

        return {"success": True}

    @staticmethod
    async def get_friends(username: str):
        user = await User.find_one({"username": username})
        if not user:
            raise NotFoundError("Không tìm thấy người dùng.")
        return user.friends

    @staticmethod
    async def get_friend_directory(username: str, limit: Optional[int] = None, cursor: Optional[str] = None):
        """
        Danh bạ bạn bè có phân trang theo username.
        Trả về (viewer, friends, total, next_cursor).
        """
        viewer = await User.find_one({"username": username})
        if not viewer:
            raise NotFoundError("Không tìm thấy người dùng.")

        page_size = min(limit, MAX_DIRECTORY_LIMIT) if limit and limit > 0 else DEFAULT_DIRECTORY_LIMIT
        names = sorted(set(viewer.friends))
        remaining = [name for name in names if cursor is None or name > cursor]
        page = remaining[:page_size]

        friends = await User.find({"username": {"$in": page}}, sort="username").to_list() if page else []
        next_cursor = page[-1] if len(remaining) > page_size else None

        return viewer, friends, len(names), next_cursor

    @staticmethod
    def _broadcast_presence(username: str, online: bool):
        event = "user-online" if online else "user-offline"
        run_in_background(manager.broadcast_all(event, username))
