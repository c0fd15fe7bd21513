import logging
from typing import Optional
from ..models import Post, Comment
from ..websocket import manager, run_in_background
from ..utils import extract_image_payload, encode_image_to_data_url, parse_object_id, map_post_to_public
from ..configs import MAX_IMAGE_BYTES
from .reactions import apply_reaction

logger = logging.getLogger(__name__)

MAX_POSTS_LIMIT = 100

class PostService:

    @staticmethod
    async def create_post(title: str, content: str, author: str,
                          image: Optional[str] = None, image_edits=None):
        """
        Tạo một bài đăng mới.
        Ảnh base64 (nếu có) được giải mã, lưu nhị phân kèm data URL, giới hạn 5MB.
        """
        image_payload = extract_image_payload(image, provided=image is not None)
        if image_payload and image_payload.error == "too_large":
            raise ValueError(f"Ảnh phải nhỏ hơn hoặc bằng {MAX_IMAGE_BYTES // (1024 * 1024)}MB.")
        if image_payload and image_payload.error == "invalid":
            raise ValueError("Dữ liệu ảnh không hợp lệ.")

        new_post = Post(title=title, content=content, author=author, imageEdits=image_edits)
        if image_payload and image_payload.data:
            new_post.imageData = image_payload.data
            new_post.imageContentType = image_payload.content_type
            new_post.image = encode_image_to_data_url(image_payload.data, image_payload.content_type)

        await new_post.insert()

        # Phát sự kiện real-time cho mọi kết nối (chạy nền không block)
        payload = {"post": map_post_to_public(new_post).model_dump()}
        run_in_background(manager.broadcast_all("post-created", payload))

        return new_post

    @staticmethod
    async def get_posts(author: Optional[str] = None, limit: Optional[int] = None, skip: Optional[int] = None):
        """
        Lấy danh sách bài đăng mới nhất trước, lọc theo tác giả nếu có.
        limit bị chặn tối đa 100; giá trị <= 0 bị bỏ qua.
        """
        query = {"author": author} if author else {}
        bounded_limit = min(limit, MAX_POSTS_LIMIT) if limit and limit > 0 else None
        bounded_skip = skip if skip and skip > 0 else None

        return await Post.find(
            query,
            sort="-createdAt",
            skip=bounded_skip,
            limit=bounded_limit
        ).to_list()

    @staticmethod
    async def get_post(post_id: str):
        object_id = parse_object_id(post_id)
        if object_id is None:
            return None
        return await Post.get(object_id)

    @staticmethod
    async def react_to_post(post_id: str, action: str, username: str):
        """
        Thích / không thích một bài đăng.
        Lặp lại cùng action là no-op. Reaction ngược chiều không bị thu hồi
        (giữ nguyên hành vi hiện có).
        """
        object_id = parse_object_id(post_id)
        post = await apply_reaction(Post, object_id, action, username) if object_id else None
        if not post:
            raise ValueError("Không tìm thấy bài đăng.")
        return post

    @staticmethod
    async def delete_post(post_id: str):
        """
        Xóa một bài đăng cùng toàn bộ bình luận của nó (cascade, không dùng transaction).
        """
        post = await PostService.get_post(post_id)
        if not post:
            raise ValueError("Không tìm thấy bài đăng.")

        await Comment.find({"postId": post.id}).delete()
        await post.delete()

        run_in_background(manager.broadcast_all("post-deleted", {"postId": str(post.id)}))
        return {"success": True}

