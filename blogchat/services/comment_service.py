from datetime import datetime
from ..models import Comment, Post, Reply
from ..utils import parse_object_id
from .reactions import apply_reaction

class CommentService:

    @staticmethod
    async def create_comment(post_id: str, author: str, text: str):
        """
        Tạo một bình luận mới cho bài đăng.
        """
        object_id = parse_object_id(post_id)
        if object_id is None:
            raise ValueError("ID bài đăng không hợp lệ.")

        # Kiểm tra bài đăng có tồn tại không
        if not await Post.get(object_id):
            raise ValueError("Không tìm thấy bài đăng.")

        new_comment = Comment(postId=object_id, author=author, text=text.strip())
        await new_comment.insert()
        return new_comment

    @staticmethod
    async def get_comments_by_post(post_id: str):
        """
        Lấy danh sách bình luận của một bài đăng, cũ nhất trước.
        """
        object_id = parse_object_id(post_id)
        if object_id is None:
            return []
        return await Comment.find({"postId": object_id}, sort="createdAt").to_list()

    @staticmethod
    async def add_reply(comment_id: str, author: str, text: str):
        """
        Thêm một phản hồi (reply) vào cuối bình luận bằng $push.
        """
        object_id = parse_object_id(comment_id)
        if object_id is None:
            raise ValueError("Không tìm thấy bình luận.")

        reply = Reply(author=author, text=text)
        await Comment.find_one({"_id": object_id}).update({
            "$push": {"replies": reply.model_dump()},
            "$set": {"updatedAt": datetime.utcnow()},
        })
        comment = await Comment.get(object_id)
        if not comment:
            raise ValueError("Không tìm thấy bình luận.")
        return comment

    @staticmethod
    async def react_to_comment(comment_id: str, action: str, username: str):
        """
        Thích / không thích một bình luận.
        Mỗi người dùng chỉ có một reaction trên một bình luận: đã like hoặc dislike thì bỏ qua.
        """
        object_id = parse_object_id(comment_id)
        comment = await apply_reaction(Comment, object_id, action, username, exclusive=True) if object_id else None
        if not comment:
            raise ValueError("Không tìm thấy bình luận.")
        return comment
