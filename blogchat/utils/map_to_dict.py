from datetime import datetime
from ..configs import ADMIN_USERNAME
from ..models import Comment, Message, Post, User
from ..schemas import (
    CommentPublic,
    MessagePublic,
    ParticipantPublic,
    PostPublic,
    ReplyPublic,
    UserPublic
)
from .image import encode_image_to_data_url

# Các hàm trợ giúp để chuyển đổi các đối tượng mô hình thành schema công khai / từ điển để phát sóng

def _iso(value: datetime) -> str:
    return value.isoformat() if value else ""

def _image_of(doc) -> str | None:
    """Ưu tiên dữ liệu nhị phân (trả về data URL), sau đó tới trường 'image'."""
    if doc.imageData:
        return encode_image_to_data_url(doc.imageData, doc.imageContentType)
    return doc.image or None

def map_user_to_public(user: User) -> UserPublic:
    return UserPublic(
        username=user.username,
        image=_image_of(user),
        friends=user.friends or [],
        online=bool(user.online),
        isAdmin=bool(user.isAdmin) or user.username == ADMIN_USERNAME
    )

def map_user_to_participant(user: User) -> ParticipantPublic:
    return ParticipantPublic(username=user.username, image=_image_of(user), online=bool(user.online))

def map_post_to_public(post: Post) -> PostPublic:
    return PostPublic(
        id=str(post.id),
        title=post.title,
        content=post.content,
        image=_image_of(post),
        imageEdits=post.imageEdits,
        author=post.author,
        likes=post.likes,
        dislikes=post.dislikes,
        likedBy=post.likedBy,
        dislikedBy=post.dislikedBy,
        createdAt=_iso(post.createdAt),
        updatedAt=_iso(post.updatedAt)
    )

def map_comment_to_public(comment: Comment) -> CommentPublic:
    return CommentPublic(
        id=str(comment.id),
        postId=str(comment.postId),
        author=comment.author,
        text=comment.text,
        likes=comment.likes,
        dislikes=comment.dislikes,
        likedBy=comment.likedBy,
        dislikedBy=comment.dislikedBy,
        replies=[
            ReplyPublic(
                author=reply.author,
                text=reply.text,
                createdAt=_iso(reply.createdAt),
                updatedAt=_iso(reply.updatedAt)
            ) for reply in comment.replies
        ],
        createdAt=_iso(comment.createdAt),
        updatedAt=_iso(comment.updatedAt)
    )

def map_message_to_public(msg: Message) -> MessagePublic:
    return MessagePublic(
        id=str(msg.id),
        sender=msg.sender,
        to=msg.to,
        type=msg.type,
        content=msg.content,
        fileName=msg.fileName,
        createdAt=_iso(msg.createdAt)
    )

def map_message_to_public_dict(msg: Message, client_message_id: str | None = None) -> dict:
    """Chuyển đổi Message thành từ điển JSON (khóa 'from') để gửi qua WebSocket."""
    data = map_message_to_public(msg).model_dump(by_alias=True)
    if client_message_id:
        data["clientMessageId"] = client_message_id
    return data
