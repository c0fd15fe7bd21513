from beanie import Document, PydanticObjectId
from pydantic import Field, BaseModel
from pymongo import ASCENDING, IndexModel
from typing import List
from datetime import datetime

class Reply(BaseModel):
    """Phản hồi phẳng bên trong một bình luận, không có reaction riêng."""
    author: str
    text: str
    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

class Comment(Document):
    """
    Đại diện cho một bình luận trong collection 'comments'.
    """
    postId: PydanticObjectId = Field(..., description="ID của bài đăng mà bình luận thuộc về.")
    author: str = Field(..., description="Username của tác giả bình luận.")
    text: str = Field(..., description="Nội dung bình luận.")
    likes: int = Field(default=0)
    dislikes: int = Field(default=0)
    likedBy: List[str] = Field(default_factory=list)
    dislikedBy: List[str] = Field(default_factory=list)
    replies: List[Reply] = Field(default_factory=list, description="Danh sách phản hồi.")
    createdAt: datetime = Field(default_factory=datetime.utcnow, description="Thời điểm bình luận được tạo.")
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "comments"
        indexes = [
            IndexModel([("postId", ASCENDING), ("createdAt", ASCENDING)]),
        ]
