from beanie import Document
from pydantic import Field, BaseModel
from pymongo import ASCENDING, DESCENDING, IndexModel
from typing import Optional, List
from datetime import datetime

class ImageEdits(BaseModel):
    """Các thông số chỉnh ảnh phía client, lưu kèm bài đăng."""
    brightness: float = 100
    contrast: float = 102
    saturation: float = 110
    grayscale: float = 0
    rotation: float = 0
    hue: float = 0
    blur: float = 0
    sepia: float = 0

class Post(Document):
    """
    Đại diện cho một bài đăng trong collection 'posts'.
    """
    title: str = Field(..., description="Tiêu đề bài đăng.")
    content: str = Field(..., description="Nội dung văn bản của bài đăng.")
    image: Optional[str] = Field(default=None, description="URL ảnh hoặc data URL base64.")
    imageData: Optional[bytes] = Field(default=None, description="Dữ liệu nhị phân của ảnh.")
    imageContentType: Optional[str] = Field(default=None, description="MIME type của ảnh.")
    imageEdits: Optional[ImageEdits] = Field(default=None, description="Thông số chỉnh ảnh.")
    author: str = Field(..., description="Username của tác giả (lưu theo giá trị).")

    likes: int = Field(default=0, description="Số lượt thích.")
    dislikes: int = Field(default=0, description="Số lượt không thích.")
    likedBy: List[str] = Field(default_factory=list, description="Tập username đã thích.")
    dislikedBy: List[str] = Field(default_factory=list, description="Tập username đã không thích.")

    createdAt: datetime = Field(default_factory=datetime.utcnow, description="Thời điểm bài đăng được tạo.")
    updatedAt: datetime = Field(default_factory=datetime.utcnow, description="Thời điểm cập nhật gần nhất.")

    class Settings:
        name = "posts"
        indexes = [
            IndexModel([("author", ASCENDING), ("createdAt", DESCENDING)]),
            IndexModel([("createdAt", DESCENDING)]),
        ]
