from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel

class Emoji(Document):
    """Dữ liệu tham chiếu tĩnh cho bảng chọn emoji."""
    shortcode: str = Field(..., description="Mã ngắn, ví dụ ':smile:'.")
    unicode: str = Field(..., description="Ký tự emoji.")
    category: str = Field(default="general")
    sortOrder: int = Field(default=0)
    hasSkinTones: bool = Field(default=False)

    class Settings:
        name = "emojis"
        indexes = [
            IndexModel([("shortcode", ASCENDING)], unique=True),
            IndexModel([("category", ASCENDING), ("sortOrder", ASCENDING)]),
        ]
