from beanie import Document
from pydantic import ConfigDict, Field
from pymongo import ASCENDING, DESCENDING, IndexModel
from typing import Literal, Optional
from datetime import datetime

MessageType = Literal["text", "image", "file"]

class Message(Document):
    """
    Đại diện cho một tin nhắn trực tiếp giữa hai người dùng.
    Trường 'from' là từ khóa Python nên được ánh xạ sang thuộc tính 'sender'.
    """
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from", description="Username người gửi.")
    to: str = Field(..., description="Username người nhận.")
    type: MessageType = Field(..., description="Loại tin nhắn: text, image hoặc file.")
    content: str = Field(..., description="Nội dung văn bản hoặc payload base64/URL.")
    fileName: Optional[str] = Field(default=None, description="Tên file gốc (nếu có).")
    createdAt: datetime = Field(default_factory=datetime.utcnow, description="Thời điểm tin nhắn được gửi.")

    class Settings:
        name = "messages"
        indexes = [
            IndexModel([("from", ASCENDING), ("to", ASCENDING), ("createdAt", DESCENDING)]),
        ]
