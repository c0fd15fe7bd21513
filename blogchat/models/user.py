from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from typing import Optional, List
from datetime import datetime

class User(Document):
    """
    Đại diện cho một người dùng trong collection 'users'.
    """
    username: str = Field(..., description="Tên đăng nhập duy nhất của người dùng.")
    email: str = Field(..., description="Địa chỉ email duy nhất (đã chuẩn hóa chữ thường).")
    password: str = Field(..., description="Mật khẩu đã được băm bằng bcrypt.")

    image: Optional[str] = Field(default=None, description="URL ảnh đại diện hoặc data URL base64.")
    imageData: Optional[bytes] = Field(default=None, description="Dữ liệu nhị phân của ảnh đại diện.")
    imageContentType: Optional[str] = Field(default=None, description="MIME type của ảnh đại diện.")

    friends: List[str] = Field(default_factory=list, description="Danh sách username của bạn bè.")
    online: bool = Field(default=False, description="Trạng thái trực tuyến do client tự báo.")
    isAdmin: bool = Field(default=False, description="Quyền quản trị.")
    createdAt: datetime = Field(default_factory=datetime.utcnow, description="Thời điểm người dùng được tạo.")

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("username", ASCENDING)], unique=True),
            IndexModel([("email", ASCENDING)], unique=True),
            IndexModel([("online", ASCENDING), ("username", ASCENDING)]),
        ]
