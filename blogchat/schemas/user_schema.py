from pydantic import BaseModel, Field, StrictBool
from typing import List, Optional

class UserPublic(BaseModel):
    username: str
    image: Optional[str] = None
    friends: List[str] = []
    online: bool = False
    isAdmin: bool = False

class UserResponse(BaseModel):
    user: UserPublic

class UsersResponse(BaseModel):
    users: List[UserPublic]

class UserUpdate(BaseModel):
    """
    Các trường được phép cập nhật. 'image' = None hoặc "" nghĩa là xóa ảnh;
    trường không gửi lên thì giữ nguyên (dựa vào model_fields_set).
    """
    username: Optional[str] = Field(default=None, min_length=1)
    online: Optional[StrictBool] = None
    image: Optional[str] = None

class StatusUpdate(BaseModel):
    online: StrictBool

class StatusResponse(BaseModel):
    success: bool = True
    online: bool

class AdminUpdate(BaseModel):
    isAdmin: StrictBool

class SuccessResponse(BaseModel):
    success: bool = True
