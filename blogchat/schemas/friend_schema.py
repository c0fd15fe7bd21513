from pydantic import BaseModel, Field
from typing import List, Optional
from .user_schema import UserPublic

class FriendAdd(BaseModel):
    user: str = Field(..., min_length=1)
    friend: str = Field(..., min_length=1)

class FriendsResponse(BaseModel):
    friends: List[str]

class FriendDirectory(BaseModel):
    viewer: Optional[UserPublic] = None
    friends: List[UserPublic]
    total: int
    nextCursor: Optional[str] = None
