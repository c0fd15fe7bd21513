from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from ..models import ImageEdits

class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, description="Tiêu đề bài đăng")
    content: str = Field(..., min_length=1, description="Nội dung bài đăng")
    author: str = Field(..., min_length=1, description="Username tác giả")
    image: Optional[str] = Field(default=None, description="Ảnh dạng base64 hoặc data URL")
    imageEdits: Optional[ImageEdits] = None

    @field_validator('title', 'content', 'author')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Không được để trống')
        return v

class PostPublic(BaseModel):
    id: str
    title: str
    content: str
    image: Optional[str] = None
    imageEdits: Optional[ImageEdits] = None
    author: str
    likes: int
    dislikes: int
    likedBy: List[str]
    dislikedBy: List[str]
    createdAt: str
    updatedAt: str

class PostResponse(BaseModel):
    post: PostPublic

class PostsResponse(BaseModel):
    posts: List[PostPublic]

class ReactionCreate(BaseModel):
    action: Literal["like", "dislike"]
    username: str = Field(..., min_length=1)

class ReactionCounts(BaseModel):
    id: str
    likes: int
    dislikes: int

class PostReactionResponse(BaseModel):
    post: ReactionCounts
