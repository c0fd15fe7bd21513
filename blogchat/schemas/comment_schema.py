from pydantic import BaseModel, Field, field_validator
from typing import List
from .post_schema import ReactionCounts

class CommentCreate(BaseModel):
    postId: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, description="Nội dung bình luận")

    @field_validator('text')
    @classmethod
    def text_validation(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Nội dung bình luận không được để trống')
        return v.strip()

class ReplyCreate(BaseModel):
    author: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)

class ReplyPublic(BaseModel):
    author: str
    text: str
    createdAt: str
    updatedAt: str

class CommentPublic(BaseModel):
    id: str
    postId: str
    author: str
    text: str
    likes: int
    dislikes: int
    likedBy: List[str]
    dislikedBy: List[str]
    replies: List[ReplyPublic]
    createdAt: str
    updatedAt: str

class CommentResponse(BaseModel):
    comment: CommentPublic

class CommentsResponse(BaseModel):
    comments: List[CommentPublic]

class CommentReactionResponse(BaseModel):
    comment: ReactionCounts
