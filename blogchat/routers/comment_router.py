from fastapi import APIRouter, HTTPException
from typing import Optional
from ..services import CommentService
from ..schemas import (
    CommentCreate,
    CommentResponse,
    CommentsResponse,
    ReplyCreate,
    ReactionCreate,
    ReactionCounts,
    CommentReactionResponse
)
from ..utils import map_comment_to_public

router = APIRouter(tags=["Comment"])

@router.get("", response_model=CommentsResponse)
async def get_comments(postId: Optional[str] = None):
    """Lấy danh sách bình luận của một bài đăng, cũ nhất trước."""
    if not postId:
        raise HTTPException(status_code=400, detail="Thiếu postId.")
    comments = await CommentService.get_comments_by_post(postId)
    return CommentsResponse(comments=[map_comment_to_public(comment) for comment in comments])

@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(comment_data: CommentCreate):
    try:
        new_comment = await CommentService.create_comment(
            post_id=comment_data.postId,
            author=comment_data.author,
            text=comment_data.text
        )
        return CommentResponse(comment=map_comment_to_public(new_comment))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Failed to create comment: {str(e)}")

@router.post("/{comment_id}", response_model=CommentResponse)
async def add_reply(comment_id: str, reply_data: ReplyCreate):
    """Thêm một phản hồi vào cuối bình luận."""
    try:
        comment = await CommentService.add_reply(
            comment_id=comment_id,
            author=reply_data.author,
            text=reply_data.text
        )
        return CommentResponse(comment=map_comment_to_public(comment))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.patch("/{comment_id}", response_model=CommentReactionResponse)
async def react_to_comment(comment_id: str, reaction_data: ReactionCreate):
    try:
        comment = await CommentService.react_to_comment(
            comment_id=comment_id,
            action=reaction_data.action,
            username=reaction_data.username
        )
        return CommentReactionResponse(comment=ReactionCounts(
            id=str(comment.id),
            likes=comment.likes,
            dislikes=comment.dislikes
        ))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
