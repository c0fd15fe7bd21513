from fastapi import APIRouter, HTTPException
from typing import Optional
from ..services import PostService
from ..schemas import PostCreate, PostResponse, PostsResponse, ReactionCreate, ReactionCounts, PostReactionResponse, SuccessResponse
from ..utils import map_post_to_public

router = APIRouter(tags=["Post"])

@router.post("", response_model=PostResponse, status_code=201)
async def create_post(post_data: PostCreate):
    """Tạo một bài đăng mới (ảnh base64 tùy chọn, tối đa 5MB)."""
    try:
        # Gọi service để tạo bài đăng một cách bất đồng bộ
        new_post = await PostService.create_post(
            title=post_data.title,
            content=post_data.content,
            author=post_data.author,
            image=post_data.image,
            image_edits=post_data.imageEdits
        )
        return PostResponse(post=map_post_to_public(new_post))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("", response_model=PostsResponse)
async def get_posts(
    author: Optional[str] = None,
    limit: Optional[int] = None,
    skip: Optional[int] = None
):
    """Lấy danh sách bài đăng mới nhất trước, lọc theo tác giả nếu có."""
    posts = await PostService.get_posts(author=author, limit=limit, skip=skip)
    return PostsResponse(posts=[map_post_to_public(post) for post in posts])

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str):
    post = await PostService.get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Không tìm thấy bài đăng.")
    return PostResponse(post=map_post_to_public(post))

@router.patch("/{post_id}", response_model=PostReactionResponse)
async def react_to_post(post_id: str, reaction_data: ReactionCreate):
    """Thích / không thích một bài đăng. Trả về số lượt like / dislike hiện tại."""
    try:
        updated_post = await PostService.react_to_post(
            post_id=post_id,
            action=reaction_data.action,
            username=reaction_data.username
        )
        return PostReactionResponse(post=ReactionCounts(
            id=str(updated_post.id),
            likes=updated_post.likes,
            dislikes=updated_post.dislikes
        ))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(post_id: str):
    """Xóa một bài đăng cùng các bình luận của nó."""
    try:
        return await PostService.delete_post(post_id=post_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
