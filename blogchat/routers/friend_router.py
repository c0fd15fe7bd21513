from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from ..services import UserService, NotFoundError
from ..schemas import FriendAdd, FriendsResponse, FriendDirectory, SuccessResponse
from ..utils import map_user_to_public

router = APIRouter(tags=["Friend"])

@router.post("", response_model=SuccessResponse)
async def add_friend(friend_data: FriendAdd):
    """Kết bạn hai chiều giữa 'user' và 'friend'."""
    try:
        return await UserService.add_friend(friend_data.user, friend_data.friend)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("", response_model=FriendsResponse)
async def get_friends(username: Optional[str] = None):
    """Danh sách username bạn bè của một người dùng."""
    if not username:
        raise HTTPException(status_code=400, detail="Thiếu username.")
    try:
        friends = await UserService.get_friends(username)
        return FriendsResponse(friends=friends)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get("/directory", response_model=FriendDirectory)
async def get_friend_directory(
    username: Optional[str] = None,
    limit: Optional[int] = Query(default=None),
    cursor: Optional[str] = None
):
    """Danh bạ bạn bè (kèm hồ sơ) có phân trang theo username."""
    if not username:
        raise HTTPException(status_code=400, detail="Thiếu username.")
    try:
        viewer, friends, total, next_cursor = await UserService.get_friend_directory(
            username, limit=limit, cursor=cursor
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return FriendDirectory(
        viewer=map_user_to_public(viewer),
        friends=[map_user_to_public(friend) for friend in friends],
        total=total,
        nextCursor=next_cursor
    )
