from fastapi import APIRouter, Depends, HTTPException, Response
from ..services import UserService, ConflictError, NotFoundError
from ..schemas import (
    UserResponse,
    UsersResponse,
    UserUpdate,
    StatusUpdate,
    StatusResponse,
    AdminUpdate,
    SuccessResponse
)
from ..models import User
from ..security import get_current_user, get_requester
from ..utils import map_user_to_public

router = APIRouter(tags=["User"])

# Lấy danh sách tất cả người dùng
@router.get("", response_model=UsersResponse)
async def list_users():
    users = await UserService.list_users()
    return UsersResponse(users=[map_user_to_public(user) for user in users])

# Cập nhật trạng thái online của người dùng hiện tại (JWT)
@router.patch("/status", response_model=StatusResponse)
async def update_status(
    status_data: StatusUpdate,
    current_user: User = Depends(get_current_user)
):
    """Đánh dấu người dùng đã xác thực là online / offline và phát sự kiện presence."""
    try:
        user = await UserService.set_status(str(current_user.id), status_data.online)
        return StatusResponse(online=user.online)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get("/{username}/image")
async def get_user_image(username: str):
    """Trả về ảnh đại diện dạng nhị phân (từ dữ liệu lưu trữ hoặc data URL base64)."""
    try:
        data, content_type = await UserService.get_user_image(username)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=86400"}
    )

@router.get("/{username}", response_model=UserResponse)
async def get_user(username: str):
    user = await UserService.get_user(username)
    if not user:
        raise HTTPException(status_code=404, detail="Không tìm thấy người dùng.")
    return UserResponse(user=map_user_to_public(user))

# Cập nhật hồ sơ: chỉ chính chủ hoặc admin
@router.put("/{username}", response_model=UserResponse)
async def update_user(
    username: str,
    user_update: UserUpdate,
    requester: str = Depends(get_requester)
):
    """
    Cập nhật username, trạng thái online hoặc ảnh đại diện.
    'image': null hoặc "" để xóa ảnh.
    """
    try:
        user = await UserService.update_user(
            target=username,
            requester=requester,
            changes=user_update.model_dump(include=user_update.model_fields_set)
        )
        return UserResponse(user=map_user_to_public(user))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# Xóa tài khoản cùng dữ liệu liên quan
@router.delete("/{username}", response_model=SuccessResponse)
async def delete_user(
    username: str,
    requester: str = Depends(get_requester)
):
    try:
        return await UserService.delete_user(target=username, requester=requester)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))

# Cấp / thu hồi quyền admin
@router.api_route("/{username}/admin", methods=["PATCH", "POST"], response_model=UserResponse)
async def update_admin_status(
    username: str,
    admin_update: AdminUpdate,
    requester: str = Depends(get_requester)
):
    try:
        user = await UserService.set_admin(
            target=username,
            requester=requester,
            is_admin=admin_update.isAdmin
        )
        return UserResponse(user=map_user_to_public(user))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
