import logging
import re
from typing import Optional
from fastapi import Depends, Header, HTTPException, status, WebSocket
from fastapi.security import OAuth2PasswordBearer
from .services.jwt_service import decode_access_token
from .models import User
from .utils import parse_object_id

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/signin")

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)

async def get_user_from_token(token: str) -> User:
    token_data = decode_access_token(token)
    if not token_data or not token_data.user_id:
        logger.error("Token decode failed or missing subject")
        raise credentials_exception

    # Kiểm tra định dạng ObjectId
    user_id = parse_object_id(token_data.user_id)
    if user_id is None:
        logger.error("Invalid ObjectId format: %s", token_data.user_id)
        raise credentials_exception

    user = await User.get(user_id)
    if user is None:
        logger.error("User not found with ID: %s", token_data.user_id)
        raise credentials_exception

    return user

async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    return await get_user_from_token(token)

async def get_requester(
    x_user: Optional[str] = Header(default=None),
    x_username: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> str:
    """
    Username của người gửi request, lấy từ header X-User, X-Username hoặc Authorization
    (bỏ tiền tố 'Bearer '). Không có → 401.
    """
    raw = x_user or x_username or authorization
    requester = BEARER_PREFIX.sub("", raw).strip() if raw else ""
    if not requester:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return requester

async def get_current_user_ws(websocket: WebSocket) -> User:

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        # Đóng kết nối chưa đủ, cần ném exception để dừng chuỗi dependency
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token is missing")

    try:
        return await get_user_from_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        raise
