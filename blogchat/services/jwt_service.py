import os
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from pydantic import BaseModel
from dotenv import load_dotenv

# Tải các biến môi trường từ tệp .env
load_dotenv()

# Lấy các giá trị cấu hình JWT từ các biến môi trường
SECRET_KEY = os.getenv("JWT_SECRET", "secretkey123")  # Khóa bí mật để ký và xác minh token
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")    # Thuật toán mã hóa để sử dụng
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 120))  # Thời gian hết hạn của token truy cập (tính bằng phút)

class TokenData(BaseModel):
    """Mô hình dữ liệu cho payload được giải mã từ token."""
    user_id: Optional[str] = None

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Tạo một token truy cập JWT mới.

    Args:
        data (dict): Dữ liệu (payload) để mã hóa vào token.
        expires_delta (Optional[timedelta]): Thời gian tồn tại của token. Mặc định là ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: Token JWT đã được mã hóa.
    """
    to_encode = data.copy()
    # Đặt thời gian hết hạn cho token
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})

    # Mã hóa token với khóa bí mật và thuật toán đã định cấu hình
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def decode_access_token(token: str) -> Optional[TokenData]:
    """
    Giải mã một token truy cập JWT và trả về payload của nó.

    Returns:
        Optional[TokenData]: Dữ liệu payload nếu giải mã thành công, nếu không thì trả về None.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub") # Trích xuất chủ thể (ID người dùng)
        if user_id is None:
            return None
        token_data = TokenData(user_id=user_id)
    except JWTError:
        # Token hết hạn hoặc không hợp lệ
        return None
    return token_data
