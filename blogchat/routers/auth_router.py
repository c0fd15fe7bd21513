from fastapi import APIRouter, HTTPException
from ..services import AuthService, ConflictError
from ..schemas import SignupRequest, SignupResponse, SigninRequest, SigninResponse

router = APIRouter(tags=["Auth"])

@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(user_data: SignupRequest):
    """
    Endpoint để đăng ký người dùng mới.
    - Nhận username, email, mật khẩu và ảnh đại diện (tùy chọn).
    - Trả về 400 nếu thiếu trường / email không hợp lệ (xử lý bởi validation handler).
    - Trả về 409 nếu username hoặc email đã tồn tại.
    """
    try:
        new_user = await AuthService.register_user(
            username=user_data.username,
            email=user_data.email,
            password=user_data.password,
            image=user_data.image
        )
        return SignupResponse(username=new_user.username)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.post("/signin", response_model=SigninResponse)
async def signin(login_data: SigninRequest):
    """
    Endpoint để đăng nhập bằng email và mật khẩu.
    Trả về username và token truy cập JWT; 401 nếu thông tin đăng nhập sai.
    """
    result = await AuthService.login_user(email=login_data.email, password=login_data.password)
    if not result:
        raise HTTPException(
            status_code=401,
            detail="Email hoặc mật khẩu không chính xác",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user, access_token = result
    return SigninResponse(username=user.username, access_token=access_token)
