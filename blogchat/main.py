import logging
import os
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .routers import (
    auth_router,
    user_router,
    post_router,
    comment_router,
    message_router,
    friend_router,
    upload_router,
    websocket_router
)
from .models import init_db
from .configs import CORS_ORIGINS, init_cloudinary

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Khởi tạo app FastAPI với thông tin Swagger UI
app = FastAPI(
    title="BlogChat",
    description="Backend blog + nhắn tin **BlogChat**.\n\n"
                "Hệ thống hỗ trợ đăng ký, đăng nhập, bài đăng có bình luận, kết bạn, "
                "nhắn tin trực tiếp và trạng thái online theo thời gian thực.",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception handler cho RequestValidationError (Pydantic validation)
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Format lỗi validation cho user-friendly
    errors = exc.errors()
    error_messages = []
    for error in errors:
        field = " -> ".join(str(loc) for loc in error["loc"])
        message = error.get("msg", "Validation error")
        error_messages.append(f"{field}: {message}")

    detail = "; ".join(error_messages) if error_messages else "Lỗi validation dữ liệu"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail}
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

# Kết nối với cơ sở dữ liệu và Cloudinary khi khởi động
@app.on_event("startup")
async def startup_db_client():
    init_cloudinary()
    await init_db()

# Gắn các router
app.include_router(auth_router.router, prefix="/api/auth", tags=["Xác thực"])
app.include_router(user_router.router, prefix="/api/users", tags=["Người dùng"])
app.include_router(post_router.router, prefix="/api/posts", tags=["Bài viết"])
app.include_router(comment_router.router, prefix="/api/comments", tags=["Bình luận"])
app.include_router(message_router.router, prefix="/api/messages", tags=["Tin nhắn"])
app.include_router(friend_router.router, prefix="/api/friends", tags=["Bạn bè"])
app.include_router(upload_router.router, prefix="/uploads", tags=["Tệp tin"])
app.include_router(websocket_router.router, prefix="/websocket", tags=["Connect real-time"])

@app.get("/")
def read_root():
    return {"message": "Máy chủ đang chạy"}
