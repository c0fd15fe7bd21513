import os
import logging
import cloudinary
from dotenv import load_dotenv

# Tải các biến môi trường từ tệp .env
load_dotenv()

logger = logging.getLogger(__name__)

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")

# Thư mục lưu file upload khi không cấu hình Cloudinary
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_IMAGE_BYTES = 5 * 1024 * 1024

API_BASE_URL = (
    os.getenv("API_BASE_URL")
    or os.getenv("NEXT_PUBLIC_API_BASE_URL")
    or "http://localhost:8000"
).rstrip("/")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


def cloudinary_enabled() -> bool:
    return bool(os.getenv("CLOUDINARY_URL"))


def init_cloudinary():
    """
    Khởi tạo cấu hình Cloudinary từ CLOUDINARY_URL.
    Không có biến này thì upload được lưu trên đĩa.
    """
    if not cloudinary_enabled():
        logger.info("CLOUDINARY_URL not set, uploads are stored in %s", UPLOAD_DIR)
        return False

    cloudinary.config(cloudinary_url=os.getenv("CLOUDINARY_URL"), secure=True)
    return True
