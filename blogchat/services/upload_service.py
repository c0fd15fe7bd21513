import asyncio
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional
from ..configs import UPLOAD_DIR, MAX_UPLOAD_BYTES, cloudinary_enabled
from ..utils import encode_image_to_data_url, upload_to_cloudinary

logger = logging.getLogger(__name__)

SAFE_NAME_PATTERN = re.compile(r"[^A-Za-z0-9._-]+")

class UploadTooLargeError(ValueError):
    """File vượt quá giới hạn upload."""

class UploadService:

    @staticmethod
    def upload_dir() -> Path:
        path = Path(UPLOAD_DIR)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def stored_name(original_name: Optional[str]) -> str:
        """Tên file lưu trên đĩa: tiền tố ngẫu nhiên + tên gốc đã làm sạch."""
        base = SAFE_NAME_PATTERN.sub("_", os.path.basename(original_name or "file")).strip("._") or "file"
        return f"{uuid.uuid4().hex}_{base}"

    @staticmethod
    async def save_upload(data: bytes, original_name: Optional[str], content_type: Optional[str]):
        """
        Lưu file upload (tối đa 10MB) lên Cloudinary nếu đã cấu hình, ngược lại ghi ra đĩa.
        Trả về {url, name, dataUrl, contentType, size}.
        """
        if not data:
            raise ValueError("Không có file được upload.")
        if len(data) > MAX_UPLOAD_BYTES:
            raise UploadTooLargeError(f"File phải nhỏ hơn hoặc bằng {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.")

        content_type = content_type or "application/octet-stream"
        name = original_name or "file"

        if cloudinary_enabled():
            result = await upload_to_cloudinary(data, name)
            url = result["url"]
        else:
            stored = UploadService.stored_name(name)
            target = UploadService.upload_dir() / stored
            await asyncio.to_thread(target.write_bytes, data)
            url = f"/uploads/{stored}"
            logger.info("Stored upload %s (%d bytes)", stored, len(data))

        return {
            "url": url,
            "name": name,
            "dataUrl": encode_image_to_data_url(data, content_type),
            "contentType": content_type,
            "size": len(data),
        }

    @staticmethod
    def resolve_stored_file(stored_name: str) -> Path:
        """Trả về đường dẫn file đã lưu; chặn tên chứa thư mục. Ném ValueError nếu không tồn tại."""
        if stored_name != os.path.basename(stored_name) or stored_name.startswith("."):
            raise ValueError("Không tìm thấy file.")
        path = UploadService.upload_dir() / stored_name
        if not path.is_file():
            raise ValueError("Không tìm thấy file.")
        return path
