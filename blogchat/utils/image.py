import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Optional
from ..configs import MAX_IMAGE_BYTES

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:([^;]+);base64,(.+)$", re.IGNORECASE | re.DOTALL)
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ImagePayload:
    """Kết quả phân tích ảnh gửi lên: xóa ảnh, ảnh hợp lệ, hoặc lỗi ('invalid' / 'too_large')."""
    data: Optional[bytes] = None
    content_type: str = DEFAULT_CONTENT_TYPE
    remove: bool = False
    error: Optional[str] = None


def encode_image_to_data_url(data: bytes, content_type: Optional[str] = None) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type or DEFAULT_CONTENT_TYPE};base64,{encoded}"


def decode_data_url(value: Optional[str]):
    """Giải mã một data URL base64, trả về (bytes, content_type) hoặc None."""
    if not isinstance(value, str):
        return None
    match = DATA_URL_PATTERN.match(value.strip())
    if not match:
        return None
    try:
        return base64.b64decode(match.group(2), validate=True), match.group(1) or DEFAULT_CONTENT_TYPE
    except (binascii.Error, ValueError) as e:
        logger.error("Failed to decode inline image: %s", e)
        return None


def parse_base64_image(image_string: str) -> ImagePayload:
    trimmed = image_string.strip()
    if not trimmed:
        return ImagePayload(remove=True)

    match = DATA_URL_PATTERN.match(trimmed)
    payload = match.group(2) if match else trimmed
    content_type = match.group(1) if match else DEFAULT_CONTENT_TYPE

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error("Failed to parse base64 image: %s", e)
        return ImagePayload(error="invalid")

    if not data:
        return ImagePayload(error="invalid")
    return ImagePayload(data=data, content_type=content_type)


def extract_image_payload(image_string, provided: bool = True,
                          max_bytes: int = MAX_IMAGE_BYTES) -> Optional[ImagePayload]:
    """
    Chuẩn hóa trường 'image' của request.
    - Không gửi trường này → None (giữ nguyên ảnh cũ).
    - None hoặc chuỗi rỗng → xóa ảnh.
    - Chuỗi base64 / data URL → bytes + content type, giới hạn kích thước.
    """
    if not provided:
        return None
    if image_string is None:
        return ImagePayload(remove=True)
    if not isinstance(image_string, str):
        return ImagePayload(error="invalid")

    parsed = parse_base64_image(image_string)
    if parsed.error or parsed.remove:
        return parsed
    if len(parsed.data) > max_bytes:
        return ImagePayload(error="too_large")
    return parsed
