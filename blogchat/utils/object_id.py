from typing import Optional
from beanie import PydanticObjectId
from bson.errors import InvalidId

def parse_object_id(value) -> Optional[PydanticObjectId]:
    """Chuyển chuỗi thành ObjectId; trả về None nếu không hợp lệ."""
    if isinstance(value, str):
        value = value.strip()
    if not value:
        return None
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None
