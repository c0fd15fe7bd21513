class NotFoundError(LookupError):
    """Không tìm thấy tài nguyên (router trả về 404)."""


class ConflictError(ValueError):
    """Dữ liệu bị trùng, ví dụ username / email đã tồn tại (router trả về 409)."""
