from .auth_service import AuthService
from .jwt_service import create_access_token, decode_access_token
from .message_service import MessageService
from .post_service import PostService
from .user_service import UserService
from .comment_service import CommentService
from .upload_service import UploadService, UploadTooLargeError
from .errors import ConflictError, NotFoundError

__all__ = [
    "AuthService",
    "create_access_token",
    "decode_access_token",
    "MessageService",
    "PostService",
    "UserService",
    "CommentService",
    "UploadService",
    "UploadTooLargeError",
    "ConflictError",
    "NotFoundError"
]
