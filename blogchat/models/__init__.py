from .user import User
from .post import Post, ImageEdits
from .comment import Comment, Reply
from .message import Message, MessageType
from .emoji import Emoji
from .database import init_db, DOCUMENT_MODELS
