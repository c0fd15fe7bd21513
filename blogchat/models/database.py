# Nhập các thư viện cần thiết
import os
import logging
from motor.motor_asyncio import AsyncIOMotorClient # Thư viện bất đồng bộ cho MongoDB
from beanie import init_beanie # ODM (Object-Document Mapper) cho MongoDB
from dotenv import load_dotenv # Để tải các biến môi trường từ file .env
from typing import Type

# Nhập các model từ các file khác
from .user import User
from .post import Post
from .comment import Comment
from .message import Message
from .emoji import Emoji

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_URI = "mongodb://127.0.0.1:27017/blogchat"

# Danh sách các model Beanie sẽ được khởi tạo
DOCUMENT_MODELS: list[Type] = [User, Post, Comment, Message, Emoji]

client = None  # 🔹 client global, dùng 1 lần suốt vòng đời app

async def init_db(mongo_client=None):
    """
    Khởi tạo kết nối cơ sở dữ liệu và Beanie ODM.
    Đảm bảo chỉ tạo một client duy nhất; có thể truyền client sẵn có (ví dụ khi kiểm thử).
    """
    global client

    # Nếu đã có client, bỏ qua
    if client is not None and mongo_client is None:
        return client

    load_dotenv()
    if mongo_client is None:
        mongo_uri = os.getenv("MONGODB_URI")
        if not mongo_uri:
            logger.warning(
                "MONGODB_URI is not set. Falling back to local MongoDB at %s", DEFAULT_LOCAL_URI
            )
            mongo_uri = DEFAULT_LOCAL_URI
        mongo_client = AsyncIOMotorClient(mongo_uri)

    client = mongo_client
    database = client.get_database(os.getenv("MONGODB_DB", "blogchat"))

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)

    return client

