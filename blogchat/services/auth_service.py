import logging
from passlib.context import CryptContext
from ..models import User
from .jwt_service import create_access_token
from .errors import ConflictError

logger = logging.getLogger(__name__)

# Thiết lập ngữ cảnh băm mật khẩu
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class AuthService:

    @staticmethod
    def verify_password(plain_password, hashed_password):
        """Xác minh mật khẩu thuần túy với mật khẩu đã được băm."""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Hash lưu trong DB không đúng định dạng bcrypt
            return False

    @staticmethod
    def get_password_hash(password):
        """Băm một mật khẩu thuần túy."""
        return pwd_context.hash(password)

    @staticmethod
    async def register_user(username: str, email: str, password: str, image: str | None = None):
        """
        Xử lý đăng ký người dùng mới.
        Kiểm tra username/email đã tồn tại, băm mật khẩu và tạo người dùng.
        Ném ConflictError nếu trùng lặp (router trả về 409).
        """
        if await User.find_one({"username": username}):
            raise ConflictError("Tên người dùng đã tồn tại.")
        if await User.find_one({"email": email}):
            raise ConflictError("Email đã được sử dụng.")

        new_user = User(
            username=username,
            email=email,
            password=AuthService.get_password_hash(password),
            image=image if isinstance(image, str) and image.strip() else None
        )
        await new_user.insert()
        logger.info("Registered user %s", username)
        return new_user

    @staticmethod
    async def login_user(email: str, password: str):
        """
        Xử lý đăng nhập: tìm người dùng theo email và xác minh mật khẩu.
        Trả về (user, access_token) hoặc None nếu sai thông tin.
        """
        user = await User.find_one({"email": email})
        if not user or not AuthService.verify_password(password, user.password):
            return None

        access_token = create_access_token(data={"sub": str(user.id)})
        return user, access_token
