from .auth_schema import SignupRequest, SignupResponse, SigninRequest, SigninResponse
from .user_schema import (
    UserPublic,
    UserResponse,
    UsersResponse,
    UserUpdate,
    StatusUpdate,
    StatusResponse,
    AdminUpdate,
    SuccessResponse
)
from .post_schema import (
    PostCreate,
    PostPublic,
    PostResponse,
    PostsResponse,
    ReactionCreate,
    ReactionCounts,
    PostReactionResponse
)
from .comment_schema import (
    CommentCreate,
    ReplyCreate,
    ReplyPublic,
    CommentPublic,
    CommentResponse,
    CommentsResponse,
    CommentReactionResponse
)
from .message_schema import (
    MessageCreate,
    MessageUpdate,
    MessagePublic,
    MessageResponse,
    ParticipantPublic,
    EmojiPublic,
    ConversationResponse,
    LatestMessage,
    LatestMessagesResponse
)
from .friend_schema import FriendAdd, FriendsResponse, FriendDirectory
from .upload_schema import UploadResponse
