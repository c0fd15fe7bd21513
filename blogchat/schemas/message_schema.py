from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from ..models import MessageType

class MessageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from", min_length=1)
    to: str = Field(..., min_length=1)
    type: MessageType
    content: str = Field(..., min_length=1)
    fileName: Optional[str] = None

class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1)

class MessagePublic(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender: str = Field(..., alias="from")
    to: str
    type: str
    content: str
    fileName: Optional[str] = None
    createdAt: str

class MessageResponse(BaseModel):
    message: MessagePublic

class ParticipantPublic(BaseModel):
    username: str
    image: Optional[str] = None
    online: bool = False

class EmojiPublic(BaseModel):
    shortcode: str
    unicode: str
    category: str = "general"
    sortOrder: int = 0
    hasSkinTones: bool = False

class ConversationResponse(BaseModel):
    messages: List[MessagePublic]
    participants: List[ParticipantPublic]
    emojis: List[EmojiPublic]
    hasMore: bool = False

class LatestMessage(BaseModel):
    partner: str
    type: str
    content: str
    fileName: Optional[str] = None
    createdAt: str

class LatestMessagesResponse(BaseModel):
    latest: List[LatestMessage]
