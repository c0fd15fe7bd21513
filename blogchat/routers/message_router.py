from datetime import datetime
from fastapi import APIRouter, HTTPException
from typing import Optional
from ..services import MessageService
from ..schemas import (
    MessageCreate,
    MessageUpdate,
    MessageResponse,
    ConversationResponse,
    EmojiPublic,
    LatestMessage,
    LatestMessagesResponse,
    SuccessResponse
)
from ..utils import map_message_to_public, map_user_to_participant

router = APIRouter(tags=["Chat"])

@router.get("", response_model=ConversationResponse)
async def get_conversation(
    user1: Optional[str] = None,
    user2: Optional[str] = None,
    limit: Optional[int] = None,
    before: Optional[datetime] = None
):
    """
    Lấy tin nhắn giữa hai người dùng (cũ nhất trước) cùng thông tin người tham gia và emoji.
    - limit: lấy tối đa 'limit' tin mới nhất (tối đa 200).
    - before: chỉ lấy tin cũ hơn mốc thời gian ISO này.
    """
    if not user1 or not user2:
        raise HTTPException(status_code=400, detail="Thiếu user1 hoặc user2.")

    messages, participants, emojis, has_more = await MessageService.get_conversation(
        user1, user2, limit=limit, before=before
    )
    return ConversationResponse(
        messages=[map_message_to_public(msg) for msg in messages],
        participants=[map_user_to_participant(user) for user in participants],
        emojis=[EmojiPublic.model_validate(emoji.model_dump(include=set(EmojiPublic.model_fields))) for emoji in emojis],
        hasMore=has_more
    )

@router.get("/latest", response_model=LatestMessagesResponse)
async def get_latest_messages(user: Optional[str] = None, targets: str = ""):
    """Tin nhắn gần nhất giữa 'user' và từng người trong 'targets' (phân tách bằng dấu phẩy)."""
    if not user:
        raise HTTPException(status_code=400, detail="Thiếu user.")

    target_list = [t.strip() for t in targets.split(",") if t.strip()]
    latest = await MessageService.get_latest_messages(user, target_list)
    return LatestMessagesResponse(latest=[
        LatestMessage(
            partner=item["partner"],
            type=item["type"],
            content=item["content"],
            fileName=item["fileName"],
            createdAt=item["createdAt"].isoformat()
        ) for item in latest
    ])

@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(message_data: MessageCreate):
    message = await MessageService.send_message(
        sender=message_data.sender,
        to=message_data.to,
        type=message_data.type,
        content=message_data.content,
        file_name=message_data.fileName
    )
    return MessageResponse(message=map_message_to_public(message))

@router.put("/{message_id}", response_model=MessageResponse)
async def update_message(message_id: str, message_update: MessageUpdate):
    try:
        message = await MessageService.update_message(message_id, message_update.content)
        return MessageResponse(message=map_message_to_public(message))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.delete("/{message_id}", response_model=SuccessResponse)
async def delete_message(message_id: str):
    try:
        return await MessageService.delete_message(message_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
