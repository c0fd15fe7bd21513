import json
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from ..models import User
from ..schemas import MessageCreate
from ..security import get_current_user_ws
from ..services import MessageService
from ..utils import map_message_to_public_dict
from ..websocket import manager, build_thread_room

logger = logging.getLogger(__name__)

router = APIRouter()

PRESENCE_EVENTS = ("user-online", "user-offline")

async def handle_chat_send(websocket: WebSocket, data, ack):
    """Lưu tin nhắn, trả ack cho người gửi và phát 'chat:message' tới phần còn lại của phòng."""
    try:
        payload = MessageCreate.model_validate(data)
    except ValidationError as e:
        await manager.emit(websocket, "ack", {"ok": False, "error": "Invalid message payload"}, ack=ack)
        logger.warning("Rejected chat:send payload: %s", e.errors())
        return

    try:
        message = await MessageService.send_message(
            sender=payload.sender,
            to=payload.to,
            type=payload.type,
            content=payload.content,
            file_name=payload.fileName
        )
    except Exception:
        logger.exception("Failed to persist chat message from %s", payload.sender)
        await manager.emit(websocket, "ack", {"ok": False, "error": "Failed to send message"}, ack=ack)
        return
    client_message_id = data.get("clientMessageId")
    message_dict = map_message_to_public_dict(
        message, str(client_message_id) if client_message_id is not None else None
    )

    room = build_thread_room(payload.sender, payload.to)
    manager.join(room, websocket)

    await manager.emit(websocket, "ack", {"ok": True, "message": message_dict}, ack=ack)
    await manager.broadcast_to_room(room, "chat:message", message_dict, exclude=websocket)

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, user: User = Depends(get_current_user_ws)):
    username = user.username
    await manager.connect(username, websocket)
    try:
        while True:
            # Chờ frame JSON {"event", "data", "ack"?} từ client
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignoring non-JSON frame from %s", username)
                continue
            if not isinstance(frame, dict):
                continue

            event = frame.get("event")
            data = frame.get("data")
            ack = frame.get("ack")

            if event in ("chat:join", "chat:leave"):
                room = build_thread_room(*_thread_users(data))
                if not room:
                    continue
                if event == "chat:join":
                    manager.join(room, websocket)
                else:
                    manager.leave(room, websocket)
            elif event == "chat:send":
                if not isinstance(data, dict):
                    await manager.emit(websocket, "ack", {"ok": False, "error": "Invalid message payload"}, ack=ack)
                    continue
                await handle_chat_send(websocket, data, ack)
            elif event in PRESENCE_EVENTS:
                if data:
                    await manager.broadcast_all(event, data, exclude=websocket)
            else:
                logger.debug("Unknown websocket event %s from %s", event, username)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(username, websocket)

def _thread_users(data):
    if not isinstance(data, dict):
        return None, None
    return data.get("user"), data.get("partner")
