import asyncio
import logging
from typing import Any, Dict, List, Optional, Set
from fastapi import WebSocket
from datetime import datetime

logger = logging.getLogger(__name__)

# Giữ tham chiếu tới các task phát sự kiện nền để chúng không bị thu hồi giữa chừng
background_tasks: Set[asyncio.Task] = set()

def run_in_background(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    background_tasks.add(task)
    task.add_done_callback(background_tasks.discard)
    return task

def build_thread_room(user_a: Optional[str], user_b: Optional[str]) -> Optional[str]:
    """Tên phòng chat 1-1, không phụ thuộc thứ tự: 'thread:<a>:<b>' với username đã sắp xếp."""
    if not user_a or not user_b:
        return None
    return ":".join(["thread", *sorted([user_a, user_b])])

class ConnectionManager:
    def __init__(self):
        # Ánh xạ username tới danh sách các kết nối WebSocket đang hoạt động
        self.active_connections: Dict[str, List[WebSocket]] = {}
        # Ánh xạ tên phòng tới tập kết nối đã tham gia
        self.rooms: Dict[str, Set[WebSocket]] = {}

    async def connect(self, username: str, websocket: WebSocket):
        """Đăng ký một kết nối WebSocket mới cho một người dùng."""
        await websocket.accept()
        self.active_connections.setdefault(username, []).append(websocket)

    def disconnect(self, username: str, websocket: WebSocket):
        """Xóa một kết nối WebSocket và rời mọi phòng."""
        if username in self.active_connections:
            if websocket in self.active_connections[username]:
                self.active_connections[username].remove(websocket)
            if not self.active_connections[username]:
                del self.active_connections[username]
        for room in list(self.rooms):
            self.leave(room, websocket)

    def join(self, room: str, websocket: WebSocket):
        self.rooms.setdefault(room, set()).add(websocket)

    def leave(self, room: str, websocket: WebSocket):
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(websocket)
        if not members:
            del self.rooms[room]

    def _serialize_for_json(self, obj: Any) -> Any:
        """Chuyển đổi datetime thành ISO string để gửi qua JSON."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, dict):
            return {k: self._serialize_for_json(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._serialize_for_json(v) for v in obj]
        return obj

    async def _send(self, connection: WebSocket, frame: dict):
        try:
            await connection.send_json(frame)
        except Exception as e:
            # Kết nối đã chết; vòng đọc của nó sẽ tự dọn dẹp
            logger.warning("Failed to push %s to a websocket: %s", frame.get("event"), e)

    async def emit(self, connection: WebSocket, event: str, data: Any, ack: Optional[str] = None):
        frame = {"event": event, "data": self._serialize_for_json(data)}
        if ack is not None:
            frame["ack"] = ack
        await self._send(connection, frame)

    async def broadcast_to_room(self, room: str, event: str, data: Any, exclude: Optional[WebSocket] = None):
        for connection in list(self.rooms.get(room, set())):
            if connection is not exclude:
                await self.emit(connection, event, data)

    async def broadcast_all(self, event: str, data: Any, exclude: Optional[WebSocket] = None):
        """Gửi một sự kiện đến mọi kết nối (presence, bài đăng mới / bị xóa)."""
        for connections in list(self.active_connections.values()):
            for connection in list(connections):
                if connection is not exclude:
                    await self.emit(connection, event, data)


# Tạo một instance duy nhất dùng toàn app
manager = ConnectionManager()
