import asyncio
from datetime import datetime, timezone
from typing import List, Optional
from ..models import Emoji, Message, User
from ..utils import parse_object_id

MAX_MESSAGES_LIMIT = 200
MAX_EMOJIS = 200

class MessageService:

    @staticmethod
    def conversation_filter(user1: str, user2: str) -> dict:
        """Bộ lọc $or cho tin nhắn theo cả hai chiều giữa hai người dùng."""
        return {
            "$or": [
                {"from": user1, "to": user2},
                {"from": user2, "to": user1},
            ]
        }

    @staticmethod
    async def get_conversation(user1: str, user2: str, limit: Optional[int] = None,
                               before: Optional[datetime] = None):
        """
        Lấy tin nhắn giữa hai người dùng (cũ nhất trước), kèm thông tin người tham gia và emoji.
        Có limit (tối đa 200): lấy 'limit' tin mới nhất (trước mốc 'before' nếu có).
        Trả về (messages, participants, emojis, has_more).
        """
        query = MessageService.conversation_filter(user1, user2)
        if before is not None:
            if before.tzinfo is not None:
                # createdAt được lưu dạng UTC naive
                before = before.astimezone(timezone.utc).replace(tzinfo=None)
            query = {"$and": [query, {"createdAt": {"$lt": before}}]}

        bounded_limit = min(limit, MAX_MESSAGES_LIMIT) if limit and limit > 0 else None

        async def fetch_messages():
            if bounded_limit:
                # Sắp xếp trong DB: lấy N tin mới nhất (+1 để biết còn tin cũ hơn) rồi đảo lại
                newest = await Message.find(query, sort="-createdAt", limit=bounded_limit + 1).to_list()
                has_more = len(newest) > bounded_limit
                return list(reversed(newest[:bounded_limit])), has_more
            return await Message.find(query, sort="createdAt").to_list(), False

        (messages, has_more), participants, emojis = await asyncio.gather(
            fetch_messages(),
            User.find({"username": {"$in": [user1, user2]}}).to_list(),
            Emoji.find({}, sort=[("sortOrder", 1), ("unicode", 1)], limit=MAX_EMOJIS).to_list(),
        )
        return messages, participants, emojis, has_more

    @staticmethod
    async def get_latest_messages(user: str, targets: List[str]):
        """
        Tin nhắn gần nhất giữa 'user' và từng người trong 'targets'.
        Trả về danh sách dict {partner, type, content, fileName, createdAt}.
        """
        targets = [t for t in dict.fromkeys(targets) if t and t != user]
        if not targets:
            return []

        pipeline = [
            {"$match": {
                "$or": [
                    {"from": user, "to": {"$in": targets}},
                    {"from": {"$in": targets}, "to": user},
                ]
            }},
            {"$sort": {"createdAt": -1}},
            {"$project": {
                "partner": {"$cond": [{"$eq": ["$from", user]}, "$to", "$from"]},
                "type": 1,
                "content": 1,
                "fileName": 1,
                "createdAt": 1,
            }},
            {"$group": {
                "_id": "$partner",
                "type": {"$first": "$type"},
                "content": {"$first": "$content"},
                "fileName": {"$first": "$fileName"},
                "createdAt": {"$first": "$createdAt"},
            }},
        ]
        rows = await Message.aggregate(pipeline).to_list()
        latest = [
            {
                "partner": row["_id"],
                "type": row["type"],
                "content": row["content"],
                "fileName": row.get("fileName"),
                "createdAt": row["createdAt"],
            }
            for row in rows
        ]
        return sorted(latest, key=lambda item: item["createdAt"], reverse=True)

    @staticmethod
    async def send_message(sender: str, to: str, type: str, content: str, file_name: Optional[str] = None):
        """Lưu một tin nhắn mới."""
        message = Message(sender=sender, to=to, type=type, content=content, fileName=file_name)
        await message.insert()
        return message

    @staticmethod
    async def update_message(message_id: str, content: str):
        message = await MessageService._get(message_id)
        message.content = content
        await message.save()
        return message

    @staticmethod
    async def delete_message(message_id: str):
        message = await MessageService._get(message_id)
        await message.delete()
        return {"success": True}

    @staticmethod
    async def _get(message_id: str) -> Message:
        object_id = parse_object_id(message_id)
        message = await Message.get(object_id) if object_id else None
        if not message:
            raise ValueError("Không tìm thấy tin nhắn.")
        return message
