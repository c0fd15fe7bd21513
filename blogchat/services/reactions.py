from datetime import datetime
from typing import Literal, Optional, Type
from beanie import Document, PydanticObjectId

ReactionAction = Literal["like", "dislike"]

# action -> (trường đếm, tập username)
REACTION_FIELDS = {
    "like": ("likes", "likedBy"),
    "dislike": ("dislikes", "dislikedBy"),
}

async def apply_reaction(
    model: Type[Document],
    doc_id: PydanticObjectId,
    action: ReactionAction,
    username: str,
    exclusive: bool = False,
) -> Optional[Document]:
    """
    Ghi nhận like/dislike của một người dùng lên Post hoặc Comment.

    Idempotent theo từng người dùng: điều kiện "username chưa nằm trong tập"
    nằm ngay trong bộ lọc của lệnh update, nên gửi lại cùng action không
    tăng bộ đếm lần nữa. $addToSet giữ tập không trùng lặp.
    exclusive=True: đã có bất kỳ reaction nào (like hoặc dislike) thì bỏ qua.
    Trả về document sau cập nhật, hoặc None nếu không tồn tại.
    """
    counter, members = REACTION_FIELDS[action]

    guard = {members: {"$ne": username}}
    if exclusive:
        guard = {"likedBy": {"$ne": username}, "dislikedBy": {"$ne": username}}

    await model.find_one({"_id": doc_id, **guard}).update(
        {
            "$addToSet": {members: username},
            "$inc": {counter: 1},
            "$set": {"updatedAt": datetime.utcnow()},
        }
    )
    return await model.get(doc_id)
