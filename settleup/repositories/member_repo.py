from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.models.member import Member, default_display_name


class MemberRepository:
    """Member display-name operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["members"]

    async def upsert_member(self, user_id: str, display_name: str) -> Member:
        now = datetime.now(timezone.utc)
        await self.collection.update_one(
            {"_id": user_id},
            {
                "$set": {"display_name": display_name, "updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True
        )
        doc = await self.collection.find_one({"_id": user_id})
        return Member(**doc)

    async def get_member(self, user_id: str) -> Optional[Member]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc:
            return Member(**doc)
        return None

    async def get_display_names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """Map every id to its display name, falling back to the e-mail local part."""
        ids = list(set(user_ids))
        if not ids:
            return {}
        docs = await self.collection.find({"_id": {"$in": ids}}).to_list(None)
        names = {
            doc["_id"]: (doc.get("display_name") or "").strip()
            for doc in docs
        }
        return {
            user_id: names.get(user_id) or default_display_name(user_id)
            for user_id in ids
        }
