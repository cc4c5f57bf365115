"""
GroupRepository - persists a group's whole ledger state.

One document per group holds the member ids, the append-only expense history
and the current edge set. Writes go through ``commit``, which only succeeds
when the stored version still matches the version the caller read, so a
commit is all-or-nothing and a lost race never leaves partial edges behind.
"""

from typing import List, Optional, Sequence
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from settleup.core.exceptions import ConcurrencyConflict, NotFoundError
from settleup.models.expense import Expense
from settleup.models.group import Group, GroupStatus


class GroupRepository:
    """Group database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]

    async def create_group(self, name: str, member_ids: List[str]) -> Group:
        """Insert a new active group with no expenses or edges."""
        group = Group(name=name, member_ids=member_ids)
        await self.collection.insert_one(group.model_dump(by_alias=True, mode="python"))
        return group

    async def get_group(self, group_id: str) -> Optional[Group]:
        doc = await self.collection.find_one({"_id": group_id})
        if doc:
            return Group(**doc)
        return None

    async def list_groups_for_member(
        self,
        user_id: str,
        status: Optional[GroupStatus] = None
    ) -> List[Group]:
        """List groups containing user_id, newest first."""
        query = {"member_ids": user_id}
        if status is not None:
            query["status"] = status.value
        cursor = self.collection.find(query).sort("created_at", -1)
        docs = await cursor.to_list(None)
        return [Group(**doc) for doc in docs]

    async def find_group_by_name(self, name: str) -> Optional[Group]:
        doc = await self.collection.find_one({"name": name})
        if doc:
            return Group(**doc)
        return None

    async def commit(
        self,
        group: Group,
        expected_version: int,
        new_expenses: Sequence[Expense] = ()
    ) -> Group:
        """
        Write the group's mutable state in a single document update.

        - new_expenses are appended to the history
        - edges, members and lifecycle fields are replaced
        - version is bumped

        Raises NotFoundError if the group is gone, ConcurrencyConflict if
        someone else committed since expected_version was read.
        """
        updates = {
            "$set": {
                "member_ids": group.member_ids,
                "status": group.status,
                "edges": [edge.model_dump(mode="python") for edge in group.edges],
                "completed_at": group.completed_at,
                "scheduled_deletion_at": group.scheduled_deletion_at,
                "version": expected_version + 1,
                "updated_at": datetime.now(timezone.utc),
            }
        }
        if new_expenses:
            updates["$push"] = {
                "expenses": {"$each": [expense.to_document() for expense in new_expenses]}
            }

        result = await self.collection.find_one_and_update(
            {
                "_id": group.id,
                "version": expected_version  # Optimistic lock
            },
            updates,
            return_document=ReturnDocument.AFTER
        )
        if result:
            return Group(**result)

        if await self.collection.find_one({"_id": group.id}, {"_id": 1}) is None:
            raise NotFoundError(f"Group {group.id} not found")
        raise ConcurrencyConflict(group.id, expected_version)
