import logging
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.core.concurrency import group_locks, retry_on_conflict
from settleup.core.exceptions import StateError, ValidationError
from settleup.models.group import Group, GroupStatus
from settleup.models.member import Member, normalize_member_id
from settleup.repositories.group_repo import GroupRepository
from settleup.repositories.member_repo import MemberRepository
from settleup.services.ledger_service import EdgeLedger

logger = logging.getLogger(__name__)


def _normalize_ids(member_ids: Iterable[str]) -> List[str]:
    """Normalized, de-duplicated, in first-seen order."""
    seen: List[str] = []
    for member_id in member_ids:
        member_id = normalize_member_id(member_id)
        if member_id and member_id not in seen:
            seen.append(member_id)
    return seen


class GroupService:
    """Group and member registry."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.groups = GroupRepository(db)
        self.members = MemberRepository(db)
        self.ledger = EdgeLedger(db)

    async def create_group(self, name: str, member_ids: Iterable[str]) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name is required")

        members = _normalize_ids(member_ids)
        if not members:
            raise ValidationError("A group needs at least one member")

        group = await self.groups.create_group(name, members)
        logger.info(f"Created group {group.id} '{name}' with {len(members)} members")
        return group

    async def get_group(self, group_id: str) -> Group:
        return await self.ledger.load_group(group_id)

    async def list_groups(self, user_id: str, status: Optional[GroupStatus] = None) -> List[Group]:
        """Groups the user belongs to, newest first."""
        return await self.groups.list_groups_for_member(normalize_member_id(user_id), status=status)

    async def find_group_by_name(self, name: str) -> Optional[Group]:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name required")
        return await self.groups.find_group_by_name(name)

    @retry_on_conflict
    async def add_members(self, group_id: str, member_ids: Iterable[str]) -> Group:
        """Add members to an active group. Already-present ids are ignored."""
        async with group_locks.lock_for(group_id):
            group = await self.ledger.load_group(group_id)
            if group.is_completed():
                raise StateError(f"Group '{group.name}' is completed")

            added = [m for m in _normalize_ids(member_ids) if not group.is_member(m)]
            if not added:
                return group

            return await self.groups.commit(
                group.model_copy(update={"member_ids": group.member_ids + added}),
                group.version
            )

    async def upsert_member(self, user_id: str, display_name: str) -> Member:
        display_name = (display_name or "").strip()
        if not display_name:
            raise ValidationError("Display name is required")
        return await self.members.upsert_member(normalize_member_id(user_id), display_name)
