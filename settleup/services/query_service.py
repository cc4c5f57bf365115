"""
Read-side views over the edge ledger for one user across all their groups.

Views read the group documents directly, so they always reflect the last
committed recompute or resolution.
"""

from typing import Dict, Iterable, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.models.group import Group, GroupStatus
from settleup.models.ledger import Edge
from settleup.models.member import normalize_member_id
from settleup.repositories.group_repo import GroupRepository
from settleup.repositories.member_repo import MemberRepository
from settleup.schemas.ledger import EdgeResponse
from settleup.schemas.views import AwaitingGroup, HistoryGroup, PendingGroup


class QueryViews:

    def __init__(self, db: AsyncIOMotorDatabase):
        self.groups = GroupRepository(db)
        self.members = MemberRepository(db)

    async def _names_for(self, edges: Iterable[Edge]) -> Dict[str, str]:
        ids = set()
        for edge in edges:
            ids.add(edge.debtor_id)
            ids.add(edge.creditor_id)
        return await self.members.get_display_names(ids)

    async def get_awaiting(self, user_id: str) -> List[AwaitingGroup]:
        """Pending edges paying the user, grouped by group."""
        user_id = normalize_member_id(user_id)
        groups = await self.groups.list_groups_for_member(user_id)

        selected = [
            (group, [e for e in group.pending_edges() if e.creditor_id == user_id])
            for group in groups
        ]
        selected = [(group, edges) for group, edges in selected if edges]
        names = await self._names_for(e for _, edges in selected for e in edges)

        return [
            AwaitingGroup(
                group_id=group.id,
                group_name=group.name,
                edges=[EdgeResponse.from_edge(edge, names) for edge in edges]
            )
            for group, edges in selected
        ]

    async def get_pending(self, user_id: str) -> List[PendingGroup]:
        """
        Edges the user pays, grouped by group.

        A group is listed while the user still owes something in it, or while
        it is active and the user has already paid edges in it.
        """
        user_id = normalize_member_id(user_id)
        groups = await self.groups.list_groups_for_member(user_id)

        selected = []
        for group in groups:
            outgoing = [edge for edge in group.edges if edge.debtor_id == user_id]
            pending = [edge for edge in outgoing if edge.is_pending()]
            resolved = [edge for edge in outgoing if not edge.is_pending()]
            if pending or (resolved and not group.is_completed()):
                selected.append((group, pending, resolved))

        names = await self._names_for(
            edge for _, pending, resolved in selected for edge in pending + resolved
        )
        return [
            PendingGroup(
                group_id=group.id,
                group_name=group.name,
                group_status=group.status,
                pending_edges=[EdgeResponse.from_edge(edge, names) for edge in pending],
                resolved_edges=[EdgeResponse.from_edge(edge, names) for edge in resolved]
            )
            for group, pending, resolved in selected
        ]

    async def get_history(self, user_id: str) -> List[HistoryGroup]:
        """Completed groups the user took part in, most recently completed first."""
        user_id = normalize_member_id(user_id)
        groups: List[Group] = await self.groups.list_groups_for_member(
            user_id, status=GroupStatus.COMPLETED
        )
        groups.sort(key=lambda group: group.completed_at or group.updated_at, reverse=True)

        names = await self._names_for(edge for group in groups for edge in group.edges)
        return [
            HistoryGroup(
                group_id=group.id,
                group_name=group.name,
                completed_at=group.completed_at,
                scheduled_deletion_at=group.scheduled_deletion_at,
                edges=[EdgeResponse.from_edge(edge, names) for edge in group.edges]
            )
            for group in groups
        ]
