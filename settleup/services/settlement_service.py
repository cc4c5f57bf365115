import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.core.concurrency import group_locks, retry_on_conflict
from settleup.core.config import settings
from settleup.core.exceptions import AlreadyResolvedError, NotFoundError, StateError
from settleup.models.group import Group
from settleup.models.ledger import EdgeStatus
from settleup.models.member import normalize_member_id
from settleup.repositories.group_repo import GroupRepository
from settleup.schemas.settlement import ResolveResponse
from settleup.services.ledger_service import EdgeLedger

logger = logging.getLogger(__name__)


class SettlementProcessor:
    """
    Edge and group lifecycle.

    Edges move pending -> resolved and never back. Resolving does not
    recompute: a paid debt stays paid and is netted out of later recomputes.
    Groups move active -> completed once nothing is pending.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.groups = GroupRepository(db)
        self.ledger = EdgeLedger(db)

    @retry_on_conflict
    async def resolve_edge(
        self,
        group_id: str,
        debtor_id: str,
        creditor_id: str,
        keep_active: bool = True
    ) -> ResolveResponse:
        """
        Mark the pending edge debtor -> creditor as paid.

        With keep_active=False the group is completed in the same commit
        once its last pending edge is resolved.
        """
        debtor_id = normalize_member_id(debtor_id)
        creditor_id = normalize_member_id(creditor_id)

        async with group_locks.lock_for(group_id):
            group = await self.ledger.load_group(group_id)

            matching = [
                index for index, edge in enumerate(group.edges)
                if edge.connects(debtor_id, creditor_id)
            ]
            if not matching:
                raise NotFoundError(
                    f"No edge {debtor_id} -> {creditor_id} in group '{group.name}'"
                )
            pending = [index for index in matching if group.edges[index].is_pending()]
            if not pending:
                raise AlreadyResolvedError(debtor_id, creditor_id)

            now = datetime.now(timezone.utc)
            edges = list(group.edges)
            edges[pending[0]] = edges[pending[0]].model_copy(update={
                "status": EdgeStatus.RESOLVED.value,
                "resolved_at": now
            })
            updated = group.model_copy(update={"edges": edges})

            if updated.all_resolved() and not keep_active:
                updated = updated.mark_completed(now, settings.GROUP_RETENTION_DAYS)

            committed = await self.groups.commit(updated, group.version)

        logger.info(
            f"Resolved {debtor_id} -> {creditor_id} in group {group_id} "
            f"(status={committed.status})"
        )
        return ResolveResponse(
            group_id=committed.id,
            group_name=committed.name,
            group_status=committed.status,
            all_resolved=committed.all_resolved()
        )

    @retry_on_conflict
    async def complete_group(self, group_id: str) -> Group:
        """Close a group whose edges are all resolved and schedule its deletion."""
        async with group_locks.lock_for(group_id):
            group = await self.ledger.load_group(group_id)
            if group.is_completed():
                raise StateError(f"Group '{group.name}' is already completed")

            outstanding = len(group.pending_edges())
            if outstanding:
                raise StateError(
                    f"Group '{group.name}' still has {outstanding} pending edge(s)"
                )

            now = datetime.now(timezone.utc)
            committed = await self.groups.commit(
                group.mark_completed(now, settings.GROUP_RETENTION_DAYS),
                group.version
            )

        logger.info(
            f"Completed group {group_id}; deletion scheduled for {committed.scheduled_deletion_at}"
        )
        return committed
