import logging
from typing import Dict, Iterable, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.core.concurrency import group_locks, retry_on_conflict
from settleup.core.exceptions import NotFoundError
from settleup.models.expense import Expense
from settleup.models.group import Group
from settleup.models.ledger import Edge
from settleup.repositories.group_repo import GroupRepository
from settleup.services.balances import apply_payments, compute_balances
from settleup.services.simplifier import simplify

logger = logging.getLogger(__name__)


class EdgeLedger:
    """
    Authoritative store of each group's edges.

    Edges are always rebuilt from the full expense history rather than
    patched, so the stored edges can never drift from the expenses.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.groups = GroupRepository(db)

    async def load_group(self, group_id: str) -> Group:
        group = await self.groups.get_group(group_id)
        if group is None:
            raise NotFoundError(f"Group {group_id} not found")
        return group

    @staticmethod
    def rebuild_edges(group: Group, expenses: Iterable[Expense]) -> List[Edge]:
        """
        Compute the edge set for a group from its expenses.

        1. Accumulate balances from the expenses
        2. Subtract what resolved edges already paid
        3. Simplify the remainder into new pending edges

        Resolved edges are kept in front of the new pending ones.
        """
        resolved = group.resolved_edges()
        remaining = apply_payments(compute_balances(expenses), resolved)
        pending = [
            edge.model_copy(update={"group_id": group.id})
            for edge in simplify(remaining)
        ]
        return resolved + pending

    @retry_on_conflict
    async def recompute(self, group_id: str) -> List[Edge]:
        """Rebuild and store a group's edges from its unchanged history."""
        async with group_locks.lock_for(group_id):
            group = await self.load_group(group_id)
            edges = self.rebuild_edges(group, group.expenses)
            committed = await self.groups.commit(
                group.model_copy(update={"edges": edges}),
                group.version
            )
            logger.info(
                f"Recomputed group {group_id}: {len(committed.pending_edges())} pending edges"
            )
            return committed.edges

    async def get_edges(self, group_id: str) -> List[Edge]:
        """Retained resolved edges followed by the current pending edges."""
        group = await self.load_group(group_id)
        return group.edges

    async def get_balances(self, group_id: str) -> Dict[str, int]:
        """Expense-derived balances for every member of the group."""
        group = await self.load_group(group_id)
        balances = {member_id: 0 for member_id in group.member_ids}
        balances.update(compute_balances(group.expenses))
        return balances
