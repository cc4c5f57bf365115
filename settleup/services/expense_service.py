import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Mapping, Sequence

import pydantic
from motor.motor_asyncio import AsyncIOMotorDatabase

from settleup.core.concurrency import group_locks, retry_on_conflict
from settleup.core.exceptions import NotFoundError, StateError, ValidationError
from settleup.core.money import Amount, to_cents
from settleup.models.expense import Expense
from settleup.models.group import Group
from settleup.models.ledger import Edge
from settleup.models.member import normalize_member_id
from settleup.repositories.group_repo import GroupRepository
from settleup.schemas.expense import ExpenseCreate
from settleup.services.balances import validate_expense
from settleup.services.ledger_service import EdgeLedger

logger = logging.getLogger(__name__)


def unique_title(title: str, taken: Iterable[str]) -> str:
    """Suffix " (2)", " (3)", ... when a title is already used in the group."""
    title = title.strip()
    existing = {name.strip().lower() for name in taken}
    if title.lower() not in existing:
        return title

    counter = 2
    while f"{title.lower()} ({counter})" in existing:
        counter += 1
    return f"{title} ({counter})"


class ExpenseService:
    """Accepts expenses and keeps the group's edges in step with them."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.groups = GroupRepository(db)
        self.ledger = EdgeLedger(db)

    async def record_expense(
        self,
        group_id: str,
        title: str,
        total_amount: Amount,
        paid_by: str,
        splits: Mapping[str, Amount]
    ) -> List[Edge]:
        """Record one expense and return the group's pending edges."""
        try:
            expense_in = ExpenseCreate(
                title=title,
                total_amount=Decimal(str(total_amount)),
                paid_by=paid_by,
                splits={member_id: Decimal(str(amount)) for member_id, amount in splits.items()}
            )
        except InvalidOperation:
            raise ValidationError(f"Expense '{title}' has an amount that is not a number")
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Expense '{title}' is malformed: {exc.errors()[0]['msg']}")
        return await self.record_expenses(group_id, [expense_in])

    @retry_on_conflict
    async def record_expenses(
        self,
        group_id: str,
        expenses_in: Sequence[ExpenseCreate]
    ) -> List[Edge]:
        """
        Record several expenses against one group in a single commit.

        Every expense is validated before anything is written; one bad
        expense rejects the whole batch. Returns the pending edges after
        the recompute.
        """
        if not expenses_in:
            raise ValidationError("At least one expense required")

        async with group_locks.lock_for(group_id):
            group = await self.ledger.load_group(group_id)
            if group.is_completed():
                raise StateError(f"Group '{group.name}' is completed and no longer accepts expenses")

            titles = [expense.title for expense in group.expenses]
            new_expenses: List[Expense] = []
            for expense_in in expenses_in:
                expense = self._build_expense(group, expense_in, titles)
                titles.append(expense.title)
                new_expenses.append(expense)

            edges = self.ledger.rebuild_edges(group, group.expenses + new_expenses)
            committed = await self.groups.commit(
                group.model_copy(update={"edges": edges}),
                group.version,
                new_expenses=new_expenses
            )

        logger.info(
            f"Recorded {len(new_expenses)} expense(s) in group {group_id}; "
            f"{len(committed.pending_edges())} pending edges"
        )
        return committed.pending_edges()

    def _build_expense(
        self,
        group: Group,
        expense_in: ExpenseCreate,
        taken_titles: List[str]
    ) -> Expense:
        paid_by = normalize_member_id(expense_in.paid_by)
        splits: Dict[str, int] = {}
        for member_id, amount in expense_in.splits.items():
            member_id = normalize_member_id(member_id)
            if member_id in splits:
                raise ValidationError(
                    f"Expense '{expense_in.title}' lists {member_id} more than once"
                )
            splits[member_id] = to_cents(amount)

        total_cents = to_cents(expense_in.total_amount)
        validate_expense(expense_in.title, total_cents, splits)

        for member_id in [paid_by, *splits]:
            if not group.is_member(member_id):
                raise NotFoundError(f"{member_id} is not a member of group '{group.name}'")

        return Expense(
            group_id=group.id,
            title=unique_title(expense_in.title, taken_titles),
            total_cents=total_cents,
            paid_by=paid_by,
            splits=splits
        )
