"""
Balance accumulation and expense validation.

Balances are integer cents per member: positive = net creditor,
negative = net debtor. A group's balances always sum to exactly zero.
"""

from collections import defaultdict
from typing import Dict, Iterable, Mapping

from settleup.core.exceptions import ValidationError
from settleup.core.money import within_epsilon
from settleup.models.expense import Expense
from settleup.models.ledger import Edge


def validate_expense(title: str, total_cents: int, splits: Mapping[str, int]) -> None:
    """
    Validate an expense before it is accepted.

    Rules:
    - title must not be blank
    - total must be positive
    - at least one split, none negative
    - splits must sum to the total within one cent
    """
    if not title or not title.strip():
        raise ValidationError("Expense title is required")

    if total_cents <= 0:
        raise ValidationError(f"Expense '{title}' must have a positive total")

    if not splits:
        raise ValidationError(f"Expense '{title}' has no splits")

    for member_id, cents in splits.items():
        if cents < 0:
            raise ValidationError(
                f"Expense '{title}' has a negative split for {member_id}"
            )

    split_sum = sum(splits.values())
    if not within_epsilon(split_sum, total_cents):
        raise ValidationError(
            f"Expense '{title}': splits sum to {split_sum / 100:.2f}, "
            f"total is {total_cents / 100:.2f}"
        )


def compute_balances(expenses: Iterable[Expense]) -> Dict[str, int]:
    """
    Accumulate net balances from an expense history (order does not matter).

    The payer is credited the total and every split member is debited their
    share. When an accepted split sum is a cent off the total, the payer
    absorbs the difference so the group still nets to zero.
    """
    balances: Dict[str, int] = defaultdict(int)

    for expense in expenses:
        split_sum = sum(expense.splits.values())
        balances[expense.paid_by] += expense.total_cents
        for member_id, cents in expense.splits.items():
            balances[member_id] -= cents
        balances[expense.paid_by] -= expense.total_cents - split_sum

    return dict(balances)


def apply_payments(balances: Mapping[str, int], resolved: Iterable[Edge]) -> Dict[str, int]:
    """
    Net out debts that were already paid.

    A resolved edge is a payment from debtor to creditor: the debtor's balance
    goes up and the creditor's goes down by the edge amount.
    """
    remaining: Dict[str, int] = defaultdict(int, balances)
    for edge in resolved:
        remaining[edge.debtor_id] += edge.amount_cents
        remaining[edge.creditor_id] -= edge.amount_cents
    return dict(remaining)
