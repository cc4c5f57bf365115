"""
Greedy debt simplification.

Given net balances, produce a small set of directed debts that settles every
member. The largest creditor is repeatedly matched with the largest debtor;
each match clears at least one of the two, so N members with a non-zero
balance need at most N-1 edges. This is a heuristic: the exact minimum
transaction count is NP-hard for three or more parties.
"""

import heapq
from typing import List, Mapping, Tuple

from settleup.core.exceptions import ValidationError
from settleup.core.money import EPSILON_CENTS
from settleup.models.ledger import Edge


def simplify(balances: Mapping[str, int]) -> List[Edge]:
    """
    Reduce balances (integer cents, positive = is owed) to pending edges.

    Ties are broken by member id, so the result only depends on the balance
    values and not on the mapping's iteration order.
    """
    # Heaps of (-amount, member_id): largest amount first, then lowest id
    creditors: List[Tuple[int, str]] = []
    debtors: List[Tuple[int, str]] = []

    for member_id, cents in balances.items():
        if cents > 0:
            heapq.heappush(creditors, (-cents, member_id))
        elif cents < 0:
            heapq.heappush(debtors, (cents, member_id))

    participants = len(creditors) + len(debtors)
    edges: List[Edge] = []

    while creditors and debtors:
        credit, creditor_id = heapq.heappop(creditors)
        debt, debtor_id = heapq.heappop(debtors)
        credit, debt = -credit, -debt

        settle = min(credit, debt)
        edges.append(Edge(debtor_id=debtor_id, creditor_id=creditor_id, amount_cents=settle))

        # Integer cents: even a one-cent remainder is still owed
        if credit - settle > 0:
            heapq.heappush(creditors, (-(credit - settle), creditor_id))
        if debt - settle > 0:
            heapq.heappush(debtors, (-(debt - settle), debtor_id))

    residual = sum(-amount for amount, _ in creditors) - sum(-amount for amount, _ in debtors)
    if residual:
        if abs(residual) > EPSILON_CENTS * participants:
            raise ValidationError(
                f"Balances do not net to zero (off by {residual / 100:.2f})"
            )
        # Rounding leftovers go to the last settled edge
        if edges:
            last = edges[-1]
            edges[-1] = last.model_copy(update={"amount_cents": last.amount_cents + abs(residual)})

    return edges
