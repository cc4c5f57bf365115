"""
Ledger model - directed debts between group members.

Design principles:
- One pending edge per (debtor, creditor) pair, produced by recompute
- Amounts in integer cents, always > 0
- Status: pending → resolved (terminal)
- Resolved edges are kept for display and count as payments already made
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from settleup.core.money import from_cents
from settleup.models.base import _utcnow


class EdgeStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class Edge(BaseModel):
    """
    Debt: debtor owes creditor amount_cents.

    Invariants:
    - debtor_id != creditor_id
    - amount_cents > 0
    - Only status/resolved_at change after creation
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    group_id: Optional[str] = None
    debtor_id: str    # Who owes money ("from")
    creditor_id: str  # Who is owed money ("to")
    amount_cents: int = Field(gt=0)
    status: EdgeStatus = EdgeStatus.PENDING

    created_at: datetime = Field(default_factory=_utcnow)
    resolved_at: Optional[datetime] = None

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)

    def is_pending(self) -> bool:
        return self.status == EdgeStatus.PENDING

    def connects(self, debtor_id: str, creditor_id: str) -> bool:
        return self.debtor_id == debtor_id and self.creditor_id == creditor_id
