from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from settleup.core.money import from_cents
from settleup.models.ledger import Edge, EdgeStatus


class EdgeResponse(BaseModel):
    """An edge as shown to clients: ``from`` pays ``to``."""
    from_id: str = Field(serialization_alias="from")
    to_id: str = Field(serialization_alias="to")
    amount: Decimal
    status: EdgeStatus
    from_name: Optional[str] = None
    to_name: Optional[str] = None
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_edge(cls, edge: Edge, names: Optional[Dict[str, str]] = None) -> "EdgeResponse":
        names = names or {}
        return cls(
            from_id=edge.debtor_id,
            to_id=edge.creditor_id,
            amount=edge.amount,
            status=edge.status,
            from_name=names.get(edge.debtor_id),
            to_name=names.get(edge.creditor_id),
            resolved_at=edge.resolved_at
        )


class GroupEdgesResponse(BaseModel):
    group_id: str
    edges: List[EdgeResponse]


class GroupBalancesResponse(BaseModel):
    """Net balance per member; positive = is owed, negative = owes."""
    group_id: str
    balances: Dict[str, Decimal]

    @classmethod
    def from_cents_map(cls, group_id: str, balances: Dict[str, int]) -> "GroupBalancesResponse":
        return cls(
            group_id=group_id,
            balances={member_id: from_cents(cents) for member_id, cents in balances.items()}
        )
