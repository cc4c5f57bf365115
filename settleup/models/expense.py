from datetime import datetime
from decimal import Decimal
from typing import Dict, Any

from pydantic import BaseModel, Field, field_validator

from settleup.core.money import from_cents
from settleup.models.base import _utcnow, new_id


class Expense(BaseModel):
    """An accepted expense. Immutable, appended to its group's history."""
    id: str = Field(default_factory=new_id)
    group_id: str
    title: str
    total_cents: int
    paid_by: str
    splits: Dict[str, int]  # member id -> cents owed for this expense
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("splits", mode="before")
    @classmethod
    def _splits_from_document(cls, value: Any) -> Any:
        # Stored as a list because member ids contain dots
        if isinstance(value, list):
            return {row["member_id"]: row["amount_cents"] for row in value}
        return value

    @property
    def total_amount(self) -> Decimal:
        return from_cents(self.total_cents)

    def to_document(self) -> dict:
        doc = self.model_dump(mode="python")
        doc["splits"] = [
            {"member_id": member_id, "amount_cents": cents}
            for member_id, cents in self.splits.items()
        ]
        return doc
