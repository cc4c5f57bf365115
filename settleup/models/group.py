from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from settleup.models.base import _utcnow, new_id
from settleup.models.expense import Expense
from settleup.models.ledger import Edge, EdgeStatus


class GroupStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Group(BaseModel):
    """
    A group's whole ledger state lives in one document: members, the
    append-only expense history and the current edge set. Every mutation is
    committed as a single version-checked write.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(default_factory=new_id, alias="_id")
    name: str
    member_ids: List[str] = []
    status: GroupStatus = GroupStatus.ACTIVE

    expenses: List[Expense] = []
    edges: List[Edge] = []

    version: int = 1
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None
    scheduled_deletion_at: Optional[datetime] = None

    def is_member(self, user_id: str) -> bool:
        return user_id in self.member_ids

    def is_completed(self) -> bool:
        return self.status == GroupStatus.COMPLETED

    def pending_edges(self) -> List[Edge]:
        return [edge for edge in self.edges if edge.status == EdgeStatus.PENDING]

    def resolved_edges(self) -> List[Edge]:
        return [edge for edge in self.edges if edge.status == EdgeStatus.RESOLVED]

    def all_resolved(self) -> bool:
        """True when nothing is pending (including a group with no edges)."""
        return not self.pending_edges()

    def mark_completed(self, now: datetime, retention_days: int) -> "Group":
        return self.model_copy(update={
            "status": GroupStatus.COMPLETED.value,
            "completed_at": now,
            "scheduled_deletion_at": now + timedelta(days=retention_days),
        })
