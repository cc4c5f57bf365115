from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from settleup.models.group import GroupStatus
from settleup.schemas.ledger import EdgeResponse


class AwaitingGroup(BaseModel):
    """Money owed to the user within one group."""
    group_id: str
    group_name: str
    edges: List[EdgeResponse]


class PendingGroup(BaseModel):
    """Money the user owes within one group, plus what they already paid."""
    group_id: str
    group_name: str
    group_status: GroupStatus
    pending_edges: List[EdgeResponse]
    resolved_edges: List[EdgeResponse]


class HistoryGroup(BaseModel):
    group_id: str
    group_name: str
    completed_at: Optional[datetime] = None
    scheduled_deletion_at: Optional[datetime] = None
    edges: List[EdgeResponse]
