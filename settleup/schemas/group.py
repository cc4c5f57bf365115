from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from settleup.models.group import Group, GroupStatus


class GroupCreate(BaseModel):
    """Schema for creating a group"""
    name: str = Field(..., min_length=1, max_length=100)
    member_ids: List[str] = Field(..., min_length=1)


class GroupMembersAdd(BaseModel):
    member_ids: List[str] = Field(..., min_length=1)


class GroupResponse(BaseModel):
    """Group summary without the expense history."""
    id: str
    name: str
    member_ids: List[str]
    status: GroupStatus
    expense_count: int
    pending_edge_count: int
    version: int
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    scheduled_deletion_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_group(cls, group: Group) -> "GroupResponse":
        return cls(
            id=group.id,
            name=group.name,
            member_ids=group.member_ids,
            status=group.status,
            expense_count=len(group.expenses),
            pending_edge_count=len(group.pending_edges()),
            version=group.version,
            created_at=group.created_at,
            updated_at=group.updated_at,
            completed_at=group.completed_at,
            scheduled_deletion_at=group.scheduled_deletion_at
        )


class GroupNameCheck(BaseModel):
    """Whether a group already uses a name."""
    exists: bool
    group_id: Optional[str] = None
