from datetime import datetime
from pydantic import BaseModel, Field


class MemberUpsert(BaseModel):
    """Schema for setting a member's display name"""
    display_name: str = Field(..., min_length=1, max_length=100)


class MemberResponse(BaseModel):
    user_id: str
    display_name: str
    updated_at: datetime
