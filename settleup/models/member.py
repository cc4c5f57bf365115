from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from settleup.models.base import _utcnow


def normalize_member_id(user_id: str) -> str:
    """User ids are e-mail addresses; compare them trimmed and lower-cased."""
    return user_id.strip().lower()


def default_display_name(user_id: str) -> str:
    """Fallback name when a member never registered one."""
    return user_id.split("@")[0] or user_id


class Member(BaseModel):
    """A person who can take part in groups. Referenced by id from ledger state."""
    user_id: str = Field(alias="_id")
    display_name: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(populate_by_name=True)
