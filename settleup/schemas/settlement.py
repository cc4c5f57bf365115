from pydantic import BaseModel, Field, ConfigDict

from settleup.models.group import GroupStatus


class ResolveRequest(BaseModel):
    """Mark the pending edge ``from`` -> ``to`` as paid."""
    from_id: str = Field(validation_alias="from")
    to_id: str = Field(validation_alias="to")
    keep_active: bool = True

    model_config = ConfigDict(populate_by_name=True)


class ResolveResponse(BaseModel):
    group_id: str
    group_name: str
    group_status: GroupStatus
    all_resolved: bool
