from typing import List, Optional
from fastapi import APIRouter, Depends

from settleup.db.mongo import get_db
from settleup.models.group import GroupStatus
from settleup.schemas.group import GroupResponse
from settleup.schemas.views import AwaitingGroup, HistoryGroup, PendingGroup
from settleup.services.group_service import GroupService
from settleup.services.query_service import QueryViews

router = APIRouter()


@router.get("/{user_id}/awaiting", response_model=List[AwaitingGroup])
async def get_awaiting(user_id: str, db = Depends(get_db)):
    """Payments the user is waiting to receive."""
    return await QueryViews(db).get_awaiting(user_id)


@router.get("/{user_id}/pending", response_model=List[PendingGroup])
async def get_pending(user_id: str, db = Depends(get_db)):
    """Payments the user still has to make, with what they already paid."""
    return await QueryViews(db).get_pending(user_id)


@router.get("/{user_id}/history", response_model=List[HistoryGroup])
async def get_history(user_id: str, db = Depends(get_db)):
    """Completed groups the user took part in."""
    return await QueryViews(db).get_history(user_id)


@router.get("/{user_id}/groups", response_model=List[GroupResponse])
async def list_groups(user_id: str, status: Optional[GroupStatus] = None, db = Depends(get_db)):
    """Groups the user belongs to, newest first."""
    groups = await GroupService(db).list_groups(user_id, status=status)
    return [GroupResponse.from_group(group) for group in groups]
