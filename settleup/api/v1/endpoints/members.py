from fastapi import APIRouter, Depends

from settleup.api.errors import http_error
from settleup.core.exceptions import LedgerError
from settleup.db.mongo import get_db
from settleup.schemas.member import MemberResponse, MemberUpsert
from settleup.services.group_service import GroupService

router = APIRouter()


@router.put("/{user_id}", response_model=MemberResponse)
async def upsert_member(user_id: str, payload: MemberUpsert, db = Depends(get_db)):
    """Set the display name shown for a member in the views."""
    try:
        member = await GroupService(db).upsert_member(user_id, payload.display_name)
    except LedgerError as exc:
        raise http_error(exc)
    return MemberResponse(
        user_id=member.user_id,
        display_name=member.display_name,
        updated_at=member.updated_at
    )
