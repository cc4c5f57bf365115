from fastapi import APIRouter, Depends, status

from settleup.api.errors import http_error
from settleup.core.exceptions import LedgerError
from settleup.db.mongo import get_db
from settleup.schemas.expense import CheckoutRequest, ExpenseCreate
from settleup.schemas.group import GroupCreate, GroupMembersAdd, GroupNameCheck, GroupResponse
from settleup.schemas.ledger import EdgeResponse, GroupBalancesResponse, GroupEdgesResponse
from settleup.schemas.settlement import ResolveRequest, ResolveResponse
from settleup.services.expense_service import ExpenseService
from settleup.services.group_service import GroupService
from settleup.services.ledger_service import EdgeLedger
from settleup.services.settlement_service import SettlementProcessor

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(group_data: GroupCreate, db = Depends(get_db)):
    """Create an active group."""
    try:
        group = await GroupService(db).create_group(group_data.name, group_data.member_ids)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupResponse.from_group(group)


@router.get("/check-name", response_model=GroupNameCheck)
async def check_name(name: str = "", db = Depends(get_db)):
    """Check whether a group name is already taken."""
    try:
        group = await GroupService(db).find_group_by_name(name)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupNameCheck(exists=group is not None, group_id=group.id if group else None)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: str, db = Depends(get_db)):
    try:
        group = await GroupService(db).get_group(group_id)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupResponse.from_group(group)


@router.post("/{group_id}/members", response_model=GroupResponse)
async def add_members(group_id: str, payload: GroupMembersAdd, db = Depends(get_db)):
    try:
        group = await GroupService(db).add_members(group_id, payload.member_ids)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupResponse.from_group(group)


@router.post("/{group_id}/expenses", response_model=GroupEdgesResponse)
async def record_expense(group_id: str, expense: ExpenseCreate, db = Depends(get_db)):
    """
    Record an expense and recompute the group's edges.

    Returns the pending edges after the recompute.
    """
    try:
        edges = await ExpenseService(db).record_expenses(group_id, [expense])
    except LedgerError as exc:
        raise http_error(exc)
    return GroupEdgesResponse(group_id=group_id, edges=[EdgeResponse.from_edge(e) for e in edges])


@router.post("/{group_id}/checkout", response_model=GroupEdgesResponse)
async def checkout(group_id: str, payload: CheckoutRequest, db = Depends(get_db)):
    """Record a batch of expenses with a single recompute."""
    try:
        edges = await ExpenseService(db).record_expenses(group_id, payload.expenses)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupEdgesResponse(group_id=group_id, edges=[EdgeResponse.from_edge(e) for e in edges])


@router.get("/{group_id}/edges", response_model=GroupEdgesResponse)
async def get_edges(group_id: str, db = Depends(get_db)):
    """Resolved edges kept for history, then the pending ones."""
    try:
        edges = await EdgeLedger(db).get_edges(group_id)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupEdgesResponse(group_id=group_id, edges=[EdgeResponse.from_edge(e) for e in edges])


@router.get("/{group_id}/balances", response_model=GroupBalancesResponse)
async def get_balances(group_id: str, db = Depends(get_db)):
    try:
        balances = await EdgeLedger(db).get_balances(group_id)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupBalancesResponse.from_cents_map(group_id, balances)


@router.post("/{group_id}/recompute", response_model=GroupEdgesResponse)
async def recompute(group_id: str, db = Depends(get_db)):
    try:
        edges = await EdgeLedger(db).recompute(group_id)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupEdgesResponse(group_id=group_id, edges=[EdgeResponse.from_edge(e) for e in edges])


@router.post("/{group_id}/resolve", response_model=ResolveResponse)
async def resolve_edge(group_id: str, payload: ResolveRequest, db = Depends(get_db)):
    """Mark a pending edge as paid."""
    try:
        return await SettlementProcessor(db).resolve_edge(
            group_id,
            payload.from_id,
            payload.to_id,
            keep_active=payload.keep_active
        )
    except LedgerError as exc:
        raise http_error(exc)


@router.post("/{group_id}/complete", response_model=GroupResponse)
async def complete_group(group_id: str, db = Depends(get_db)):
    """Complete a group with no pending edges and schedule its deletion."""
    try:
        group = await SettlementProcessor(db).complete_group(group_id)
    except LedgerError as exc:
        raise http_error(exc)
    return GroupResponse.from_group(group)
