from decimal import Decimal
from typing import Dict, List
from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    """An expense as submitted by the checkout collaborator."""
    title: str
    total_amount: Decimal
    paid_by: str
    splits: Dict[str, Decimal]  # member id -> amount owed


class CheckoutRequest(BaseModel):
    """Several expenses recorded against one group in a single commit."""
    expenses: List[ExpenseCreate] = Field(..., min_length=1)
