"""
Pydantic schemas for settlement summaries.
"""
from pydantic import BaseModel
from typing import List
from decimal import Decimal


class BalanceItem(BaseModel):
    """Net balance for one collaborator. Positive = is owed money."""
    user_id: int
    name: str
    balance: Decimal


class Debt(BaseModel):
    """Schema for a single transfer in the settlement."""
    from_user_id: int
    from_name: str
    to_user_id: int
    to_name: str
    amount: Decimal


class SettlementSummary(BaseModel):
    """Schema for the trip's settlement summary."""
    trip_id: int
    total_paid: Decimal
    my_total_paid: Decimal
    my_total_owed: Decimal  # Unsettled amounts the current user still owes
    balances: List[BalanceItem]
    debts: List[Debt]


class SettleAllRequest(BaseModel):
    """Settle everything `from_user_id` owes `to_user_id` on a trip."""
    from_user_id: int
    to_user_id: int


class SettleAllResponse(BaseModel):
    settled_count: int
