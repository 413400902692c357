"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal


class ExpenseBase(BaseModel):
    """Base expense schema."""
    description: str
    amount: Decimal
    category: str


class ExpenseCreate(ExpenseBase):
    """Schema for expense creation."""
    pass


class ExpenseResponse(ExpenseBase):
    """Schema for expense response."""
    id: int
    trip_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
