"""
Pydantic schemas for Payment entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from app.models.payment import SplitType


class SplitInput(BaseModel):
    """One participant in a split. `amount` is used for custom splits, `percentage` for percentage splits."""
    user_id: int
    amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None


class PaymentCreate(BaseModel):
    """Schema for payment creation. The payer is the current user."""
    description: str
    amount: Decimal
    currency: Optional[str] = None
    category: Optional[str] = None
    split_type: SplitType = SplitType.EQUAL
    splits: List[SplitInput]
    expense_id: Optional[int] = None
    accommodation_id: Optional[int] = None
    flight_id: Optional[int] = None
    location_id: Optional[int] = None


class PaymentUpdate(BaseModel):
    """Schema for payment update. Any split-related field triggers a full split replacement."""
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    split_type: Optional[SplitType] = None
    splits: Optional[List[SplitInput]] = None


class PaymentSplitResponse(BaseModel):
    """Schema for payment split response."""
    id: int
    user_id: int
    amount: Decimal
    settled: bool
    settled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentResponse(BaseModel):
    """Schema for payment response."""
    id: int
    trip_id: int
    paid_by: int
    amount: Decimal
    currency: str
    description: str
    category: Optional[str] = None
    split_type: SplitType
    expense_id: Optional[int] = None
    accommodation_id: Optional[int] = None
    flight_id: Optional[int] = None
    location_id: Optional[int] = None
    splits: List[PaymentSplitResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
