"""
Payment models for shared spending and who owes whom.
"""
from sqlalchemy import Column, String, Numeric, Boolean, DateTime, Enum as SQLEnum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class SplitType(str, enum.Enum):
    """How a payment amount is divided between participants."""
    EQUAL = "equal"
    CUSTOM = "custom"
    PERCENTAGE = "percentage"


class Payment(BaseModel):
    """One real-world expenditure fronted by a single payer."""
    __tablename__ = "payments"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    paid_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="SGD")
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=True)
    split_type = Column(SQLEnum(SplitType), default=SplitType.EQUAL, nullable=False)

    # Optional links to the trip item this payment covers
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="SET NULL"), nullable=True)
    accommodation_id = Column(Integer, ForeignKey("accommodations.id", ondelete="SET NULL"), nullable=True)
    flight_id = Column(Integer, ForeignKey("flights.id", ondelete="SET NULL"), nullable=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="payments")
    payer = relationship("User", foreign_keys=[paid_by], back_populates="payments_made")
    expense = relationship("Expense", back_populates="payment")
    accommodation = relationship("Accommodation", back_populates="payments")
    flight = relationship("Flight", back_populates="payments")
    location = relationship("Location", back_populates="payments")
    splits = relationship(
        "PaymentSplit",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaymentSplit.id",
    )


class PaymentSplit(BaseModel):
    """A participant's share of a payment. The payer's own split is settled on creation."""
    __tablename__ = "payment_splits"

    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    settled = Column(Boolean, default=False, nullable=False)
    settled_at = Column(DateTime, nullable=True)

    # Relationships
    payment = relationship("Payment", back_populates="splits")
    user = relationship("User", back_populates="payment_splits")
