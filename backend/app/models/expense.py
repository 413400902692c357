"""
Expense model for budget tracking.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Expense(BaseModel):
    """Budget line for the trip. Who paid for it is tracked by Payment."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(String(50), nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    payment = relationship("Payment", back_populates="expense", uselist=False)
