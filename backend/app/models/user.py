"""
User model for authentication and user management.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class User(BaseModel):
    """User model with immutable username."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    owned_trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan")
    shares = relationship("TripShare", foreign_keys="TripShare.user_id", back_populates="user", cascade="all, delete-orphan")
    payments_made = relationship("Payment", foreign_keys="Payment.paid_by", back_populates="payer")
    payment_splits = relationship("PaymentSplit", back_populates="user")
