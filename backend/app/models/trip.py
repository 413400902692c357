"""
Trip model for collaborative trip planning.
"""
from sqlalchemy import Column, String, Date, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Trip(BaseModel):
    """Trip owned by one user and shared with collaborators through TripShare rows."""
    __tablename__ = "trips"

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    image_url = Column(String(500), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="owned_trips")
    shares = relationship("TripShare", back_populates="trip", cascade="all, delete-orphan")
    invites = relationship("TripInvite", back_populates="trip", cascade="all, delete-orphan")
    locations = relationship("Location", back_populates="trip", cascade="all, delete-orphan")
    accommodations = relationship("Accommodation", back_populates="trip", cascade="all, delete-orphan")
    flights = relationship("Flight", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="trip", cascade="all, delete-orphan")
