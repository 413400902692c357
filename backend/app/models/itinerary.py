"""
Itinerary models: locations, accommodations and flights.
"""
from sqlalchemy import Column, String, Date, DateTime, Float, Numeric, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Location(BaseModel):
    """Itinerary stop. Ordered by (day, order); day is None until scheduled."""
    __tablename__ = "locations"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    day = Column(Integer, nullable=True, index=True)
    order = Column(Integer, nullable=False, default=0)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=True)  # Minutes, derived from start/end time
    notes = Column(Text, nullable=True)
    cost = Column(Numeric(15, 2), nullable=True)
    category = Column(String(50), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="locations")
    # Deleting the item unlinks any payment that covered it
    payments = relationship("Payment", back_populates="location")


class Accommodation(BaseModel):
    """Hotel or rental booked for the trip."""
    __tablename__ = "accommodations"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(300), nullable=True)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    confirmation_number = Column(String(100), nullable=True)
    booking_link = Column(String(500), nullable=True)
    cost = Column(Numeric(15, 2), nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="accommodations")
    # Deleting the item unlinks any payment that covered it
    payments = relationship("Payment", back_populates="accommodation")


class Flight(BaseModel):
    """Flight leg booked for the trip."""
    __tablename__ = "flights"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    airline = Column(String(100), nullable=False)
    flight_number = Column(String(20), nullable=False)
    departure_airport = Column(String(100), nullable=False)
    arrival_airport = Column(String(100), nullable=False)
    departure_time = Column(DateTime, nullable=False)
    arrival_time = Column(DateTime, nullable=False)
    booking_reference = Column(String(100), nullable=True)
    cost = Column(Numeric(15, 2), nullable=True)
    seat_number = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="flights")
    # Deleting the item unlinks any payment that covered it
    payments = relationship("Payment", back_populates="flight")
