"""
Pydantic schemas for itinerary items.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal


class LocationCreate(BaseModel):
    """Schema for adding a location. The address is geocoded server-side."""
    address: str


class LocationUpdate(BaseModel):
    """Schema for location update."""
    title: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    notes: Optional[str] = None
    cost: Optional[Decimal] = None
    category: Optional[str] = None


class LocationDayUpdate(BaseModel):
    day: int


class ItineraryReorder(BaseModel):
    """Location ids in their new order."""
    location_ids: List[int]


class LocationResponse(BaseModel):
    """Schema for location response."""
    id: int
    trip_id: int
    title: str
    latitude: float
    longitude: float
    day: Optional[int] = None
    order: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    notes: Optional[str] = None
    cost: Optional[Decimal] = None
    category: Optional[str] = None

    class Config:
        from_attributes = True


class AccommodationBase(BaseModel):
    """Base accommodation schema."""
    name: str
    address: Optional[str] = None
    check_in_date: date
    check_out_date: date
    confirmation_number: Optional[str] = None
    booking_link: Optional[str] = None
    cost: Optional[Decimal] = None
    notes: Optional[str] = None


class AccommodationCreate(AccommodationBase):
    pass


class AccommodationResponse(AccommodationBase):
    id: int
    trip_id: int

    class Config:
        from_attributes = True


class FlightBase(BaseModel):
    """Base flight schema."""
    airline: str
    flight_number: str
    departure_airport: str
    arrival_airport: str
    departure_time: datetime
    arrival_time: datetime
    booking_reference: Optional[str] = None
    cost: Optional[Decimal] = None
    seat_number: Optional[str] = None
    notes: Optional[str] = None


class FlightCreate(FlightBase):
    pass


class FlightResponse(FlightBase):
    id: int
    trip_id: int

    class Config:
        from_attributes = True
