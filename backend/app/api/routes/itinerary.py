"""
Itinerary routes: locations, accommodations and flights.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.itinerary import (
    LocationCreate, LocationUpdate, LocationDayUpdate, ItineraryReorder, LocationResponse,
    AccommodationCreate, AccommodationResponse, FlightCreate, FlightResponse
)
from app.api.dependencies import get_current_user
from app.services import itinerary_service

router = APIRouter(prefix="/trips/{trip_id}", tags=["itinerary"])


@router.get("/locations", response_model=List[LocationResponse])
async def list_locations(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Itinerary in day/order sequence."""
    return itinerary_service.list_locations(trip_id, current_user.id, db)


@router.post("/locations", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def add_location(
    trip_id: int,
    data: LocationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Geocode an address and append it to the itinerary."""
    return itinerary_service.add_location(trip_id, current_user.id, data.address, db)


@router.put("/locations/order")
async def reorder_itinerary(
    trip_id: int,
    data: ItineraryReorder,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Persist a drag-and-drop reorder."""
    updated = itinerary_service.reorder_itinerary(trip_id, current_user.id, data.location_ids, db)
    return {"updated": updated}


@router.put("/locations/{location_id}", response_model=LocationResponse)
async def update_location(
    trip_id: int,
    location_id: int,
    data: LocationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.update_location(location_id, trip_id, current_user.id, data, db)


@router.put("/locations/{location_id}/day", response_model=LocationResponse)
async def update_location_day(
    trip_id: int,
    location_id: int,
    data: LocationDayUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Move a location to another day."""
    return itinerary_service.update_location_day(location_id, data.day, trip_id, current_user.id, db)


@router.delete("/locations/{location_id}")
async def delete_location(
    trip_id: int,
    location_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    itinerary_service.delete_location(location_id, trip_id, current_user.id, db)
    return {"message": "Location deleted"}


@router.get("/accommodations", response_model=List[AccommodationResponse])
async def list_accommodations(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.list_accommodations(trip_id, current_user.id, db)


@router.post("/accommodations", response_model=AccommodationResponse, status_code=status.HTTP_201_CREATED)
async def add_accommodation(
    trip_id: int,
    data: AccommodationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.add_accommodation(trip_id, current_user.id, data, db)


@router.put("/accommodations/{accommodation_id}", response_model=AccommodationResponse)
async def update_accommodation(
    trip_id: int,
    accommodation_id: int,
    data: AccommodationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.update_accommodation(accommodation_id, trip_id, current_user.id, data, db)


@router.delete("/accommodations/{accommodation_id}")
async def delete_accommodation(
    trip_id: int,
    accommodation_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    itinerary_service.delete_accommodation(accommodation_id, trip_id, current_user.id, db)
    return {"message": "Accommodation deleted"}


@router.get("/flights", response_model=List[FlightResponse])
async def list_flights(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.list_flights(trip_id, current_user.id, db)


@router.post("/flights", response_model=FlightResponse, status_code=status.HTTP_201_CREATED)
async def add_flight(
    trip_id: int,
    data: FlightCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.add_flight(trip_id, current_user.id, data, db)


@router.put("/flights/{flight_id}", response_model=FlightResponse)
async def update_flight(
    trip_id: int,
    flight_id: int,
    data: FlightCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return itinerary_service.update_flight(flight_id, trip_id, current_user.id, data, db)


@router.delete("/flights/{flight_id}")
async def delete_flight(
    trip_id: int,
    flight_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    itinerary_service.delete_flight(flight_id, trip_id, current_user.id, db)
    return {"message": "Flight deleted"}
