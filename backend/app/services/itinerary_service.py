"""
Itinerary service: locations (with day bucketing and ordering),
accommodations and flights.
"""
import logging
from typing import List
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, ValidationError
from app.models.itinerary import Accommodation, Flight, Location
from app.models.share import Role
from app.schemas.itinerary import AccommodationCreate, FlightCreate, LocationUpdate
from app.services.geocode_service import geocode_address
from app.services.permission_service import require_trip_access

logger = logging.getLogger(__name__)


def list_locations(trip_id: int, user_id: int, db: Session) -> List[Location]:
    """Locations sorted by day then order; unscheduled locations come last."""
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    locations = db.query(Location).filter(Location.trip_id == trip_id).all()
    locations.sort(key=lambda loc: (loc.day is None, loc.day or 0, loc.order, loc.id))
    return locations


def add_location(trip_id: int, user_id: int, address: str, db: Session) -> Location:
    """Geocode an address and append it to the end of the itinerary."""
    require_trip_access(trip_id, user_id, db, Role.EDITOR)

    address = (address or "").strip()
    if not address:
        raise ValidationError("Address is required")

    lat, lng = geocode_address(address)
    count = db.query(Location).filter(Location.trip_id == trip_id).count()

    location = Location(
        trip_id=trip_id,
        title=address,
        latitude=lat,
        longitude=lng,
        order=count
    )
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


def _get_trip_location(location_id: int, trip_id: int, db: Session) -> Location:
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location or location.trip_id != trip_id:
        raise NotFoundError("Location not found")
    return location


def update_location(location_id: int, trip_id: int, user_id: int, data: LocationUpdate, db: Session) -> Location:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    location = _get_trip_location(location_id, trip_id, db)

    if not data.title or not data.title.strip():
        raise ValidationError("Location title is required")

    if data.start_time and data.end_time and data.end_time <= data.start_time:
        raise ValidationError("End time must be after start time")

    if data.cost is not None and data.cost < 0:
        raise ValidationError("Invalid cost amount")

    duration = None
    if data.start_time and data.end_time:
        duration = round((data.end_time - data.start_time).total_seconds() / 60)

    location.title = data.title.strip()
    location.start_time = data.start_time
    location.end_time = data.end_time
    location.duration = duration
    location.notes = data.notes or None
    location.cost = data.cost
    location.category = data.category or None

    db.commit()
    db.refresh(location)
    return location


def update_location_day(location_id: int, new_day: int, trip_id: int, user_id: int, db: Session) -> Location:
    """Move a location into a day, placing it after the locations already there."""
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    location = _get_trip_location(location_id, trip_id, db)

    in_target_day = db.query(Location).filter(
        Location.trip_id == trip_id,
        Location.day == new_day,
        Location.id != location_id
    ).count()

    location.day = new_day
    location.order = in_target_day
    db.commit()
    db.refresh(location)
    return location


def reorder_itinerary(trip_id: int, user_id: int, location_ids: List[int], db: Session) -> int:
    """
    Set each location's order to its index in `location_ids`.

    Ids belonging to other trips are skipped. Returns the number updated.
    """
    require_trip_access(trip_id, user_id, db, Role.EDITOR)

    updated = 0
    try:
        for index, location_id in enumerate(location_ids):
            updated += db.query(Location).filter(
                Location.id == location_id,
                Location.trip_id == trip_id
            ).update({Location.order: index}, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return updated


def delete_location(location_id: int, trip_id: int, user_id: int, db: Session):
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    location = _get_trip_location(location_id, trip_id, db)
    db.delete(location)
    db.commit()


def _validate_accommodation(data: AccommodationCreate):
    if not data.name or not data.check_in_date or not data.check_out_date:
        raise ValidationError("Name, check-in date, and check-out date are required")
    if data.check_out_date <= data.check_in_date:
        raise ValidationError("Check-out date must be after check-in date")


def _get_trip_item(model, item_id: int, trip_id: int, label: str, db: Session):
    item = db.query(model).filter(model.id == item_id).first()
    if not item or item.trip_id != trip_id:
        raise NotFoundError(f"{label} not found")
    return item


def list_accommodations(trip_id: int, user_id: int, db: Session) -> List[Accommodation]:
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    return db.query(Accommodation).filter(
        Accommodation.trip_id == trip_id
    ).order_by(Accommodation.check_in_date, Accommodation.id).all()


def add_accommodation(trip_id: int, user_id: int, data: AccommodationCreate, db: Session) -> Accommodation:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    _validate_accommodation(data)

    accommodation = Accommodation(trip_id=trip_id, **data.model_dump())
    db.add(accommodation)
    db.commit()
    db.refresh(accommodation)
    return accommodation


def update_accommodation(
    accommodation_id: int, trip_id: int, user_id: int, data: AccommodationCreate, db: Session
) -> Accommodation:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    accommodation = _get_trip_item(Accommodation, accommodation_id, trip_id, "Accommodation", db)
    _validate_accommodation(data)

    for key, value in data.model_dump().items():
        setattr(accommodation, key, value)
    db.commit()
    db.refresh(accommodation)
    return accommodation


def delete_accommodation(accommodation_id: int, trip_id: int, user_id: int, db: Session):
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    accommodation = _get_trip_item(Accommodation, accommodation_id, trip_id, "Accommodation", db)
    db.delete(accommodation)
    db.commit()


def _validate_flight(data: FlightCreate):
    required = (
        data.airline, data.flight_number, data.departure_airport,
        data.arrival_airport, data.departure_time, data.arrival_time
    )
    if not all(required):
        raise ValidationError("Airline, flight number, airports, and times are required")
    if data.arrival_time <= data.departure_time:
        raise ValidationError("Arrival time must be after departure time")


def list_flights(trip_id: int, user_id: int, db: Session) -> List[Flight]:
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    return db.query(Flight).filter(
        Flight.trip_id == trip_id
    ).order_by(Flight.departure_time, Flight.id).all()


def add_flight(trip_id: int, user_id: int, data: FlightCreate, db: Session) -> Flight:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    _validate_flight(data)

    flight = Flight(trip_id=trip_id, **data.model_dump())
    db.add(flight)
    db.commit()
    db.refresh(flight)
    return flight


def update_flight(flight_id: int, trip_id: int, user_id: int, data: FlightCreate, db: Session) -> Flight:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    flight = _get_trip_item(Flight, flight_id, trip_id, "Flight", db)
    _validate_flight(data)

    for key, value in data.model_dump().items():
        setattr(flight, key, value)
    db.commit()
    db.refresh(flight)
    return flight


def delete_flight(flight_id: int, trip_id: int, user_id: int, db: Session):
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    flight = _get_trip_item(Flight, flight_id, trip_id, "Flight", db)
    db.delete(flight)
    db.commit()
