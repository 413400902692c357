"""
Trip service for trip-related business logic.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.exceptions import AuthorizationDenied, NotFoundError, ValidationError
from app.models.share import Role, TripShare
from app.models.trip import Trip
from app.models.user import User
from app.schemas.trip import TripCreate, TripUpdate
from app.services.sharing_service import list_pending_invites
from app.services.permission_service import (
    get_trip_collaborators, require_trip_access
)

logger = logging.getLogger(__name__)


def _validate_dates(start_date: Optional[date], end_date: Optional[date]):
    if not start_date or not end_date:
        raise ValidationError("Missing required fields")
    if start_date > end_date:
        raise ValidationError("Start date must be before end date")


def get_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def create_trip(owner: User, data: TripCreate, db: Session) -> Trip:
    """Create a trip owned by `owner`. Owners never get a share row."""
    if not data.title or not data.title.strip():
        raise ValidationError("Missing required fields")
    _validate_dates(data.start_date, data.end_date)

    trip = Trip(
        owner_id=owner.id,
        title=data.title.strip(),
        description=data.description or None,
        start_date=data.start_date,
        end_date=data.end_date,
        image_url=data.image_url or None
    )
    db.add(trip)
    db.commit()
    db.refresh(trip)

    logger.info(f"Trip {trip.id} created by user {owner.id}")
    return trip


def list_trips(user_id: int, db: Session) -> List[Trip]:
    """Trips the user owns or has been shared, soonest first."""
    shared_trip_ids = db.query(TripShare.trip_id).filter(TripShare.user_id == user_id)
    return db.query(Trip).filter(
        or_(Trip.owner_id == user_id, Trip.id.in_(shared_trip_ids))
    ).order_by(Trip.start_date, Trip.id).all()


def get_trip_detail(trip_id: int, user_id: int, db: Session) -> dict:
    """Trip with its collaborators and the caller's role. Viewer access required."""
    trip = get_trip(trip_id, db)
    access = require_trip_access(trip_id, user_id, db, Role.VIEWER)

    return {
        "trip": trip,
        "collaborators": get_trip_collaborators(trip_id, db),
        "pending_invites": list_pending_invites(trip_id, user_id, db),
        "user_role": access.role,
        "is_owner": access.is_owner,
    }


def update_trip(trip_id: int, user_id: int, data: TripUpdate, db: Session) -> Trip:
    trip = get_trip(trip_id, db)
    require_trip_access(trip_id, user_id, db, Role.EDITOR)

    start_date = data.start_date if data.start_date is not None else trip.start_date
    end_date = data.end_date if data.end_date is not None else trip.end_date
    _validate_dates(start_date, end_date)

    if data.title is not None:
        if not data.title.strip():
            raise ValidationError("Missing required fields")
        trip.title = data.title.strip()
    if data.description is not None:
        trip.description = data.description
    if data.image_url is not None:
        trip.image_url = data.image_url
    trip.start_date = start_date
    trip.end_date = end_date

    db.commit()
    db.refresh(trip)
    return trip


def delete_trip(trip_id: int, user_id: int, db: Session):
    """Only the owner may delete a trip; everything under it cascades."""
    trip = get_trip(trip_id, db)
    if trip.owner_id != user_id:
        raise AuthorizationDenied("Unauthorized to delete this trip")

    db.delete(trip)
    db.commit()
    logger.info(f"Trip {trip_id} deleted by user {user_id}")
