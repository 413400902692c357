"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.trip import TripCreate, TripUpdate, TripResponse, TripDetailResponse
from app.schemas.share import CollaboratorResponse, InviteResponse
from app.api.dependencies import get_current_user
from app.services import trip_service
from app.services.permission_service import get_trip_collaborators, require_trip_access

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip owned by the current user."""
    return trip_service.create_trip(current_user, trip_data, db)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List owned and shared trips."""
    return trip_service.list_trips(current_user.id, db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get trip details with collaborators."""
    detail = trip_service.get_trip_detail(trip_id, current_user.id, db)
    return TripDetailResponse(
        **TripResponse.model_validate(detail["trip"]).model_dump(),
        collaborators=detail["collaborators"],
        pending_invites=[InviteResponse.model_validate(i) for i in detail["pending_invites"]],
        user_role=detail["user_role"],
        is_owner=detail["is_owner"]
    )


@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a trip. Editor access required."""
    return trip_service.update_trip(trip_id, current_user.id, trip_data, db)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a trip. Owner only."""
    trip_service.delete_trip(trip_id, current_user.id, db)
    return {"message": "Trip deleted successfully"}


@router.get("/{trip_id}/collaborators", response_model=List[CollaboratorResponse])
async def get_collaborators(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Owner and shared users with their roles."""
    require_trip_access(trip_id, current_user.id, db)
    return get_trip_collaborators(trip_id, db)
