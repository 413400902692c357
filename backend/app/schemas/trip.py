"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from app.models.share import Role
from app.schemas.share import CollaboratorResponse, InviteResponse


class TripBase(BaseModel):
    """Base trip schema."""
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    image_url: Optional[str] = None


class TripCreate(TripBase):
    """Schema for trip creation."""
    pass


class TripUpdate(BaseModel):
    """Schema for trip update."""
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    image_url: Optional[str] = None


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with collaborators and the caller's role."""
    collaborators: List[CollaboratorResponse] = []
    pending_invites: List[InviteResponse] = []
    user_role: Role
    is_owner: bool
