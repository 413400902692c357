"""
Pydantic schemas for sharing: collaborators, roles and invites.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.models.share import Role


class CollaboratorResponse(BaseModel):
    """Owner or shared user on a trip."""
    id: int
    username: str
    name: Optional[str] = None
    email: str
    role: Role
    share_id: Optional[int] = None


class InviteCreate(BaseModel):
    """Schema for sending an invite. Only viewer or editor may be invited."""
    email: str
    role: Role = Role.VIEWER


class InviteResponse(BaseModel):
    """Schema for invite response."""
    id: int
    trip_id: int
    email: str
    role: Role
    token: str
    expires_at: datetime
    accepted: bool
    created_at: datetime

    class Config:
        from_attributes = True


class InviteAcceptResponse(BaseModel):
    trip_id: int
    trip_title: str


class ShareRoleUpdate(BaseModel):
    """Schema for changing a collaborator's role."""
    role: Role


class ShareResponse(BaseModel):
    """Schema for share response."""
    id: int
    trip_id: int
    user_id: int
    role: Role

    class Config:
        from_attributes = True
