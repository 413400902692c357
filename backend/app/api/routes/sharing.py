"""
Sharing routes: invites and collaborator roles.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.share import (
    InviteCreate, InviteResponse, InviteAcceptResponse, ShareRoleUpdate, ShareResponse
)
from app.api.dependencies import get_current_user
from app.services import sharing_service

router = APIRouter(tags=["sharing"])


@router.post("/trips/{trip_id}/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def send_invite(
    trip_id: int,
    invite: InviteCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Invite someone by email. Admin access required."""
    return sharing_service.send_invite(trip_id, current_user, invite.email, invite.role, db)


@router.get("/trips/{trip_id}/invites", response_model=List[InviteResponse])
async def list_invites(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending invites for a trip."""
    return sharing_service.list_pending_invites(trip_id, current_user.id, db)


@router.delete("/trips/{trip_id}/invites/{invite_id}")
async def cancel_invite(
    trip_id: int,
    invite_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel a pending invite. Admin access required."""
    sharing_service.cancel_invite(invite_id, trip_id, current_user.id, db)
    return {"message": "Invite cancelled"}


@router.post("/invites/{token}/accept", response_model=InviteAcceptResponse)
async def accept_invite(
    token: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept an invite sent to the current user's email."""
    invite = sharing_service.accept_invite(token, current_user, db)
    return InviteAcceptResponse(trip_id=invite.trip_id, trip_title=invite.trip.title)


@router.patch("/trips/{trip_id}/shares/{share_id}", response_model=ShareResponse)
async def update_share_role(
    trip_id: int,
    share_id: int,
    update: ShareRoleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change a collaborator's role. Admin roles are owner-managed."""
    return sharing_service.update_share_role(share_id, trip_id, current_user.id, update.role, db)


@router.delete("/trips/{trip_id}/shares/{share_id}")
async def remove_share(
    trip_id: int,
    share_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a collaborator from the trip."""
    sharing_service.remove_share(share_id, trip_id, current_user.id, db)
    return {"message": "Collaborator removed"}
