"""
Sharing service: invites, collaborator roles and removal.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import List
import httpx
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import AuthorizationDenied, ConflictError, NotFoundError, ValidationError
from app.models.payment import Payment, PaymentSplit
from app.models.share import INVITE_ROLES, SHARE_ROLES, Role, TripInvite, TripShare
from app.models.trip import Trip
from app.models.user import User
from app.services.email_service import send_trip_invite_email
from app.services.permission_service import (
    can_manage_role, can_manage_sharing, require_trip_access
)

logger = logging.getLogger(__name__)

INVITE_TOKEN_BYTES = 32


def generate_invite_token() -> str:
    """Random URL-safe token for an invite link."""
    return secrets.token_urlsafe(INVITE_TOKEN_BYTES)


def send_invite(trip_id: int, actor: User, email: str, role: Role, db: Session) -> TripInvite:
    """
    Invite someone by email as viewer or editor.

    Admin access required. The email is sent after the invite is stored;
    a failed send is logged and the invite is still returned.
    """
    if not can_manage_sharing(trip_id, actor.id, db):
        raise AuthorizationDenied("You don't have permission to invite users to this trip")

    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("Invalid email address")

    role = Role(role)
    if role not in INVITE_ROLES:
        raise ValidationError("Invites can only grant viewer or editor access")

    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")

    if actor.email == email:
        raise ValidationError("You cannot invite yourself")

    if trip.owner.email == email:
        raise ValidationError("Cannot invite the trip owner")

    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        existing_share = db.query(TripShare).filter(
            TripShare.trip_id == trip_id,
            TripShare.user_id == existing_user.id
        ).first()
        if existing_share:
            raise ConflictError("User already has access to this trip")

    pending = db.query(TripInvite).filter(
        TripInvite.trip_id == trip_id,
        TripInvite.email == email,
        TripInvite.accepted.is_(False)
    ).first()
    if pending:
        raise ConflictError("An invite has already been sent to this email")

    invite = TripInvite(
        trip_id=trip_id,
        email=email,
        role=role,
        token=generate_invite_token(),
        invited_by=actor.id,
        expires_at=datetime.utcnow() + timedelta(days=settings.INVITE_EXPIRE_DAYS)
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)
    logger.info(f"Invite {invite.id} for {email} as {role.value} created on trip {trip_id}")

    try:
        send_trip_invite_email(
            to_email=email,
            inviter_name=trip.owner.name or trip.owner.email or "Someone",
            trip_title=trip.title,
            trip_description=trip.description,
            start_date=trip.start_date,
            end_date=trip.end_date,
            role=role.value,
            token=invite.token,
            expires_at=invite.expires_at
        )
    except httpx.HTTPError as e:
        logger.error(f"Failed to send invitation email for invite {invite.id}: {e}")

    return invite


def accept_invite(token: str, user: User, db: Session) -> TripInvite:
    """Turn a pending invite into a share for the invited user."""
    invite = db.query(TripInvite).filter(TripInvite.token == token).first()
    if not invite:
        raise NotFoundError("Invite not found")

    if datetime.utcnow() > invite.expires_at:
        raise ValidationError("This invite has expired")

    if invite.accepted:
        raise ConflictError("This invite has already been accepted")

    if invite.email != user.email:
        raise AuthorizationDenied("This invite was sent to a different email address")

    existing_share = db.query(TripShare).filter(
        TripShare.trip_id == invite.trip_id,
        TripShare.user_id == user.id
    ).first()
    if existing_share:
        raise ConflictError("You already have access to this trip")

    try:
        db.add(TripShare(
            trip_id=invite.trip_id,
            user_id=user.id,
            role=invite.role,
            invited_by=invite.invited_by
        ))
        invite.accepted = True
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(invite)

    logger.info(f"User {user.id} accepted invite {invite.id} to trip {invite.trip_id}")
    return invite


def cancel_invite(invite_id: int, trip_id: int, actor_id: int, db: Session):
    if not can_manage_sharing(trip_id, actor_id, db):
        raise AuthorizationDenied("You don't have permission to cancel invites for this trip")

    invite = db.query(TripInvite).filter(TripInvite.id == invite_id).first()
    if not invite or invite.trip_id != trip_id:
        raise NotFoundError("Invite not found")

    db.delete(invite)
    db.commit()
    logger.info(f"Invite {invite_id} on trip {trip_id} cancelled by user {actor_id}")


def list_pending_invites(trip_id: int, user_id: int, db: Session) -> List[TripInvite]:
    """Unaccepted, unexpired invites. Viewer access required."""
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    return db.query(TripInvite).filter(
        TripInvite.trip_id == trip_id,
        TripInvite.accepted.is_(False),
        TripInvite.expires_at > datetime.utcnow()
    ).order_by(TripInvite.created_at).all()


def _get_trip_share(share_id: int, trip_id: int, db: Session) -> TripShare:
    share = db.query(TripShare).filter(TripShare.id == share_id).first()
    if not share or share.trip_id != trip_id:
        raise NotFoundError("Share not found")
    return share


def update_share_role(share_id: int, trip_id: int, actor_id: int, new_role: Role, db: Session) -> TripShare:
    """
    Change a collaborator's role.

    Admins may move shares between viewer and editor. Promoting to admin
    or changing an existing admin needs the trip owner.
    """
    if not can_manage_sharing(trip_id, actor_id, db):
        raise AuthorizationDenied("You don't have permission to change roles for this trip")

    new_role = Role(new_role)
    if new_role not in SHARE_ROLES:
        raise ValidationError("Ownership cannot be granted through a share")

    share = _get_trip_share(share_id, trip_id, db)

    for role in (new_role, Role(share.role)):
        if not can_manage_role(trip_id, actor_id, role, db):
            raise AuthorizationDenied("Only the trip owner can manage admin roles")

    share.role = new_role
    db.commit()
    db.refresh(share)

    logger.info(f"Share {share_id} on trip {trip_id} set to {new_role.value} by user {actor_id}")
    return share


def has_open_debts(trip_id: int, user_id: int, db: Session) -> bool:
    """Whether the user owes, or is owed, any unsettled split on the trip."""
    open_split = db.query(PaymentSplit.id).join(Payment).filter(
        Payment.trip_id == trip_id,
        PaymentSplit.settled.is_(False),
        or_(PaymentSplit.user_id == user_id, Payment.paid_by == user_id)
    ).first()
    return open_split is not None


def remove_share(share_id: int, trip_id: int, actor_id: int, db: Session):
    """
    Remove a collaborator from a trip.

    Removing an admin needs the owner. A collaborator with unsettled debts
    in either direction cannot be removed, since their balance would drop
    out of the settlement summary.
    """
    if not can_manage_sharing(trip_id, actor_id, db):
        raise AuthorizationDenied("You don't have permission to remove users from this trip")

    share = _get_trip_share(share_id, trip_id, db)

    if not can_manage_role(trip_id, actor_id, Role(share.role), db):
        raise AuthorizationDenied("Only the trip owner can remove admins")

    if has_open_debts(trip_id, share.user_id, db):
        raise ConflictError("Settle this collaborator's outstanding payments before removing them")

    db.delete(share)
    db.commit()
    logger.info(f"Share {share_id} removed from trip {trip_id} by user {actor_id}")
