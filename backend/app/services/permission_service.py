"""
Trip access control.

Resolves a (trip, user) pair to a role. A failed check is a normal result,
never an exception; callers that need a hard stop use require_trip_access.
"""
from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy.orm import Session
from app.core.exceptions import AuthorizationDenied
from app.models.share import Role, TripShare
from app.models.trip import Trip


@dataclass(frozen=True)
class TripAccess:
    """Outcome of a single access check. Built per call, never cached."""
    has_access: bool
    role: Optional[Role]
    is_owner: bool


NO_ACCESS = TripAccess(has_access=False, role=None, is_owner=False)


def check_trip_access(
    trip_id: int,
    user_id: int,
    db: Session,
    required_role: Role = Role.VIEWER
) -> TripAccess:
    """
    Check whether a user holds at least `required_role` on a trip.

    The owner always wins, whether or not a share row exists for them.
    A missing trip or missing share fails closed. When a share exists but
    ranks below `required_role`, the actual role is still reported.
    """
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        return NO_ACCESS

    if trip.owner_id == user_id:
        return TripAccess(has_access=True, role=Role.OWNER, is_owner=True)

    share = db.query(TripShare).filter(
        TripShare.trip_id == trip_id,
        TripShare.user_id == user_id
    ).first()
    if not share:
        return NO_ACCESS

    role = Role(share.role)
    return TripAccess(
        has_access=role.at_least(required_role),
        role=role,
        is_owner=False
    )


def can_edit_trip(trip_id: int, user_id: int, db: Session) -> bool:
    """Editor, admin or owner."""
    return check_trip_access(trip_id, user_id, db, Role.EDITOR).has_access


def can_manage_sharing(trip_id: int, user_id: int, db: Session) -> bool:
    """Admin or owner."""
    return check_trip_access(trip_id, user_id, db, Role.ADMIN).has_access


def is_trip_owner(trip_id: int, user_id: int, db: Session) -> bool:
    """Direct owner-field comparison, independent of shares."""
    owner_id = db.query(Trip.owner_id).filter(Trip.id == trip_id).scalar()
    return owner_id is not None and owner_id == user_id


def can_manage_role(trip_id: int, actor_id: int, role: Role, db: Session) -> bool:
    """
    Whether the actor may grant, change or revoke a share holding `role`.

    Admins manage viewer and editor shares only; anything touching an
    admin share needs the actual owner.
    """
    if Role(role) == Role.ADMIN:
        return is_trip_owner(trip_id, actor_id, db)
    return can_manage_sharing(trip_id, actor_id, db)


def require_trip_access(
    trip_id: int,
    user_id: int,
    db: Session,
    required_role: Role = Role.VIEWER
) -> TripAccess:
    """Run check_trip_access and raise AuthorizationDenied when it fails."""
    access = check_trip_access(trip_id, user_id, db, required_role)
    if not access.has_access:
        raise AuthorizationDenied(f"Access denied. Required role: {Role(required_role).value}")
    return access


def get_trip_collaborators(trip_id: int, db: Session) -> List[dict]:
    """Owner first, then every shared user with their role and share id."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        return []

    collaborators = [{
        "id": trip.owner.id,
        "username": trip.owner.username,
        "name": trip.owner.name,
        "email": trip.owner.email,
        "role": Role.OWNER,
        "share_id": None,
    }]
    shares = db.query(TripShare).filter(
        TripShare.trip_id == trip_id
    ).order_by(TripShare.id).all()
    for share in shares:
        collaborators.append({
            "id": share.user.id,
            "username": share.user.username,
            "name": share.user.name,
            "email": share.user.email,
            "role": Role(share.role),
            "share_id": share.id,
        })
    return collaborators


def get_trip_member_ids(trip_id: int, db: Session) -> List[int]:
    """User ids of the owner and every collaborator, in collaborator order."""
    return [c["id"] for c in get_trip_collaborators(trip_id, db)]
