"""
Sharing models: collaborator roles and pending email invites.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class Role(str, enum.Enum):
    """Collaborator role, ordered viewer < editor < admin < owner."""
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return ROLE_RANK[self]

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


ROLE_RANK = {
    Role.VIEWER: 0,
    Role.EDITOR: 1,
    Role.ADMIN: 2,
    Role.OWNER: 3,
}

# Roles a share row may hold; ownership lives on Trip.owner_id
SHARE_ROLES = (Role.VIEWER, Role.EDITOR, Role.ADMIN)
INVITE_ROLES = (Role.VIEWER, Role.EDITOR)


class TripShare(BaseModel):
    """A collaborator's role on a trip. At most one per (trip, user)."""
    __tablename__ = "trip_shares"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(SQLEnum(Role), default=Role.VIEWER, nullable=False)
    invited_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="shares")
    user = relationship("User", foreign_keys=[user_id], back_populates="shares")

    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_user_share'),
    )


class TripInvite(BaseModel):
    """Email invite that becomes a TripShare once accepted."""
    __tablename__ = "trip_invites"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    email = Column(String(100), nullable=False, index=True)
    role = Column(SQLEnum(Role), default=Role.VIEWER, nullable=False)
    token = Column(String(64), unique=True, nullable=False, index=True)
    invited_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    accepted = Column(Boolean, default=False, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="invites")
