"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.trip import Trip
from app.models.share import Role, TripShare, TripInvite
from app.models.itinerary import Location, Accommodation, Flight
from app.models.expense import Expense
from app.models.payment import Payment, PaymentSplit, SplitType

__all__ = [
    "User",
    "Trip",
    "Role",
    "TripShare",
    "TripInvite",
    "Location",
    "Accommodation",
    "Flight",
    "Expense",
    "Payment",
    "PaymentSplit",
    "SplitType",
]
