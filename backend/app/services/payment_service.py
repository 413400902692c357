"""
Payment service: split calculation and payment CRUD.
"""
import logging
from decimal import Decimal
from typing import List
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import AuthorizationDenied, NotFoundError, ValidationError
from app.models.expense import Expense
from app.models.itinerary import Accommodation, Flight, Location
from app.models.payment import Payment, PaymentSplit, SplitType
from app.models.share import Role
from app.schemas.payment import PaymentCreate, PaymentUpdate, SplitInput
from app.services.permission_service import (
    can_edit_trip, get_trip_member_ids, require_trip_access
)
from app.services.settlement_service import EPSILON, get_trip_payments, round_currency, to_decimal

logger = logging.getLogger(__name__)


def calculate_splits(amount, split_type, splits: List[SplitInput]) -> List[dict]:
    """
    Turn split inputs into concrete per-user amounts.

    equal: amount / n per user, rounded to cents.
    custom: the given amounts, which must add up to the total within 0.01.
    percentage: amount * pct / 100 per user, rounded to cents; percentages
    must add up to 100 within 0.01.
    """
    try:
        split_type = SplitType(split_type)
    except ValueError:
        raise ValidationError("Invalid split type")

    amount = to_decimal(amount)

    if split_type == SplitType.EQUAL:
        share = round_currency(amount / len(splits))
        return [{"user_id": s.user_id, "amount": share} for s in splits]

    if split_type == SplitType.CUSTOM:
        calculated = [
            {"user_id": s.user_id, "amount": to_decimal(s.amount or 0)}
            for s in splits
        ]
        total_split = sum((c["amount"] for c in calculated), Decimal(0))
        if abs(total_split - amount) > EPSILON:
            raise ValidationError(
                f"Split amounts ({total_split}) must equal total amount ({amount})"
            )
        return calculated

    # Percentage
    calculated = [
        {"user_id": s.user_id, "amount": round_currency(amount * to_decimal(s.percentage or 0) / 100)}
        for s in splits
    ]
    total_percentage = sum((to_decimal(s.percentage or 0) for s in splits), Decimal(0))
    if abs(total_percentage - 100) > EPSILON:
        raise ValidationError(
            f"Split percentages must equal 100% (current: {total_percentage}%)"
        )
    return calculated


def _validate_split_members(trip_id: int, splits: List[SplitInput], db: Session):
    if not splits:
        raise ValidationError("At least one person must be included in the split")

    member_ids = set(get_trip_member_ids(trip_id, db))
    for split in splits:
        if split.user_id not in member_ids:
            raise ValidationError("Split includes users who are not trip members")


def _build_split_rows(payer_id: int, calculated: List[dict]) -> List[PaymentSplit]:
    # The payer's own share is settled from the start
    return [
        PaymentSplit(
            user_id=c["user_id"],
            amount=c["amount"],
            settled=c["user_id"] == payer_id
        )
        for c in calculated
    ]


LINKABLE_ITEMS = (
    ("expense_id", Expense, "Expense"),
    ("accommodation_id", Accommodation, "Accommodation"),
    ("flight_id", Flight, "Flight"),
    ("location_id", Location, "Location"),
)


def _validate_links(trip_id: int, data: PaymentCreate, db: Session):
    """Linked items must exist on the same trip as the payment."""
    for field_name, model, label in LINKABLE_ITEMS:
        item_id = getattr(data, field_name)
        if item_id is None:
            continue
        item = db.query(model).filter(model.id == item_id).first()
        if not item or item.trip_id != trip_id:
            raise NotFoundError(f"{label} not found")


def get_payment(payment_id: int, db: Session) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundError("Payment not found")
    return payment


def list_payments(trip_id: int, user_id: int, db: Session) -> List[Payment]:
    """Payments for a trip, newest first. Viewer access required."""
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    return get_trip_payments(trip_id, db)


def create_payment(trip_id: int, user_id: int, data: PaymentCreate, db: Session) -> Payment:
    """Record a payment made by `user_id` and split it among trip members."""
    if not data.description or data.amount is None or data.amount <= 0:
        raise ValidationError("Invalid payment details")

    if not data.splits:
        raise ValidationError("At least one person must be included in the split")

    if not can_edit_trip(trip_id, user_id, db):
        raise AuthorizationDenied("Not authorized to add payments to this trip")

    _validate_split_members(trip_id, data.splits, db)
    _validate_links(trip_id, data, db)
    calculated = calculate_splits(data.amount, data.split_type, data.splits)

    payment = Payment(
        trip_id=trip_id,
        paid_by=user_id,
        amount=data.amount,
        currency=data.currency or settings.DEFAULT_CURRENCY,
        description=data.description,
        category=data.category,
        split_type=SplitType(data.split_type),
        expense_id=data.expense_id,
        accommodation_id=data.accommodation_id,
        flight_id=data.flight_id,
        location_id=data.location_id,
        splits=_build_split_rows(user_id, calculated)
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(f"Payment {payment.id} of {payment.amount} created on trip {trip_id} by user {user_id}")
    return payment


def update_payment(payment_id: int, user_id: int, data: PaymentUpdate, db: Session) -> Payment:
    """
    Update a payment.

    Changing the amount, split type or splits recomputes the splits and
    replaces them wholesale: the old rows are orphaned and deleted in the
    same commit that inserts the new ones, so no reader ever sees the
    payment without splits. The payer's split stays settled.
    """
    payment = get_payment(payment_id, db)

    if not can_edit_trip(payment.trip_id, user_id, db):
        raise AuthorizationDenied("Not authorized to update payments in this trip")

    replace_splits = (
        data.amount is not None or data.split_type is not None or data.splits is not None
    )
    if replace_splits:
        final_amount = to_decimal(data.amount) if data.amount is not None else to_decimal(payment.amount)
        final_split_type = data.split_type if data.split_type is not None else payment.split_type
        final_splits = data.splits if data.splits is not None else [
            SplitInput(user_id=s.user_id, amount=s.amount) for s in payment.splits
        ]

        if final_amount <= 0:
            raise ValidationError("Invalid payment amount")

        _validate_split_members(payment.trip_id, final_splits, db)
        calculated = calculate_splits(final_amount, final_split_type, final_splits)

    if data.description is not None:
        payment.description = data.description
    if data.currency is not None:
        payment.currency = data.currency
    if data.category is not None:
        payment.category = data.category

    if replace_splits:
        payment.amount = final_amount
        payment.split_type = SplitType(final_split_type)
        payment.splits = _build_split_rows(payment.paid_by, calculated)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payment)

    logger.info(f"Payment {payment_id} updated by user {user_id}")
    return payment


def delete_payment(payment_id: int, user_id: int, db: Session) -> int:
    """Delete a payment and its splits. Returns the trip id."""
    payment = get_payment(payment_id, db)

    if not can_edit_trip(payment.trip_id, user_id, db):
        raise AuthorizationDenied("Not authorized to delete payments in this trip")

    trip_id = payment.trip_id
    db.delete(payment)
    db.commit()

    logger.info(f"Payment {payment_id} deleted from trip {trip_id} by user {user_id}")
    return trip_id
