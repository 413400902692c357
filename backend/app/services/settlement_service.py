"""
Settlement service: who owes whom, and marking debts as paid.

compute_balances_and_debts is a pure function over the payment ledger.
The remaining functions load a consistent snapshot from the database,
or flip split settlement flags.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Hashable, Iterable, List
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import AuthorizationDenied, InvalidLedgerError, NotFoundError
from app.models.payment import Payment, PaymentSplit
from app.models.share import Role
from app.models.trip import Trip
from app.models.user import User
from app.services.permission_service import (
    check_trip_access, get_trip_collaborators, require_trip_access
)

logger = logging.getLogger(__name__)

EPSILON = Decimal("0.01")
CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value: Decimal) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class Debt:
    """A single transfer that settles part of the ledger."""
    from_user_id: Hashable
    to_user_id: Hashable
    amount: Decimal


@dataclass
class SettlementSummary:
    """Net balance per participant (positive = is owed) and the transfers to settle them."""
    balances: Dict[Hashable, Decimal] = field(default_factory=dict)
    debts: List[Debt] = field(default_factory=list)


def compute_balances_and_debts(payments: Iterable, participants: Iterable[Hashable]) -> SettlementSummary:
    """
    Reduce a payment ledger to per-user balances and a list of transfers.

    Each payment needs `paid_by`, `amount` and `splits`; each split needs
    `user_id`, `amount` and `settled`. ORM Payment rows work as-is.

    The payer is credited the full amount; every unsettled split debits its
    user. Creditors and debtors are then drained pairwise in participant
    order: for each creditor, for each debtor, transfer the smaller of the
    two remaining amounts. The result depends on participant order and is
    not guaranteed to use the fewest transfers.

    Raises InvalidLedgerError for negative amounts or for payers and split
    users missing from `participants`.
    """
    balances: Dict[Hashable, Decimal] = {}
    for user_id in participants:
        balances.setdefault(user_id, Decimal(0))

    for payment in payments:
        amount = to_decimal(payment.amount)
        if amount < 0:
            raise InvalidLedgerError(f"Payment amount cannot be negative ({amount})")
        if payment.paid_by not in balances:
            raise InvalidLedgerError(f"Payer {payment.paid_by} is not a trip participant")
        balances[payment.paid_by] += amount

        for split in payment.splits:
            split_amount = to_decimal(split.amount)
            if split_amount < 0:
                raise InvalidLedgerError(f"Split amount cannot be negative ({split_amount})")
            if split.user_id not in balances:
                raise InvalidLedgerError(f"User {split.user_id} is not a trip participant")
            if not split.settled:
                balances[split.user_id] -= split_amount

    creditors = [[uid, bal] for uid, bal in balances.items() if bal > EPSILON]
    debtors = [[uid, -bal] for uid, bal in balances.items() if bal < -EPSILON]

    debts = []
    for creditor in creditors:
        for debtor in debtors:
            if creditor[1] > EPSILON and debtor[1] > EPSILON:
                amount = min(creditor[1], debtor[1])
                debts.append(Debt(
                    from_user_id=debtor[0],
                    to_user_id=creditor[0],
                    amount=round_currency(amount)
                ))
                creditor[1] -= amount
                debtor[1] -= amount

    return SettlementSummary(balances=balances, debts=debts)


def get_trip_payments(trip_id: int, db: Session) -> List[Payment]:
    """All payments for a trip with splits loaded, newest first."""
    return db.query(Payment).options(
        joinedload(Payment.splits)
    ).filter(
        Payment.trip_id == trip_id
    ).order_by(Payment.created_at.desc(), Payment.id.desc()).all()


def get_trip_settlement(trip_id: int, user_id: int, db: Session) -> dict:
    """
    Settlement summary for the trip's payments tab.

    Viewer access required. Balances are seeded from the current
    collaborators, owner first, followed by former collaborators who
    still appear in the payment history.
    """
    require_trip_access(trip_id, user_id, db, Role.VIEWER)

    collaborators = get_trip_collaborators(trip_id, db)
    names = {c["id"]: c["name"] or c["username"] for c in collaborators}
    participants = [c["id"] for c in collaborators]
    payments = get_trip_payments(trip_id, db)

    former_ids = []
    for payment in payments:
        for uid in [payment.paid_by] + [s.user_id for s in payment.splits]:
            if uid not in names and uid not in former_ids:
                former_ids.append(uid)
    if former_ids:
        for user in db.query(User).filter(User.id.in_(former_ids)).all():
            names[user.id] = user.name or user.username
        participants.extend(former_ids)

    summary = compute_balances_and_debts(payments, participants)

    total_paid = sum((to_decimal(p.amount) for p in payments), Decimal(0))
    my_total_paid = sum(
        (to_decimal(p.amount) for p in payments if p.paid_by == user_id), Decimal(0)
    )
    my_total_owed = Decimal(0)
    for payment in payments:
        for split in payment.splits:
            if split.user_id == user_id and not split.settled:
                my_total_owed += to_decimal(split.amount)

    return {
        "trip_id": trip_id,
        "total_paid": round_currency(total_paid),
        "my_total_paid": round_currency(my_total_paid),
        "my_total_owed": round_currency(my_total_owed),
        "balances": [
            {"user_id": uid, "name": names.get(uid, ""), "balance": round_currency(bal)}
            for uid, bal in summary.balances.items()
        ],
        "debts": [
            {
                "from_user_id": d.from_user_id,
                "from_name": names.get(d.from_user_id, ""),
                "to_user_id": d.to_user_id,
                "to_name": names.get(d.to_user_id, ""),
                "amount": d.amount,
            }
            for d in summary.debts
        ],
    }


def settle_payment_split(split_id: int, user_id: int, db: Session) -> PaymentSplit:
    """Mark one split as paid. Only the debtor on the split or the trip owner may do this."""
    split = db.query(PaymentSplit).filter(PaymentSplit.id == split_id).first()
    if not split:
        raise NotFoundError("Payment split not found")

    trip = split.payment.trip
    if split.user_id != user_id and trip.owner_id != user_id:
        raise AuthorizationDenied("Not authorized to settle this payment")

    split.settled = True
    split.settled_at = datetime.utcnow()
    db.commit()
    db.refresh(split)

    logger.info(f"Split {split_id} on payment {split.payment_id} settled by user {user_id}")
    return split


def settle_all_debts(
    trip_id: int,
    from_user_id: int,
    to_user_id: int,
    user_id: int,
    db: Session
) -> int:
    """
    Settle every unsettled split where `from_user_id` owes a payment made by `to_user_id`.

    The caller must be on the trip and be the debtor, the creditor or the
    owner. Returns the number of splits settled.
    """
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")

    if not check_trip_access(trip_id, user_id, db).has_access:
        raise AuthorizationDenied("Not authorized to access this trip")

    if user_id not in (from_user_id, to_user_id, trip.owner_id):
        raise AuthorizationDenied("Not authorized to settle these payments")

    split_ids = [
        split_id for (split_id,) in db.query(PaymentSplit.id).join(Payment).filter(
            Payment.trip_id == trip_id,
            Payment.paid_by == to_user_id,
            PaymentSplit.user_id == from_user_id,
            PaymentSplit.settled.is_(False)
        ).all()
    ]

    if split_ids:
        db.query(PaymentSplit).filter(
            PaymentSplit.id.in_(split_ids)
        ).update(
            {PaymentSplit.settled: True, PaymentSplit.settled_at: datetime.utcnow()},
            synchronize_session=False
        )
        db.commit()

    logger.info(
        f"Settled {len(split_ids)} splits on trip {trip_id} "
        f"from user {from_user_id} to user {to_user_id}"
    )
    return len(split_ids)
