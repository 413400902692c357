"""
Tests for trips and their budget lines.
"""
import pytest
from datetime import date
from decimal import Decimal

from app.core.exceptions import AuthorizationDenied, NotFoundError, ValidationError
from app.models.payment import Payment, PaymentSplit
from app.models.share import Role, TripShare
from app.schemas.expense import ExpenseCreate
from app.schemas.payment import PaymentCreate, SplitInput
from app.schemas.trip import TripCreate, TripUpdate
from app.services.expense_service import add_expense, delete_expense, get_total_budget, list_expenses
from app.services.payment_service import create_payment
from app.services.trip_service import create_trip, delete_trip, get_trip_detail, list_trips, update_trip


def test_create_trip_has_no_owner_share(db, make_user):
    alice = make_user("alice")

    trip = create_trip(alice, TripCreate(
        title="  Seoul ", start_date=date(2025, 5, 1), end_date=date(2025, 5, 5)
    ), db)

    assert trip.title == "Seoul"
    assert trip.owner_id == alice.id
    assert db.query(TripShare).count() == 0


def test_create_trip_rejects_reversed_dates(db, make_user):
    with pytest.raises(ValidationError, match="Start date"):
        create_trip(make_user("alice"), TripCreate(
            title="Seoul", start_date=date(2025, 5, 5), end_date=date(2025, 5, 1)
        ), db)


def test_list_trips_owned_and_shared(db, crew, make_trip):
    later = make_trip(crew["bob"], title="Bob's own")
    later.start_date = date(2025, 9, 1)
    later.end_date = date(2025, 9, 3)
    db.commit()

    assert [t.title for t in list_trips(crew["bob"].id, db)] == ["Tokyo 2025", "Bob's own"]
    assert list_trips(crew["eve"].id, db) == []


def test_trip_detail_reports_role(db, crew):
    detail = get_trip_detail(crew["trip"].id, crew["carol"].id, db)

    assert detail["user_role"] == Role.VIEWER
    assert detail["is_owner"] is False
    assert len(detail["collaborators"]) == 4


def test_editor_updates_trip_viewer_cannot(db, crew):
    trip = crew["trip"]

    updated = update_trip(trip.id, crew["bob"].id, TripUpdate(end_date=date(2025, 4, 12)), db)
    assert updated.end_date == date(2025, 4, 12)

    with pytest.raises(AuthorizationDenied):
        update_trip(trip.id, crew["carol"].id, TripUpdate(title="Mine"), db)
    with pytest.raises(ValidationError):
        update_trip(trip.id, crew["bob"].id, TripUpdate(start_date=date(2025, 5, 1)), db)


def test_only_owner_deletes_trip(db, crew):
    trip, alice = crew["trip"], crew["alice"]
    museum = add_expense(trip.id, alice.id, ExpenseCreate(description="Museum", amount=Decimal("40"), category="Activities"), db)
    create_payment(trip.id, alice.id, PaymentCreate(
        description="Museum",
        amount=Decimal("40"),
        splits=[SplitInput(user_id=alice.id), SplitInput(user_id=crew["bob"].id)],
        expense_id=museum.id
    ), db)

    with pytest.raises(AuthorizationDenied):
        delete_trip(trip.id, crew["dave"].id, db)

    delete_trip(trip.id, alice.id, db)
    assert db.query(TripShare).count() == 0
    assert db.query(Payment).count() == 0
    assert db.query(PaymentSplit).count() == 0
    with pytest.raises(NotFoundError):
        delete_trip(trip.id, alice.id, db)


def test_budget_lines(db, crew):
    trip, bob = crew["trip"], crew["bob"]
    hotel = add_expense(trip.id, bob.id, ExpenseCreate(description="Hotel", amount=Decimal("600"), category="Stay"), db)
    add_expense(trip.id, bob.id, ExpenseCreate(description="Food", amount=Decimal("250.50"), category="Food"), db)

    assert get_total_budget(trip.id, db) == Decimal("850.50")
    assert [e.description for e in list_expenses(trip.id, crew["carol"].id, db)] == ["Hotel", "Food"]

    delete_expense(hotel.id, trip.id, bob.id, db)
    assert get_total_budget(trip.id, db) == Decimal("250.50")


def test_budget_line_validation(db, crew):
    with pytest.raises(ValidationError, match="Invalid amount"):
        add_expense(crew["trip"].id, crew["bob"].id,
                    ExpenseCreate(description="Refund", amount=Decimal("-5"), category="Misc"), db)
    with pytest.raises(AuthorizationDenied):
        add_expense(crew["trip"].id, crew["carol"].id,
                    ExpenseCreate(description="Snacks", amount=Decimal("5"), category="Food"), db)
