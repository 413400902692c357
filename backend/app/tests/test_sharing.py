"""
Tests for invites and collaborator management.
"""
import re

import httpx
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from app.core.exceptions import AuthorizationDenied, ConflictError, NotFoundError, ValidationError
from app.models.share import Role, TripInvite, TripShare
from app.schemas.payment import PaymentCreate, SplitInput
from app.services import sharing_service
from app.services.payment_service import create_payment
from app.services.permission_service import check_trip_access
from app.services.settlement_service import settle_all_debts
from app.services.sharing_service import (
    accept_invite, cancel_invite, list_pending_invites, remove_share, send_invite,
    update_share_role
)


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(**kwargs):
        sent.append(kwargs)
        return True

    monkeypatch.setattr(sharing_service, "send_trip_invite_email", fake_send)
    return sent


def test_admin_invites_by_email(db, crew, sent_emails):
    invite = send_invite(crew["trip"].id, crew["dave"], "frank@example.com", Role.EDITOR, db)

    assert invite.role == Role.EDITOR
    assert invite.accepted is False
    assert invite.expires_at > datetime.utcnow() + timedelta(days=6)
    assert len(sent_emails) == 1
    assert sent_emails[0]["to_email"] == "frank@example.com"
    assert sent_emails[0]["token"] == invite.token
    assert sent_emails[0]["inviter_name"] == "Alice"


def test_invite_tokens_are_unique_and_url_safe():
    tokens = {sharing_service.generate_invite_token() for _ in range(50)}

    assert len(tokens) == 50
    for token in tokens:
        assert len(token) >= 43
        assert re.fullmatch(r"[A-Za-z0-9_-]+", token)


def test_email_failure_keeps_invite(db, crew, monkeypatch):
    def broken_send(**kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(sharing_service, "send_trip_invite_email", broken_send)

    invite = send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.VIEWER, db)

    assert db.query(TripInvite).filter(TripInvite.id == invite.id).count() == 1


@pytest.mark.parametrize("name", ["bob", "carol", "eve"])
def test_non_admins_cannot_invite(db, crew, sent_emails, name):
    with pytest.raises(AuthorizationDenied):
        send_invite(crew["trip"].id, crew[name], "frank@example.com", Role.VIEWER, db)
    assert sent_emails == []


def test_invite_cannot_grant_admin(db, crew, sent_emails):
    with pytest.raises(ValidationError, match="viewer or editor"):
        send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.ADMIN, db)


@pytest.mark.parametrize("email, message", [
    ("not-an-email", "Invalid email"),
    ("alice@example.com", "invite yourself"),
])
def test_invalid_invite_targets(db, crew, sent_emails, email, message):
    with pytest.raises(ValidationError, match=message):
        send_invite(crew["trip"].id, crew["alice"], email, Role.VIEWER, db)


def test_cannot_invite_owner(db, crew, sent_emails):
    with pytest.raises(ValidationError, match="trip owner"):
        send_invite(crew["trip"].id, crew["dave"], "alice@example.com", Role.VIEWER, db)


def test_cannot_invite_existing_collaborator(db, crew, sent_emails):
    with pytest.raises(ConflictError, match="already has access"):
        send_invite(crew["trip"].id, crew["alice"], "bob@example.com", Role.EDITOR, db)


def test_duplicate_pending_invite(db, crew, sent_emails):
    send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.VIEWER, db)

    with pytest.raises(ConflictError, match="already been sent"):
        send_invite(crew["trip"].id, crew["dave"], "frank@example.com", Role.EDITOR, db)


def test_accept_invite_creates_share(db, crew, make_user, sent_emails):
    trip = crew["trip"]
    invite = send_invite(trip.id, crew["alice"], "frank@example.com", Role.EDITOR, db)
    frank = make_user("frank")

    accepted = accept_invite(invite.token, frank, db)

    assert accepted.accepted is True
    assert check_trip_access(trip.id, frank.id, db, Role.EDITOR).has_access
    share = db.query(TripShare).filter(TripShare.user_id == frank.id).one()
    assert share.invited_by == crew["alice"].id


def test_accept_invite_twice(db, crew, make_user, sent_emails):
    invite = send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.VIEWER, db)
    frank = make_user("frank")
    accept_invite(invite.token, frank, db)

    with pytest.raises(ConflictError):
        accept_invite(invite.token, frank, db)


def test_accept_invite_for_other_email(db, crew, sent_emails):
    invite = send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.VIEWER, db)

    with pytest.raises(AuthorizationDenied, match="different email"):
        accept_invite(invite.token, crew["eve"], db)


def test_expired_invite(db, crew, make_user, sent_emails):
    invite = send_invite(crew["trip"].id, crew["alice"], "frank@example.com", Role.VIEWER, db)
    invite.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    with pytest.raises(ValidationError, match="expired"):
        accept_invite(invite.token, make_user("frank"), db)
    assert list_pending_invites(crew["trip"].id, crew["alice"].id, db) == []


def test_unknown_invite_token(db, crew):
    with pytest.raises(NotFoundError):
        accept_invite("no-such-token", crew["eve"], db)


def test_cancel_invite(db, crew, sent_emails):
    trip = crew["trip"]
    invite = send_invite(trip.id, crew["alice"], "frank@example.com", Role.VIEWER, db)

    with pytest.raises(AuthorizationDenied):
        cancel_invite(invite.id, trip.id, crew["bob"].id, db)

    cancel_invite(invite.id, trip.id, crew["dave"].id, db)
    assert list_pending_invites(trip.id, crew["carol"].id, db) == []


def test_cancel_invite_from_other_trip(db, crew, make_trip, sent_emails):
    other = make_trip(crew["alice"], title="Osaka")
    invite = send_invite(other.id, crew["alice"], "frank@example.com", Role.VIEWER, db)

    with pytest.raises(NotFoundError):
        cancel_invite(invite.id, crew["trip"].id, crew["alice"].id, db)


def test_admin_changes_viewer_to_editor(db, crew):
    trip = crew["trip"]
    carol_share = crew["shares"]["carol"]

    updated = update_share_role(carol_share.id, trip.id, crew["dave"].id, Role.EDITOR, db)

    assert updated.role == Role.EDITOR
    assert check_trip_access(trip.id, crew["carol"].id, db, Role.EDITOR).has_access


def test_only_owner_promotes_to_admin(db, crew):
    trip = crew["trip"]
    bob_share = crew["shares"]["bob"]

    with pytest.raises(AuthorizationDenied, match="owner"):
        update_share_role(bob_share.id, trip.id, crew["dave"].id, Role.ADMIN, db)

    assert update_share_role(bob_share.id, trip.id, crew["alice"].id, Role.ADMIN, db).role == Role.ADMIN


def test_admin_cannot_demote_admin(db, crew, make_user, share):
    trip = crew["trip"]
    other_admin = share(trip, make_user("grace"), Role.ADMIN)

    with pytest.raises(AuthorizationDenied):
        update_share_role(other_admin.id, trip.id, crew["dave"].id, Role.VIEWER, db)


def test_share_role_cannot_be_owner(db, crew):
    with pytest.raises(ValidationError):
        update_share_role(crew["shares"]["bob"].id, crew["trip"].id, crew["alice"].id, Role.OWNER, db)


def test_editor_cannot_change_roles(db, crew):
    with pytest.raises(AuthorizationDenied):
        update_share_role(crew["shares"]["carol"].id, crew["trip"].id, crew["bob"].id, Role.EDITOR, db)


def test_remove_share(db, crew):
    trip, carol = crew["trip"], crew["carol"]

    remove_share(crew["shares"]["carol"].id, trip.id, crew["dave"].id, db)

    assert not check_trip_access(trip.id, carol.id, db).has_access


def test_only_owner_removes_admin(db, crew):
    trip = crew["trip"]
    dave_share = crew["shares"]["dave"]

    with pytest.raises(AuthorizationDenied):
        remove_share(dave_share.id, trip.id, crew["dave"].id, db)

    remove_share(dave_share.id, trip.id, crew["alice"].id, db)
    assert db.query(TripShare).filter(TripShare.id == dave_share.id).count() == 0


def test_cannot_remove_collaborator_with_open_debts(db, crew):
    trip, alice, bob = crew["trip"], crew["alice"], crew["bob"]
    create_payment(trip.id, alice.id, PaymentCreate(
        description="Hotel",
        amount=Decimal("200"),
        splits=[SplitInput(user_id=alice.id), SplitInput(user_id=bob.id)]
    ), db)

    with pytest.raises(ConflictError, match="outstanding"):
        remove_share(crew["shares"]["bob"].id, trip.id, alice.id, db)

    settle_all_debts(trip.id, bob.id, alice.id, bob.id, db)
    remove_share(crew["shares"]["bob"].id, trip.id, alice.id, db)
    assert not check_trip_access(trip.id, bob.id, db).has_access


def test_remove_missing_share(db, crew):
    with pytest.raises(NotFoundError):
        remove_share(9999, crew["trip"].id, crew["alice"].id, db)
