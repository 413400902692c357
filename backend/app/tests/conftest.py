"""
Shared fixtures: in-memory SQLite database and an authenticated test client.
"""
import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers mappers
from app.core.security import create_access_token, get_password_hash
from app.db.base import Base
from app.db.session import get_db
from app.main import app as fastapi_app
from app.models.share import Role, TripShare
from app.models.trip import Trip
from app.models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign keys off unless asked; MySQL always enforces them
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD_HASH = get_password_hash("testpassword123")


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username: str) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            name=username.capitalize(),
            hashed_password=PASSWORD_HASH
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_trip(db):
    def _make_trip(owner: User, title: str = "Tokyo 2025") -> Trip:
        trip = Trip(
            owner_id=owner.id,
            title=title,
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 10)
        )
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip
    return _make_trip


@pytest.fixture
def share(db):
    def _share(trip: Trip, user: User, role: Role) -> TripShare:
        row = TripShare(trip_id=trip.id, user_id=user.id, role=role, invited_by=trip.owner_id)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    return _share


@pytest.fixture
def crew(make_user, make_trip, share):
    """Alice owns the trip; Dave is admin, Bob editor, Carol viewer; Eve is an outsider."""
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    dave = make_user("dave")
    eve = make_user("eve")
    trip = make_trip(alice)
    shares = {
        "dave": share(trip, dave, Role.ADMIN),
        "bob": share(trip, bob, Role.EDITOR),
        "carol": share(trip, carol, Role.VIEWER),
    }
    return {
        "trip": trip,
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "dave": dave,
        "eve": eve,
        "shares": shares,
    }


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(data={"sub": user.username, "user_id": user.id})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
