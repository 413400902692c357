"""
End-to-end flows through the HTTP API.
"""
import pytest
from app.services import sharing_service


@pytest.fixture(autouse=True)
def no_email(monkeypatch):
    monkeypatch.setattr(sharing_service, "send_trip_invite_email", lambda **kwargs: True)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_trip_and_detail(client, make_user, auth_headers):
    alice = make_user("alice")
    headers = auth_headers(alice)

    response = client.post("/api/trips", headers=headers, json={
        "title": "Bali",
        "start_date": "2025-07-01",
        "end_date": "2025-07-07"
    })
    assert response.status_code == 201
    trip_id = response.json()["id"]

    detail = client.get(f"/api/trips/{trip_id}", headers=headers).json()
    assert detail["user_role"] == "owner"
    assert detail["is_owner"] is True
    assert [c["username"] for c in detail["collaborators"]] == ["alice"]


def test_trip_dates_validated(client, make_user, auth_headers):
    response = client.post("/api/trips", headers=auth_headers(make_user("alice")), json={
        "title": "Backwards",
        "start_date": "2025-07-07",
        "end_date": "2025-07-01"
    })

    assert response.status_code == 400
    assert "Start date" in response.json()["detail"]


def test_outsider_gets_403(client, crew, auth_headers):
    headers = auth_headers(crew["eve"])
    trip_id = crew["trip"].id

    assert client.get(f"/api/trips/{trip_id}", headers=headers).status_code == 403
    assert client.get(f"/api/trips/{trip_id}/settlement", headers=headers).status_code == 403


def test_missing_trip_gets_403(client, crew, auth_headers):
    response = client.get("/api/trips/9999/payments", headers=auth_headers(crew["alice"]))

    assert response.status_code == 403


def test_viewer_cannot_add_payment(client, crew, auth_headers):
    response = client.post(
        f"/api/trips/{crew['trip'].id}/payments",
        headers=auth_headers(crew["carol"]),
        json={"description": "Snacks", "amount": "10", "splits": [{"user_id": crew["carol"].id}]}
    )

    assert response.status_code == 403


def test_invite_accept_pay_and_settle(client, make_user, make_trip, auth_headers):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    trip = make_trip(alice)
    owner = auth_headers(alice)

    for user, role in ((bob, "editor"), (carol, "viewer")):
        invite = client.post(
            f"/api/trips/{trip.id}/invites",
            headers=owner,
            json={"email": user.email, "role": role}
        )
        assert invite.status_code == 201
        accepted = client.post(f"/api/invites/{invite.json()['token']}/accept", headers=auth_headers(user))
        assert accepted.json() == {"trip_id": trip.id, "trip_title": "Tokyo 2025"}

    everyone = [{"user_id": u.id} for u in (alice, bob, carol)]
    dinner = client.post(
        f"/api/trips/{trip.id}/payments",
        headers=owner,
        json={"description": "Dinner", "amount": "90", "splits": everyone}
    )
    assert dinner.status_code == 201
    taxi = client.post(
        f"/api/trips/{trip.id}/payments",
        headers=auth_headers(bob),
        json={"description": "Taxi", "amount": "30", "splits": everyone}
    )
    assert taxi.status_code == 201

    summary = client.get(f"/api/trips/{trip.id}/settlement", headers=auth_headers(carol)).json()
    assert summary["debts"] == [{
        "from_user_id": carol.id,
        "from_name": "Carol",
        "to_user_id": alice.id,
        "to_name": "Alice",
        "amount": "40.00",
    }]

    carol_split = next(s for s in dinner.json()["splits"] if s["user_id"] == carol.id)
    settled = client.post(f"/api/splits/{carol_split['id']}/settle", headers=auth_headers(carol))
    assert settled.json()["settled"] is True

    summary = client.get(f"/api/trips/{trip.id}/settlement", headers=owner).json()
    assert [(d["from_user_id"], d["to_user_id"], d["amount"]) for d in summary["debts"]] == [
        (carol.id, alice.id, "10.00")
    ]

    response = client.post(
        f"/api/trips/{trip.id}/settlement/settle-all",
        headers=auth_headers(carol),
        json={"from_user_id": carol.id, "to_user_id": bob.id}
    )
    assert response.json() == {"settled_count": 1}


def test_invite_conflict_returns_409(client, crew, auth_headers):
    response = client.post(
        f"/api/trips/{crew['trip'].id}/invites",
        headers=auth_headers(crew["alice"]),
        json={"email": crew["bob"].email, "role": "editor"}
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "User already has access to this trip"
