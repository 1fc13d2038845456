"""API tests for booking, payment and message endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from app.core.security import create_access_token

API = "/api/v1"


def dates(start_offset: int = -2, length: int = 2) -> tuple[str, str]:
    """ISO start/end around today so activation and completion are allowed."""
    start = datetime.now(UTC).date() + timedelta(days=start_offset)
    return start.isoformat(), (start + timedelta(days=length)).isoformat()


async def request_booking(client, headers, property_id, start: str, end: str):
    return await client.post(
        f"{API}/bookings/",
        json={"property_id": str(property_id), "start_date": start, "end_date": end},
        headers=headers,
    )


async def set_status(client, headers, booking_id, status: str, reason: str | None = None):
    body = {"status": status}
    if reason is not None:
        body["reason"] = reason
    return await client.put(f"{API}/bookings/{booking_id}/status", json=body, headers=headers)


async def pay(client, headers, booking_id, amount: int, **extra):
    return await client.post(
        f"{API}/bookings/{booking_id}/payments",
        json={"amount": amount, "payment_method": "bank_transfer", **extra},
        headers=headers,
    )


@pytest.fixture
def owner_headers(auth_headers, owner):
    return auth_headers(owner)


@pytest.fixture
def renter_headers(auth_headers, renter):
    return auth_headers(renter)


@pytest.fixture
async def pending_booking(client, renter_headers, rental) -> dict:
    start, end = dates()
    response = await request_booking(client, renter_headers, rental.id, start, end)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def approved_booking(client, owner_headers, pending_booking) -> dict:
    response = await set_status(client, owner_headers, pending_booking["id"], "approved")
    assert response.status_code == 200, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Request-ID" in response.headers


async def test_readiness_pings_database(client):
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


# ==================== IDENTITY ====================


async def test_requests_without_token_are_rejected(client):
    response = await client.get(f"{API}/bookings/")
    assert response.status_code == 401


async def test_invalid_token_is_rejected(client):
    response = await client.get(f"{API}/bookings/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_token_for_unknown_user_is_rejected(client):
    token = create_access_token({"sub": str(uuid4())})
    response = await client.get(f"{API}/bookings/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_deactivated_user_is_rejected(client, db, renter, renter_headers):
    renter.is_active = False
    await db.commit()

    response = await client.get(f"{API}/bookings/", headers=renter_headers)
    assert response.status_code == 401


# ==================== FULL FLOW ====================


async def test_rent_and_pay_flow(client, rental, owner_headers, renter_headers):
    start, end = dates()

    calc = await client.post(
        f"{API}/bookings/calculate",
        json={"property_id": str(rental.id), "start_date": start, "end_date": end},
        headers=renter_headers,
    )
    assert calc.status_code == 200
    assert calc.json()["available"] is True
    assert calc.json()["price_breakdown"]["total_amount"] == 1500

    created = await request_booking(client, renter_headers, rental.id, start, end)
    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "pending"
    assert booking["total_amount"] == 1500
    assert booking["duration_months"] == 1
    booking_id = booking["id"]

    approved = await set_status(client, owner_headers, booking_id, "approved")
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    prop = await client.get(f"{API}/properties/{rental.id}", headers=owner_headers)
    assert prop.json()["is_available"] is False

    first = await pay(client, renter_headers, booking_id, 1000)
    assert first.status_code == 201
    assert first.json()["payment_status"] == "partial"
    assert first.json()["balance_due"] == 500
    assert first.json()["payment"]["amount"] == 1000

    second = await pay(client, renter_headers, booking_id, 500)
    assert second.status_code == 201
    assert second.json()["payment_status"] == "paid"

    history = await client.get(f"{API}/bookings/{booking_id}/payments", headers=owner_headers)
    assert history.status_code == 200
    assert [p["amount"] for p in history.json()["payments"]] == [1000, 500]
    assert history.json()["amount_paid"] == 1500

    active = await set_status(client, owner_headers, booking_id, "active")
    assert active.status_code == 200
    assert active.json()["move_in_date"] is not None

    completed = await set_status(client, owner_headers, booking_id, "completed")
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert completed.json()["payment_status"] == "paid"

    detail = await client.get(f"{API}/bookings/{booking_id}", headers=renter_headers)
    assert detail.status_code == 200
    assert len(detail.json()["payments"]) == 2

    # the owner reopens the property once the tenancy is over
    reopened = await client.put(
        f"{API}/properties/{rental.id}/availability",
        json={"is_available": True},
        headers=owner_headers,
    )
    assert reopened.status_code == 200
    assert reopened.json()["is_available"] is True


# ==================== ERROR MAPPING ====================


async def test_create_with_bad_dates_is_400(client, rental, renter_headers):
    start, _ = dates()
    response = await request_booking(client, renter_headers, rental.id, start, start)
    assert response.status_code == 400


async def test_create_on_closed_property_is_400(client, rental, owner_headers, renter_headers):
    closed = await client.put(
        f"{API}/properties/{rental.id}/availability",
        json={"is_available": False},
        headers=owner_headers,
    )
    assert closed.status_code == 200

    start, end = dates()
    response = await request_booking(client, renter_headers, rental.id, start, end)
    assert response.status_code == 400


async def test_owner_cannot_request_booking(client, rental, owner_headers):
    start, end = dates()
    response = await request_booking(client, owner_headers, rental.id, start, end)
    assert response.status_code == 403


async def test_missing_booking_is_404(client, renter_headers):
    response = await client.get(f"{API}/bookings/{uuid4()}", headers=renter_headers)
    assert response.status_code == 404


async def test_unknown_status_is_422(client, owner_headers, pending_booking):
    response = await set_status(client, owner_headers, pending_booking["id"], "archived")
    assert response.status_code == 422


async def test_illegal_transition_is_403(client, owner_headers, pending_booking):
    response = await set_status(client, owner_headers, pending_booking["id"], "completed")

    assert response.status_code == 403
    assert response.json()["detail"] == "Invalid booking transition: pending → completed"


async def test_renter_cannot_approve(client, renter_headers, pending_booking):
    response = await set_status(client, renter_headers, pending_booking["id"], "approved")
    assert response.status_code == 403


async def test_overlapping_approval_is_409(
    client, auth_headers, other_renter, rental, owner_headers, pending_booking
):
    start, end = dates(start_offset=-1, length=5)
    second = await request_booking(client, auth_headers(other_renter), rental.id, start, end)
    assert second.status_code == 201

    first = await set_status(client, owner_headers, pending_booking["id"], "approved")
    assert first.status_code == 200

    response = await set_status(client, owner_headers, second.json()["id"], "approved")
    assert response.status_code == 409


async def test_cancel_without_reason_is_400(client, renter_headers, approved_booking):
    response = await set_status(client, renter_headers, approved_booking["id"], "cancelled")
    assert response.status_code == 400

    response = await set_status(client, renter_headers, approved_booking["id"], "cancelled", reason="Relocating")
    assert response.status_code == 200
    assert response.json()["cancellation_reason"] == "Relocating"


async def test_reopen_refused_while_booking_holds_property(client, rental, owner_headers, approved_booking):
    response = await client.put(
        f"{API}/properties/{rental.id}/availability",
        json={"is_available": True},
        headers=owner_headers,
    )
    assert response.status_code == 409


@pytest.mark.parametrize("amount", [0, -50])
async def test_non_positive_payment_is_400(client, renter_headers, approved_booking, amount):
    response = await pay(client, renter_headers, approved_booking["id"], amount)
    assert response.status_code == 400

    history = await client.get(f"{API}/bookings/{approved_booking['id']}/payments", headers=renter_headers)
    assert history.json()["payments"] == []
    assert history.json()["payment_status"] == "pending"


async def test_outsider_cannot_see_booking(client, auth_headers, other_renter, pending_booking):
    response = await client.get(f"{API}/bookings/{pending_booking['id']}", headers=auth_headers(other_renter))
    assert response.status_code == 403


# ==================== LISTING ====================


async def test_list_bookings_by_role(client, auth_headers, other_renter, rental, owner_headers, renter_headers, pending_booking):
    start, end = dates(start_offset=10, length=40)
    other = await request_booking(client, auth_headers(other_renter), rental.id, start, end)
    assert other.status_code == 201

    mine = await client.get(f"{API}/bookings/", headers=renter_headers)
    assert mine.status_code == 200
    assert mine.json()["total"] == 1
    assert mine.json()["bookings"][0]["id"] == pending_booking["id"]

    owned = await client.get(f"{API}/bookings/", params={"page_size": 1}, headers=owner_headers)
    assert owned.json()["total"] == 2
    assert owned.json()["total_pages"] == 2
    assert len(owned.json()["bookings"]) == 1

    approved = await client.get(f"{API}/bookings/", params={"status": "approved"}, headers=owner_headers)
    assert approved.json()["total"] == 0


# ==================== MESSAGES ====================


async def test_messages(client, owner_headers, renter_headers, pending_booking):
    booking_id = pending_booking["id"]

    sent = await client.post(
        f"{API}/bookings/{booking_id}/messages",
        json={"message": "Can I move in a day early?"},
        headers=renter_headers,
    )
    assert sent.status_code == 201
    assert sent.json()["is_read"] is False

    inbox = await client.get(f"{API}/bookings/{booking_id}/messages", headers=owner_headers)
    assert inbox.status_code == 200
    assert inbox.json()["unread_count"] == 1

    marked = await client.post(f"{API}/bookings/{booking_id}/messages/read", headers=owner_headers)
    assert marked.json() == {"marked_read": 1}

    inbox = await client.get(f"{API}/bookings/{booking_id}/messages", headers=owner_headers)
    assert inbox.json()["unread_count"] == 0
    assert inbox.json()["messages"][0]["is_read"] is True


async def test_empty_message_is_422(client, renter_headers, pending_booking):
    response = await client.post(
        f"{API}/bookings/{pending_booking['id']}/messages",
        json={"message": ""},
        headers=renter_headers,
    )
    assert response.status_code == 422


# ==================== PROPERTIES ====================


async def test_renter_cannot_list_property(client, renter_headers):
    response = await client.post(
        f"{API}/properties/",
        json={"title": "Loft", "rent_price": 900},
        headers=renter_headers,
    )
    assert response.status_code == 403


async def test_owner_lists_property(client, owner, owner_headers):
    response = await client.post(
        f"{API}/properties/",
        json={"title": "Loft", "rent_price": 900, "security_deposit": 300},
        headers=owner_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["owner_id"] == str(owner.id)
    assert body["is_available"] is True


async def test_other_owner_cannot_toggle_availability(client, auth_headers, other_owner, rental):
    response = await client.put(
        f"{API}/properties/{rental.id}/availability",
        json={"is_available": False},
        headers=auth_headers(other_owner),
    )
    assert response.status_code == 403
