"""Booking lifecycle over HTTP."""

from datetime import date, timedelta

import pytest

TOUR_DATE = (date.today() + timedelta(days=30)).isoformat()


@pytest.fixture
async def booking(client, users, package, auth_headers) -> dict:
    response = await client.post(
        "/api/v1/bookings",
        json={"packageId": str(package.id), "tourDate": TOUR_DATE, "travelers": 1},
        headers=auth_headers(users["customer"].email),
    )
    assert response.status_code == 201
    return response.json()


async def test_create_booking(booking, users):
    assert booking["booking_status"] == "pending"
    assert booking["payment_status"] == "unpaid"
    assert booking["payment"] is None
    assert booking["created_by"] == users["customer"].email
    assert booking["price"] == 12500.0
    assert booking["tour_date"] == TOUR_DATE


async def test_create_requires_sign_in(client, package):
    response = await client.post("/api/v1/bookings", json={"packageId": str(package.id)})
    assert response.status_code == 401


async def test_create_with_past_tour_date(client, users, package, auth_headers):
    response = await client.post(
        "/api/v1/bookings",
        json={"packageId": str(package.id), "tourDate": "2001-01-01"},
        headers=auth_headers(users["customer"].email),
    )
    assert response.status_code == 422


async def test_create_for_unknown_package(client, users, auth_headers):
    response = await client.post(
        "/api/v1/bookings",
        json={"packageId": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers(users["customer"].email),
    )
    assert response.status_code == 404


async def test_tour_scenario(client, users, auth_headers):
    """Customer books, pays, admin reviews and assigns, guide accepts."""
    admin = auth_headers(users["admin"].email)
    customer = auth_headers(users["customer"].email)
    guide = auth_headers(users["guide"].email)

    package = await client.post(
        "/api/v1/packages",
        json={"title": "P1", "location": "Sylhet", "price": "100"},
        headers=admin,
    )
    assert package.status_code == 201

    booking = await client.post(
        "/api/v1/bookings",
        json={"packageId": package.json()["id"], "tourDate": TOUR_DATE},
        headers=customer,
    )
    booking_id = booking.json()["id"]

    paid = await client.patch(
        f"/api/v1/bookings/{booking_id}",
        json={"transactionId": "T1", "amount": 100},
        headers=customer,
    )
    assert paid.status_code == 200
    assert paid.json()["payment_status"] == "paid"
    assert paid.json()["payment"]["transaction_id"] == "T1"
    assert paid.json()["payment"]["amount"] == 100

    reviewed = await client.patch(f"/api/v1/bookings/{booking_id}/review", headers=admin)
    assert reviewed.json()["booking_status"] == "in-review"

    assigned = await client.patch(
        f"/api/v1/bookings/{booking_id}/assign",
        json={"guideEmail": users["guide"].email},
        headers=admin,
    )
    assert assigned.json()["booking_status"] == "guide_assigned"

    mine = await client.get("/api/v1/bookings/assigned", headers=guide)
    assert [b["id"] for b in mine.json()["bookings"]] == [booking_id]

    accepted = await client.patch(
        f"/api/v1/bookings/assigned/{booking_id}/status",
        json={"status": "accepted"},
        headers=guide,
    )
    assert accepted.status_code == 200
    final = accepted.json()
    assert final["booking_status"] == "accepted"
    assert final["payment_status"] == "paid"
    assert final["guide_email"] == users["guide"].email


async def test_unassigned_guide_cannot_accept(client, booking, users, auth_headers):
    admin = auth_headers(users["admin"].email)
    await client.patch(f"/api/v1/bookings/{booking['id']}/review", headers=admin)
    await client.patch(
        f"/api/v1/bookings/{booking['id']}/assign",
        json={"guideEmail": users["guide"].email},
        headers=admin,
    )

    response = await client.patch(
        f"/api/v1/bookings/assigned/{booking['id']}/status",
        json={"status": "accepted"},
        headers=auth_headers(users["guide2"].email),
    )
    assert response.status_code == 403

    current = await client.get(f"/api/v1/bookings/{booking['id']}", headers=admin)
    assert current.json()["booking_status"] == "guide_assigned"


async def test_customer_cannot_act_as_guide(client, booking, users, auth_headers):
    response = await client.patch(
        f"/api/v1/bookings/assigned/{booking['id']}/status",
        json={"status": "accepted"},
        headers=auth_headers(users["customer"].email),
    )
    assert response.status_code == 403


async def test_guide_cannot_set_other_statuses(client, booking, users, auth_headers):
    response = await client.patch(
        f"/api/v1/bookings/assigned/{booking['id']}/status",
        json={"status": "guide_assigned"},
        headers=auth_headers(users["guide"].email),
    )
    assert response.status_code == 422


async def test_illegal_transition_is_conflict(client, booking, users, auth_headers):
    response = await client.patch(
        f"/api/v1/bookings/{booking['id']}/assign",
        json={"guideEmail": users["guide"].email},
        headers=auth_headers(users["admin"].email),
    )
    assert response.status_code == 409


async def test_review_is_admin_only(client, booking, users, auth_headers):
    response = await client.patch(
        f"/api/v1/bookings/{booking['id']}/review",
        headers=auth_headers(users["guide"].email),
    )
    assert response.status_code == 403


async def test_booking_visibility(client, booking, users, auth_headers):
    url = f"/api/v1/bookings/{booking['id']}"
    assert (await client.get(url, headers=auth_headers(users["customer"].email))).status_code == 200
    assert (await client.get(url, headers=auth_headers(users["admin"].email))).status_code == 200
    assert (await client.get(url, headers=auth_headers(users["other"].email))).status_code == 403


async def test_list_endpoints(client, booking, users, auth_headers):
    mine = await client.get("/api/v1/bookings/mine", headers=auth_headers(users["customer"].email))
    assert mine.json()["total"] == 1

    theirs = await client.get("/api/v1/bookings/mine", headers=auth_headers(users["other"].email))
    assert theirs.json()["total"] == 0

    pending = await client.get(
        "/api/v1/bookings",
        params={"status": "pending"},
        headers=auth_headers(users["admin"].email),
    )
    assert [b["id"] for b in pending.json()["bookings"]] == [booking["id"]]

    bad_filter = await client.get(
        "/api/v1/bookings",
        params={"status": "cancelled"},
        headers=auth_headers(users["admin"].email),
    )
    assert bad_filter.status_code == 422


async def test_delete_unpaid_booking(client, booking, users, auth_headers):
    customer = auth_headers(users["customer"].email)
    response = await client.delete(f"/api/v1/bookings/{booking['id']}", headers=customer)
    assert response.status_code == 204

    gone = await client.get(f"/api/v1/bookings/{booking['id']}", headers=customer)
    assert gone.status_code == 404


async def test_paid_booking_is_kept(client, booking, users, auth_headers):
    customer = auth_headers(users["customer"].email)
    await client.patch(
        f"/api/v1/bookings/{booking['id']}",
        json={"transactionId": "tx_paid", "amount": 12500},
        headers=customer,
    )

    response = await client.delete(f"/api/v1/bookings/{booking['id']}", headers=customer)
    assert response.status_code == 409
