"""Booking lifecycle service: conditional transitions, payment and deletion."""

import uuid

import pytest
from sqlalchemy import select

from app.core.exceptions import AuthorizationError, InvalidTransition, NotFoundError, ValidationError
from app.domain.payment_state import payment_invariant_holds
from app.models.admin import AuditLog
from app.models.booking import Booking
from app.schemas.booking import BookingCreate
from app.services.booking_service import BookingService


@pytest.fixture
def service(db) -> BookingService:
    return BookingService(db)


@pytest.fixture
async def booking(service, users, package) -> Booking:
    return await service.create(
        BookingCreate(package_id=package.id, travelers=2), created_by=users["customer"].email
    )


async def assigned(service, booking, users) -> Booking:
    await service.mark_in_review(booking.id, users["admin"])
    return await service.assign_guide(booking.id, users["guide"].email, users["admin"])


async def test_create_prices_by_travelers(booking, users):
    assert booking.booking_status == "pending"
    assert booking.payment_status == "unpaid"
    assert booking.payment is None
    assert booking.price == 25000.0
    assert booking.created_by == users["customer"].email


async def test_create_for_unknown_package(service, users):
    with pytest.raises(NotFoundError):
        await service.create(
            BookingCreate(package_id=uuid.uuid4()), created_by=users["customer"].email
        )


async def test_full_lifecycle(service, booking, users, db):
    reviewed = await service.mark_in_review(booking.id, users["admin"])
    assert reviewed.booking_status == "in-review"

    with_guide = await service.assign_guide(booking.id, users["guide"].email, users["admin"])
    assert with_guide.booking_status == "guide_assigned"
    assert with_guide.guide_email == users["guide"].email

    accepted = await service.guide_decision(booking.id, "accepted", users["guide"])
    assert accepted.booking_status == "accepted"

    await db.flush()
    actions = (
        await db.scalars(select(AuditLog.action).where(AuditLog.resource_id == booking.id))
    ).all()
    assert sorted(actions) == ["booking_accept", "booking_assign_guide", "booking_mark_in_review"]


async def test_audit_records_actual_prior_status(service, booking, users, db):
    await assigned(service, booking, users)
    await service.guide_decision(booking.id, "rejected", users["guide"])
    await db.flush()

    entries = (
        await db.scalars(select(AuditLog).where(AuditLog.resource_id == booking.id))
    ).all()
    moves = {e.action: (e.old_values["status"], e.new_values["status"]) for e in entries}
    assert moves == {
        "booking_mark_in_review": ("pending", "in-review"),
        "booking_assign_guide": ("in-review", "guide_assigned"),
        "booking_reject": ("guide_assigned", "rejected"),
    }


async def test_assign_skipping_review_is_rejected(service, booking, users):
    with pytest.raises(InvalidTransition) as exc_info:
        await service.assign_guide(booking.id, users["guide"].email, users["admin"])
    assert exc_info.value.current == "pending"

    current = await service.get(booking.id)
    assert current.booking_status == "pending"
    assert current.guide_email is None


async def test_assign_requires_a_guide(service, booking, users):
    await service.mark_in_review(booking.id, users["admin"])
    with pytest.raises(ValidationError):
        await service.assign_guide(booking.id, users["other"].email, users["admin"])
    with pytest.raises(ValidationError):
        await service.assign_guide(booking.id, "nobody@example.com", users["admin"])


async def test_unassigned_guide_is_forbidden(service, booking, users):
    await assigned(service, booking, users)

    with pytest.raises(AuthorizationError):
        await service.guide_decision(booking.id, "accepted", users["guide2"])

    current = await service.get(booking.id)
    assert current.booking_status == "guide_assigned"


async def test_forbidden_takes_precedence_over_state(service, booking, users):
    # No guide assigned yet: a guide is refused before the state is considered
    with pytest.raises(AuthorizationError):
        await service.guide_decision(booking.id, "rejected", users["guide"])


async def test_admin_acts_for_assigned_guide(service, booking, users):
    await assigned(service, booking, users)
    rejected = await service.guide_decision(booking.id, "rejected", users["admin"])
    assert rejected.booking_status == "rejected"
    assert rejected.guide_email == users["guide"].email


async def test_terminal_booking_cannot_move(service, booking, users):
    await assigned(service, booking, users)
    await service.guide_decision(booking.id, "accepted", users["guide"])

    with pytest.raises(InvalidTransition):
        await service.guide_decision(booking.id, "rejected", users["guide"])
    with pytest.raises(InvalidTransition):
        await service.mark_in_review(booking.id, users["admin"])

    assert (await service.get(booking.id)).booking_status == "accepted"


async def test_competing_decisions_only_one_wins(service, booking, users):
    await assigned(service, booking, users)

    outcomes = []
    for status in ("accepted", "rejected"):
        try:
            outcomes.append((await service.guide_decision(booking.id, status, users["guide"])).booking_status)
        except InvalidTransition:
            outcomes.append("refused")

    assert outcomes == ["accepted", "refused"]
    assert (await service.get(booking.id)).booking_status == "accepted"


async def test_transition_on_missing_booking(service, users):
    with pytest.raises(NotFoundError):
        await service.mark_in_review(uuid.uuid4(), users["admin"])


async def test_confirm_payment_embeds_record(service, booking):
    paid = await service.confirm_payment(
        booking.id, transaction_id="tx_100", method="card", amount=25000.0
    )
    assert paid.payment_status == "paid"
    assert paid.payment["transaction_id"] == "tx_100"
    assert paid.payment["amount"] == 25000.0
    assert payment_invariant_holds(paid.payment_status, paid.payment)
    # Payment is independent of the review lifecycle
    assert paid.booking_status == "pending"


async def test_confirm_payment_twice(service, booking):
    await service.confirm_payment(booking.id, transaction_id="tx_1", method="card", amount=10.0)
    with pytest.raises(InvalidTransition):
        await service.confirm_payment(booking.id, transaction_id="tx_2", method="card", amount=10.0)

    current = await service.get(booking.id)
    assert current.payment["transaction_id"] == "tx_1"


async def test_confirm_payment_rejects_non_positive_amount(service, booking):
    with pytest.raises(ValidationError):
        await service.confirm_payment(booking.id, transaction_id="tx_1", method="card", amount=0)
    assert (await service.get(booking.id)).payment_status == "unpaid"


async def test_visibility(service, booking, users):
    assert (await service.get_visible(booking.id, users["customer"])).id == booking.id
    assert (await service.get_visible(booking.id, users["admin"])).id == booking.id
    with pytest.raises(AuthorizationError):
        await service.get_visible(booking.id, users["other"])
    with pytest.raises(AuthorizationError):
        await service.get_visible(booking.id, users["guide"])

    await assigned(service, booking, users)
    assert (await service.get_visible(booking.id, users["guide"])).id == booking.id


async def test_delete_unpaid_by_owner(service, booking, users):
    await service.delete(booking.id, users["customer"])
    with pytest.raises(NotFoundError):
        await service.get(booking.id)


async def test_delete_by_stranger_is_forbidden(service, booking, users):
    with pytest.raises(AuthorizationError):
        await service.delete(booking.id, users["other"])


async def test_paid_booking_cannot_be_deleted(service, booking, users):
    await service.confirm_payment(booking.id, transaction_id="tx_1", method="card", amount=10.0)
    with pytest.raises(InvalidTransition):
        await service.delete(booking.id, users["admin"])
    assert (await service.get(booking.id)).payment_status == "paid"


async def test_search_filters(service, booking, users, package):
    other = await service.create(
        BookingCreate(package_id=package.id), created_by=users["other"].email
    )
    await service.mark_in_review(other.id, users["admin"])

    mine, total = await service.search(created_by=users["customer"].email)
    assert total == 1 and mine[0].id == booking.id

    reviewing, total = await service.search(status="in-review")
    assert total == 1 and reviewing[0].id == other.id

    everything, total = await service.search(page_size=1)
    assert total == 2 and len(everything) == 1
