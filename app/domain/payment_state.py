"""Booking payment state machine.

States: unpaid → paid (terminal). A booking carries its payment
sub-record exactly when it is paid.
"""

from enum import Enum

from app.core.exceptions import InvalidTransition


class PaymentStatus(str, Enum):
    """Payment states of a booking."""

    UNPAID = "unpaid"
    PAID = "paid"


PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.UNPAID: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}


def assert_payment_transition(current: str, target: str) -> None:
    allowed = PAYMENT_TRANSITIONS.get(PaymentStatus(current), set())
    if PaymentStatus(target) not in allowed:
        raise InvalidTransition(
            f"Invalid payment transition: {current} → {target}",
            current=current,
            action="confirm_payment",
        )


def payment_invariant_holds(payment_status: str, payment: dict | None) -> bool:
    """A paid booking has a payment record with a positive amount; an unpaid one has none."""
    if payment_status == PaymentStatus.PAID.value:
        return bool(payment) and (payment.get("amount") or 0) > 0
    return payment is None
