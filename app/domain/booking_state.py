"""Booking state machine.

booking_status: pending → in-review → {guide_assigned, accepted, rejected};
guide_assigned → {accepted, rejected}.
Payment progresses independently (see payment_state).
"""

from enum import Enum

from app.core.exceptions import InvalidTransition


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    IN_REVIEW = "in-review"
    GUIDE_ASSIGNED = "guide_assigned"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class BookingAction(str, Enum):
    """Actions that move a booking between states."""

    MARK_IN_REVIEW = "mark_in_review"
    ASSIGN_GUIDE = "assign_guide"
    ACCEPT = "accept"
    REJECT = "reject"


# action -> (allowed current states, resulting state)
BOOKING_TRANSITIONS: dict[BookingAction, tuple[frozenset[BookingStatus], BookingStatus]] = {
    BookingAction.MARK_IN_REVIEW: (
        frozenset({BookingStatus.PENDING}),
        BookingStatus.IN_REVIEW,
    ),
    BookingAction.ASSIGN_GUIDE: (
        frozenset({BookingStatus.IN_REVIEW}),
        BookingStatus.GUIDE_ASSIGNED,
    ),
    BookingAction.ACCEPT: (
        frozenset({BookingStatus.IN_REVIEW, BookingStatus.GUIDE_ASSIGNED}),
        BookingStatus.ACCEPTED,
    ),
    BookingAction.REJECT: (
        frozenset({BookingStatus.IN_REVIEW, BookingStatus.GUIDE_ASSIGNED}),
        BookingStatus.REJECTED,
    ),
}

# Actions performed by the assigned guide
GUIDE_ACTIONS = frozenset({BookingAction.ACCEPT, BookingAction.REJECT})


def allowed_sources(action: BookingAction | str) -> frozenset[BookingStatus]:
    """States from which an action may be taken."""
    return BOOKING_TRANSITIONS[BookingAction(action)][0]


def target_status(action: BookingAction | str) -> BookingStatus:
    """State a booking lands in after an action."""
    return BOOKING_TRANSITIONS[BookingAction(action)][1]


def assert_booking_transition(current: str, action: BookingAction | str) -> BookingStatus:
    """Validate an action against the current status and return the new status."""
    action = BookingAction(action)
    sources, target = BOOKING_TRANSITIONS[action]
    if current not in {s.value for s in sources}:
        raise InvalidTransition(
            f"Invalid booking transition: {current} → {target.value} ({action.value})",
            current=current,
            action=action.value,
        )
    return target
