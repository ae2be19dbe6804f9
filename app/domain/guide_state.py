"""Guide application state machine.

States: pending → active | rejected (both terminal)
"""

from enum import Enum

from app.core.exceptions import InvalidTransition


class GuideApplicationStatus(str, Enum):
    """Guide application states."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


GUIDE_APPLICATION_TRANSITIONS: dict[GuideApplicationStatus, set[GuideApplicationStatus]] = {
    GuideApplicationStatus.PENDING: {GuideApplicationStatus.ACTIVE, GuideApplicationStatus.REJECTED},
    GuideApplicationStatus.ACTIVE: set(),
    GuideApplicationStatus.REJECTED: set(),
}

# Applications that block a new one for the same email
OPEN_STATUSES = frozenset({GuideApplicationStatus.PENDING, GuideApplicationStatus.ACTIVE})


def sources_for(target: GuideApplicationStatus | str) -> set[GuideApplicationStatus]:
    """States from which an application may move to target."""
    target = GuideApplicationStatus(target)
    return {s for s, allowed in GUIDE_APPLICATION_TRANSITIONS.items() if target in allowed}


def assert_guide_transition(current: str, target: str) -> None:
    allowed = GUIDE_APPLICATION_TRANSITIONS.get(GuideApplicationStatus(current), set())
    if GuideApplicationStatus(target) not in allowed:
        raise InvalidTransition(
            f"Invalid guide application transition: {current} → {target}",
            current=current,
            action=f"set_{target}",
        )
