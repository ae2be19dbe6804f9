"""Role-based access control."""

from collections.abc import Iterable
from enum import Enum

from app.core.exceptions import AuthorizationError


class UserRole(str, Enum):
    """User roles in the system."""

    USER = "user"
    GUIDE = "guide"
    ADMIN = "admin"


def is_authorized(role: str | UserRole, allowed_roles: Iterable[str | UserRole]) -> bool:
    """Check a stored role against an allowed-role set. Admin always passes."""
    role = UserRole(role)
    if role is UserRole.ADMIN:
        return True
    return role in {UserRole(r) for r in allowed_roles}


def authorize(role: str | UserRole, allowed_roles: Iterable[str | UserRole]) -> None:
    """Raise AuthorizationError unless the role is admitted."""
    allowed = list(allowed_roles)
    if not is_authorized(role, allowed):
        names = ", ".join(sorted(UserRole(r).value for r in allowed)) or "none"
        raise AuthorizationError(
            f"Role '{UserRole(role).value}' is not authorized for this action (requires: {names})"
        )
