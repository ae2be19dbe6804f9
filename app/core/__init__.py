"""Core utilities: errors, identity verification and the access gate."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidTransition,
    NotFoundError,
    PaymentError,
    UpstreamUnavailable,
    UserNotFound,
    ValidationError,
)
from app.core.permissions import UserRole, authorize, is_authorized
from app.core.security import (
    Identity,
    IdentityVerifier,
    create_access_token,
    get_identity_verifier,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidTransition",
    "NotFoundError",
    "PaymentError",
    "UpstreamUnavailable",
    "UserNotFound",
    "ValidationError",
    "UserRole",
    "authorize",
    "is_authorized",
    "Identity",
    "IdentityVerifier",
    "create_access_token",
    "get_identity_verifier",
]
