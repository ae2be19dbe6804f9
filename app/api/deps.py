"""API dependencies for authentication, authorization and services."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, UserNotFound
from app.core.permissions import UserRole, authorize
from app.core.security import Identity, IdentityVerifier, get_identity_verifier
from app.database import get_db
from app.models.user import User
from app.services.booking_service import BookingService
from app.services.gateway_service import GatewayService, get_gateway_service
from app.services.guide_service import GuideService
from app.services.payment_service import PaymentService

# Security scheme; missing credentials are reported by get_identity
security = HTTPBearer(auto_error=False)


async def get_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> Identity:
    """Authenticate: verify the bearer token with the identity provider."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    token = credentials.credentials.strip()
    if not token:
        raise AuthenticationError("Missing bearer token")
    return await verifier.verify(token)


async def get_current_user(
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the stored user for the verified identity."""
    result = await db.execute(select(User).where(User.email == identity.email))
    user = result.scalar_one_or_none()
    if not user:
        raise UserNotFound(identity.email)
    return user


def require_roles(*allowed_roles: UserRole) -> Callable[..., Coroutine[Any, Any, User]]:
    """Authorize: admit the caller if their stored role is allowed (admin always is)."""

    async def role_checker(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        authorize(current_user.role, allowed_roles)
        return current_user

    return role_checker


# Convenience dependencies
require_admin = require_roles(UserRole.ADMIN)
require_guide = require_roles(UserRole.GUIDE)
require_guide_or_admin = require_roles(UserRole.GUIDE, UserRole.ADMIN)


def get_booking_service(db: Annotated[AsyncSession, Depends(get_db)]) -> BookingService:
    return BookingService(db)


def get_guide_service(db: Annotated[AsyncSession, Depends(get_db)]) -> GuideService:
    return GuideService(db)


def get_payment_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    gateways: Annotated[GatewayService, Depends(get_gateway_service)],
) -> PaymentService:
    return PaymentService(db, gateways)
