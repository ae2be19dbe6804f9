"""Bearer-token identity verification.

Tokens are issued by an external identity provider. Production verifies
Firebase ID tokens with the Firebase Admin SDK; development and tests use
locally signed HS256 tokens.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError, UpstreamUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """A verified identity claim."""

    email: str
    uid: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


def _identity_from_claims(claims: dict[str, Any]) -> Identity:
    email = claims.get("email")
    if not email:
        raise AuthenticationError("Token carries no email claim")
    return Identity(
        email=str(email).lower(),
        uid=claims.get("uid") or claims.get("sub"),
        claims=claims,
    )


class IdentityVerifier(ABC):
    """Verifies an opaque bearer token against an identity provider."""

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """Return the verified identity or raise AuthenticationError."""


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verify Firebase ID tokens via firebase-admin."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout or settings.upstream_timeout_seconds
        self._app = None

    def _get_app(self):
        if self._app is None:
            import firebase_admin
            from firebase_admin import credentials

            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                cred = (
                    credentials.Certificate(settings.firebase_credentials_path)
                    if settings.firebase_credentials_path
                    else credentials.ApplicationDefault()
                )
                options = (
                    {"projectId": settings.firebase_project_id}
                    if settings.firebase_project_id
                    else None
                )
                self._app = firebase_admin.initialize_app(cred, options)
        return self._app

    async def verify(self, token: str) -> Identity:
        from firebase_admin import auth

        try:
            claims = await asyncio.wait_for(
                asyncio.to_thread(auth.verify_id_token, token, self._get_app(), True),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Identity verification timed out after {self.timeout}s")
            raise UpstreamUnavailable("identity", "verification timed out")
        except auth.CertificateFetchError as e:
            logger.warning(f"Identity provider unreachable: {e}")
            raise UpstreamUnavailable("identity", "could not fetch signing certificates")
        except (
            auth.ExpiredIdTokenError,
            auth.RevokedIdTokenError,
            auth.InvalidIdTokenError,
            auth.UserDisabledError,
        ) as e:
            raise AuthenticationError(f"Token validation failed: {e}")
        except ValueError as e:
            raise AuthenticationError(f"Token validation failed: {e}")
        return _identity_from_claims(claims)


class JWTIdentityVerifier(IdentityVerifier):
    """Verify locally signed JWTs (development and tests)."""

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None) -> None:
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm

    async def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTError as e:
            raise AuthenticationError(f"Token validation failed: {str(e)}")
        return _identity_from_claims(claims)


def create_access_token(
    email: str,
    expires_delta: timedelta | None = None,
    secret_key: str | None = None,
    **extra: Any,
) -> str:
    """Create a locally signed identity token for the JWT verifier."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": email, "email": email, "exp": expire, **extra}
    return jwt.encode(
        to_encode,
        secret_key or settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@lru_cache
def get_identity_verifier() -> IdentityVerifier:
    """Get the configured identity verifier."""
    if settings.identity_provider == "jwt":
        return JWTIdentityVerifier()
    return FirebaseIdentityVerifier()
