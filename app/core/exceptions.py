"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Malformed or semantically invalid input."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UserNotFound(NotFoundError):
    """No stored user for a verified identity."""

    def __init__(self, email: str | None = None) -> None:
        AppException.__init__(
            self,
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{email}' not found" if email else "User not found",
        )


class AuthenticationError(AppException):
    """Missing or invalid bearer credential."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Role or ownership mismatch."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidTransition(AppException):
    """Current state does not satisfy the transition's precondition."""

    def __init__(
        self,
        detail: str = "This operation is not allowed for the current state",
        current: str | None = None,
        action: str | None = None,
    ) -> None:
        self.current = current
        self.action = action
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PaymentError(AppException):
    """Payment could not be verified by the gateway."""

    def __init__(self, detail: str = "Payment processing failed") -> None:
        super().__init__(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=detail)


class UpstreamUnavailable(AppException):
    """Identity provider, store or payment gateway failed or timed out."""

    def __init__(self, service: str, detail: str | None = None) -> None:
        self.service = service
        message = f"Upstream service '{service}' is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=message,
            headers={"Retry-After": "5"},
        )
