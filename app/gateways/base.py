"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class GatewayType(str, Enum):
    """Supported payment gateways."""

    STRIPE = "stripe"
    MANUAL = "manual"


@dataclass
class PaymentResult:
    """Result of a payment operation."""

    success: bool
    transaction_id: str | None = None
    client_secret: str | None = None
    amount: int | None = None
    error_message: str | None = None
    metadata: dict | None = None
    raw_response: dict | None = None


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def gateway_type(self) -> GatewayType:
        """Return the gateway type."""
        pass

    @abstractmethod
    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create a payment intent.

        Args:
            amount: Amount in smallest currency unit
            currency: ISO currency code
            reference_id: Internal reference (booking id)
            description: Payment description
            metadata: Additional metadata

        Returns:
            PaymentResult carrying the client-side confirmation token

        Raises:
            UpstreamUnavailable: If the gateway cannot be reached in time
        """
        pass

    @abstractmethod
    async def verify_payment(
        self,
        transaction_id: str,
    ) -> PaymentResult:
        """Verify a payment status.

        Args:
            transaction_id: Gateway transaction ID

        Returns:
            PaymentResult with current status, captured amount and the
            metadata the intent was created with
        """
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Verify webhook signature and parse payload.

        Args:
            payload: Raw request body
            signature: Webhook signature header

        Returns:
            Parsed event dict if valid, None if invalid
        """
        pass


def to_minor_units(amount: float) -> int:
    """Convert a major-unit price to the gateway's smallest unit."""
    return int(round(amount * 100))


def from_minor_units(amount: int) -> float:
    return amount / 100
