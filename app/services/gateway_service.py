"""Payment gateway service.

Routes payment operations to the appropriate gateway adapter.
No business logic here - only gateway coordination.
"""

from app.config import settings
from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
)
from app.gateways.manual import ManualGateway
from app.gateways.stripe_gateway import StripeGateway


class GatewayService:
    """Service for managing payment gateway operations."""

    def __init__(self):
        self._gateways: dict[GatewayType, PaymentGateway] = {}

    def get_gateway(self, gateway_type: str | GatewayType | None = None) -> PaymentGateway:
        """Get or create gateway instance (defaults to the configured gateway)."""
        gateway_type = gateway_type or settings.payment_gateway
        if isinstance(gateway_type, str):
            try:
                gateway_type = GatewayType(gateway_type)
            except ValueError:
                gateway_type = GatewayType.MANUAL

        if gateway_type not in self._gateways:
            if gateway_type == GatewayType.STRIPE:
                self._gateways[gateway_type] = StripeGateway()
            else:
                self._gateways[gateway_type] = ManualGateway()

        return self._gateways[gateway_type]

    def register(self, gateway: PaymentGateway) -> None:
        """Install a gateway instance for its type."""
        self._gateways[gateway.gateway_type] = gateway

    async def verify_payment(
        self,
        transaction_id: str,
        gateway_type: str | GatewayType | None = None,
    ) -> PaymentResult:
        """Verify payment status via gateway."""
        gateway = self.get_gateway(gateway_type)
        return await gateway.verify_payment(transaction_id)

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
        gateway_type: str | GatewayType | None = None,
    ) -> dict | None:
        """Verify webhook from gateway."""
        gateway = self.get_gateway(gateway_type)
        return gateway.verify_webhook(payload, signature)


# Singleton instance
gateway_service = GatewayService()


def get_gateway_service() -> GatewayService:
    """Dependency returning the gateway service."""
    return gateway_service
