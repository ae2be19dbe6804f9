"""Manual payment gateway adapter for cash and bank transfers."""

from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
)


class ManualGateway(PaymentGateway):
    """Manual payment gateway.

    Payments are collected offline; the confirmation step records the
    transaction reference supplied by the payer.
    """

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.MANUAL

    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create manual payment request (always succeeds)."""
        return PaymentResult(
            success=True,
            transaction_id=f"manual_{reference_id}",
            client_secret=None,
            amount=amount,
            raw_response={
                "type": "manual",
                "status": "pending_verification",
                "currency": currency,
            },
        )

    async def verify_payment(
        self,
        transaction_id: str,
    ) -> PaymentResult:
        """Manual payments carry no gateway state to check."""
        return PaymentResult(
            success=True,
            transaction_id=transaction_id,
            raw_response={"type": "manual", "status": "recorded"},
        )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Manual gateway doesn't have webhooks."""
        return None
