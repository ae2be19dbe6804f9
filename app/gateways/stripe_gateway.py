"""Stripe payment gateway adapter."""

import asyncio
import json
import logging

import stripe

from app.config import settings
from app.core.exceptions import UpstreamUnavailable
from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
)

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    """Stripe payment gateway implementation.

    The Stripe SDK is synchronous; calls run in a worker thread bounded by
    the upstream timeout.
    """

    def __init__(self, timeout: float | None = None):
        self.secret_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret
        self.timeout = timeout or settings.upstream_timeout_seconds

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.STRIPE

    async def _call(self, func, *args, **kwargs):
        stripe.api_key = self.secret_key
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Stripe call timed out after {self.timeout}s")
            raise UpstreamUnavailable("stripe", "request timed out")
        except (stripe.APIConnectionError, stripe.RateLimitError) as e:
            logger.warning(f"Stripe unavailable: {e}")
            raise UpstreamUnavailable("stripe", str(e.user_message or e))

    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create Stripe PaymentIntent."""
        if not self.secret_key:
            return PaymentResult(
                success=False,
                error_message="Stripe not configured",
            )

        try:
            intent = await self._call(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=currency.lower(),
                description=description,
                payment_method_types=["card"],
                metadata={"booking_id": reference_id, **(metadata or {})},
            )
        except stripe.StripeError as e:
            return PaymentResult(
                success=False,
                error_message=str(e.user_message or e),
            )

        return PaymentResult(
            success=True,
            transaction_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            raw_response={"id": intent.id, "status": intent.status},
        )

    async def verify_payment(
        self,
        transaction_id: str,
    ) -> PaymentResult:
        """Verify Stripe payment status."""
        if not self.secret_key:
            return PaymentResult(
                success=False,
                error_message="Stripe not configured",
            )

        try:
            intent = await self._call(stripe.PaymentIntent.retrieve, transaction_id)
        except stripe.StripeError as e:
            return PaymentResult(
                success=False,
                transaction_id=transaction_id,
                error_message=str(e.user_message or e),
            )

        return PaymentResult(
            success=intent.status == "succeeded",
            transaction_id=transaction_id,
            amount=intent.amount_received,
            metadata=dict(intent.metadata or {}),
            error_message=None if intent.status == "succeeded" else f"Payment status is {intent.status}",
            raw_response={"status": intent.status},
        )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Verify Stripe webhook signature."""
        if not self.webhook_secret:
            return None

        try:
            stripe.Webhook.construct_event(
                payload,
                signature,
                self.webhook_secret,
            )
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Rejected Stripe webhook: {e}")
            return None

        return json.loads(payload)
