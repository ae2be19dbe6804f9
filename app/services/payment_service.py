"""Booking payment service.

Payment intents are created through the configured gateway; confirmation
verifies the transaction with the gateway (where it can) and then applies
the unpaid → paid transition through the booking service.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import AuthorizationError, InvalidTransition, PaymentError
from app.core.permissions import UserRole
from app.domain.payment_state import PaymentStatus
from app.gateways.base import from_minor_units, to_minor_units
from app.models.booking import Booking
from app.models.user import User
from app.services.booking_service import BookingService
from app.services.gateway_service import GatewayService

logger = logging.getLogger(__name__)


class PaymentService:
    """Coordinates the payment gateway with the booking lifecycle."""

    def __init__(self, db: AsyncSession, gateways: GatewayService) -> None:
        self.db = db
        self.gateways = gateways
        self.bookings = BookingService(db)

    async def _owned_booking(self, booking_id: UUID, actor: User) -> Booking:
        booking = await self.bookings.get(booking_id)
        if actor.role != UserRole.ADMIN.value and booking.created_by != actor.email:
            raise AuthorizationError("You can only pay for your own bookings")
        return booking

    async def create_intent(self, booking_id: UUID, actor: User) -> dict:
        """Ask the gateway for a client-side confirmation token."""
        booking = await self._owned_booking(booking_id, actor)
        if booking.payment_status != PaymentStatus.UNPAID.value:
            raise InvalidTransition(
                "Booking is already paid",
                current=booking.payment_status,
                action="create_payment_intent",
            )

        gateway = self.gateways.get_gateway()
        result = await gateway.create_payment(
            amount=to_minor_units(booking.price),
            currency=settings.currency,
            reference_id=str(booking.id),
            description=f"Tour booking {booking.id}",
            metadata={"created_by": booking.created_by},
        )
        if not result.success:
            logger.warning(f"Payment intent for booking {booking.id} failed: {result.error_message}")
            raise PaymentError(result.error_message or "Could not create payment intent")

        return {
            "booking_id": booking.id,
            "gateway": gateway.gateway_type.value,
            "transaction_id": result.transaction_id,
            "client_secret": result.client_secret,
            "amount": booking.price,
            "currency": settings.currency,
        }

    async def confirm(
        self,
        booking_id: UUID,
        transaction_id: str,
        method: str,
        amount: float,
        actor: User,
    ) -> Booking:
        """Verify a payer-reported transaction and mark the booking paid."""
        booking = await self._owned_booking(booking_id, actor)
        if booking.payment_status != PaymentStatus.UNPAID.value:
            raise InvalidTransition(
                "Booking is already paid",
                current=booking.payment_status,
                action="confirm_payment",
            )

        if await self.bookings.transaction_in_use(transaction_id):
            raise PaymentError(f"Transaction '{transaction_id}' already paid for another booking")

        verification = await self.gateways.verify_payment(transaction_id)
        if not verification.success:
            raise PaymentError(verification.error_message or "Payment could not be verified")
        reference = (verification.metadata or {}).get("booking_id")
        if verification.metadata is not None and reference != str(booking.id):
            logger.warning(f"Transaction {transaction_id} was not created for booking {booking.id}")
            raise PaymentError("Payment does not belong to this booking")
        if verification.amount is not None:
            if verification.amount < to_minor_units(booking.price):
                raise PaymentError("Captured amount does not cover the booking price")
            amount = from_minor_units(verification.amount)

        return await self.bookings.confirm_payment(
            booking_id,
            transaction_id=transaction_id,
            method=method,
            amount=amount,
            actor=actor,
        )

    async def handle_gateway_event(self, event: dict) -> Booking | None:
        """Apply a verified gateway event; already-paid bookings are ignored."""
        if event.get("type") != "payment_intent.succeeded":
            return None

        data = event["data"]["object"]
        try:
            booking_id = UUID((data.get("metadata") or {}).get("booking_id") or "")
        except ValueError:
            logger.warning(f"Payment intent {data.get('id')} carries no valid booking_id")
            return None

        captured = data.get("amount_received") or data.get("amount") or 0
        if captured <= 0:
            logger.warning(f"Payment intent {data['id']} for booking {booking_id} captured nothing; ignoring")
            return None

        try:
            return await self.bookings.confirm_payment(
                booking_id,
                transaction_id=data["id"],
                method="card",
                amount=from_minor_units(captured),
            )
        except InvalidTransition:
            logger.info(f"Booking {booking_id} already paid; ignoring {data['id']}")
            return None
