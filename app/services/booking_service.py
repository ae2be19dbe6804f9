"""Booking lifecycle service.

Every transition is one conditional UPDATE that matches on the current
state (and owner, where relevant). Two concurrent attempts on the same
booking race in the database: exactly one matches, the other sees zero
rows and is reported as NotFound, Forbidden or InvalidTransition.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    InvalidTransition,
    NotFoundError,
    ValidationError,
)
from app.core.permissions import UserRole
from app.domain.booking_state import (
    GUIDE_ACTIONS,
    BookingAction,
    BookingStatus,
    allowed_sources,
    assert_booking_transition,
    target_status,
)
from app.domain.payment_state import PaymentStatus, assert_payment_transition
from app.models.booking import Booking
from app.models.package import TourPackage
from app.models.user import User
from app.schemas.booking import BookingCreate
from app.services.audit_service import audit_service

logger = logging.getLogger(__name__)


def _is_admin(actor: User | None) -> bool:
    return actor is not None and actor.role == UserRole.ADMIN.value


class BookingService:
    """Creates bookings and applies lifecycle transitions."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, booking_id: UUID) -> Booking:
        booking = await self.db.get(Booking, booking_id, populate_existing=True)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def get_visible(self, booking_id: UUID, actor: User) -> Booking:
        """Fetch a booking the actor owns, is assigned to, or administers."""
        booking = await self.get(booking_id)
        if _is_admin(actor) or actor.email in (booking.created_by, booking.guide_email):
            return booking
        raise AuthorizationError("You don't have permission to access this booking")

    async def create(self, data: BookingCreate, created_by: str) -> Booking:
        """Create a booking in pending/unpaid."""
        package = await self.db.get(TourPackage, data.package_id)
        if not package:
            raise NotFoundError("Package", str(data.package_id))

        booking = Booking(
            package_id=package.id,
            created_by=created_by,
            tour_date=data.tour_date,
            travelers=data.travelers,
            price=float(package.price) * data.travelers,
            notes=data.notes,
            booking_status=BookingStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            payment=None,
        )
        self.db.add(booking)
        await self.db.flush()
        logger.info(f"Booking {booking.id} created by {created_by} for package {package.id}")
        return booking

    # ==================== LIFECYCLE ====================

    async def mark_in_review(self, booking_id: UUID, actor: User) -> Booking:
        """Admin: pending → in-review."""
        return await self._transition(booking_id, BookingAction.MARK_IN_REVIEW, actor)

    async def assign_guide(self, booking_id: UUID, guide_email: str, actor: User) -> Booking:
        """Admin: in-review → guide_assigned, recording the guide."""
        guide = await self.db.scalar(select(User).where(User.email == guide_email))
        if not guide or guide.role != UserRole.GUIDE.value:
            raise ValidationError(f"'{guide_email}' is not an active guide")

        return await self._transition(
            booking_id,
            BookingAction.ASSIGN_GUIDE,
            actor,
            values={"guide_email": guide.email},
        )

    async def guide_decision(self, booking_id: UUID, status: str, actor: User) -> Booking:
        """Assigned guide: in-review | guide_assigned → accepted | rejected."""
        if status == BookingStatus.ACCEPTED.value:
            action = BookingAction.ACCEPT
        elif status == BookingStatus.REJECTED.value:
            action = BookingAction.REJECT
        else:
            raise ValidationError(f"Guides cannot set booking status '{status}'")

        if _is_admin(actor):
            owner_clause = Booking.guide_email.is_not(None)
        else:
            owner_clause = Booking.guide_email == actor.email
        return await self._transition(booking_id, action, actor, where=(owner_clause,))

    async def _transition(
        self,
        booking_id: UUID,
        action: BookingAction,
        actor: User,
        values: dict | None = None,
        where: tuple = (),
    ) -> Booking:
        sources = [s.value for s in allowed_sources(action)]
        target = target_status(action)
        # The update also matches on the status read here, so the audit
        # records the state the booking actually left
        prior = await self.db.scalar(select(Booking.booking_status).where(Booking.id == booking_id))

        stmt = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.booking_status.in_(sources),
                Booking.booking_status == prior,
                *where,
            )
            .values(booking_status=target.value, updated_at=datetime.now(UTC), **(values or {}))
            .returning(Booking)
            .execution_options(populate_existing=True)
        )
        booking = (await self.db.execute(stmt)).scalar_one_or_none()
        if booking is None:
            await self._raise_transition_failure(booking_id, action, actor)

        await audit_service.log_booking_transition(
            self.db,
            actor_email=actor.email,
            action=action.value,
            booking_id=booking.id,
            old_status=prior,
            new_status=target.value,
            extra=values,
        )
        logger.info(f"Booking {booking.id}: {action.value} → {target.value} by {actor.email}")
        return booking

    async def _raise_transition_failure(
        self, booking_id: UUID, action: BookingAction, actor: User
    ) -> None:
        """Re-read a booking whose conditional update matched nothing and raise why."""
        current = await self.get(booking_id)
        if action in GUIDE_ACTIONS:
            if current.guide_email is None:
                if not _is_admin(actor):
                    raise AuthorizationError("This booking is not assigned to you")
                raise InvalidTransition(
                    "Booking has no assigned guide",
                    current=current.booking_status,
                    action=action.value,
                )
            if not _is_admin(actor) and current.guide_email != actor.email:
                raise AuthorizationError("This booking is not assigned to you")
        assert_booking_transition(current.booking_status, action)
        # State moved between the update and the re-read
        raise InvalidTransition(
            "Booking changed concurrently; reload and retry",
            current=current.booking_status,
            action=action.value,
        )

    # ==================== PAYMENT ====================

    async def transaction_in_use(self, transaction_id: str) -> bool:
        """Whether a paid booking already carries this transaction id."""
        found = await self.db.scalar(
            select(Booking.id)
            .where(Booking.payment["transaction_id"].as_string() == transaction_id)
            .limit(1)
        )
        return found is not None

    async def confirm_payment(
        self,
        booking_id: UUID,
        transaction_id: str,
        method: str,
        amount: float,
        actor: User | None = None,
    ) -> Booking:
        """unpaid → paid, embedding the payment record in the same update."""
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")

        payment = {
            "transaction_id": transaction_id,
            "method": method,
            "amount": amount,
            "paid_at": datetime.now(UTC).isoformat(),
        }
        stmt = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.payment_status == PaymentStatus.UNPAID.value,
            )
            .values(
                payment_status=PaymentStatus.PAID.value,
                payment=payment,
                updated_at=datetime.now(UTC),
            )
            .returning(Booking)
            .execution_options(populate_existing=True)
        )
        booking = (await self.db.execute(stmt)).scalar_one_or_none()
        if booking is None:
            current = await self.get(booking_id)
            assert_payment_transition(current.payment_status, PaymentStatus.PAID.value)
            raise InvalidTransition(
                "Booking changed concurrently; reload and retry",
                current=current.payment_status,
                action="confirm_payment",
            )

        await audit_service.log_action(
            self.db,
            actor_email=actor.email if actor else None,
            action="booking_confirm_payment",
            resource_type="booking",
            resource_id=booking.id,
            old_values={"payment_status": PaymentStatus.UNPAID.value},
            new_values={"payment_status": PaymentStatus.PAID.value, "payment": payment},
        )
        logger.info(f"Booking {booking.id} paid: transaction {transaction_id} ({amount})")
        return booking

    # ==================== DELETION ====================

    async def delete(self, booking_id: UUID, actor: User) -> None:
        """Owner or admin removes an unpaid booking."""
        booking = await self.get(booking_id)
        if not _is_admin(actor) and booking.created_by != actor.email:
            raise AuthorizationError("You can only delete your own bookings")
        old_values = {"status": booking.booking_status, "payment_status": booking.payment_status}

        deleted = await self.db.scalar(
            delete(Booking)
            .where(
                Booking.id == booking_id,
                Booking.payment_status == PaymentStatus.UNPAID.value,
            )
            .returning(Booking.id)
            .execution_options(synchronize_session="fetch")
        )
        if deleted is None:
            raise InvalidTransition(
                "Paid bookings cannot be deleted",
                current=old_values["payment_status"],
                action="delete",
            )
        await audit_service.log_action(
            self.db,
            actor_email=actor.email,
            action="booking_delete",
            resource_type="booking",
            resource_id=booking_id,
            old_values=old_values,
        )
        logger.info(f"Booking {booking_id} deleted by {actor.email}")

    # ==================== QUERIES ====================

    async def search(
        self,
        created_by: str | None = None,
        guide_email: str | None = None,
        status: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """Filter, count and paginate bookings."""
        query = select(Booking)
        if created_by:
            query = query.where(Booking.created_by == created_by)
        if guide_email:
            query = query.where(Booking.guide_email == guide_email)
        if status:
            query = query.where(Booking.booking_status == status)

        total = await self.db.scalar(select(func.count()).select_from(query.subquery())) or 0

        offset = (page - 1) * page_size
        query = query.order_by(Booking.created_at.desc()).offset(offset).limit(page_size)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total
