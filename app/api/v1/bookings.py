"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    get_booking_service,
    get_current_user,
    get_payment_service,
    require_admin,
    require_guide,
)
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    GuideAssignRequest,
    GuideDecisionRequest,
    PaymentConfirmRequest,
)
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentService

router = APIRouter()

STATUS_PATTERN = "^(pending|in-review|guide_assigned|accepted|rejected)$"


def _page(bookings: list[Booking], total: int, page: int, page_size: int) -> BookingListResponse:
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Create a booking for the signed-in customer (pending, unpaid)."""
    return await bookings.create(booking_data, created_by=current_user.email)


@router.get("/mine", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: Annotated[User, Depends(get_current_user)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    status_filter: str | None = Query(default=None, alias="status", pattern=STATUS_PATTERN),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """Bookings created by the current user."""
    items, total = await bookings.search(
        created_by=current_user.email, status=status_filter, page=page, page_size=page_size
    )
    return _page(items, total, page, page_size)


@router.get("/assigned", response_model=BookingListResponse)
async def get_assigned_bookings(
    guide: Annotated[User, Depends(require_guide)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    status_filter: str | None = Query(default=None, alias="status", pattern=STATUS_PATTERN),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """Bookings assigned to the current guide."""
    items, total = await bookings.search(
        guide_email=guide.email, status=status_filter, page=page, page_size=page_size
    )
    return _page(items, total, page, page_size)


@router.get("", response_model=BookingListResponse)
async def get_all_bookings(
    admin: Annotated[User, Depends(require_admin)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    status_filter: str | None = Query(default=None, alias="status", pattern=STATUS_PATTERN),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """All bookings (admin only)."""
    items, total = await bookings.search(status=status_filter, page=page, page_size=page_size)
    return _page(items, total, page, page_size)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Get a booking (owner, assigned guide, or admin)."""
    return await bookings.get_visible(booking_id, current_user)


@router.patch("/{booking_id}/review", response_model=BookingResponse)
async def mark_booking_in_review(
    booking_id: UUID,
    admin: Annotated[User, Depends(require_admin)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Move a pending booking to in-review (admin only)."""
    return await bookings.mark_in_review(booking_id, admin)


@router.patch("/{booking_id}/assign", response_model=BookingResponse)
async def assign_booking_guide(
    booking_id: UUID,
    request: GuideAssignRequest,
    admin: Annotated[User, Depends(require_admin)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Assign a guide to an in-review booking (admin only)."""
    return await bookings.assign_guide(booking_id, request.guide_email, admin)


@router.patch("/assigned/{booking_id}/status", response_model=BookingResponse)
async def update_assigned_booking_status(
    booking_id: UUID,
    request: GuideDecisionRequest,
    guide: Annotated[User, Depends(require_guide)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Accept or reject a booking assigned to the current guide."""
    return await bookings.guide_decision(booking_id, request.status, guide)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def confirm_booking_payment(
    booking_id: UUID,
    request: PaymentConfirmRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    payments: Annotated[PaymentService, Depends(get_payment_service)],
) -> Booking:
    """Confirm payment for a booking (owner or admin)."""
    return await payments.confirm(
        booking_id,
        transaction_id=request.transaction_id,
        method=request.method,
        amount=request.amount,
        actor=current_user,
    )


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> None:
    """Delete an unpaid booking (owner or admin)."""
    await bookings.delete(booking_id, current_user)
