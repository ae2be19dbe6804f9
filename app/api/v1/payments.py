"""Payment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_payment_service
from app.models.user import User
from app.schemas.payment import PaymentIntentCreate, PaymentIntentResponse
from app.services.payment_service import PaymentService

router = APIRouter()


@router.post("/intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: PaymentIntentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    payments: Annotated[PaymentService, Depends(get_payment_service)],
) -> dict:
    """Create a gateway payment intent for a booking (owner or admin)."""
    return await payments.create_intent(request.booking_id, current_user)
