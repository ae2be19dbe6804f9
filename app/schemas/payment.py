"""Payment-related Pydantic schemas."""

from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class PaymentIntentCreate(BaseModel):
    """Schema for requesting a payment intent for a booking."""

    booking_id: UUID = Field(validation_alias=AliasChoices("booking_id", "bookingId"))


class PaymentIntentResponse(BaseModel):
    """Schema for a gateway payment intent."""

    booking_id: UUID
    gateway: str
    transaction_id: str
    client_secret: str | None
    amount: float
    currency: str
