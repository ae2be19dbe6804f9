"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    package_id: UUID = Field(validation_alias=AliasChoices("package_id", "packageId"))
    tour_date: date | None = Field(None, validation_alias=AliasChoices("tour_date", "tourDate"))
    travelers: int = Field(default=1, ge=1, le=50)
    notes: str | None = Field(None, max_length=1000)

    @field_validator("tour_date")
    @classmethod
    def validate_tour_date(cls, v: date | None) -> date | None:
        if v is not None and v < date.today():
            raise ValueError("tour_date cannot be in the past")
        return v


class GuideAssignRequest(BaseModel):
    """Schema for an admin assigning a guide."""

    guide_email: EmailStr = Field(validation_alias=AliasChoices("guide_email", "guideEmail"))

    @field_validator("guide_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class GuideDecisionRequest(BaseModel):
    """Schema for the assigned guide accepting or rejecting."""

    status: str = Field(..., pattern="^(accepted|rejected)$")


class PaymentConfirmRequest(BaseModel):
    """Schema for confirming a booking payment."""

    transaction_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("transaction_id", "transactionId"),
    )
    method: str = Field(default="card", max_length=50)
    amount: float = Field(..., gt=0)


class PaymentRecord(BaseModel):
    """Payment sub-record embedded in a paid booking."""

    transaction_id: str
    method: str
    amount: float
    paid_at: datetime


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    package_id: UUID
    created_by: str
    guide_email: str | None

    # Tour details
    tour_date: date | None
    travelers: int
    price: float
    notes: str | None

    # Status
    booking_status: str
    payment_status: str
    payment: PaymentRecord | None

    # Timestamps
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int
