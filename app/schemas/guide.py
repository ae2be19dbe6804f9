"""Guide application schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GuideApplicationCreate(BaseModel):
    """Schema for applying as a guide."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=30)
    photo_url: str | None = None
    experience_years: int = Field(default=0, ge=0, le=80)
    bio: str | None = Field(None, max_length=2000)


class GuideStatusUpdate(BaseModel):
    """Schema for an admin decision on an application."""

    status: str = Field(..., pattern="^(active|rejected)$")


class GuideApplicationResponse(BaseModel):
    """Schema for guide application response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    phone: str | None
    photo_url: str | None
    experience_years: int
    bio: str | None
    status: str
    applied_at: datetime
    decided_at: datetime | None


class GuideDecisionResponse(BaseModel):
    """Result of an admin decision, with any partial-failure warnings."""

    application: GuideApplicationResponse
    role_updated: bool
    warnings: list[str] = []
