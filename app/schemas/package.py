"""Tour package and story schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanDay(BaseModel):
    """One day of a tour plan."""

    day: int = Field(..., ge=1)
    title: str = Field(..., max_length=200)
    details: str | None = None


class TourPackageCreate(BaseModel):
    """Schema for creating a tour package."""

    title: str = Field(..., min_length=1, max_length=200)
    location: str | None = Field(None, max_length=200)
    tour_type: str | None = Field(None, max_length=50)
    price: float = Field(..., ge=0)
    duration_days: int = Field(default=1, ge=1, le=365)
    description: str | None = None
    images: list[str] = []
    plan: list[PlanDay] = []

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, v: Any) -> list:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("plan", mode="before")
    @classmethod
    def coerce_plan(cls, v: Any) -> list:
        return v if isinstance(v, list) else []


class TourPackageResponse(BaseModel):
    """Schema for tour package response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str | None
    tour_type: str | None
    price: float
    duration_days: int
    description: str | None
    images: list[str]
    plan: list[PlanDay]
    created_by: str | None
    created_at: datetime


class TourPackageListResponse(BaseModel):
    """Schema for paginated package list."""

    packages: list[TourPackageResponse]
    total: int
    page: int
    page_size: int


class StoryCreate(BaseModel):
    """Schema for sharing a story."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    images: list[str] = []


class StoryResponse(BaseModel):
    """Schema for story response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    images: list[str]
    author_email: str
    created_at: datetime


class StoryListResponse(BaseModel):
    """Schema for paginated story list."""

    stories: list[StoryResponse]
    total: int
    page: int
    page_size: int
