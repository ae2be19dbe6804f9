"""User-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserSignIn(BaseModel):
    """Schema for recording a sign-in observation."""

    email: EmailStr
    name: str | None = Field(None, max_length=200)
    photo_url: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserRoleUpdate(BaseModel):
    """Schema for an admin changing a user's role."""

    role: str = Field(..., pattern="^(user|guide|admin)$")


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None
    photo_url: str | None
    role: str
    created_at: datetime
    last_login_at: datetime | None


class UserSignInResponse(BaseModel):
    """Schema for the sign-in observation result."""

    user: UserResponse
    inserted: bool


class UserRoleResponse(BaseModel):
    """Schema for a role lookup."""

    email: str
    role: str


class UserListResponse(BaseModel):
    """Schema for paginated user list."""

    users: list[UserResponse]
    total: int
    page: int
    page_size: int
