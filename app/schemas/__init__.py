"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    GuideAssignRequest,
    GuideDecisionRequest,
    PaymentConfirmRequest,
    PaymentRecord,
)
from app.schemas.guide import (
    GuideApplicationCreate,
    GuideApplicationResponse,
    GuideDecisionResponse,
    GuideStatusUpdate,
)
from app.schemas.package import (
    StoryCreate,
    StoryListResponse,
    StoryResponse,
    TourPackageCreate,
    TourPackageListResponse,
    TourPackageResponse,
)
from app.schemas.payment import PaymentIntentCreate, PaymentIntentResponse
from app.schemas.user import (
    UserListResponse,
    UserResponse,
    UserRoleResponse,
    UserRoleUpdate,
    UserSignIn,
    UserSignInResponse,
)

__all__ = [
    # User
    "UserSignIn",
    "UserSignInResponse",
    "UserRoleUpdate",
    "UserRoleResponse",
    "UserResponse",
    "UserListResponse",
    # Guide
    "GuideApplicationCreate",
    "GuideApplicationResponse",
    "GuideDecisionResponse",
    "GuideStatusUpdate",
    # Catalogue
    "TourPackageCreate",
    "TourPackageResponse",
    "TourPackageListResponse",
    "StoryCreate",
    "StoryResponse",
    "StoryListResponse",
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingListResponse",
    "GuideAssignRequest",
    "GuideDecisionRequest",
    "PaymentConfirmRequest",
    "PaymentRecord",
    # Payment
    "PaymentIntentCreate",
    "PaymentIntentResponse",
]
