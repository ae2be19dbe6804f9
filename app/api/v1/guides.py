"""Guide application endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_guide_service, require_admin
from app.config import settings
from app.domain.guide_state import GuideApplicationStatus
from app.models.guide import GuideApplication
from app.models.user import User
from app.schemas.guide import (
    GuideApplicationCreate,
    GuideApplicationResponse,
    GuideDecisionResponse,
    GuideStatusUpdate,
)
from app.services.guide_service import GuideDecision, GuideService

router = APIRouter()


def _decision_response(decision: GuideDecision) -> GuideDecisionResponse:
    return GuideDecisionResponse(
        application=GuideApplicationResponse.model_validate(decision.application),
        role_updated=decision.role_updated,
        warnings=decision.warnings,
    )


@router.post("", response_model=GuideApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_guide(
    data: GuideApplicationCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    guides: Annotated[GuideService, Depends(get_guide_service)],
) -> GuideApplication:
    """Submit a guide application for the signed-in user."""
    return await guides.apply(current_user.email, data)


@router.get("", response_model=list[GuideApplicationResponse])
async def list_guides(
    guides: Annotated[GuideService, Depends(get_guide_service)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> list[GuideApplication]:
    """All guide applications (public)."""
    return await guides.search(page=page, page_size=page_size)


@router.get("/pending", response_model=list[GuideApplicationResponse])
async def list_pending_guides(
    admin: Annotated[User, Depends(require_admin)],
    guides: Annotated[GuideService, Depends(get_guide_service)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> list[GuideApplication]:
    """Applications awaiting a decision (admin only)."""
    return await guides.search(
        status=GuideApplicationStatus.PENDING.value, page=page, page_size=page_size
    )


@router.get("/approved", response_model=list[GuideApplicationResponse])
async def list_approved_guides(
    guides: Annotated[GuideService, Depends(get_guide_service)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> list[GuideApplication]:
    """Active guides (public)."""
    return await guides.search(
        status=GuideApplicationStatus.ACTIVE.value, page=page, page_size=page_size
    )


@router.get("/random", response_model=list[GuideApplicationResponse])
async def random_guides(
    guides: Annotated[GuideService, Depends(get_guide_service)],
) -> list[GuideApplication]:
    """A random sample of active guides (public)."""
    return await guides.sample(
        settings.random_guides_size, status=GuideApplicationStatus.ACTIVE.value
    )


@router.patch("/{application_id}/status", response_model=GuideDecisionResponse)
async def update_guide_status(
    application_id: UUID,
    update: GuideStatusUpdate,
    admin: Annotated[User, Depends(require_admin)],
    guides: Annotated[GuideService, Depends(get_guide_service)],
) -> GuideDecisionResponse:
    """Approve or reject an application (admin only).

    Approval also promotes the applicant's user role to guide; if that
    second update fails the approval stands and the response lists a warning.
    """
    decision = await guides.decide(application_id, update.status, admin)
    return _decision_response(decision)


@router.patch("/approve/{application_id}", response_model=GuideDecisionResponse)
async def approve_guide(
    application_id: UUID,
    admin: Annotated[User, Depends(require_admin)],
    guides: Annotated[GuideService, Depends(get_guide_service)],
) -> GuideDecisionResponse:
    """Approve an application (admin only)."""
    decision = await guides.decide(application_id, GuideApplicationStatus.ACTIVE.value, admin)
    return _decision_response(decision)
