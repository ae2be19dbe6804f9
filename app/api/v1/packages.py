"""Tour package endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_guide_or_admin
from app.config import settings
from app.core.exceptions import NotFoundError
from app.models.package import TourPackage
from app.models.user import User
from app.schemas.package import (
    TourPackageCreate,
    TourPackageListResponse,
    TourPackageResponse,
)

router = APIRouter()


@router.post("", response_model=TourPackageResponse, status_code=status.HTTP_201_CREATED)
async def create_package(
    data: TourPackageCreate,
    current_user: Annotated[User, Depends(require_guide_or_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TourPackage:
    """Add a tour package (guides and admins)."""
    package = TourPackage(
        **data.model_dump(exclude={"plan"}),
        plan=[day.model_dump() for day in data.plan],
        created_by=current_user.email,
    )
    db.add(package)
    await db.flush()
    return package


@router.get("", response_model=TourPackageListResponse)
async def list_packages(
    db: Annotated[AsyncSession, Depends(get_db)],
    location: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> TourPackageListResponse:
    """List packages (public)."""
    query = select(TourPackage)
    if location:
        query = query.where(func.lower(TourPackage.location) == location.lower())

    total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0

    offset = (page - 1) * page_size
    query = query.order_by(TourPackage.created_at.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)

    return TourPackageListResponse(
        packages=[TourPackageResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/random", response_model=list[TourPackageResponse])
async def random_packages(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[TourPackage]:
    """A random sample of packages (public)."""
    result = await db.execute(
        select(TourPackage).order_by(func.random()).limit(settings.random_packages_size)
    )
    return list(result.scalars().all())


@router.get("/{package_id}", response_model=TourPackageResponse)
async def get_package(
    package_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TourPackage:
    """Package detail (signed-in users)."""
    package = await db.get(TourPackage, package_id)
    if not package:
        raise NotFoundError("Package", str(package_id))
    return package
