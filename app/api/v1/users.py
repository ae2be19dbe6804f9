"""User endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, get_identity, require_admin
from app.core.exceptions import AuthorizationError, UserNotFound
from app.core.security import Identity
from app.models.user import User
from app.schemas.user import (
    UserListResponse,
    UserResponse,
    UserRoleResponse,
    UserRoleUpdate,
    UserSignIn,
    UserSignInResponse,
)
from app.services.audit_service import audit_service

router = APIRouter()


@router.post("", response_model=UserSignInResponse)
async def record_sign_in(
    data: UserSignIn,
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    response: Response,
) -> UserSignInResponse:
    """Record a sign-in: create the user on first sight, else refresh last login."""
    if data.email != identity.email:
        raise AuthorizationError("You can only register your own account")

    now = datetime.now(UTC)
    user = await db.scalar(select(User).where(User.email == data.email))
    if user:
        user.last_login_at = now
        if data.name and not user.name:
            user.name = data.name
        if data.photo_url and not user.photo_url:
            user.photo_url = data.photo_url
        await db.flush()
        return UserSignInResponse(user=UserResponse.model_validate(user), inserted=False)

    user = User(
        email=data.email,
        name=data.name,
        photo_url=data.photo_url,
        role="user",
        created_at=now,
        last_login_at=now,
    )
    db.add(user)
    await db.flush()
    response.status_code = status.HTTP_201_CREATED
    return UserSignInResponse(user=UserResponse.model_validate(user), inserted=True)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user's profile."""
    return current_user


@router.get("/{email}/role", response_model=UserRoleResponse)
async def get_user_role(
    email: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRoleResponse:
    """Look up a user's role (own role, or any role for admins)."""
    email = email.lower()
    if email != current_user.email and current_user.role != "admin":
        raise AuthorizationError("You can only look up your own role")
    role = await db.scalar(select(User.role).where(User.email == email))
    if role is None:
        raise UserNotFound(email)
    return UserRoleResponse(email=email, role=role)


@router.get("", response_model=UserListResponse)
async def get_users(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(default=None, max_length=100),
    role: str | None = Query(default=None, pattern="^(user|guide|admin)$"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> UserListResponse:
    """List users (admin only)."""
    query = select(User)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(User.email.like(pattern) | func.lower(User.name).like(pattern))
    if role:
        query = query.where(User.role == role)

    total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0

    offset = (page - 1) * page_size
    query = query.order_by(User.created_at.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)

    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.patch("/{email}/role", response_model=UserResponse)
async def update_user_role(
    email: str,
    update: UserRoleUpdate,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Change a user's role (admin only)."""
    user = await db.scalar(select(User).where(User.email == email.lower()))
    if not user:
        raise UserNotFound(email)

    old_role = user.role
    user.role = update.role
    await db.flush()

    await audit_service.log_action(
        db,
        actor_email=admin.email,
        action="user_role_update",
        resource_type="user",
        resource_id=user.id,
        old_values={"role": old_role},
        new_values={"role": update.role},
    )
    return user
