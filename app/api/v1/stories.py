"""Story endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.config import settings
from app.core.exceptions import AuthorizationError, NotFoundError
from app.models.package import Story
from app.models.user import User
from app.schemas.package import StoryCreate, StoryListResponse, StoryResponse

router = APIRouter()


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    data: StoryCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Story:
    """Share a story."""
    story = Story(**data.model_dump(), author_email=current_user.email)
    db.add(story)
    await db.flush()
    return story


@router.get("", response_model=StoryListResponse)
async def list_stories(
    db: Annotated[AsyncSession, Depends(get_db)],
    author: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> StoryListResponse:
    """List stories, newest first (public)."""
    query = select(Story)
    if author:
        query = query.where(Story.author_email == author.lower())

    total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0

    offset = (page - 1) * page_size
    query = query.order_by(Story.created_at.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)

    return StoryListResponse(
        stories=[StoryResponse.model_validate(s) for s in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/random", response_model=list[StoryResponse])
async def random_stories(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Story]:
    result = await db.execute(
        select(Story).order_by(func.random()).limit(settings.random_stories_size)
    )
    return list(result.scalars().all())


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story(
    story_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a story (author or admin)."""
    story = await db.get(Story, story_id)
    if not story:
        raise NotFoundError("Story", str(story_id))
    if story.author_email != current_user.email and current_user.role != "admin":
        raise AuthorizationError("You can only delete your own stories")
    await db.delete(story)
