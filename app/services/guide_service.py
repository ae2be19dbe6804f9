"""Guide application service.

Approving an application touches two records: the application status and
the applicant's user role. The role update runs in a savepoint; if it fails
the approval stands and the failure is logged and returned as a warning.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidTransition, NotFoundError, ValidationError
from app.core.permissions import UserRole
from app.domain.guide_state import (
    OPEN_STATUSES,
    GuideApplicationStatus,
    assert_guide_transition,
    sources_for,
)
from app.models.guide import GuideApplication
from app.models.user import User
from app.schemas.guide import GuideApplicationCreate
from app.services.audit_service import audit_service

logger = logging.getLogger(__name__)


@dataclass
class GuideDecision:
    """Outcome of an admin decision on an application."""

    application: GuideApplication
    role_updated: bool = False
    warnings: list[str] = field(default_factory=list)


class GuideService:
    """Guide applications and the guide-approval side effect."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def apply(self, email: str, data: GuideApplicationCreate) -> GuideApplication:
        """Submit an application for the caller's own email."""
        existing = await self.db.scalar(
            select(GuideApplication).where(
                GuideApplication.email == email,
                GuideApplication.status.in_([s.value for s in OPEN_STATUSES]),
            )
        )
        if existing:
            if existing.status == GuideApplicationStatus.ACTIVE.value:
                raise ValidationError("You are already an approved guide")
            raise ValidationError("A guide application is already pending")

        application = GuideApplication(
            email=email,
            name=data.name,
            phone=data.phone,
            photo_url=data.photo_url,
            experience_years=data.experience_years,
            bio=data.bio,
            status=GuideApplicationStatus.PENDING.value,
        )
        self.db.add(application)
        await self.db.flush()
        logger.info(f"Guide application {application.id} submitted by {email}")
        return application

    async def decide(
        self,
        application_id: UUID,
        status: str,
        actor: User,
    ) -> GuideDecision:
        """Admin sets a pending application to active or rejected."""
        target = GuideApplicationStatus(status)
        sources = [s.value for s in sources_for(target)]

        stmt = (
            update(GuideApplication)
            .where(
                GuideApplication.id == application_id,
                GuideApplication.status.in_(sources),
            )
            .values(
                status=target.value,
                decided_at=datetime.now(UTC),
                decided_by=actor.email,
            )
            .returning(GuideApplication)
            .execution_options(populate_existing=True)
        )
        application = (await self.db.execute(stmt)).scalar_one_or_none()
        if application is None:
            current = await self.db.get(GuideApplication, application_id, populate_existing=True)
            if not current:
                raise NotFoundError("Guide application", str(application_id))
            assert_guide_transition(current.status, target.value)
            raise InvalidTransition(
                "Guide application changed concurrently; reload and retry",
                current=current.status,
                action=f"set_{target.value}",
            )

        decision = GuideDecision(application=application)
        if target is GuideApplicationStatus.ACTIVE:
            await self._promote_to_guide(application.email, decision)

        await audit_service.log_action(
            self.db,
            actor_email=actor.email,
            action=f"guide_application_{target.value}",
            resource_type="guide_application",
            resource_id=application.id,
            old_values={"status": GuideApplicationStatus.PENDING.value},
            new_values={
                "status": target.value,
                "role_updated": decision.role_updated,
                "warnings": decision.warnings,
            },
        )
        logger.info(f"Guide application {application.id} set to {target.value} by {actor.email}")
        return decision

    async def _promote_to_guide(self, email: str, decision: GuideDecision) -> None:
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(
                    update(User)
                    .where(User.email == email, User.role != UserRole.ADMIN.value)
                    .values(role=UserRole.GUIDE.value)
                    .returning(User.id)
                    .execution_options(synchronize_session="fetch")
                )
                promoted = result.scalar_one_or_none()
                if promoted is not None:
                    decision.role_updated = True
                    return
                role = await self.db.scalar(select(User.role).where(User.email == email))
        except SQLAlchemyError as e:
            logger.warning(f"Guide approved but role update for {email} failed: {e}")
            decision.warnings.append(f"Application approved, but updating the role of '{email}' failed")
            return

        if role is None:
            logger.warning(f"Guide approved but no user account exists for {email}")
            decision.warnings.append(f"Application approved, but no user account exists for '{email}'")

    # ==================== QUERIES ====================

    async def search(
        self,
        status: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> list[GuideApplication]:
        query = select(GuideApplication)
        if status:
            query = query.where(GuideApplication.status == status)
        offset = (page - 1) * page_size
        query = query.order_by(GuideApplication.applied_at.desc()).offset(offset).limit(page_size)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def sample(self, size: int, status: str | None = None) -> list[GuideApplication]:
        """Random sample of applications."""
        query = select(GuideApplication)
        if status:
            query = query.where(GuideApplication.status == status)
        result = await self.db.execute(query.order_by(func.random()).limit(size))
        return list(result.scalars().all())
