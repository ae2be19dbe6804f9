"""Audit trail service."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin import AuditLog


class AuditService:
    """Service for append-only audit logging of state changes."""

    async def log_action(
        self,
        db: AsyncSession,
        actor_email: str | None,
        action: str,
        resource_type: str,
        resource_id: UUID | None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Log an action.

        Args:
            db: Database session
            actor_email: Identity performing the action (None for gateway callbacks)
            action: Action name (e.g., "booking_accept")
            resource_type: Resource type (e.g., "booking", "guide_application")
            resource_id: Resource ID
            old_values: Previous state
            new_values: New state

        Returns:
            Created audit log entry
        """
        audit = AuditLog(
            actor_email=actor_email,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
        )
        db.add(audit)
        return audit

    async def log_booking_transition(
        self,
        db: AsyncSession,
        actor_email: str | None,
        action: str,
        booking_id: UUID,
        old_status: str,
        new_status: str,
        extra: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Log a booking status change."""
        return await self.log_action(
            db=db,
            actor_email=actor_email,
            action=f"booking_{action}",
            resource_type="booking",
            resource_id=booking_id,
            old_values={"status": old_status},
            new_values={"status": new_status, **(extra or {})},
        )


audit_service = AuditService()
