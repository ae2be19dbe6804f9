"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all initial tables for the ExploreBD platform:
- Users and guide applications
- Tour packages and stories
- Bookings (with the embedded payment record)
- Audit logs
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(200)),
        sa.Column("photo_url", sa.Text),
        sa.Column("role", sa.String(20), nullable=False, server_default="user", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("role IN ('user', 'guide', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "guide_applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, index=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("photo_url", sa.Text),
        sa.Column("experience_years", sa.Integer, nullable=False, server_default="0"),
        sa.Column("bio", sa.Text),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("decided_at", sa.DateTime(timezone=True)),
        sa.Column("decided_by", sa.String(255)),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'rejected')",
            name="ck_guide_applications_status",
        ),
    )

    # ==================== CATALOGUE ====================
    op.create_table(
        "packages",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("location", sa.String(200), index=True),
        sa.Column("tour_type", sa.String(50)),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("duration_days", sa.Integer, server_default="1"),
        sa.Column("description", sa.Text),
        sa.Column("images", postgresql.JSONB, server_default="[]"),
        sa.Column("plan", postgresql.JSONB, server_default="[]"),
        sa.Column("created_by", sa.String(255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "stories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("images", postgresql.JSONB, server_default="[]"),
        sa.Column("author_email", sa.String(255), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "package_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("packages.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("created_by", sa.String(255), nullable=False, index=True),
        sa.Column("guide_email", sa.String(255), index=True),
        sa.Column("tour_date", sa.Date),
        sa.Column("travelers", sa.Integer, server_default="1"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("booking_status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="unpaid", index=True),
        sa.Column("payment", postgresql.JSONB),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "booking_status IN ('pending', 'in-review', 'guide_assigned', 'accepted', 'rejected')",
            name="ck_bookings_booking_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('unpaid', 'paid')",
            name="ck_bookings_payment_status",
        ),
        # A paid booking always carries its payment record
        sa.CheckConstraint(
            "(payment_status = 'paid') = (payment IS NOT NULL)",
            name="ck_bookings_payment_record",
        ),
    )

    # ==================== ADMIN ====================
    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("actor_email", sa.String(255), index=True),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("resource_type", sa.String(50), nullable=False, index=True),
        sa.Column("resource_id", postgresql.UUID(as_uuid=True)),
        sa.Column("old_values", postgresql.JSONB),
        sa.Column("new_values", postgresql.JSONB),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_table("audit_logs")
    op.drop_table("bookings")
    op.drop_table("stories")
    op.drop_table("packages")
    op.drop_table("guide_applications")
    op.drop_table("users")
