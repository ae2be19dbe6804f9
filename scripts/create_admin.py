#!/usr/bin/env python3
"""Create or promote an admin user.

Sign-in is handled by the identity provider, so an admin is simply a stored
user whose role is "admin". Run this once per environment to bootstrap the
first admin; further role changes go through PATCH /api/v1/users/{email}/role.
"""

import asyncio

from sqlalchemy import select

from app.core.permissions import UserRole
from app.database import AsyncSessionLocal, close_db
from app.models.user import User


async def create_admin(email: str, name: str | None = None) -> None:
    """Create an admin user, or promote the existing user with this email."""
    email = email.lower()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()

        if existing:
            existing.role = UserRole.ADMIN.value
            if name and not existing.name:
                existing.name = name
            await session.commit()
            print(f"Promoted existing user to admin: {email}")
        else:
            session.add(User(email=email, name=name, role=UserRole.ADMIN.value))
            await session.commit()
            print(f"Created admin user: {email}")

    await close_db()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("--email", required=True, help="Admin email (as issued by the identity provider)")
    parser.add_argument("--name", default=None, help="Display name")

    args = parser.parse_args()

    asyncio.run(create_admin(email=args.email, name=args.name))
