"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import (
    bookings,
    guides,
    packages,
    payments,
    stories,
    users,
    webhooks,
)

api_router = APIRouter()

# Users
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# Packages
api_router.include_router(packages.router, prefix="/packages", tags=["Packages"])

# Guides
api_router.include_router(guides.router, prefix="/guides", tags=["Guides"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payments
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

# Stories
api_router.include_router(stories.router, prefix="/stories", tags=["Stories"])

# Webhooks
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
