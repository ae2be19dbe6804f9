"""Database models."""

from app.models.admin import AuditLog
from app.models.booking import Booking
from app.models.guide import GuideApplication
from app.models.package import Story, TourPackage
from app.models.user import User

__all__ = [
    # User
    "User",
    "GuideApplication",
    # Catalogue
    "TourPackage",
    "Story",
    # Booking
    "Booking",
    # Admin
    "AuditLog",
]
