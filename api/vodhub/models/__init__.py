"""SQLAlchemy ORM models for the VOD Hub API."""

from vodhub.models.provider import ProviderSelection, VodProvider

__all__ = [
    "ProviderSelection",
    "VodProvider",
]
