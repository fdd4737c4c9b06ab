"""Service-layer helpers for API operations."""

from . import provider_service

__all__ = [
    "provider_service",
]
