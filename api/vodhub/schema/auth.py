"""Operator session schemas."""

from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    """Shared-password login payload."""
    password: str = Field(min_length=1, max_length=256)


class SessionStatus(BaseModel):
    authenticated: bool
