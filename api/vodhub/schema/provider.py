"""Provider registry request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from vodhub.schema.base import ORMModel


class ProviderBase(BaseModel):
    """Fields an operator supplies for a provider."""
    name: str = Field(min_length=1, max_length=255)
    search_endpoint: str = Field(min_length=1, max_length=1024)
    player_url_template: str | None = Field(default=None, max_length=1024)
    use_player_template: bool = True
    priority: int | None = Field(default=None, ge=0)
    enabled: bool = True
    sort_order: int | None = Field(default=None, ge=0)

    @field_validator("search_endpoint")
    @classmethod
    def _require_http_endpoint(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped.lower().startswith(("http://", "https://")):
            raise ValueError("search_endpoint must be an http(s) URL")
        return stripped

    @field_validator("player_url_template")
    @classmethod
    def _blank_template_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None


class ProviderUpsert(ProviderBase):
    """Payload for creating or replacing one provider by key."""


class ProviderCreate(ProviderBase):
    """Provider entry inside a bulk save payload."""
    key: str = Field(min_length=1, max_length=64)

    @field_validator("key")
    @classmethod
    def _strip_key(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("key cannot be blank")
        return stripped


class ProviderRead(ORMModel):
    """Provider representation returned by the API."""
    key: str
    name: str
    search_endpoint: str
    player_url_template: str | None = None
    use_player_template: bool = True
    priority: int | None = None
    enabled: bool
    sort_order: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProviderBulkSave(BaseModel):
    """Replace the whole provider list, optionally updating the selection."""
    providers: list[ProviderCreate]
    selected: str | None = None


class ProviderEnabledUpdate(BaseModel):
    enabled: bool


class ProviderSelectionUpdate(BaseModel):
    selected: str = Field(min_length=1, max_length=64)


class ProviderListing(BaseModel):
    """Enabled providers plus the operator's preferred provider."""
    providers: list[ProviderRead]
    selected: ProviderRead | None = None
