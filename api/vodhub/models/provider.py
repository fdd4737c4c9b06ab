"""Video-on-demand provider registry models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vodhub.db.base_class import Base, UpdatedAtMixin


class VodProvider(UpdatedAtMixin, Base):
    """Operator-configured content provider queried during title matching."""
    __tablename__ = "vod_providers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    search_endpoint: Mapped[str] = mapped_column(String(1024), nullable=False)
    player_url_template: Mapped[str | None] = mapped_column(String(1024))
    use_player_template: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    priority: Mapped[int | None] = mapped_column(Integer)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class ProviderSelection(UpdatedAtMixin, Base):
    """Single-row record of the operator's preferred provider."""
    __tablename__ = "vod_provider_selection"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    selected_key: Mapped[str | None] = mapped_column(String(64))
