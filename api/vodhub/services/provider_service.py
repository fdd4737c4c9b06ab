"""Provider registry CRUD, selection state and orchestrator snapshots."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vodhub.matching.base import ProviderDescriptor
from vodhub.models.provider import ProviderSelection, VodProvider
from vodhub.schema.provider import ProviderCreate, ProviderUpsert

logger = logging.getLogger("vodhub.services.providers")

SELECTION_ROW_ID = 1


class ProviderNotFoundError(LookupError):
    """Raised when a provider key does not exist."""


def _ordering():
    # NULL priorities sort as the default "last" priority.
    return (
        VodProvider.priority.is_(None),
        VodProvider.priority.asc(),
        VodProvider.sort_order.asc(),
        VodProvider.id.asc(),
    )


def to_descriptor(provider: VodProvider) -> ProviderDescriptor:
    """Freeze a provider row into the snapshot type the orchestrator consumes."""
    return ProviderDescriptor(
        key=provider.key,
        name=provider.name,
        search_endpoint=provider.search_endpoint,
        player_url_template=provider.player_url_template,
        use_player_template=provider.use_player_template,
        priority=provider.priority,
        enabled=provider.enabled,
    )


async def list_enabled_providers(session: AsyncSession) -> list[VodProvider]:
    """List enabled providers, highest precedence first."""
    stmt = select(VodProvider).where(VodProvider.enabled.is_(True)).order_by(*_ordering())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_all_providers(session: AsyncSession) -> list[VodProvider]:
    """List every provider including disabled ones."""
    result = await session.execute(select(VodProvider).order_by(*_ordering()))
    return list(result.scalars().all())


async def get_provider(session: AsyncSession, key: str) -> VodProvider | None:
    result = await session.execute(select(VodProvider).where(VodProvider.key == key))
    return result.scalar_one_or_none()


async def upsert_provider(session: AsyncSession, key: str, payload: ProviderUpsert) -> VodProvider:
    """Create or update a provider by key; the key itself never changes."""
    key = key.strip()
    if not key:
        raise ValueError("Provider key cannot be blank")
    provider = await get_provider(session, key)
    if provider is None:
        provider = VodProvider(key=key)
        session.add(provider)
    provider.name = payload.name.strip()
    provider.search_endpoint = payload.search_endpoint
    provider.player_url_template = payload.player_url_template
    provider.use_player_template = payload.use_player_template
    provider.priority = payload.priority
    provider.enabled = payload.enabled
    provider.sort_order = payload.sort_order if payload.sort_order is not None else provider.sort_order or 0
    await session.commit()
    await session.refresh(provider)
    logger.info("Saved provider %s", key)
    return provider


async def replace_providers(
    session: AsyncSession, providers: Sequence[ProviderCreate], selected: str | None = None
) -> list[VodProvider]:
    """Replace the full provider list in one transaction.

    Priority and sort order default to each entry's position in the list.
    """
    keys = [entry.key for entry in providers]
    duplicates = {key for key in keys if keys.count(key) > 1}
    if duplicates:
        raise ValueError(f"Duplicate provider keys: {', '.join(sorted(duplicates))}")
    if selected and selected not in keys:
        raise ProviderNotFoundError(f"Selected provider {selected} is not in the list")

    await session.execute(delete(VodProvider))
    rows: list[VodProvider] = []
    for index, entry in enumerate(providers):
        row = VodProvider(
            key=entry.key,
            name=entry.name.strip(),
            search_endpoint=entry.search_endpoint,
            player_url_template=entry.player_url_template,
            use_player_template=entry.use_player_template,
            priority=entry.priority if entry.priority is not None else index,
            enabled=entry.enabled,
            sort_order=entry.sort_order if entry.sort_order is not None else index,
        )
        session.add(row)
        rows.append(row)
    if selected:
        await _store_selection(session, selected)
    await session.commit()
    logger.info("Replaced provider list with %d entries", len(rows))
    return await list_all_providers(session)


async def set_provider_enabled(session: AsyncSession, key: str, enabled: bool) -> VodProvider:
    provider = await get_provider(session, key)
    if provider is None:
        raise ProviderNotFoundError(f"Provider {key} not found")
    provider.enabled = enabled
    provider.updated_at = datetime.utcnow()
    await session.commit()
    await session.refresh(provider)
    return provider


async def delete_provider(session: AsyncSession, key: str) -> None:
    provider = await get_provider(session, key)
    if provider is None:
        raise ProviderNotFoundError(f"Provider {key} not found")
    await session.delete(provider)
    await session.commit()
    logger.info("Deleted provider %s", key)


async def _store_selection(session: AsyncSession, key: str) -> None:
    selection = await session.get(ProviderSelection, SELECTION_ROW_ID)
    if selection is None:
        selection = ProviderSelection(id=SELECTION_ROW_ID)
        session.add(selection)
    selection.selected_key = key
    selection.updated_at = datetime.utcnow()


async def set_selected_provider(session: AsyncSession, key: str) -> VodProvider:
    """Persist the operator's preferred provider."""
    provider = await get_provider(session, key)
    if provider is None:
        raise ProviderNotFoundError(f"Provider {key} not found")
    await _store_selection(session, key)
    await session.commit()
    return provider


async def get_selected_provider(session: AsyncSession) -> VodProvider | None:
    """Return the selected provider, falling back to the first enabled one."""
    selection = await session.get(ProviderSelection, SELECTION_ROW_ID)
    if selection and selection.selected_key:
        provider = await get_provider(session, selection.selected_key)
        if provider is not None and provider.enabled:
            return provider
    stmt = (
        select(VodProvider)
        .where(VodProvider.enabled.is_(True))
        .order_by(VodProvider.sort_order.asc(), VodProvider.id.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


class DatabaseProviderRegistry:
    """Registry read side backed by the request's database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_enabled_providers(self) -> list[ProviderDescriptor]:
        return [to_descriptor(provider) for provider in await list_enabled_providers(self.session)]


class StaticProviderRegistry:
    """Registry over a fixed provider list."""

    def __init__(self, providers: Sequence[ProviderDescriptor]) -> None:
        self.providers = list(providers)

    async def list_enabled_providers(self) -> list[ProviderDescriptor]:
        enabled = [provider for provider in self.providers if provider.enabled]
        return sorted(enabled, key=lambda provider: provider.effective_priority)
