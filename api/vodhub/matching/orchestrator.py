"""Concurrent multi-provider title matching.

Invariants:
- Exactly one ``init``, then one ``result`` per provider in arrival order, then one ``done``.
- ``completed`` grows by one per ``result`` and ends at ``total``.
- Provider tasks are never cancelled once started, even if the consumer goes away.
- ``SearchSession.results`` is always sorted by (priority, confidence, registry order).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator

from vodhub.matching.adapter import ProviderQueryAdapter
from vodhub.matching.base import MatchResult, ProviderAdapter, ProviderDescriptor, ProviderRegistry
from vodhub.matching.events import DoneEvent, InitEvent, OrchestratorEvent, ResultEvent

logger = logging.getLogger("vodhub.matching.orchestrator")

# Provider tasks outlive an abandoned stream; hold references until they finish.
_inflight: set[asyncio.Task] = set()


class NoProvidersConfigured(Exception):
    """Raised when a search starts with no enabled providers."""


@dataclass
class SearchSession:
    """Request-scoped progress of one search."""
    search_title: str
    total_providers: int
    context_id: str | None = None
    completed_count: int = 0
    results: list[MatchResult] = field(default_factory=list)
    _order: dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def found_count(self) -> int:
        return len(self.results)

    @property
    def best(self) -> MatchResult | None:
        return self.results[0] if self.results else None

    @property
    def is_complete(self) -> bool:
        return self.completed_count >= self.total_providers

    def _rank(self, match: MatchResult) -> tuple[int, int, int]:
        return (*match.sort_key, self._order.get(match.provider_key, len(self._order)))

    def record(self, index: int, provider: ProviderDescriptor, match: MatchResult | None) -> ResultEvent:
        """Account for one settled provider and return its result event."""
        self.completed_count += 1
        if match is not None:
            self._order[match.provider_key] = index
            self.results.append(match)
            self.results.sort(key=self._rank)
        return ResultEvent(
            provider_key=provider.key,
            provider_name=provider.name,
            match=match,
            completed=self.completed_count,
            total=self.total_providers,
        )


class MatchStream:
    """Async iterator over the events of one search.

    The provider fan-out starts on first iteration. Each provider task records
    into the session and posts its event to a queue, so accounting completes
    whether or not anyone is still reading.
    """

    def __init__(
        self, session: SearchSession, providers: list[ProviderDescriptor], adapter: ProviderAdapter
    ) -> None:
        self.session = session
        self.providers = providers
        self.adapter = adapter
        self._queue: asyncio.Queue[ResultEvent] = asyncio.Queue()
        self._started = False

    def __aiter__(self) -> AsyncIterator[OrchestratorEvent]:
        if self._started:
            raise RuntimeError("A match stream can only be consumed once")
        self._started = True
        return self._events()

    async def _settle(self, index: int, provider: ProviderDescriptor) -> None:
        try:
            match = await self.adapter.query(provider, self.session.search_title)
        except Exception:  # noqa: BLE001
            logger.exception("Provider %s raised during search", provider.key)
            match = None
        event = self.session.record(index, provider, match)
        if match:
            logger.info("Provider %s matched %r (%s)", provider.key, match.candidate_name, match.confidence.value)
        else:
            logger.info("Provider %s found no match", provider.key)
        self._queue.put_nowait(event)

    def _launch(self) -> None:
        for index, provider in enumerate(self.providers):
            task = asyncio.create_task(self._settle(index, provider), name=f"match:{provider.key}")
            _inflight.add(task)
            task.add_done_callback(_inflight.discard)

    async def _events(self) -> AsyncIterator[OrchestratorEvent]:
        session = self.session
        yield InitEvent(
            total_providers=session.total_providers,
            title=session.search_title,
            context_id=session.context_id,
        )
        logger.info("Searching %d providers for %r", session.total_providers, session.search_title)
        self._launch()
        for _ in range(session.total_providers):
            yield await self._queue.get()
        logger.info(
            "Search for %r finished: %d of %d providers matched",
            session.search_title,
            session.found_count,
            session.total_providers,
        )
        yield DoneEvent(total_providers=session.total_providers, found_count=session.found_count)


class MatchOrchestrator:
    """Fan a title out to every enabled provider and stream ranked matches."""

    def __init__(self, registry: ProviderRegistry, adapter: ProviderAdapter | None = None) -> None:
        self.registry = registry
        self.adapter = adapter or ProviderQueryAdapter()

    async def search(self, title: str, context_id: str | None = None) -> MatchStream:
        """Snapshot enabled providers and return the event stream.

        Raises ``NoProvidersConfigured`` before any event exists when the
        registry has nothing enabled.
        """
        providers = [provider for provider in await self.registry.list_enabled_providers() if provider.enabled]
        if not providers:
            raise NoProvidersConfigured("No video providers configured")
        session = SearchSession(search_title=title, total_providers=len(providers), context_id=context_id)
        return MatchStream(session, providers, self.adapter)

    async def collect(self, title: str, context_id: str | None = None) -> SearchSession:
        """Run a search to completion and return the final session."""
        stream = await self.search(title, context_id)
        async for _ in stream:
            pass
        return stream.session
