"""Single-provider search adapter used by the match orchestrator."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

import httpx

from vodhub.core.config import settings
from vodhub.matching.base import MatchResult, ProviderDescriptor, SearchCandidate
from vodhub.matching.decoding import EmptyListingError, ListingDecodeError, decode_listing
from vodhub.matching.http import ExternalAPIError, build_search_url, fetch_text, provider_headers
from vodhub.matching.observability import (
    OUTCOME_EMPTY,
    OUTCOME_FAILED,
    OUTCOME_MATCHED,
    ProviderMonitor,
    provider_monitor,
)
from vodhub.matching.scoring import pick_best_candidate, score
from vodhub.utils.redaction import describe_provider_error

logger = logging.getLogger("vodhub.matching.adapter")

ListingDecoder = Callable[[str], Sequence[SearchCandidate]]


class ProviderQueryAdapter:
    """Query one provider's search endpoint and reduce it to a single match.

    Implementation notes:
    - ``query`` never raises; every failure resolves to ``None``.
    - No retries: a slow or broken provider costs one timeout per search.
    """

    operation = "search"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        decoder: ListingDecoder = decode_listing,
        monitor: ProviderMonitor | None = None,
    ) -> None:
        self.timeout = settings.provider_search_timeout_seconds if timeout is None else timeout
        self.transport = transport
        self.decoder = decoder
        self.monitor = monitor or provider_monitor

    async def query(self, provider: ProviderDescriptor, title: str) -> MatchResult | None:
        started_at = await self.monitor.record_start(provider.key, self.operation)
        context = {"title": title}
        try:
            url = build_search_url(provider.search_endpoint, title)
            headers = provider_headers(provider.search_endpoint)
            body = await asyncio.wait_for(
                fetch_text(url, headers=headers, timeout=self.timeout, transport=self.transport),
                timeout=self.timeout,
            )
            candidates = self.decoder(body)
        except EmptyListingError:
            await self.monitor.record_outcome(
                provider.key, self.operation, OUTCOME_EMPTY, started_at=started_at, context=context
            )
            return None
        except asyncio.TimeoutError:
            await self._record_failure(provider, started_at, f"timed out after {self.timeout:g}s", context)
            return None
        except (httpx.HTTPError, ExternalAPIError, ListingDecodeError) as exc:
            await self._record_failure(provider, started_at, describe_provider_error(exc), context)
            return None
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error querying provider %s", provider.key)
            await self._record_failure(provider, started_at, type(exc).__name__, context)
            return None

        best = pick_best_candidate(candidates, title)
        if best is None:
            await self.monitor.record_outcome(
                provider.key, self.operation, OUTCOME_EMPTY, started_at=started_at, context=context
            )
            return None
        await self.monitor.record_outcome(
            provider.key, self.operation, OUTCOME_MATCHED, started_at=started_at, context=context
        )
        return MatchResult(
            provider_key=provider.key,
            provider_name=provider.name,
            candidate_id=best.id,
            candidate_name=best.display_name,
            confidence=score(best.display_name, title),
            priority=provider.effective_priority,
        )

    async def _record_failure(
        self, provider: ProviderDescriptor, started_at: float, error: str, context: dict[str, str]
    ) -> None:
        await self.monitor.record_outcome(
            provider.key, self.operation, OUTCOME_FAILED, started_at=started_at, error=error, context=context
        )
