"""Candidate detail lookup and episode URL resolution for playback."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from tenacity.wait import wait_base

from vodhub.core.config import settings
from vodhub.matching.base import ProviderDescriptor
from vodhub.matching.decoding import ListingDecodeError, decode_envelope
from vodhub.matching.http import ExternalAPIError, build_detail_url, fetch_body, provider_headers
from vodhub.matching.observability import (
    OUTCOME_FAILED,
    OUTCOME_MATCHED,
    ProviderMonitor,
    provider_monitor,
)
from vodhub.utils.redaction import describe_provider_error

SOURCE_SEPARATOR = "$$$"
EPISODE_SEPARATOR = "#"
NAME_URL_SEPARATOR = "$"
HLS_MARKER = ".m3u8"
# Characters encodeURIComponent leaves alone; players expect that encoding.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(slots=True)
class Episode:
    name: str
    url: str
    play_url: str


@dataclass(slots=True)
class PlaybackDetail:
    """Normalized detail record for one provider candidate."""
    provider_key: str
    candidate_id: str
    name: str
    cover_url: str | None = None
    description: str | None = None
    type_name: str | None = None
    year: str | None = None
    region: str | None = None
    director: str | None = None
    actors: str | None = None
    score: str | None = None
    remarks: str | None = None
    episodes: list[Episode] = field(default_factory=list)


def resolve_play_url(provider: ProviderDescriptor, media_url: str) -> str:
    """Route a raw media URL through the provider's player when enabled."""
    if not provider.uses_player:
        return media_url
    return f"{provider.player_url_template}{quote(media_url, safe=_URI_COMPONENT_SAFE)}"


def parse_episodes(play_field: str | None) -> list[tuple[str, str]]:
    """Split a ``vod_play_url`` field into (name, url) pairs.

    The field holds one or more play sources joined by ``$$$``; the first source
    carrying HLS links wins, otherwise the first source is used.
    """
    if not play_field:
        return []
    sources = [source for source in play_field.split(SOURCE_SEPARATOR) if source]
    if not sources:
        return []
    target = next((source for source in sources if HLS_MARKER in source), sources[0])
    episodes: list[tuple[str, str]] = []
    for chunk in target.split(EPISODE_SEPARATOR):
        if not chunk:
            continue
        name, _, url = chunk.partition(NAME_URL_SEPARATOR)
        name, url = name.strip(), url.strip()
        if name and url:
            episodes.append((name, url))
    return episodes


def _text(entry: dict[str, Any], key: str) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_detail(provider: ProviderDescriptor, entry: dict[str, Any]) -> PlaybackDetail:
    episodes = [
        Episode(name=name, url=url, play_url=resolve_play_url(provider, url))
        for name, url in parse_episodes(_text(entry, "vod_play_url"))
    ]
    return PlaybackDetail(
        provider_key=provider.key,
        candidate_id=_text(entry, "vod_id") or "",
        name=_text(entry, "vod_name") or "",
        cover_url=_text(entry, "vod_pic"),
        description=_text(entry, "vod_content"),
        type_name=_text(entry, "type_name"),
        year=_text(entry, "vod_year"),
        region=_text(entry, "vod_area"),
        director=_text(entry, "vod_director"),
        actors=_text(entry, "vod_actor"),
        score=_text(entry, "vod_score"),
        remarks=_text(entry, "vod_remarks"),
        episodes=episodes,
    )


class PlaybackResolver:
    """Fetch one candidate's detail record from its provider."""

    operation = "detail"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        monitor: ProviderMonitor | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self.timeout = settings.provider_detail_timeout_seconds if timeout is None else timeout
        self.retry_wait = retry_wait
        self.transport = transport
        self.monitor = monitor or provider_monitor

    async def fetch_detail(self, provider: ProviderDescriptor, candidate_id: str) -> PlaybackDetail:
        """Return the candidate detail; raises ``ExternalAPIError`` on any failure."""
        started_at = await self.monitor.record_start(provider.key, self.operation)
        context = {"candidate_id": candidate_id}
        try:
            url = build_detail_url(provider.search_endpoint, candidate_id)
            body = await fetch_body(
                url,
                headers=provider_headers(provider.search_endpoint),
                timeout=self.timeout,
                transport=self.transport,
                wait=self.retry_wait,
            )
            entries = decode_envelope(body)
        except (httpx.HTTPError, ExternalAPIError, ListingDecodeError) as exc:
            error = describe_provider_error(exc)
            await self.monitor.record_outcome(
                provider.key, self.operation, OUTCOME_FAILED, started_at=started_at, error=error, context=context
            )
            raise ExternalAPIError(f"Detail lookup failed for {provider.key}: {error}") from exc
        await self.monitor.record_outcome(
            provider.key, self.operation, OUTCOME_MATCHED, started_at=started_at, context=context
        )
        return build_detail(provider, entries[0])
