"""Shared helpers for API and matching tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import httpx
from httpx import AsyncClient

from vodhub.core.config import settings
from vodhub.matching.base import Confidence, MatchResult, ProviderDescriptor
from vodhub.models.provider import VodProvider


def make_provider(key: str, *, priority: int | None = None, enabled: bool = True, **overrides: Any) -> ProviderDescriptor:
    fields: dict[str, Any] = {
        "key": key,
        "name": f"Provider {key.upper()}",
        "search_endpoint": f"https://{key}.example.com/api.php/provide/vod",
        "priority": priority,
        "enabled": enabled,
    }
    fields.update(overrides)
    return ProviderDescriptor(**fields)


def make_match(provider: ProviderDescriptor, confidence: Confidence, name: str = "Avatar") -> MatchResult:
    return MatchResult(
        provider_key=provider.key,
        provider_name=provider.name,
        candidate_id=f"{provider.key}-1",
        candidate_name=name,
        confidence=confidence,
        priority=provider.effective_priority,
    )


class ScriptedAdapter:
    """Adapter double: each provider key maps to (delay seconds, outcome)."""

    def __init__(self, script: dict[str, tuple[float, Any]]) -> None:
        self.script = script
        self.calls: list[str] = []
        self.finished: list[str] = []

    async def query(self, provider: ProviderDescriptor, title: str) -> MatchResult | None:
        self.calls.append(provider.key)
        delay, outcome = self.script[provider.key]
        await asyncio.sleep(delay)
        self.finished.append(provider.key)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def listing_body(*names: str, code: int = 1) -> str:
    return json.dumps(
        {
            "code": code,
            "msg": "ok",
            "page": 1,
            "pagecount": 1,
            "limit": 20,
            "total": len(names),
            "list": [
                {"vod_id": index + 100, "vod_name": name, "type_name": "Movie", "vod_year": "2009"}
                for index, name in enumerate(names)
            ],
        }
    )


def provider_transport(routes: dict[str, Callable[[httpx.Request], Any]]) -> httpx.MockTransport:
    """Dispatch requests by host to per-provider handlers (sync or async)."""

    async def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.host)
        if route is None:
            return httpx.Response(404, text="unknown host")
        response = route(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    return httpx.MockTransport(handler)


def provider_row(key: str, **overrides: Any) -> VodProvider:
    fields: dict[str, Any] = {
        "key": key,
        "name": f"Provider {key.upper()}",
        "search_endpoint": f"https://{key}.example.com/api.php/provide/vod",
        "enabled": True,
        "use_player_template": True,
        "sort_order": 0,
    }
    fields.update(overrides)
    return VodProvider(**fields)


def parse_sse(body: str) -> list[dict[str, Any]]:
    events = []
    for block in body.split("\n\n"):
        block = block.strip()
        if not block:
            continue
        assert block.startswith("data: ")
        events.append(json.loads(block[len("data: "):]))
    return events


async def login_admin(client: AsyncClient) -> None:
    response = await client.post("/api/auth/login", json={"password": settings.admin_password})
    assert response.status_code == 200
