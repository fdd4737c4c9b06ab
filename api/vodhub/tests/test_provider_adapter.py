"""Provider query adapter: request shape, decoding and failure isolation."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from vodhub.core.config import settings
from vodhub.matching.adapter import ProviderQueryAdapter
from vodhub.matching.base import DEFAULT_PRIORITY, Confidence
from vodhub.matching.observability import ProviderMonitor
from vodhub.tests.utils import listing_body, make_provider, provider_transport


def _adapter(handler, *, timeout: float = 1.0, monitor: ProviderMonitor | None = None) -> ProviderQueryAdapter:
    return ProviderQueryAdapter(
        timeout=timeout,
        transport=httpx.MockTransport(handler),
        monitor=monitor or ProviderMonitor(),
    )


@pytest.mark.asyncio
async def test_query_sends_search_params_and_provider_referer() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=listing_body("Avatar"))

    provider = make_provider("alpha", priority=2)
    match = await _adapter(handler).query(provider, "Avatar")

    assert match is not None
    request = seen[0]
    assert request.method == "GET"
    assert request.url.params["ac"] == "detail"
    assert request.url.params["pg"] == "1"
    assert request.url.params["wd"] == "Avatar"
    assert request.headers["referer"] == "https://alpha.example.com/"
    assert "Mozilla" in request.headers["user-agent"]


@pytest.mark.asyncio
async def test_query_substitutes_query_placeholder() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=listing_body("Spirited Away"))

    provider = make_provider("beta", search_endpoint="https://beta.example.com/search?kw={query}&fmt=json")
    await _adapter(handler).query(provider, "Spirited Away")

    assert seen == ["https://beta.example.com/search?kw=Spirited+Away&fmt=json"]


@pytest.mark.asyncio
async def test_query_returns_best_candidate_with_confidence_and_priority() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=listing_body("Avatar: Way of Water", "Avatar"))

    provider = make_provider("alpha", priority=3)
    match = await _adapter(handler).query(provider, "avatar")

    assert match is not None
    assert match.provider_key == "alpha"
    assert match.provider_name == provider.name
    assert match.candidate_id == "101"
    assert match.candidate_name == "Avatar"
    assert match.confidence is Confidence.HIGH
    assert match.priority == 3


@pytest.mark.asyncio
async def test_query_defaults_missing_priority_to_last() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=listing_body("Inception"))

    match = await _adapter(handler).query(make_provider("alpha"), "Avatar")

    assert match is not None
    assert match.priority == DEFAULT_PRIORITY
    assert match.confidence is Confidence.LOW


@pytest.mark.asyncio
async def test_query_treats_html_error_page_as_no_match() -> None:
    monitor = ProviderMonitor()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<!DOCTYPE html><html><body>Access denied</body></html>")

    assert await _adapter(handler, monitor=monitor).query(make_provider("alpha"), "Avatar") is None
    snapshot = await monitor.snapshot()
    assert snapshot["alpha"]["operations"]["search"]["failed"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [403, 404, 500, 503])
async def test_query_treats_error_status_as_no_match(status_code: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=listing_body("Avatar"))

    assert await _adapter(handler).query(make_provider("alpha"), "Avatar") is None


@pytest.mark.asyncio
async def test_query_treats_transport_error_as_no_match() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert await _adapter(handler).query(make_provider("alpha"), "Avatar") is None


@pytest.mark.asyncio
async def test_query_times_out_slow_provider() -> None:
    monitor = ProviderMonitor()

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, text=listing_body("Avatar"))

    adapter = ProviderQueryAdapter(timeout=0.05, transport=provider_transport({"alpha.example.com": handler}), monitor=monitor)
    assert await adapter.query(make_provider("alpha"), "Avatar") is None
    snapshot = await monitor.snapshot()
    assert "timed out" in snapshot["alpha"]["operations"]["search"]["last_error"]


@pytest.mark.asyncio
async def test_query_counts_empty_listing_separately_from_failures() -> None:
    monitor = ProviderMonitor()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 1, "list": []})

    assert await _adapter(handler, monitor=monitor).query(make_provider("alpha"), "Avatar") is None
    metrics = (await monitor.snapshot())["alpha"]["operations"]["search"]
    assert metrics["empty"] == 1
    assert metrics["failed"] == 0


@pytest.mark.asyncio
async def test_query_absorbs_decoder_bugs() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=listing_body("Avatar"))

    def broken_decoder(body: str):
        raise RuntimeError("decoder bug")

    adapter = ProviderQueryAdapter(
        timeout=1.0, transport=httpx.MockTransport(handler), decoder=broken_decoder, monitor=ProviderMonitor()
    )
    assert await adapter.query(make_provider("alpha"), "Avatar") is None


@pytest.mark.asyncio
async def test_query_rejects_invalid_endpoint_without_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        return httpx.Response(200, text=listing_body("Avatar"))

    provider = make_provider("alpha", search_endpoint="not-a-url")
    assert await _adapter(handler).query(provider, "Avatar") is None


def test_adapter_keeps_explicit_zero_timeout() -> None:
    assert ProviderQueryAdapter(timeout=0).timeout == 0
    assert ProviderQueryAdapter().timeout == settings.provider_search_timeout_seconds
