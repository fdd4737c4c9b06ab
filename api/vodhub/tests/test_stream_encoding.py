"""Server-sent event framing of orchestrator events."""

from __future__ import annotations

import json

import pytest

from vodhub.matching.base import Confidence
from vodhub.matching.events import DoneEvent, InitEvent, ResultEvent
from vodhub.matching.stream import encode_event, sse_frames
from vodhub.tests.utils import make_match, make_provider


def _decode(frame: bytes) -> dict:
    text = frame.decode("utf-8")
    assert text.startswith("data: ")
    assert text.endswith("\n\n")
    return json.loads(text[len("data: "):])


def test_init_event_uses_camel_case_keys() -> None:
    payload = _decode(encode_event(InitEvent(total_providers=3, title="Avatar", context_id="tmdb-19995")))
    assert payload == {"type": "init", "title": "Avatar", "contextId": "tmdb-19995", "totalProviders": 3}


def test_result_event_embeds_match_payload() -> None:
    provider = make_provider("alpha", priority=1)
    event = ResultEvent(
        provider_key="alpha",
        provider_name=provider.name,
        match=make_match(provider, Confidence.MEDIUM, name="Avatar 2"),
        completed=2,
        total=4,
    )
    payload = _decode(encode_event(event))
    assert payload["type"] == "result"
    assert payload["providerKey"] == "alpha"
    assert payload["completed"] == 2
    assert payload["total"] == 4
    assert payload["match"] == {
        "providerKey": "alpha",
        "providerName": "Provider ALPHA",
        "candidateId": "alpha-1",
        "candidateName": "Avatar 2",
        "confidence": "medium",
        "priority": 1,
    }


def test_result_event_without_match_encodes_null() -> None:
    event = ResultEvent(provider_key="beta", provider_name="Beta", match=None, completed=1, total=1)
    assert _decode(encode_event(event))["match"] is None


def test_done_event_reports_found_count() -> None:
    assert _decode(encode_event(DoneEvent(total_providers=5, found_count=4))) == {
        "type": "done",
        "totalProviders": 5,
        "foundCount": 4,
    }


def test_non_ascii_titles_are_kept_verbatim() -> None:
    frame = encode_event(InitEvent(total_providers=1, title="千与千寻"))
    assert "千与千寻".encode("utf-8") in frame


@pytest.mark.asyncio
async def test_sse_frames_preserve_emission_order() -> None:
    async def events():
        yield InitEvent(total_providers=1, title="Avatar")
        yield ResultEvent(provider_key="a", provider_name="A", match=None, completed=1, total=1)
        yield DoneEvent(total_providers=1, found_count=0)

    frames = [frame async for frame in sse_frames(events())]
    assert [_decode(frame)["type"] for frame in frames] == ["init", "result", "done"]
