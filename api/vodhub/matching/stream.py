"""Server-sent event framing for orchestrator progress."""

from __future__ import annotations

import json
import logging
from typing import AsyncIterable, AsyncIterator

from vodhub.matching.events import OrchestratorEvent

logger = logging.getLogger("vodhub.matching.stream")

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def encode_event(event: OrchestratorEvent) -> bytes:
    """Frame one event as a self-contained ``data:`` block."""
    body = json.dumps(event.to_payload(), ensure_ascii=False, separators=(",", ":"))
    return f"data: {body}\n\n".encode("utf-8")


async def sse_frames(events: AsyncIterable[OrchestratorEvent]) -> AsyncIterator[bytes]:
    """Encode events in emission order; stop quietly if the client goes away."""
    try:
        async for event in events:
            yield encode_event(event)
    except GeneratorExit:
        logger.info("Match stream consumer disconnected")
        raise
