from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from vodhub.api.deps import get_orchestrator
from vodhub.matching.orchestrator import MatchOrchestrator, NoProvidersConfigured
from vodhub.matching.stream import SSE_HEADERS, SSE_MEDIA_TYPE, sse_frames

router = APIRouter()


@router.get("/stream", response_class=StreamingResponse)
async def match_stream(
    title: str = Query(..., min_length=1, max_length=256),
    context_id: str | None = Query(default=None, max_length=128),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
) -> StreamingResponse:
    """Stream per-provider matches for a title as server-sent events.

    Fails with 404 before any event is sent when no provider is enabled.
    """
    cleaned = title.strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing title parameter")
    try:
        stream = await orchestrator.search(cleaned, context_id=context_id)
    except NoProvidersConfigured as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StreamingResponse(sse_frames(stream), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)
