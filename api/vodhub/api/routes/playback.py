from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from vodhub.api.deps import get_db, get_playback_resolver
from vodhub.matching.http import ExternalAPIError
from vodhub.matching.playback import PlaybackResolver
from vodhub.schema.playback import PlaybackDetailRead, PlaybackProviderRead, PlaybackResponse
from vodhub.services import provider_service

router = APIRouter()


@router.get("/{provider_key}/{candidate_id}", response_model=PlaybackResponse)
async def get_playback_detail(
    provider_key: str,
    candidate_id: str,
    session: AsyncSession = Depends(get_db),
    resolver: PlaybackResolver = Depends(get_playback_resolver),
) -> PlaybackResponse:
    """Fetch a matched candidate's episodes with playable URLs."""
    provider = await provider_service.get_provider(session, provider_key)
    if provider is None or not provider.enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Provider not found")
    descriptor = provider_service.to_descriptor(provider)
    try:
        detail = await resolver.fetch_detail(descriptor, candidate_id)
    except ExternalAPIError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Provider detail lookup failed") from exc
    return PlaybackResponse(
        provider=PlaybackProviderRead(key=descriptor.key, name=descriptor.name, uses_player=descriptor.uses_player),
        detail=PlaybackDetailRead.model_validate(detail),
    )
