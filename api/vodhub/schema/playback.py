"""Playback detail response schemas."""

from __future__ import annotations

from pydantic import BaseModel

from vodhub.schema.base import ORMModel


class EpisodeRead(ORMModel):
    name: str
    url: str
    play_url: str


class PlaybackDetailRead(ORMModel):
    """Candidate detail with episodes resolved for playback."""
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
    episodes: list[EpisodeRead] = []


class PlaybackProviderRead(BaseModel):
    key: str
    name: str
    uses_player: bool


class PlaybackResponse(BaseModel):
    provider: PlaybackProviderRead
    detail: PlaybackDetailRead
