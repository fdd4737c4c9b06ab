"""Progress events emitted by the match orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from vodhub.matching.base import MatchResult


@dataclass(frozen=True, slots=True)
class InitEvent:
    total_providers: int
    title: str
    context_id: str | None = None
    type: str = "init"

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "contextId": self.context_id,
            "totalProviders": self.total_providers,
        }


@dataclass(frozen=True, slots=True)
class ResultEvent:
    provider_key: str
    provider_name: str
    match: MatchResult | None
    completed: int
    total: int
    type: str = "result"

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "providerKey": self.provider_key,
            "providerName": self.provider_name,
            "match": self.match.to_payload() if self.match else None,
            "completed": self.completed,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class DoneEvent:
    total_providers: int
    found_count: int
    type: str = "done"

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "totalProviders": self.total_providers,
            "foundCount": self.found_count,
        }


OrchestratorEvent = Union[InitEvent, ResultEvent, DoneEvent]
