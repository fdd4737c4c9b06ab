"""Core types shared by the provider adapter, scorer and orchestrator."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol

DEFAULT_PRIORITY = 999


class Confidence(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort weight where a stronger match ranks lower."""
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    """Read-only snapshot of a provider taken at the start of a search."""
    key: str
    name: str
    search_endpoint: str
    player_url_template: str | None = None
    use_player_template: bool = True
    priority: int | None = None
    enabled: bool = True

    @property
    def effective_priority(self) -> int:
        return DEFAULT_PRIORITY if self.priority is None else self.priority

    @property
    def uses_player(self) -> bool:
        return bool(self.player_url_template) and self.use_player_template


@dataclass(frozen=True, slots=True)
class SearchCandidate:
    """One entry from a provider's search listing."""
    id: str
    display_name: str
    type_name: str | None = None
    year: str | None = None
    region: str | None = None
    remarks: str | None = None


@dataclass(frozen=True, slots=True)
class MatchResult:
    """The single best candidate a provider returned for a search title."""
    provider_key: str
    provider_name: str
    candidate_id: str
    candidate_name: str
    confidence: Confidence
    priority: int

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self.confidence.rank)

    def to_payload(self) -> dict[str, Any]:
        return {
            "providerKey": self.provider_key,
            "providerName": self.provider_name,
            "candidateId": self.candidate_id,
            "candidateName": self.candidate_name,
            "confidence": self.confidence.value,
            "priority": self.priority,
        }


class ProviderRegistry(Protocol):
    """Read side of the provider store consumed by the orchestrator."""

    async def list_enabled_providers(self) -> list[ProviderDescriptor]:
        ...


class ProviderAdapter(Protocol):
    """Queries one provider; failures resolve to ``None`` instead of raising."""

    async def query(self, provider: ProviderDescriptor, title: str) -> MatchResult | None:
        ...
