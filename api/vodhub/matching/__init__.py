"""Cross-provider title matching: adapter, scorer, orchestrator and SSE framing."""

from __future__ import annotations

from vodhub.matching.adapter import ProviderQueryAdapter
from vodhub.matching.base import Confidence, MatchResult, ProviderDescriptor, ProviderRegistry, SearchCandidate
from vodhub.matching.orchestrator import MatchOrchestrator, MatchStream, NoProvidersConfigured, SearchSession

__all__ = [
    "Confidence",
    "MatchOrchestrator",
    "MatchResult",
    "MatchStream",
    "NoProvidersConfigured",
    "ProviderDescriptor",
    "ProviderQueryAdapter",
    "ProviderRegistry",
    "SearchCandidate",
    "SearchSession",
]
