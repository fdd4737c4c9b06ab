"""Confidence scoring and best-candidate selection for provider listings."""

from __future__ import annotations

from typing import Sequence

from vodhub.matching.base import Confidence, SearchCandidate


def normalize_name(value: str) -> str:
    return value.strip().lower()


def _contains_either_way(left: str, right: str) -> bool:
    return left in right or right in left


def score(candidate_name: str, search_title: str) -> Confidence:
    """Classify how closely a candidate name matches the search title."""
    name = normalize_name(candidate_name)
    title = normalize_name(search_title)
    if name == title:
        return Confidence.HIGH
    if _contains_either_way(name, title):
        return Confidence.MEDIUM
    return Confidence.LOW


def pick_best_candidate(candidates: Sequence[SearchCandidate], search_title: str) -> SearchCandidate | None:
    """Pick one candidate: exact match, then containment, then provider order."""
    if not candidates:
        return None
    title = normalize_name(search_title)
    for candidate in candidates:
        if normalize_name(candidate.display_name) == title:
            return candidate
    for candidate in candidates:
        if _contains_either_way(normalize_name(candidate.display_name), title):
            return candidate
    return candidates[0]
