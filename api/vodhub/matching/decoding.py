"""Structured decoding of provider listing responses.

Providers speak a loosely shared JSON format (``code``/``list`` envelopes with
``vod_*`` fields) but routinely answer with HTML or XML error pages under a 200
status. Everything that is not a well-formed success envelope is reported as a
``ListingDecodeError`` so callers have exactly one failure to handle.
"""

from __future__ import annotations

import json
from typing import Any

from vodhub.matching.base import SearchCandidate

SUCCESS_CODE = 1
_MARKUP_PREFIXES = ("<?xml", "<!doctype", "<html")


class ListingDecodeError(ValueError):
    """Raised when a provider body is not a usable listing."""


class EmptyListingError(ListingDecodeError):
    """Raised when a well-formed response carries no usable entries."""


def _looks_like_markup(body: str) -> bool:
    head = body.lstrip("\ufeff \t\r\n")[:16].lower()
    return head.startswith(_MARKUP_PREFIXES)


def decode_envelope(body: str) -> list[dict[str, Any]]:
    """Return the raw ``list`` entries of a successful provider envelope."""
    if not body or not body.strip():
        raise ListingDecodeError("empty body")
    if _looks_like_markup(body):
        raise ListingDecodeError("markup response")
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ListingDecodeError(f"invalid json: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ListingDecodeError("unexpected payload type")
    code = payload.get("code")
    if code != SUCCESS_CODE and str(code) != str(SUCCESS_CODE):
        raise ListingDecodeError(f"provider reported code {code!r}")
    entries = payload.get("list")
    if not isinstance(entries, list) or not entries:
        raise EmptyListingError("no entries")
    records = [entry for entry in entries if isinstance(entry, dict)]
    if not records:
        raise EmptyListingError("no object entries")
    return records


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def decode_listing(body: str) -> list[SearchCandidate]:
    """Decode a provider search body into candidates in provider order."""
    candidates: list[SearchCandidate] = []
    for entry in decode_envelope(body):
        candidate_id = _text(entry.get("vod_id"))
        name = _text(entry.get("vod_name"))
        if candidate_id is None or name is None:
            continue
        candidates.append(
            SearchCandidate(
                id=candidate_id,
                display_name=name,
                type_name=_text(entry.get("type_name")),
                year=_text(entry.get("vod_year")),
                region=_text(entry.get("vod_area")),
                remarks=_text(entry.get("vod_remarks")),
            )
        )
    if not candidates:
        raise EmptyListingError("no usable entries")
    return candidates
