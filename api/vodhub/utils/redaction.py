"""Redaction helpers for provider URLs and errors written to logs."""

from __future__ import annotations

import re

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/]+)@", re.IGNORECASE)
# Provider APIs commonly authenticate with ``key``/``sign`` query params.
_QUERY_SECRET_RE = re.compile(
    r"(?i)\b(token|secret|password|api_key|apikey|access_token|key|sign)=([^&\s]+)"
)
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~-]+)")
MAX_ERROR_LENGTH = 300


def redact_secrets(text: str) -> str:
    """Mask credentials embedded in URLs or error strings."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    redacted = _QUERY_SECRET_RE.sub(r"\1=***", redacted)
    return _BEARER_RE.sub(r"\1***", redacted)


def describe_provider_error(exc: BaseException) -> str:
    """One-line, redacted description of a provider failure for telemetry."""
    lines = str(exc).strip().splitlines()
    message = redact_secrets(lines[0]) if lines else ""
    if not message:
        return type(exc).__name__
    if len(message) > MAX_ERROR_LENGTH:
        message = message[: MAX_ERROR_LENGTH - 3] + "..."
    return message
