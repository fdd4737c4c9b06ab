"""Signed session tokens and shared-password checks for operator access."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from .config import settings

SESSION_SUBJECT = "admin"
SESSION_TOKEN_TYPE = "admin_session"


def create_token(subject: str, expires_delta: timedelta, token_type: str) -> str:
    """Create a signed JWT for the given subject and token type."""
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.session_secret_key, algorithm=settings.session_algorithm)


def create_session_token() -> str:
    """Create an operator session token with the configured TTL."""
    delta = timedelta(minutes=settings.session_expires_minutes)
    return create_token(SESSION_SUBJECT, delta, SESSION_TOKEN_TYPE)


def verify_admin_password(candidate: str) -> bool:
    """Compare a submitted password with the configured shared password."""
    return secrets.compare_digest(candidate.encode("utf-8"), settings.admin_password.encode("utf-8"))


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT and return its payload if valid."""
    try:
        return jwt.decode(token, settings.session_secret_key, algorithms=[settings.session_algorithm])
    except JWTError:
        return None


def is_valid_session(token: str | None) -> bool:
    """Return True when the token is a live operator session."""
    if not token:
        return False
    payload = decode_token(token)
    return bool(payload and payload.get("type") == SESSION_TOKEN_TYPE and payload.get("sub") == SESSION_SUBJECT)
