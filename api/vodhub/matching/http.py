"""Provider URL building and outbound GETs for search and detail lookups."""

from __future__ import annotations

from urllib.parse import quote_plus, urlencode, urlsplit

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter
from tenacity.wait import wait_base

from vodhub.core.config import settings

QUERY_PLACEHOLDER = "{query}"
RETRY_ATTEMPTS = 3


class ExternalAPIError(Exception):
    pass


def provider_origin(endpoint: str) -> str:
    parts = urlsplit(endpoint)
    if not parts.scheme or not parts.netloc:
        raise ExternalAPIError(f"Invalid provider endpoint {endpoint!r}")
    return f"{parts.scheme}://{parts.netloc}"


def provider_headers(endpoint: str) -> dict[str, str]:
    """Generic browser headers with the provider's own site as referer."""
    return {
        "User-Agent": settings.provider_user_agent,
        "Referer": f"{provider_origin(endpoint)}/",
        "Accept": "application/json, text/plain, */*",
    }


def build_endpoint_url(endpoint: str, params: dict[str, str]) -> str:
    """Append query parameters, respecting any query string already present."""
    separator = "&" if urlsplit(endpoint).query else "?"
    return f"{endpoint}{separator}{urlencode(params)}"


def build_search_url(endpoint: str, title: str) -> str:
    if QUERY_PLACEHOLDER in endpoint:
        return endpoint.replace(QUERY_PLACEHOLDER, quote_plus(title))
    return build_endpoint_url(endpoint, {"ac": "detail", "pg": "1", "wd": title})


def build_detail_url(endpoint: str, candidate_id: str) -> str:
    base = endpoint.split("?", 1)[0] if QUERY_PLACEHOLDER in endpoint else endpoint
    return build_endpoint_url(base, {"ac": "detail", "ids": candidate_id})


async def fetch_text(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Issue one GET and return the body text; no retries."""
    async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
        response = await client.get(url, headers=headers)
        if not response.is_success:
            raise ExternalAPIError(f"Provider responded {response.status_code}")
        return response.text


async def fetch_body(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
    wait: wait_base | None = None,
) -> str:
    """Like ``fetch_text`` but retries transport errors and 5xx responses."""
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(RETRY_ATTEMPTS),
        wait=wait if wait is not None else wait_exponential_jitter(initial=1, max=8),
        retry=retry_if_exception_type((httpx.TransportError, ExternalAPIError)),
        reraise=True,
    ):
        with attempt:
            async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
                response = await client.get(url, headers=headers)
                if response.status_code >= 500:
                    raise ExternalAPIError(f"Server error {response.status_code}")
                response.raise_for_status()
                return response.text
    raise ExternalAPIError("Unreachable")
