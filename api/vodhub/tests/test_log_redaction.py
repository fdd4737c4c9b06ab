"""Redaction of provider URLs and errors before they reach logs."""

from __future__ import annotations

import httpx

from vodhub.utils.redaction import MAX_ERROR_LENGTH, describe_provider_error, redact_secrets


def test_redacts_userinfo_and_query_credentials() -> None:
    text = "GET https://user:pw@vod.example.com/api.php/provide/vod?ac=detail&key=abc123&sign=f00 failed"
    redacted = redact_secrets(text)
    assert "user:pw" not in redacted
    assert "abc123" not in redacted
    assert "f00" not in redacted
    assert "ac=detail" in redacted


def test_leaves_unrelated_parameters_alone() -> None:
    assert redact_secrets("https://vod.example.com/?monkey=1&wd=Avatar") == "https://vod.example.com/?monkey=1&wd=Avatar"


def test_describe_provider_error_uses_first_line_and_type_fallback() -> None:
    assert describe_provider_error(RuntimeError("bad gateway\ntraceback noise")) == "bad gateway"
    assert describe_provider_error(httpx.ReadTimeout("")) == "ReadTimeout"


def test_describe_provider_error_truncates_long_messages() -> None:
    message = describe_provider_error(ValueError("x" * 1000))
    assert len(message) == MAX_ERROR_LENGTH
    assert message.endswith("...")
