"""Shared sanitisation helpers for log output."""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_BEARER_RE = re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)
_TOKEN_QUERY_RE = re.compile(r"(?i)(token|api_key|key)=([^&\s]+)")
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_JWT_RE = re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")
_PANEL_KEY_RE = re.compile(r"\bptl[ac]_[A-Za-z0-9]{8,}")

_SENSITIVE_QUERY_KEYS = frozenset({"token", "api_key", "key"})


def redact_text(value: str | None) -> str:
    """Return ``value`` with bearer tokens, panel keys, JWTs and emails removed."""

    if not value:
        return ""
    text = str(value)
    if not text:
        return ""
    redacted = _BEARER_RE.sub("Bearer ***", text)
    redacted = _TOKEN_QUERY_RE.sub(lambda match: f"{match.group(1)}=***", redacted)
    redacted = _JWT_RE.sub("***", redacted)
    redacted = _PANEL_KEY_RE.sub("ptl*_***", redacted)
    redacted = _EMAIL_RE.sub("***@***", redacted)
    return redacted.replace("authorization", "auth").replace("Authorization", "Auth")


def redact_token_fragment(value: str | None) -> str:
    """Return a shortened representation of a token-like string."""

    if value is None:
        return ""
    trimmed = str(value).strip()
    if not trimmed:
        return ""
    if len(trimmed) <= 4:
        return "***"
    if len(trimmed) <= 8:
        return f"{trimmed[:2]}***{trimmed[-2:]}"
    return f"{trimmed[:4]}...{trimmed[-4:]}"


def mask_identifier(value: str | None) -> str:
    """Return a masked identifier suitable for log output."""

    if value is None:
        return ""
    trimmed = str(value).strip()
    if not trimmed:
        return ""
    if len(trimmed) <= 4:
        return "***"
    if len(trimmed) <= 8:
        return f"{trimmed[:2]}...{trimmed[-2:]}"
    prefix = trimmed[:6]
    suffix = trimmed[-4:]
    return f"{prefix}...{suffix}"


def sanitise_headers(headers: Mapping[str, Any]) -> dict[str, str]:
    """Redact sensitive header values for logging."""

    sanitised: dict[str, str] = {}
    for key, value in headers.items():
        if isinstance(value, bytes):
            text = value.decode(errors="ignore")
        else:
            text = str(value)
        if key.lower() == "authorization":
            prefix, _, token = text.partition(" ")
            if token:
                text = f"{prefix} {redact_token_fragment(token)}".strip()
            else:
                text = redact_token_fragment(text)
        elif key.lower() in {"cookie", "set-cookie"}:
            text = redact_token_fragment(text)
        sanitised[key] = text
    return sanitised


def sanitise_url(url: str) -> str:
    """Return ``url`` with token-like query values and server UUIDs masked."""

    try:
        parsed = urlsplit(url)
    except ValueError:
        return url
    query_items = parse_qsl(parsed.query, keep_blank_values=True)
    sanitised_query = urlencode(
        [
            (key, "{token}" if key.lower() in _SENSITIVE_QUERY_KEYS else value)
            for key, value in query_items
        ],
        doseq=True,
    )
    segments = parsed.path.split("/")
    # wings socket paths look like /api/servers/<uuid>/ws
    if len(segments) >= 3 and segments[-1] == "ws" and segments[-3] == "servers":
        segments[-2] = mask_identifier(segments[-2])
    return urlunsplit(
        (parsed.scheme, parsed.netloc, "/".join(segments), sanitised_query, parsed.fragment)
    )


__all__ = [
    "mask_identifier",
    "redact_text",
    "redact_token_fragment",
    "sanitise_headers",
    "sanitise_url",
]
