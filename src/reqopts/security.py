"""Header redaction for log output."""

from __future__ import annotations

import httpx

SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
}


def sanitize_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    """Return header pairs with sensitive values redacted, repeats kept."""
    redacted: list[tuple[str, str]] = []
    for key, value in headers.multi_items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted.append((key, "[REDACTED]"))
        else:
            redacted.append((key, value))
    return redacted
