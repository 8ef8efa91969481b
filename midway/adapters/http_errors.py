"""Log-safe descriptions of HTTP failures.

Mapbox takes its access token as a query parameter, so the request
URL embedded in httpx error messages carries the credential.
"""

from __future__ import annotations

from typing import Optional

import httpx

REDACTED = "***"


def redact(text: str, secret: Optional[str]) -> str:
    if not secret:
        return text
    return text.replace(secret, REDACTED)


def describe_http_error(error: Exception, secret: Optional[str] = None) -> str:
    """Short description of ``error`` without the request URL.

    Status errors are reduced to their status line; anything else keeps
    its message with ``secret`` masked.
    """
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        return f"HTTP {response.status_code} {response.reason_phrase}".rstrip()
    return f"{type(error).__name__}: {redact(str(error), secret)}"
