"""httpx wrapper.

Why a wrapper:
- Standardizes base URL, timeouts, default headers and authentication.
- Makes testing easy: tests inject an `httpx.MockTransport`.
"""

from __future__ import annotations

import base64

import httpx

from core.config import AppSettings

USER_AGENT = "mochi-cli/0.1"


def basic_auth_header(api_key: str) -> str:
    """HTTP Basic value for `api_key` as username and an empty password."""

    token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    api_key: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` bound to the API base URL.

    Why a builder:
    - Centralizes timeouts/headers so the executor and the attachment upload
      behave the same.
    - `transport` is the seam tests use to fake the remote service.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if api_key:
        headers["Authorization"] = basic_auth_header(api_key)
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
