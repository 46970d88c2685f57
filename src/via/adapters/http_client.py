"""httpx client builder.

Every component that talks HTTP (dispatcher, generator) gets its client from
here, so timeouts, redirects and the User-Agent come from one place. Tests
pass an `httpx.MockTransport` through `transport`.
"""

from __future__ import annotations

import httpx

from via.core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` configured from `settings`.

    The client is meant for a single exchange: callers open it with
    `async with` and let it close once the response is read.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=settings.follow_redirects,
        headers=headers,
        transport=transport,
    )
