"""
httpx client for the allocation service

One AsyncClient (one connection pool) per client session. The base design
sets no request timeout: a query either resolves or fails at the transport
layer, and a stuck request is only cleared by the user resetting the booking.
"""

import httpx

from src.platform.config.core_setting import settings


def create_http_client(
    *,
    base_url: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url or settings.BOOKING_API_BASE_URL,
        timeout=httpx.Timeout(timeout if timeout is not None else settings.BOOKING_API_TIMEOUT),
        headers={'Accept': 'application/json'},
        transport=transport,
    )

