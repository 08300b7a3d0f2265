import logging
from typing import Optional

import httpx

from booknotes.config import settings

logger = logging.getLogger(__name__)


class OptimizedHTTPClient:
    """Shared async HTTP client with pooled connections for upstream calls."""

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        limits = httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=30.0
        )

        timeout = timeout if timeout is not None else settings.openlibrary_timeout

        self._client = httpx.AsyncClient(
            limits=limits,
            timeout=httpx.Timeout(timeout, connect=5.0),
            follow_redirects=True,
            headers={"User-Agent": f"{settings.app_name} (booknotes)"},
            transport=transport,
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """Async GET over the pooled client."""
        return await self._client.get(url, **kwargs)

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


# Process-wide client, created on first use
_global_client: Optional[OptimizedHTTPClient] = None


async def get_http_client() -> OptimizedHTTPClient:
    """Return the shared client, creating it if needed."""
    global _global_client
    if _global_client is None:
        _global_client = OptimizedHTTPClient()
        logger.debug("HTTP client created")
    return _global_client


async def cleanup_http_client():
    """Close the shared client."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
