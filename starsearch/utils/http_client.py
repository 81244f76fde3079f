"""
Shared async HTTP client:
- Session-wide timeout
- Redirect limits
- Single attempt per request, non-2xx raised as HttpError
"""
import logging
from typing import Any, Optional

import aiohttp
from aiohttp import ClientSession, TCPConnector

from starsearch.config.settings import settings

logger = logging.getLogger(__name__)


class HttpError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"HTTP {status}: {message}")


def build_session() -> ClientSession:
    connector = TCPConnector(
        limit=20,
        ssl=True,
    )
    timeout = aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS)
    return ClientSession(
        connector=connector,
        timeout=timeout,
        trust_env=False,
    )


async def fetch_json(
    session: ClientSession,
    url: str,
    *,
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
) -> Any:
    """GET JSON. The body is decoded whatever its declared content type."""
    async with session.get(
        url,
        headers=headers,
        params=params,
        allow_redirects=True,
        max_redirects=settings.HTTP_MAX_REDIRECTS,
    ) as resp:
        if not 200 <= resp.status < 300:
            body = await resp.text()
            logger.warning(
                "HTTP request failed",
                extra={"url": url[:80], "status": resp.status},
            )
            raise HttpError(resp.status, body[:200])
        return await resp.json(content_type=None)
