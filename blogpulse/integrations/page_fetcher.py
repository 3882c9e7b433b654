"""Fetches raw page HTML for the page audit."""

import logging
from typing import Any

import httpx

from blogpulse.config import settings

logger = logging.getLogger(__name__)


class PageFetcher:
    """Fetches one page at a time over a shared HTTP client."""

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.timeout = timeout or settings.page_fetch_timeout
        self.user_agent = user_agent or (
            "Mozilla/5.0 (compatible; BlogPulse/1.0; +https://blogpulse.app)"
        )
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "PageFetcher":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent, "Accept": "text/html"},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Fetcher must be used as async context manager")
        return self._client

    async def fetch_html(self, url: str) -> str | None:
        """Return the page body, or None when the page cannot be fetched."""
        logger.info("Fetching page", extra={"url": url})
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch page", extra={"url": url, "error": str(e)})
            return None
        return response.text
