"""Google PageSpeed Insights client for Core Web Vitals."""

import logging
from typing import Any

import httpx

from blogpulse.config import settings
from blogpulse.core.exceptions import APIKeyMissingError, ExternalAPIError
from blogpulse.schemas.seo import CoreWebVitals

logger = logging.getLogger(__name__)


class PageSpeedClient:
    """Client for the PageSpeed Insights v5 ``runPagespeed`` endpoint."""

    BASE_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        strategy: str = "mobile",
    ) -> None:
        self.api_key = api_key or settings.pagespeed_api_key
        self.timeout = timeout or settings.pagespeed_timeout
        self.strategy = strategy
        self._client: httpx.AsyncClient | None = None

        if not self.api_key:
            raise APIKeyMissingError("PageSpeed")

    async def __aenter__(self) -> "PageSpeedClient":
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client must be used as async context manager")
        return self._client

    async def get_core_web_vitals(self, url: str) -> CoreWebVitals:
        """Fetch field metrics for ``url``.

        Raises:
            ExternalAPIError: on transport failure, non-2xx status or a
                response without field data.
        """
        logger.info("PageSpeed request", extra={"url": url, "strategy": self.strategy})
        try:
            response = await self.client.get(
                self.BASE_URL,
                params={"url": url, "strategy": self.strategy, "key": self.api_key},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ExternalAPIError("PageSpeed", str(e)) from e
        except ValueError as e:
            raise ExternalAPIError("PageSpeed", "response body is not valid JSON") from e

        metrics = (data.get("loadingExperience") or {}).get("metrics")
        if not metrics:
            raise ExternalAPIError("PageSpeed", f"no field data for {url}")

        def percentile(name: str) -> float:
            return float((metrics.get(name) or {}).get("percentile") or 0)

        performance = (
            ((data.get("lighthouseResult") or {}).get("categories") or {}).get("performance")
            or {}
        )
        return CoreWebVitals(
            lcp=percentile("LARGEST_CONTENTFUL_PAINT_MS") / 1000,
            fid=percentile("FIRST_INPUT_DELAY_MS"),
            # PageSpeed reports CLS multiplied by 100.
            cls=percentile("CUMULATIVE_LAYOUT_SHIFT_SCORE") / 100,
            fcp=percentile("FIRST_CONTENTFUL_PAINT_MS") / 1000,
            ttfb=percentile("EXPERIMENTAL_TIME_TO_FIRST_BYTE") / 1000,
            score=round(float(performance.get("score") or 0) * 100),
            source="pagespeed",
        )
