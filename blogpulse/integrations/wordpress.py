"""WordPress REST API client for posts and categories."""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from blogpulse.config import settings
from blogpulse.core.exceptions import ExternalAPIError, RetryableAPIError
from blogpulse.core.retry import RetryPolicy, run_with_retry
from blogpulse.schemas.wordpress import Category, Post

logger = logging.getLogger(__name__)

API_NAME = "WordPress"


def _is_retryable(exc: Exception) -> bool:
    return isinstance(exc, RetryableAPIError)


class WordPressClient:
    """Read-only client for a WordPress site's ``wp/v2`` endpoints.

    Posts are fetched page by page, strictly in order, with a fixed pause
    between pages. A page that keeps failing ends pagination and whatever
    was collected so far is returned.
    """

    def __init__(
        self,
        base_url: str,
        page_size: int | None = None,
        retry_policy: RetryPolicy | None = None,
        page_delay_seconds: float | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        if not base_url.startswith(("http://", "https://")):
            base_url = f"https://{base_url}"
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size or settings.wordpress_page_size
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.retry_policy = retry_policy or RetryPolicy.exponential(
            max_attempts=settings.wordpress_max_attempts,
        )
        self.page_delay_seconds = (
            settings.wordpress_page_delay_seconds
            if page_delay_seconds is None
            else page_delay_seconds
        )
        self.timeout = timeout or settings.wordpress_timeout
        self.user_agent = user_agent or (
            "Mozilla/5.0 (compatible; BlogPulse/1.0; +https://blogpulse.app)"
        )
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "WordPressClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("WordPressClient must be used as async context manager")
        return self._client

    @property
    def posts_url(self) -> str:
        return f"{self.base_url}/wp-json/wp/v2/posts"

    @property
    def categories_url(self) -> str:
        return f"{self.base_url}/wp-json/wp/v2/categories"

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET a JSON document, classifying failures.

        Returns ``None`` for non-retryable client errors (4xx), which the
        posts endpoint uses to signal a page past the end.
        """
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise RetryableAPIError(API_NAME, f"request failed: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise RetryableAPIError(API_NAME, f"HTTP {response.status_code}")
        if response.status_code >= 400:
            logger.info(
                "WordPress returned client error",
                extra={"url": url, "status": response.status_code, "params": params},
            )
            return None

        try:
            return response.json()
        except ValueError as e:
            raise RetryableAPIError(API_NAME, "response body is not valid JSON") from e

    async def _fetch_posts_page(self, page: int, per_page: int) -> list[Post] | None:
        params = {
            "per_page": per_page,
            "page": page,
            "orderby": "date",
            "order": "desc",
            "_embed": "",
        }
        payload = await self._get_json(self.posts_url, params)
        if payload is None:
            return None
        if not isinstance(payload, list):
            raise RetryableAPIError(API_NAME, "posts response is not a list")

        try:
            return [Post.model_validate(item) for item in payload]
        except ValidationError as e:
            raise ExternalAPIError(API_NAME, f"unexpected post shape on page {page}: {e}") from e

    async def fetch_all_posts(self) -> list[Post]:
        """Fetch every post, newest first, across all pages."""
        all_posts: list[Post] = []
        page = 1

        logger.info(
            "Fetching all WordPress posts",
            extra={"base_url": self.base_url, "page_size": self.page_size},
        )

        while True:
            async def fetch_page(page: int = page) -> list[Post] | None:
                return await self._fetch_posts_page(page, self.page_size)

            try:
                posts = await run_with_retry(
                    fetch_page,
                    policy=self.retry_policy,
                    operation_name="wordpress_posts_page",
                    is_retryable=_is_retryable,
                    log_context={"base_url": self.base_url, "page": page},
                )
            except ExternalAPIError as e:
                logger.error(
                    "Stopping pagination after failed page",
                    extra={"page": page, "collected": len(all_posts), "error": e.message},
                )
                break

            if posts is None:
                logger.info("No more pages available", extra={"page": page})
                break
            if not posts:
                logger.info("Empty page received, stopping pagination", extra={"page": page})
                break

            all_posts.extend(posts)
            logger.info(
                "Fetched posts page",
                extra={"page": page, "count": len(posts), "total": len(all_posts)},
            )

            if len(posts) < self.page_size:
                break

            page += 1
            await asyncio.sleep(self.page_delay_seconds)

        logger.info("WordPress post fetch complete", extra={"total_posts": len(all_posts)})
        return all_posts

    async def fetch_latest_posts(self, limit: int = 10) -> list[Post]:
        """Fetch the newest ``limit`` posts from the first page."""
        async def fetch_first_page() -> list[Post] | None:
            return await self._fetch_posts_page(1, limit)

        try:
            posts = await run_with_retry(
                fetch_first_page,
                policy=self.retry_policy,
                operation_name="wordpress_latest_posts",
                is_retryable=_is_retryable,
                log_context={"base_url": self.base_url, "limit": limit},
            )
        except ExternalAPIError:
            return []
        return posts or []

    async def fetch_categories(self) -> list[Category]:
        """Fetch up to 100 categories; failures yield an empty list."""
        try:
            payload = await self._get_json(self.categories_url, {"per_page": 100})
        except ExternalAPIError as e:
            logger.warning("Failed to fetch categories", extra={"error": e.message})
            return []

        if not isinstance(payload, list):
            return []

        categories: list[Category] = []
        for item in payload:
            try:
                categories.append(Category.model_validate(item))
            except ValidationError:
                logger.debug("Skipping malformed category", extra={"item": item})
        return categories
