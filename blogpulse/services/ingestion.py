"""WordPress ingestion pipeline: fetch, extract keywords, match treatments."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from blogpulse.config import Settings, settings
from blogpulse.core.retry import RetryPolicy
from blogpulse.integrations.wordpress import WordPressClient
from blogpulse.schemas.wordpress import BlogData
from blogpulse.services.blog_statistics import category_stats
from blogpulse.services.keywords import extract_keywords, keyword_frequencies, top_keywords
from blogpulse.services.treatment_matcher import MatcherConfig, analyze_treatment_matches

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestionConfig:
    """Everything one ingestion run needs; no state is shared between runs."""

    base_url: str
    treatments: Sequence[str]
    page_size: int = 50
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy.exponential)
    page_delay_seconds: float = 0.2
    matcher: MatcherConfig = field(default_factory=MatcherConfig)

    @classmethod
    def from_settings(
        cls,
        base_url: str | None = None,
        treatments: Sequence[str] | None = None,
        app_settings: Settings | None = None,
    ) -> IngestionConfig:
        """Build a config from application settings, with optional overrides."""
        app_settings = app_settings or settings
        return cls(
            base_url=(base_url or app_settings.wordpress_url).rstrip("/"),
            treatments=list(treatments) if treatments is not None else app_settings.load_treatments(),
            page_size=app_settings.wordpress_page_size,
            retry_policy=RetryPolicy.exponential(max_attempts=app_settings.wordpress_max_attempts),
            page_delay_seconds=app_settings.wordpress_page_delay_seconds,
            matcher=MatcherConfig(
                locale_suffix=app_settings.locale_suffix,
                locale_markers=tuple(marker.lower() for marker in app_settings.locale_markers),
            ),
        )

    def build_client(self) -> WordPressClient:
        return WordPressClient(
            self.base_url,
            page_size=self.page_size,
            retry_policy=self.retry_policy,
            page_delay_seconds=self.page_delay_seconds,
        )


async def get_blog_data(config: IngestionConfig) -> BlogData:
    """Run one full ingestion: posts, categories, keywords and treatment matches."""
    logger.info(
        "Blog ingestion started",
        extra={"base_url": config.base_url, "treatments": len(config.treatments)},
    )
    t0 = time.perf_counter()

    async with config.build_client() as client:
        posts, categories = await asyncio.gather(
            client.fetch_all_posts(),
            client.fetch_categories(),
        )

    keywords = extract_keywords(posts)
    matches = analyze_treatment_matches(posts, config.treatments, config.matcher)

    logger.info(
        "Blog ingestion completed",
        extra={
            "base_url": config.base_url,
            "posts": len(posts),
            "categories": len(categories),
            "keywords": len(keywords),
            "duration_s": round(time.perf_counter() - t0, 2),
        },
    )
    return BlogData(
        posts=posts,
        categories=categories,
        keywords=keywords,
        treatment_matches=matches,
    )


def format_for_ai_context(blog_data: BlogData, site_name: str = "CK HEALTH TURKEY") -> str:
    """Render ingestion results as the plain-text context block sent to the LLM."""
    lines = [
        f"{site_name} BLOG ANALYSIS DATA",
        "",
        f"TOTAL POSTS: {len(blog_data.posts)}",
        f"TOTAL KEYWORDS FOUND: {len(blog_data.keywords)}",
        "",
        "TOP 50 KEYWORDS:",
    ]

    frequencies = keyword_frequencies(blog_data.posts, blog_data.keywords)
    for index, (keyword, frequency) in enumerate(top_keywords(frequencies, 50), start=1):
        lines.append(f"{index}. {keyword}: {frequency} times")

    lines.extend(["", "TREATMENT ANALYSIS:"])
    for index, match in enumerate(blog_data.treatment_matches, start=1):
        lines.append(f"{index}. {match.treatment}: {match.frequency} posts")

    lines.extend(["", "POSTS BY CATEGORY:"])
    for stat in category_stats(blog_data.posts, blog_data.categories):
        lines.append(f"{stat.name}: {stat.count} posts")

    return "\n".join(lines) + "\n"
