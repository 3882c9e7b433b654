"""Ingest a WordPress blog and print its dashboard analytics.

With ``--save-for USER_ID`` the snapshot is also stored for that user, the
same way ``POST /api/v1/analytics/refresh`` stores it.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from blogpulse.config import settings
from blogpulse.core.database import close_db, get_session_context
from blogpulse.core.exceptions import ConfigurationError
from blogpulse.core.logging import setup_logging
from blogpulse.repositories.blog_repository import AnalyticsRepository
from blogpulse.schemas.analytics import DashboardAnalytics
from blogpulse.services.blog_statistics import build_dashboard_analytics
from blogpulse.services.ingestion import IngestionConfig, get_blog_data

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--url",
        default=settings.wordpress_url,
        help=f"WordPress site URL (default: {settings.wordpress_url})",
    )
    parser.add_argument(
        "--treatments",
        type=Path,
        default=None,
        help="Path to a treatments YAML file (default: bundled list)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.wordpress_page_size,
        help="Posts requested per page",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full analytics snapshot as JSON",
    )
    parser.add_argument(
        "--save-for",
        metavar="USER_ID",
        default=None,
        help="Store the snapshot in the database for this user",
    )
    return parser.parse_args(argv)


def render_summary(analytics: DashboardAnalytics) -> str:
    lines = [
        f"Site:                 {analytics.wordpress_url}",
        f"Posts:                {analytics.total_posts}",
        f"Unique keywords:      {analytics.total_keywords}",
        f"Avg words per post:   {analytics.avg_words_per_post}",
        f"Growth rate:          {analytics.growth_rate}%",
        f"Keyword diversity:    {analytics.keyword_diversity_score}/100",
        f"Content gap rate:     {analytics.content_gap_rate}%",
        "",
        "Top keywords:",
    ]
    lines.extend(f"  {k.keyword}: {k.frequency}" for k in analytics.top_keywords[:10])
    lines.extend(["", "Treatment coverage:"])
    lines.extend(
        f"  {t.treatment}: {t.post_count} posts ({t.percentage}%)"
        for t in analytics.treatment_coverage
    )
    return "\n".join(lines)


async def save_snapshot(user_id: str, analytics: DashboardAnalytics) -> None:
    try:
        async with get_session_context() as session:
            await AnalyticsRepository(session).upsert(user_id, analytics)
    finally:
        await close_db()
    logger.info(
        "Analytics snapshot saved",
        extra={"user_id": user_id, "wordpress_url": analytics.wordpress_url},
    )


async def async_main(args: argparse.Namespace) -> int:
    try:
        app_settings = settings
        if args.treatments is not None:
            app_settings = settings.model_copy(update={"treatments_path": str(args.treatments)})
        config = IngestionConfig.from_settings(base_url=args.url, app_settings=app_settings)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc.message}", file=sys.stderr)
        return 2

    if args.page_size < 1:
        print("--page-size must be at least 1", file=sys.stderr)
        return 2
    config.page_size = args.page_size

    blog_data = await get_blog_data(config)
    analytics = build_dashboard_analytics(
        blog_data,
        wordpress_url=config.base_url,
        treatments=config.treatments,
    )

    if args.json:
        print(analytics.model_dump_json(indent=2))
    else:
        print(render_summary(analytics))

    if args.save_for and blog_data.posts:
        await save_snapshot(args.save_for, analytics)
    return 0 if blog_data.posts else 1


def main(argv: list[str] | None = None) -> int:
    setup_logging(logging.WARNING)
    return asyncio.run(async_main(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
