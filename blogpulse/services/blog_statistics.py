"""Aggregate statistics over an ingested blog corpus.

All scores are whole numbers, rounded half-up the way the dashboard shows them.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from blogpulse.schemas.analytics import (
    CategoryCount,
    DashboardAnalytics,
    KeywordCount,
    MonthlyPostCount,
    PublicationPeriod,
    TreatmentCoverage,
    TreatmentGap,
)
from blogpulse.schemas.wordpress import BlogData, Category, Post, TreatmentMatch
from blogpulse.services.keywords import keyword_frequencies, top_keywords
from blogpulse.services.text import count_words, strip_html_tags

# A treatment needs this many posts to count as covered.
COVERAGE_THRESHOLD = 2
RECENT_DAYS = 30
OLDER_DAYS = 90
MONTHS_IN_CHART = 12


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _utc_now(now: datetime | None) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(timezone.utc)


def treatment_gaps(
    matches: Sequence[TreatmentMatch],
    treatments: Sequence[str],
) -> list[TreatmentGap]:
    """Treatments with fewer than two matching posts, in ``treatments`` order."""
    frequency_by_treatment = {match.treatment: match.frequency for match in matches}
    gaps: list[TreatmentGap] = []
    for treatment in treatments:
        count = frequency_by_treatment.get(treatment, 0)
        if count >= COVERAGE_THRESHOLD:
            continue
        gaps.append(
            TreatmentGap(
                treatment=treatment,
                current_post_count=count,
                gap_level="high" if count == 0 else "medium",
                priority=10 if count == 0 else 5,
            )
        )
    return gaps


def content_gap_rate(matches: Sequence[TreatmentMatch], treatments: Sequence[str]) -> int:
    """Percentage of treatments with insufficient coverage."""
    if not treatments:
        return 0
    gaps = treatment_gaps(matches, treatments)
    return round_half_up(100 * len(gaps) / len(treatments))


def keyword_diversity_index(unique_keyword_count: int, post_count: int) -> int:
    """Unique keywords per post as a percentage, capped at 100."""
    if post_count <= 0:
        return 0
    return min(100, round_half_up(100 * unique_keyword_count / post_count))


def avg_words_per_post(posts: Sequence[Post]) -> int:
    if not posts:
        return 0
    total = sum(count_words(strip_html_tags(post.content)) for post in posts)
    return round_half_up(total / len(posts))


def publication_trend(posts: Sequence[Post], now: datetime | None = None) -> list[PublicationPeriod]:
    """Posts from the last 30 days and from 31 to 90 days ago."""
    current = _utc_now(now)
    recent_start = current - timedelta(days=RECENT_DAYS)
    older_start = current - timedelta(days=OLDER_DAYS)

    recent = 0
    older = 0
    for post in posts:
        published = _as_utc(post.date)
        if published >= recent_start:
            recent += 1
        elif published >= older_start:
            older += 1

    return [
        PublicationPeriod(period="Last 30 days", posts=recent),
        PublicationPeriod(period="31-90 days ago", posts=older),
    ]


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_posts(posts: Sequence[Post], now: datetime | None = None) -> list[MonthlyPostCount]:
    """Post counts for the last twelve calendar months, oldest first."""
    current = _utc_now(now)
    dates = [_as_utc(post.date) for post in posts]

    months: list[MonthlyPostCount] = []
    for offset in range(MONTHS_IN_CHART - 1, -1, -1):
        year, month = _shift_month(current.year, current.month, -offset)
        next_year, next_month = _shift_month(year, month, 1)
        start = datetime(year, month, 1, tzinfo=timezone.utc)
        end = datetime(next_year, next_month, 1, tzinfo=timezone.utc)
        months.append(
            MonthlyPostCount(
                month_label=start.strftime("%b %y"),
                post_count=sum(1 for date in dates if start <= date < end),
            )
        )
    return months


def growth_rate(recent: int, older: int) -> int:
    """Rough period-over-period growth of the last 30 days vs. the 60 before.

    The older window is twice as long, so it is halved before comparing.
    """
    baseline = older / 2
    return round_half_up(100 * (recent - baseline) / (baseline or 1))


def category_stats(posts: Sequence[Post], categories: Sequence[Category]) -> list[CategoryCount]:
    """Posts per category name, most used first."""
    names = {category.id: category.name for category in categories}
    counts: dict[str, int] = {}
    for post in posts:
        for category_id in post.categories:
            name = names.get(category_id)
            if name is not None:
                counts[name] = counts.get(name, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [CategoryCount(name=name, count=count) for name, count in ranked]


def treatment_coverage(
    matches: Sequence[TreatmentMatch],
    post_count: int,
) -> list[TreatmentCoverage]:
    """Treatments with at least one post and their share of the corpus."""
    return [
        TreatmentCoverage(
            treatment=match.treatment,
            post_count=match.frequency,
            percentage=round_half_up(100 * match.frequency / post_count) if post_count else 0,
        )
        for match in matches
        if match.frequency > 0
    ]


def build_dashboard_analytics(
    blog_data: BlogData,
    *,
    wordpress_url: str,
    treatments: Sequence[str],
    now: datetime | None = None,
    top_keyword_limit: int = 20,
) -> DashboardAnalytics:
    """Compute the full dashboard snapshot for one ingestion run."""
    current = _utc_now(now)
    posts = blog_data.posts
    trend = publication_trend(posts, current)
    frequencies = keyword_frequencies(posts, blog_data.keywords)

    return DashboardAnalytics(
        wordpress_url=wordpress_url,
        total_posts=len(posts),
        total_keywords=len(blog_data.keywords),
        avg_words_per_post=avg_words_per_post(posts),
        growth_rate=growth_rate(trend[0].posts, trend[1].posts),
        keyword_diversity_score=keyword_diversity_index(len(blog_data.keywords), len(posts)),
        content_gap_rate=content_gap_rate(blog_data.treatment_matches, treatments),
        publication_trend=trend,
        monthly_posts=monthly_posts(posts, current),
        top_keywords=[
            KeywordCount(keyword=keyword, frequency=frequency)
            for keyword, frequency in top_keywords(frequencies, top_keyword_limit)
        ],
        category_stats=category_stats(posts, blog_data.categories),
        treatment_coverage=treatment_coverage(blog_data.treatment_matches, len(posts)),
        last_updated=current,
    )
