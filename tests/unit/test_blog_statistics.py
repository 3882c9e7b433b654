"""Unit tests for aggregate blog statistics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from blogpulse.schemas.wordpress import BlogData, Category, Post, TreatmentMatch
from blogpulse.services.blog_statistics import (
    avg_words_per_post,
    build_dashboard_analytics,
    category_stats,
    content_gap_rate,
    growth_rate,
    keyword_diversity_index,
    monthly_posts,
    publication_trend,
    round_half_up,
    treatment_coverage,
    treatment_gaps,
)
from blogpulse.services.keywords import extract_keywords
from blogpulse.services.treatment_matcher import analyze_treatment_matches

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _post(
    post_id: int,
    title: str = "Post",
    content: str = "",
    date: datetime = NOW,
    categories: tuple[int, ...] = (),
) -> Post:
    return Post(id=post_id, title=title, content=content, date=date, categories=categories)


def _match(treatment: str, count: int) -> TreatmentMatch:
    return TreatmentMatch(treatment=treatment, posts=[_post(i) for i in range(count)])


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (2.49, 2), (0.5, 1), (-1.5, -1), (7.0, 7)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_treatment_gaps_use_two_post_threshold() -> None:
    matches = [_match("A", 0), _match("B", 1), _match("C", 2)]

    gaps = treatment_gaps(matches, ["A", "B", "C", "D"])

    assert [(g.treatment, g.current_post_count, g.gap_level, g.priority) for g in gaps] == [
        ("A", 0, "high", 10),
        ("B", 1, "medium", 5),
        ("D", 0, "high", 10),
    ]


def test_content_gap_rate_bounds() -> None:
    matches = [_match("A", 5), _match("B", 0)]

    assert content_gap_rate(matches, []) == 0
    assert content_gap_rate(matches, ["A"]) == 0
    assert content_gap_rate(matches, ["B"]) == 100
    assert content_gap_rate(matches, ["A", "B"]) == 50
    assert content_gap_rate(matches, ["A", "B", "C"]) == 67


def test_example_scenario_gap_rate() -> None:
    posts = [
        _post(1, "Hair Transplant in Istanbul"),
        _post(2, "Dental Implants Guide"),
        _post(3, "Weight Loss After Surgery"),
        _post(4, "Hair transplant recovery in Turkey"),
    ]
    treatments = ["Hair Transplant in Turkey", "Rhinoplasty in Turkey"]

    matches = analyze_treatment_matches(posts, treatments)

    assert content_gap_rate(matches, treatments) == 50


def test_keyword_diversity_index_is_capped_and_safe_on_empty_corpus() -> None:
    assert keyword_diversity_index(0, 0) == 0
    assert keyword_diversity_index(3, 4) == 75
    assert keyword_diversity_index(500, 3) == 100


def test_avg_words_per_post_uses_stripped_content() -> None:
    posts = [_post(1, content="<p>one two three</p>"), _post(2, content="four")]

    assert avg_words_per_post(posts) == 2
    assert avg_words_per_post([]) == 0


def test_publication_trend_windows_are_inclusive_at_start() -> None:
    posts = [
        _post(1, date=NOW - timedelta(days=1)),
        _post(2, date=NOW - timedelta(days=30)),
        _post(3, date=NOW - timedelta(days=31)),
        _post(4, date=NOW - timedelta(days=90)),
        _post(5, date=NOW - timedelta(days=91)),
    ]

    trend = publication_trend(posts, NOW)

    assert [(p.period, p.posts) for p in trend] == [
        ("Last 30 days", 2),
        ("31-90 days ago", 2),
    ]


def test_publication_trend_treats_naive_dates_as_utc() -> None:
    posts = [_post(1, date=(NOW - timedelta(days=2)).replace(tzinfo=None))]

    assert publication_trend(posts, NOW)[0].posts == 1


def test_monthly_posts_covers_twelve_months_oldest_first() -> None:
    posts = [
        _post(1, date=datetime(2026, 10, 1, tzinfo=timezone.utc)),
        _post(2, date=datetime(2026, 10, 18, tzinfo=timezone.utc)),
        _post(3, date=datetime(2025, 11, 1, tzinfo=timezone.utc)),
        _post(4, date=datetime(2025, 10, 31, 23, 59, tzinfo=timezone.utc)),
    ]

    months = monthly_posts(posts, NOW)

    assert len(months) == 12
    assert months[0].month_label == "Nov 25"
    assert months[-1].month_label == "Oct 26"
    assert months[0].post_count == 1
    assert months[-1].post_count == 2
    assert sum(m.post_count for m in months) == 3


@pytest.mark.parametrize(
    ("recent", "older", "expected"),
    [(10, 10, 100), (0, 0, 0), (3, 0, 300), (1, 4, -50), (2, 4, 0)],
)
def test_growth_rate(recent: int, older: int, expected: int) -> None:
    assert growth_rate(recent, older) == expected


def test_category_stats_counts_known_categories_only() -> None:
    posts = [
        _post(1, categories=(1, 2)),
        _post(2, categories=(2,)),
        _post(3, categories=(99,)),
    ]
    categories = [Category(id=1, name="Hair"), Category(id=2, name="Dental")]

    stats = category_stats(posts, categories)

    assert [(s.name, s.count) for s in stats] == [("Dental", 2), ("Hair", 1)]


def test_treatment_coverage_skips_uncovered_treatments() -> None:
    coverage = treatment_coverage([_match("A", 1), _match("B", 0)], post_count=3)

    assert [(c.treatment, c.post_count, c.percentage) for c in coverage] == [("A", 1, 33)]
    assert treatment_coverage([_match("A", 1)], post_count=0)[0].percentage == 0


def test_build_dashboard_analytics_snapshot() -> None:
    posts = [
        _post(1, "Hair transplant in Turkey", "<p>Hair clinics</p>", NOW - timedelta(days=3), (1,)),
        _post(2, "Dental veneers Istanbul", "<p>Veneers guide</p>", NOW - timedelta(days=40), (2,)),
    ]
    treatments = ["Hair Transplant in Turkey", "Veneers in Turkey", "Rhinoplasty in Turkey"]
    blog_data = BlogData(
        posts=posts,
        categories=[Category(id=1, name="Hair"), Category(id=2, name="Dental")],
        keywords=extract_keywords(posts),
        treatment_matches=analyze_treatment_matches(posts, treatments),
    )

    analytics = build_dashboard_analytics(
        blog_data,
        wordpress_url="https://example.com",
        treatments=treatments,
        now=NOW,
    )

    assert analytics.total_posts == 2
    assert analytics.total_keywords == len(blog_data.keywords)
    assert analytics.content_gap_rate == 100
    assert 0 <= analytics.keyword_diversity_score <= 100
    assert [p.posts for p in analytics.publication_trend] == [1, 1]
    assert analytics.growth_rate == 100
    assert {c.treatment for c in analytics.treatment_coverage} == {
        "Hair Transplant in Turkey",
        "Veneers in Turkey",
    }
    assert analytics.top_keywords[0].keyword == "hair"
    assert analytics.last_updated == NOW
