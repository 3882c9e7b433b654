"""Unit tests for keyword extraction and frequency counting."""

from __future__ import annotations

from datetime import datetime, timezone

from blogpulse.schemas.wordpress import Post
from blogpulse.services.keywords import (
    extract_keywords,
    is_keyword,
    keyword_frequencies,
    top_keywords,
)


def _post(post_id: int, title: str, content: str = "") -> Post:
    return Post(
        id=post_id,
        title=title,
        content=content,
        date=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def test_extract_keywords_filters_short_tokens_and_stop_words() -> None:
    posts = [_post(1, "The Best Hair Clinic", "<p>This clinic would help you</p>")]

    keywords = extract_keywords(posts)

    assert keywords == ["best", "clinic", "hair", "help"]
    assert "this" not in keywords
    assert "would" not in keywords
    assert "you" not in keywords


def test_extract_keywords_is_sorted_and_deduplicated() -> None:
    posts = [
        _post(1, "Zirconia veneers", "veneers guide"),
        _post(2, "Veneers aftercare", "<b>guide</b>"),
    ]

    assert extract_keywords(posts) == ["aftercare", "guide", "veneers", "zirconia"]


def test_extract_keywords_on_empty_corpus() -> None:
    assert extract_keywords([]) == []


def test_is_keyword_boundaries() -> None:
    assert is_keyword("hair")
    assert not is_keyword("fue")
    assert not is_keyword("these")


def test_keyword_frequencies_counts_whole_tokens_and_keeps_unseen() -> None:
    posts = [
        _post(1, "Hair transplant", "hair hair haircut"),
        _post(2, "Dental", "<p>Hair</p>"),
    ]

    frequencies = keyword_frequencies(posts, ["hair", "haircut", "missing"])

    assert frequencies == {"hair": 4, "haircut": 1, "missing": 0}
    assert all(count >= 0 for count in frequencies.values())


def test_top_keywords_orders_by_count_then_alphabetically() -> None:
    ranked = top_keywords({"beta": 2, "alpha": 2, "gamma": 5, "delta": 1}, limit=3)

    assert ranked == [("gamma", 5), ("alpha", 2), ("beta", 2)]
