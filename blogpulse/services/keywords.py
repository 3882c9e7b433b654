"""Keyword extraction and frequency counting over a post corpus."""

from __future__ import annotations

from collections.abc import Iterable

from blogpulse.schemas.wordpress import Post
from blogpulse.services.text import strip_html_tags, tokenize

MIN_KEYWORD_LENGTH = 4

STOP_WORDS = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
        "by", "an", "a", "is", "are", "was", "were", "be", "been", "have", "has",
        "had", "do", "does", "did", "will", "would", "could", "should", "may",
        "might", "must", "can", "this", "that", "these", "those",
    }
)


def post_text(post: Post) -> str:
    """Lower-cased title plus tag-stripped content used for keyword work."""
    return f"{post.title} {strip_html_tags(post.content)}".lower()


def is_keyword(token: str) -> bool:
    return len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS


def extract_keywords(posts: Iterable[Post]) -> list[str]:
    """Return the sorted set of candidate keywords found across all posts."""
    keywords: set[str] = set()
    for post in posts:
        keywords.update(token for token in tokenize(post_text(post)) if is_keyword(token))
    return sorted(keywords)


def keyword_frequencies(posts: Iterable[Post], keywords: Iterable[str]) -> dict[str, int]:
    """Count whole-word occurrences of each keyword across the corpus.

    Every requested keyword is present in the result, with 0 when unseen.
    """
    frequencies = {keyword: 0 for keyword in keywords}
    if not frequencies:
        return frequencies

    for post in posts:
        for token in tokenize(post_text(post)):
            if token in frequencies:
                frequencies[token] += 1
    return frequencies


def top_keywords(frequencies: dict[str, int], limit: int = 20) -> list[tuple[str, int]]:
    """Most frequent keywords first; ties keep alphabetical order."""
    ranked = sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]
