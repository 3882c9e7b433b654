"""Treatment-to-post matching heuristics.

A post covers a treatment when it names the treatment (in its title, or
loosely in its body) and also mentions a locale marker such as "turkey".
The rules are coarse string heuristics and knowingly over- and under-match
in edge cases, e.g. treatments with a single distinguishing word.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from blogpulse.schemas.wordpress import Post, TreatmentMatch
from blogpulse.services.text import strip_html_tags

logger = logging.getLogger(__name__)

_SPECIAL_CHARS_RE = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class MatcherConfig:
    """Tunable inputs of the matching heuristic."""

    locale_suffix: str = " in Turkey"
    locale_markers: tuple[str, ...] = ("turkey", "istanbul")
    # Treatments whose body-only mentions are too noisy to count.
    title_only_treatments: tuple[str, ...] = ("Weight Loss Surgery in Turkey",)


@dataclass(frozen=True, slots=True)
class _PostText:
    post: Post
    title: str
    content: str


def base_phrase(treatment: str, locale_suffix: str) -> str:
    """Drop the trailing locale suffix from a treatment name."""
    if locale_suffix and treatment.endswith(locale_suffix):
        return treatment[: -len(locale_suffix)]
    return treatment


def keyword_variants(treatment: str, locale_suffix: str = " in Turkey") -> list[str]:
    """Lower-cased phrase, its space-normalized form and a special-char-free form."""
    lowered = base_phrase(treatment, locale_suffix).lower().strip()
    variants = [
        lowered,
        _WHITESPACE_RE.sub(" ", lowered),
        _WHITESPACE_RE.sub(" ", _SPECIAL_CHARS_RE.sub(" ", lowered)).strip(),
    ]
    unique: list[str] = []
    for variant in variants:
        if variant and variant not in unique:
            unique.append(variant)
    return unique


def _significant_words(variant: str) -> list[str]:
    return [word for word in variant.split(" ") if len(word) > 2]


def _title_hit(variant: str, title: str) -> bool:
    words = variant.split(" ")
    if len(words) < 2:
        return len(variant) > 3 and variant in title
    significant = _significant_words(variant)
    return bool(significant) and all(word in title for word in significant)


def _content_hit(variant: str, content: str) -> bool:
    words = variant.split(" ")
    if len(words) < 2:
        return len(variant) > 3 and variant in content
    # Counted against all words, so a variant with one significant word never hits.
    present = sum(1 for word in _significant_words(variant) if word in content)
    return present >= min(2, len(words))


def post_matches_treatment(
    title: str,
    content: str,
    treatment: str,
    config: MatcherConfig,
    variants: Sequence[str] | None = None,
) -> bool:
    """Apply the match predicate to an already normalized, lower-cased post."""
    variants = variants or keyword_variants(treatment, config.locale_suffix)
    if not any(marker in title or marker in content for marker in config.locale_markers):
        return False

    if any(_title_hit(variant, title) for variant in variants):
        return True
    if treatment in config.title_only_treatments:
        return False
    return any(_content_hit(variant, content) for variant in variants)


def _normalize_posts(posts: Iterable[Post]) -> list[_PostText]:
    return [
        _PostText(
            post=post,
            title=strip_html_tags(post.title).lower(),
            content=strip_html_tags(post.content).lower(),
        )
        for post in posts
    ]


def analyze_treatment_matches(
    posts: Iterable[Post],
    treatments: Sequence[str],
    config: MatcherConfig | None = None,
) -> list[TreatmentMatch]:
    """Match every treatment against the corpus, most covered first.

    One entry is returned per treatment, including those with no posts.
    Ties keep the order of ``treatments``.
    """
    config = config or MatcherConfig()
    normalized = _normalize_posts(posts)

    matches: list[TreatmentMatch] = []
    for treatment in treatments:
        variants = keyword_variants(treatment, config.locale_suffix)
        matched = [
            item.post
            for item in normalized
            if post_matches_treatment(item.title, item.content, treatment, config, variants)
        ]
        matches.append(TreatmentMatch(treatment=treatment, posts=matched))

    matches.sort(key=lambda match: match.frequency, reverse=True)

    logger.info(
        "Treatment matching complete",
        extra={
            "posts": len(normalized),
            "treatments": len(treatments),
            "covered": sum(1 for match in matches if match.frequency > 0),
        },
    )
    return matches
