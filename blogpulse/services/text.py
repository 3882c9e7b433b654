"""Plain-text helpers for rendered WordPress HTML."""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]*>")
_NUMERIC_ENTITY_RE = re.compile(r"&#\d+;")
_NAMED_ENTITY_RE = re.compile(r"&[a-zA-Z]+;")
_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\b\w+\b")

# Only these entities are decoded; every other entity is dropped.
_DECODED_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)


def strip_html_tags(html: str) -> str:
    """Remove tags, decode a few common entities and collapse whitespace.

    The tag pattern is non-validating: malformed markup such as an unclosed
    ``<`` swallows text up to the next ``>``.
    """
    if not html:
        return ""

    text = _TAG_RE.sub("", html)
    for entity, replacement in _DECODED_ENTITIES:
        text = text.replace(entity, replacement)
    text = _NUMERIC_ENTITY_RE.sub("", text)
    text = _NAMED_ENTITY_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def tokenize(text: str) -> list[str]:
    """Split text on word boundaries."""
    return _WORD_RE.findall(text)


def count_words(text: str) -> int:
    """Count whitespace-separated words, ignoring empty tokens."""
    return len([word for word in text.split() if word])
