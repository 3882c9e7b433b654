"""Unit tests for the log line formatter."""

from __future__ import annotations

import json
import logging

from blogpulse.core.logging import JSONExtrasFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="blogpulse.ingestion",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Blog ingestion finished",
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_extras_are_appended_as_json() -> None:
    line = JSONExtrasFormatter().format(_record(total_posts=112, base_url="https://example.com"))

    prefix, _, extras = line.partition(" {")
    assert prefix.endswith("| INFO     | blogpulse.ingestion | Blog ingestion finished")
    assert json.loads("{" + extras) == {"total_posts": 112, "base_url": "https://example.com"}


def test_line_without_extras_has_no_json() -> None:
    line = JSONExtrasFormatter().format(_record())

    assert line.endswith("| blogpulse.ingestion | Blog ingestion finished")


def test_unencodable_extras_are_kept() -> None:
    loop: dict[str, object] = {}
    loop["self"] = loop

    line = JSONExtrasFormatter().format(_record(state=loop))

    assert "'state'" in line
