"""Tests for the analyze_blog CLI."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from blogpulse.schemas.analytics import DashboardAnalytics
from blogpulse.schemas.wordpress import BlogData, Post
from blogpulse.services.ingestion import IngestionConfig
from scripts import analyze_blog as cli


def _blog_data(with_posts: bool = True) -> BlogData:
    posts = (
        [
            Post(
                id=1,
                title="Dental implants in Turkey",
                content="<p>Implant prices</p>",
                date=datetime(2026, 10, 1, tzinfo=timezone.utc),
            )
        ]
        if with_posts
        else []
    )
    return BlogData(posts=posts, keywords=["dental", "implant", "implants", "prices", "turkey"])


def _fake_ingestion(monkeypatch: pytest.MonkeyPatch, blog_data: BlogData) -> list[IngestionConfig]:
    seen: list[IngestionConfig] = []

    async def fake_get_blog_data(config: IngestionConfig) -> BlogData:
        seen.append(config)
        return blog_data

    monkeypatch.setattr(cli, "get_blog_data", fake_get_blog_data)
    return seen


def test_parse_args_defaults() -> None:
    args = cli.parse_args([])

    assert args.url == cli.settings.wordpress_url
    assert args.treatments is None
    assert args.json is False
    assert args.save_for is None


def test_summary_output(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    seen = _fake_ingestion(monkeypatch, _blog_data())

    args = cli.parse_args(["--url", "https://blog.example.com/", "--page-size", "20"])

    code = asyncio.run(cli.async_main(args))

    fields = dict(
        (key.strip(), value.strip())
        for key, _, value in (line.partition(":") for line in capsys.readouterr().out.splitlines())
    )
    assert code == 0
    assert fields["Posts"] == "1"
    assert fields["Site"] == "https://blog.example.com"
    assert seen[0].page_size == 20


def test_json_output_with_custom_treatments(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    treatments = tmp_path / "treatments.yaml"
    treatments.write_text("treatments:\n  - Dental Implants in Turkey\n", encoding="utf-8")
    seen = _fake_ingestion(monkeypatch, _blog_data())

    code = asyncio.run(cli.async_main(cli.parse_args(["--treatments", str(treatments), "--json"])))

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["total_posts"] == 1
    assert seen[0].treatments == ["Dental Implants in Turkey"]


def test_invalid_arguments_exit_with_2(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _fake_ingestion(monkeypatch, _blog_data())

    missing = asyncio.run(
        cli.async_main(cli.parse_args(["--treatments", str(tmp_path / "missing.yaml")]))
    )
    bad_page_size = asyncio.run(cli.async_main(cli.parse_args(["--page-size", "0"])))

    assert missing == 2
    assert bad_page_size == 2
    assert "Configuration error" in capsys.readouterr().err


def test_empty_blog_exits_with_1(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_ingestion(monkeypatch, _blog_data(with_posts=False))

    assert asyncio.run(cli.async_main(cli.parse_args([]))) == 1


class _RecordingSession:
    def __init__(self) -> None:
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        return None


@pytest.fixture
def saved(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Route snapshot persistence to an in-memory session and repository."""
    record: dict[str, Any] = {"rows": [], "closed": 0}
    session = _RecordingSession()
    record["session"] = session

    @asynccontextmanager
    async def fake_session_maker() -> AsyncIterator[_RecordingSession]:
        yield session

    class RecordingRepository:
        def __init__(self, db_session: _RecordingSession) -> None:
            assert db_session is session

        async def upsert(self, user_id: str, analytics: DashboardAnalytics) -> None:
            record["rows"].append((user_id, analytics.wordpress_url, analytics.total_posts))

    async def fake_close_db() -> None:
        record["closed"] += 1

    monkeypatch.setattr("blogpulse.core.database.async_session_maker", fake_session_maker)
    monkeypatch.setattr(cli, "AnalyticsRepository", RecordingRepository)
    monkeypatch.setattr(cli, "close_db", fake_close_db)
    return record


def test_save_for_stores_snapshot(monkeypatch: pytest.MonkeyPatch, saved: dict[str, Any]) -> None:
    _fake_ingestion(monkeypatch, _blog_data())

    args = cli.parse_args(["--url", "https://blog.example.com", "--save-for", "user-7"])
    code = asyncio.run(cli.async_main(args))

    assert code == 0
    assert saved["rows"] == [("user-7", "https://blog.example.com", 1)]
    assert saved["session"].commits == 1
    assert saved["closed"] == 1


def test_empty_blog_is_not_saved(monkeypatch: pytest.MonkeyPatch, saved: dict[str, Any]) -> None:
    _fake_ingestion(monkeypatch, _blog_data(with_posts=False))

    code = asyncio.run(cli.async_main(cli.parse_args(["--save-for", "user-7"])))

    assert code == 1
    assert saved["rows"] == []
    assert saved["closed"] == 0
