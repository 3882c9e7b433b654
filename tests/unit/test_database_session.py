"""Unit tests for database session commit/rollback behavior."""

from __future__ import annotations

from typing import Any

import pytest

from blogpulse.core.database import get_session, get_session_context


class _FakeSessionContextManager:
    def __init__(self, session: "_FakeSession") -> None:
        self._session = session

    async def __aenter__(self) -> "_FakeSession":
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        return None


class _FakeSessionMaker:
    def __init__(self, session: "_FakeSession") -> None:
        self._session = session

    def __call__(self) -> _FakeSessionContextManager:
        return _FakeSessionContextManager(self._session)


class _FakeSession:
    def __init__(self) -> None:
        self.commit_calls = 0
        self.rollback_calls = 0
        self.rollback_error: Exception | None = None

    async def commit(self) -> None:
        self.commit_calls += 1

    async def rollback(self) -> None:
        self.rollback_calls += 1
        if self.rollback_error is not None:
            raise self.rollback_error


@pytest.fixture
def session(monkeypatch: pytest.MonkeyPatch) -> _FakeSession:
    fake = _FakeSession()
    monkeypatch.setattr("blogpulse.core.database.async_session_maker", _FakeSessionMaker(fake))
    return fake


@pytest.mark.asyncio
async def test_session_context_commits_on_success(session: _FakeSession) -> None:
    async with get_session_context() as yielded:
        assert yielded is session

    assert session.commit_calls == 1
    assert session.rollback_calls == 0


@pytest.mark.asyncio
async def test_session_context_rolls_back_and_reraises(session: _FakeSession) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        async with get_session_context():
            raise RuntimeError("boom")

    assert session.commit_calls == 0
    assert session.rollback_calls == 1


@pytest.mark.asyncio
async def test_failed_rollback_keeps_original_error(session: _FakeSession) -> None:
    session.rollback_error = ConnectionError("connection closed")

    with pytest.raises(RuntimeError, match="boom"):
        async with get_session_context():
            raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_dependency_session_commits_after_request(session: _FakeSession) -> None:
    generator = get_session()
    yielded = await generator.__anext__()

    with pytest.raises(StopAsyncIteration):
        await generator.__anext__()

    assert yielded is session
    assert session.commit_calls == 1


@pytest.mark.asyncio
async def test_dependency_session_rolls_back_on_error(session: _FakeSession) -> None:
    generator = get_session()
    await generator.__anext__()

    with pytest.raises(ValueError):
        await generator.athrow(ValueError("bad request"))

    assert session.commit_calls == 0
    assert session.rollback_calls == 1
