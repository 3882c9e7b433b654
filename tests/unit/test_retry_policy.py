"""Unit tests for the retry helper."""

from __future__ import annotations

import pytest

from blogpulse.core.exceptions import ExternalAPIError, RetryableAPIError
from blogpulse.core.retry import RetryPolicy, run_with_retry


class _Recorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def sleep(self, delay: float) -> None:
        self.delays.append(delay)


def test_exponential_backoff_doubles_per_attempt() -> None:
    policy = RetryPolicy.exponential(max_attempts=4)

    assert [policy.delay_after(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]


def test_fixed_backoff_and_invalid_budget() -> None:
    assert RetryPolicy.fixed(max_attempts=2, delay_seconds=15).delay_after(5) == 15.0
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


@pytest.mark.asyncio
async def test_run_with_retry_succeeds_after_transient_failures() -> None:
    recorder = _Recorder()
    attempts: list[int] = []

    async def operation() -> str:
        attempts.append(len(attempts) + 1)
        if len(attempts) < 3:
            raise RetryableAPIError("WordPress", "HTTP 503")
        return "ok"

    result = await run_with_retry(
        operation,
        policy=RetryPolicy.exponential(max_attempts=3),
        operation_name="test_op",
        sleep=recorder.sleep,
    )

    assert result == "ok"
    assert attempts == [1, 2, 3]
    assert recorder.delays == [2.0, 4.0]


@pytest.mark.asyncio
async def test_run_with_retry_raises_last_error_when_budget_spent() -> None:
    recorder = _Recorder()
    calls = 0

    async def operation() -> str:
        nonlocal calls
        calls += 1
        raise RetryableAPIError("WordPress", f"failure {calls}")

    with pytest.raises(RetryableAPIError, match="failure 2"):
        await run_with_retry(
            operation,
            policy=RetryPolicy(max_attempts=2),
            operation_name="test_op",
            sleep=recorder.sleep,
        )

    assert calls == 2
    assert recorder.delays == [0.0]


@pytest.mark.asyncio
async def test_non_retryable_error_is_raised_immediately() -> None:
    recorder = _Recorder()
    calls = 0

    async def operation() -> str:
        nonlocal calls
        calls += 1
        raise ExternalAPIError("WordPress", "bad payload")

    with pytest.raises(ExternalAPIError):
        await run_with_retry(
            operation,
            policy=RetryPolicy(max_attempts=5),
            operation_name="test_op",
            is_retryable=lambda exc: isinstance(exc, RetryableAPIError),
            sleep=recorder.sleep,
        )

    assert calls == 1
    assert recorder.delays == []
