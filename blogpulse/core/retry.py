"""Retry policy and helper for transient upstream failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How many times to attempt an operation and how long to wait in between.

    ``backoff`` receives the 1-based number of the attempt that just failed and
    returns the delay in seconds before the next attempt.
    """

    max_attempts: int = 3
    backoff: Callable[[int], float] = lambda attempt: 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def exponential(cls, max_attempts: int = 3, base: float = 2.0) -> RetryPolicy:
        """Wait ``base ** attempt`` seconds after each failed attempt."""
        return cls(max_attempts=max_attempts, backoff=lambda attempt: base**attempt)

    @classmethod
    def fixed(cls, max_attempts: int = 3, delay_seconds: float = 15.0) -> RetryPolicy:
        """Wait the same delay after each failed attempt."""
        return cls(max_attempts=max_attempts, backoff=lambda attempt: delay_seconds)

    def delay_after(self, attempt: int) -> float:
        return max(0.0, float(self.backoff(attempt)))


def _always_retry(exc: Exception) -> bool:
    return True


async def run_with_retry(
    operation: Callable[[], Awaitable[_ResultT]],
    *,
    policy: RetryPolicy,
    operation_name: str,
    is_retryable: Callable[[Exception], bool] = _always_retry,
    log_context: Mapping[str, Any] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> _ResultT:
    """Run an async operation, retrying retryable failures under ``policy``.

    The last exception propagates once the attempt budget is spent or when a
    failure is not retryable.
    """
    context = dict(log_context or {})
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if not is_retryable(exc) or attempt == policy.max_attempts:
                logger.warning(
                    "Operation failed; giving up",
                    extra={
                        **context,
                        "operation": operation_name,
                        "attempt": attempt,
                        "max_attempts": policy.max_attempts,
                        "error": str(exc),
                    },
                )
                raise
            delay = policy.delay_after(attempt)
            logger.warning(
                "Transient failure; retrying operation",
                extra={
                    **context,
                    "operation": operation_name,
                    "attempt": attempt,
                    "max_attempts": policy.max_attempts,
                    "delay_s": delay,
                    "error": str(exc),
                },
            )
            await sleep(delay)

    raise RuntimeError(f"Retry loop exhausted unexpectedly for operation: {operation_name}")
