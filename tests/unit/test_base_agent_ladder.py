"""Tests for the BaseAgent primary/secondary model ladder."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any

import pytest
from pydantic import BaseModel
from pydantic_ai.exceptions import UserError

from blogpulse.agents.base_agent import BaseAgent, format_conversation
from blogpulse.core.exceptions import (
    AllModelsExhaustedError,
    ConfigurationError,
    ExternalAPIError,
)
from blogpulse.core.retry import RetryPolicy

PRIMARY = "test:primary"
SECONDARY = "test:secondary"


class DummyInput(BaseModel):
    """Minimal input model for BaseAgent tests."""

    text: str


class DummyAgent(BaseAgent[DummyInput]):
    @property
    def system_prompt(self) -> str:
        return "test"

    def _build_prompt(self, input_data: DummyInput) -> str:
        return f"prompt: {input_data.text}"


class FakePydanticAgent:
    """Scripted stand-in for ``pydantic_ai.Agent``.

    ``script`` maps a model name to a list of outcomes consumed per call:
    a string is returned as output, an exception is raised.
    """

    def __init__(self, script: dict[str, list[Any]]) -> None:
        self.script = {model: list(outcomes) for model, outcomes in script.items()}
        self.calls: list[tuple[str, str]] = []

    def _next(self, model: str) -> Any:
        outcomes = self.script.get(model) or [RuntimeError("no scripted outcome")]
        return outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]

    async def run(self, prompt: str, model: str) -> SimpleNamespace:
        self.calls.append((prompt, model))
        outcome = self._next(model)
        if isinstance(outcome, BaseException):
            raise outcome
        return SimpleNamespace(output=outcome)

    @asynccontextmanager
    async def run_stream(self, prompt: str, model: str) -> AsyncIterator[SimpleNamespace]:
        self.calls.append((prompt, model))
        outcome = self._next(model)
        if isinstance(outcome, BaseException):
            raise outcome

        async def stream_text(delta: bool = False) -> AsyncIterator[str]:
            for chunk in outcome:
                if isinstance(chunk, BaseException):
                    raise chunk
                yield chunk

        yield SimpleNamespace(stream_text=stream_text)


def _agent(
    script: dict[str, list[Any]],
    max_attempts: int = 2,
) -> tuple[DummyAgent, FakePydanticAgent]:
    agent = DummyAgent(
        models=[PRIMARY, SECONDARY],
        retry_policy=RetryPolicy(max_attempts=max_attempts),
    )
    fake = FakePydanticAgent(script)
    agent._agent = fake  # type: ignore[assignment]
    return agent, fake


def test_default_models_come_from_settings() -> None:
    agent = DummyAgent()

    assert agent.models[0] == "google-gla:gemini-2.5-flash"
    assert agent.retry_policy.max_attempts == 3


@pytest.mark.asyncio
async def test_primary_success_uses_single_call() -> None:
    agent, fake = _agent({PRIMARY: ["hello"]})

    assert await agent.run(DummyInput(text="hi")) == "hello"
    assert fake.calls == [("prompt: hi", PRIMARY)]


@pytest.mark.asyncio
async def test_secondary_model_used_after_primary_exhausted() -> None:
    agent, fake = _agent({PRIMARY: [RuntimeError("overloaded")], SECONDARY: ["from secondary"]})

    assert await agent.run(DummyInput(text="hi")) == "from secondary"
    assert [model for _, model in fake.calls] == [PRIMARY, PRIMARY, SECONDARY]


@pytest.mark.asyncio
async def test_empty_output_counts_as_failure() -> None:
    agent, fake = _agent({PRIMARY: ["   ", "second try"]})

    assert await agent.run(DummyInput(text="hi")) == "second try"
    assert len(fake.calls) == 2


@pytest.mark.asyncio
async def test_all_models_failing_raises_exhausted() -> None:
    agent, fake = _agent(
        {PRIMARY: [RuntimeError("down")], SECONDARY: [RuntimeError("down")]},
        max_attempts=3,
    )

    with pytest.raises(AllModelsExhaustedError) as exc_info:
        await agent.run(DummyInput(text="hi"))

    assert exc_info.value.models == [PRIMARY, SECONDARY]
    assert len(fake.calls) == 6


@pytest.mark.asyncio
async def test_user_error_is_not_retried() -> None:
    agent, fake = _agent({PRIMARY: [UserError("unknown provider")]})

    with pytest.raises(ConfigurationError):
        await agent.run(DummyInput(text="hi"))

    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_run_validated_retries_rejected_output() -> None:
    agent, fake = _agent({PRIMARY: ["not a number", "42"]})

    result = await agent.run_validated(DummyInput(text="hi"), int)

    assert result == 42
    assert len(fake.calls) == 2


@pytest.mark.asyncio
async def test_stream_yields_chunks_from_first_working_model() -> None:
    agent, fake = _agent(
        {PRIMARY: [RuntimeError("down")], SECONDARY: [["Hel", "lo"]]},
        max_attempts=1,
    )

    chunks = [chunk async for chunk in agent.stream(DummyInput(text="hi"))]

    assert chunks == ["Hel", "lo"]
    assert [model for _, model in fake.calls] == [PRIMARY, SECONDARY]


@pytest.mark.asyncio
async def test_stream_failure_after_first_chunk_is_not_retried() -> None:
    agent, fake = _agent({PRIMARY: [["partial", RuntimeError("connection lost")]]})

    chunks: list[str] = []
    with pytest.raises(ExternalAPIError, match="stream interrupted"):
        async for chunk in agent.stream(DummyInput(text="hi")):
            chunks.append(chunk)

    assert chunks == ["partial"]
    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_stream_raises_exhausted_when_no_model_starts() -> None:
    agent, _ = _agent({PRIMARY: [RuntimeError("down")], SECONDARY: [RuntimeError("down")]})

    with pytest.raises(AllModelsExhaustedError):
        async for _chunk in agent.stream(DummyInput(text="hi")):
            pass


def test_format_conversation_renders_roles() -> None:
    transcript = format_conversation(
        [
            {"role": "user", "content": "How many posts?"},
            {"role": "assistant", "content": "There are 12."},
            {"role": "system", "content": "ignored"},
        ]
    )

    assert transcript == "User: How many posts?\n\nAssistant: There are 12."
