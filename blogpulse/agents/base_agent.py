"""Base class for Pydantic AI text agents with a primary/secondary model ladder."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Generic, TypeVar, cast

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.exceptions import UserError

from blogpulse.config import settings
from blogpulse.core.exceptions import (
    AllModelsExhaustedError,
    ConfigurationError,
    ExternalAPIError,
)
from blogpulse.core.retry import RetryPolicy, run_with_retry

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
ResultT = TypeVar("ResultT")


def _is_retryable(exc: Exception) -> bool:
    # Misconfiguration (unknown provider, missing key) will not heal on retry.
    return not isinstance(exc, UserError | ConfigurationError)


class BaseAgent(ABC, Generic[InputT]):
    """Abstract base class for text-producing agents.

    Each agent should:
    1. Define the system_prompt property
    2. Implement _build_prompt to construct the user prompt

    Every call walks the model ladder: the primary model is tried under the
    retry policy, then the secondary model under the same policy. When both
    are exhausted ``AllModelsExhaustedError`` is raised and the caller falls
    back to locally generated content.
    """

    temperature: float = 0.7

    def __init__(
        self,
        models: Sequence[str] | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._models = list(models) if models else settings.get_llm_models()
        if not self._models:
            raise ConfigurationError("At least one LLM model must be configured")
        self.retry_policy = retry_policy or RetryPolicy.fixed(
            max_attempts=settings.llm_max_attempts,
            delay_seconds=settings.llm_retry_delay_seconds,
        )
        self._agent: Agent[None, str] | None = None

        logger.info(
            "Agent initialized",
            extra={
                "agent": self.__class__.__name__,
                "models": self._models,
                "max_attempts": self.retry_policy.max_attempts,
            },
        )

    @property
    def models(self) -> list[str]:
        return list(self._models)

    @property
    def agent(self) -> Agent[None, str]:
        """Lazily initialize and return the Pydantic AI agent."""
        if self._agent is None:
            try:
                self._agent = cast(
                    Agent[None, str],
                    Agent(
                        model=self._models[0],
                        output_type=str,
                        system_prompt=self.system_prompt,
                        model_settings={
                            "temperature": self.temperature,
                            "timeout": settings.llm_timeout,
                        },
                    ),
                )
            except UserError as e:
                raise ConfigurationError(f"LLM agent could not be created: {e}") from e
        agent = self._agent
        assert agent is not None
        return agent

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """System prompt for the agent."""
        pass

    @abstractmethod
    def _build_prompt(self, input_data: InputT) -> str:
        """Build the user prompt from input data."""
        pass

    async def _run_ladder(
        self,
        call: Callable[[str], Awaitable[ResultT]],
        operation_name: str,
    ) -> ResultT:
        agent_name = self.__class__.__name__
        for model in self._models:
            async def attempt(model: str = model) -> ResultT:
                return await call(model)

            try:
                return await run_with_retry(
                    attempt,
                    policy=self.retry_policy,
                    operation_name=operation_name,
                    is_retryable=_is_retryable,
                    log_context={"agent": agent_name, "model": model},
                )
            except UserError as e:
                raise ConfigurationError(f"LLM model {model} is misconfigured: {e}") from e
            except ConfigurationError:
                raise
            except Exception as e:
                logger.warning(
                    "Model exhausted its retries; moving to next model",
                    extra={"agent": agent_name, "model": model, "error": str(e)},
                )

        raise AllModelsExhaustedError(self._models)

    async def _run_text(self, prompt: str, model: str) -> str:
        t0 = time.perf_counter()
        result = await self.agent.run(prompt, model=model)
        output = result.output
        if not isinstance(output, str) or not output.strip():
            raise ExternalAPIError("Completion", f"empty response from {model}")

        logger.info(
            "Agent run completed",
            extra={
                "agent": self.__class__.__name__,
                "model": model,
                "duration_s": round(time.perf_counter() - t0, 2),
                "response_length": len(output),
            },
        )
        return output

    async def run(self, input_data: InputT) -> str:
        """Return the model's text answer for ``input_data``."""
        prompt = self._build_prompt(input_data)
        logger.info(
            "Prompt built, sending to LLM",
            extra={"agent": self.__class__.__name__, "prompt_length": len(prompt)},
        )
        return await self._run_ladder(
            lambda model: self._run_text(prompt, model),
            operation_name="agent_run",
        )

    async def run_validated(
        self,
        input_data: InputT,
        validate: Callable[[str], ResultT],
    ) -> ResultT:
        """Like ``run`` but a response rejected by ``validate`` counts as a failed attempt."""
        prompt = self._build_prompt(input_data)

        async def call(model: str) -> ResultT:
            return validate(await self._run_text(prompt, model))

        return await self._run_ladder(call, operation_name="agent_run_validated")

    async def stream(self, input_data: InputT) -> AsyncIterator[str]:
        """Yield text chunks as they arrive.

        Models and attempts are only switched before the first chunk; a
        failure mid-stream is raised since delivered text cannot be recalled.
        """
        prompt = self._build_prompt(input_data)
        agent_name = self.__class__.__name__

        for model in self._models:
            for attempt in range(1, self.retry_policy.max_attempts + 1):
                emitted = False
                try:
                    async with self.agent.run_stream(prompt, model=model) as result:
                        async for chunk in result.stream_text(delta=True):
                            if chunk:
                                emitted = True
                                yield chunk
                    return
                except UserError as e:
                    raise ConfigurationError(f"LLM model {model} is misconfigured: {e}") from e
                except ConfigurationError:
                    raise
                except Exception as e:
                    if emitted:
                        raise ExternalAPIError("Completion", f"stream interrupted: {e}") from e
                    logger.warning(
                        "Streaming attempt failed",
                        extra={
                            "agent": agent_name,
                            "model": model,
                            "attempt": attempt,
                            "error": str(e),
                        },
                    )
                    if attempt < self.retry_policy.max_attempts:
                        await asyncio.sleep(self.retry_policy.delay_after(attempt))

        raise AllModelsExhaustedError(self._models)


def format_conversation(messages: Sequence[dict[str, str]]) -> str:
    """Flatten ``{role, content}`` turns into a transcript prompt."""
    parts: list[str] = []
    for message in messages:
        role = message.get("role", "user")
        content = message.get("content", "")
        if role == "user":
            parts.append(f"User: {content}")
        elif role in ("assistant", "model"):
            parts.append(f"Assistant: {content}")
    return "\n\n".join(parts)
