"""Bounded exponential-backoff retry for upstream HTTP calls."""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, FrozenSet, Optional, TypeVar

import httpx
from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig(BaseModel):
    """Configuration for retrying transient upstream failures."""

    max_attempts: int = Field(default=3, ge=1, description="Total attempts including the first")
    base_delay: float = Field(default=1.0, description="Delay before the first retry in seconds")
    max_delay: float = Field(default=10.0, description="Upper bound for a single delay in seconds")
    max_jitter: float = Field(default=0.5, description="Upper bound for random jitter in seconds")
    transient_status_codes: FrozenSet[int] = Field(
        default=frozenset({429, 503}),
        description="HTTP status codes worth retrying",
    )


class RetryPolicy:
    """Retries a single upstream call on transient HTTP status codes.

    Only ``httpx.HTTPStatusError`` with a status in
    ``transient_status_codes`` is retried. Every other exception, and the
    last transient one once attempts run out, propagates to the caller.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "upstream",
    ):
        """Initialize the policy.

        Args:
            config: Retry configuration
            sleep: Awaitable sleep used between attempts
            name: Label used in log messages
        """
        self._config = config or RetryConfig()
        self._sleep = sleep
        self._name = name

    @property
    def config(self) -> RetryConfig:
        """Get the retry configuration."""
        return self._config

    def is_transient(self, error: BaseException) -> bool:
        """Check whether an error should be retried."""
        return (
            isinstance(error, httpx.HTTPStatusError)
            and error.response.status_code in self._config.transient_status_codes
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given zero-based failed attempt.

        ``base * 2**attempt`` plus random jitter, capped at ``max_delay``.
        """
        delay = self._config.base_delay * (2 ** attempt)
        jitter = random.uniform(0, self._config.max_jitter)
        return min(delay + jitter, self._config.max_delay)

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.backoff_delay(retry_state.attempt_number - 1)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        status = error.response.status_code if isinstance(error, httpx.HTTPStatusError) else "?"
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"⚠️ {self._name} API error {status}, retrying in {delay * 1000:.0f}ms "
            f"(attempt {retry_state.attempt_number}/{self._config.max_attempts})"
        )

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Call ``func`` with retries.

        Args:
            func: Coroutine function performing one upstream request
            *args: Positional arguments for ``func``
            **kwargs: Keyword arguments for ``func``

        Returns:
            Whatever ``func`` returns on its first successful attempt

        Raises:
            httpx.HTTPStatusError: Transient error after the last attempt
            Exception: Any non-transient error, immediately
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(self.is_transient),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(func, *args, **kwargs)
