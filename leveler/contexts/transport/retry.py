"""
Retry policy for report API calls.

- Client errors (4xx) are never retried; they surface immediately
- Server errors (5xx), network errors and unclassified errors are retried
- Task cancellation is never retried; it propagates at once
- At most max_retries retries, waiting min(base * 2**attempt, max) between them
  (1s, 2s, 4s, ... capped at 30s with the default settings)

When retries run out the last error is re-raised unchanged.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from omegaconf import DictConfig
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from leveler.contexts.transport.errors import is_client_error
from leveler.contexts.transport.logger import log_retry_scheduled
from leveler.utils.settings import load_settings

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff parameters.

    Attributes:
        max_retries: Retries after the first attempt
        base_delay_ms: Delay before the first retry
        max_delay_ms: Upper bound for any single delay
    """

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000

    @classmethod
    def from_settings(cls, settings: Optional[DictConfig] = None) -> "RetryPolicy":
        if settings is None:
            settings = load_settings()
        return cls(
            max_retries=settings.retry.max_retries,
            base_delay_ms=settings.retry.base_delay_ms,
            max_delay_ms=settings.retry.max_delay_ms,
        )

    def delay_ms(self, attempt: int) -> int:
        """Delay before retry number attempt (0 for the first retry)."""
        return min(self.base_delay_ms * 2**attempt, self.max_delay_ms)


def should_retry(error: BaseException) -> bool:
    """
    Everything except client errors is worth another attempt.

    BaseExceptions such as asyncio.CancelledError are never retried.
    """
    return isinstance(error, Exception) and not is_client_error(error)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    log_retry_scheduled(
        retry_state.attempt_number,
        retry_state.next_action.sleep,
        retry_state.outcome.exception(),
    )


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await operation, retrying transient failures per policy.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Backoff parameters (defaults to settings)
        sleep: Awaitable sleep used between attempts (seconds)

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The last error, when it is not retryable or retries ran out
    """
    if policy is None:
        policy = RetryPolicy.from_settings()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(
            multiplier=policy.base_delay_ms / 1000, max=policy.max_delay_ms / 1000
        ),
        retry=retry_if_exception(should_retry),
        before_sleep=_log_before_sleep,
        sleep=sleep,
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            result = await operation()
    return result
