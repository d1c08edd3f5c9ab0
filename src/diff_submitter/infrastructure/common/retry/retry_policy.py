from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from diff_submitter.core.application.ports.common.exceptions import ReviewServiceError

_T = TypeVar("_T")

logger = structlog.get_logger()


def _retryable(exc: BaseException) -> bool:
    return isinstance(exc, ReviewServiceError) and exc.retryable


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Retrying review service call",
        processing_retries=state.attempt_number,
        error_type=type(error).__name__ if error else None,
        error_details=str(error) if error else None,
        error_retryable=True,
    )


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 1  # Default: Fail fast (1 attempt, 0 retries)
    initial_wait: float = 0.25
    max_wait: float = 5.0

    async def run(self, fn: Callable[[], Awaitable[_T]]) -> _T:
        """Await ``fn()`` until it succeeds, a non-retryable error occurs or attempts run out."""
        async for attempt in self._retrying():
            with attempt:
                return await fn()
        raise AssertionError("unreachable: AsyncRetrying reraises the last error")

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception(_retryable),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.initial_wait, max=self.max_wait),
            before_sleep=_log_retry,
            reraise=True,
        )
