"""Bounded retry with deterministic exponential back-off.

:class:`RetryLogic` runs a zero-argument operation up to ``max_retries + 1``
times using ``tenacity``.  Only failures accepted by
:func:`~beeper_desktop.exceptions.is_retryable_error` are retried; anything
else propagates unchanged on first occurrence.  The delay before retry *i*
(0-based) is ``min(base_delay * 2**i, max_delay)`` with no jitter.

Cancellation is cooperative: an optional event is checked before every
attempt and while sleeping between attempts.  The async variant is also
interrupted by ordinary task cancellation.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
)

from .exceptions import RequestCancelledError, RetryExhaustedError, is_retryable_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BASE_DELAY = 0.25
DEFAULT_MAX_DELAY = 10.0


class RetryLogic:
    """Retry policy shared by the sync and async clients.

    Instances hold no per-call state and are safe to share between threads
    and tasks.
    """

    def __init__(
        self,
        max_retries: int,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """Configure the policy.

        Args:
            max_retries: Retries after the first attempt (total attempts is
                ``max_retries + 1``).
            base_delay: Delay in seconds before the first retry.
            max_delay: Upper bound in seconds for any single delay.
            sleep: Blocking sleep used by :meth:`call` when no cancel event
                is supplied; defaults to :func:`time.sleep`.
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def calculate_delay(self, attempt: int) -> float:
        """Return the back-off delay in seconds for retry index *attempt* (0-based)."""
        return min(self.base_delay * (2**attempt), self.max_delay)

    def call(self, fn: Callable[[], T], cancel_event: threading.Event | None = None) -> T:
        """Run *fn* under the retry policy.

        Raises:
            RequestCancelledError: *cancel_event* was set before an attempt or
                during a back-off sleep.
            RetryExhaustedError: Every attempt failed with a retryable error.
                The error is also an instance of the last failure's class.
            Exception: The first non-retryable error raised by *fn*, unchanged.
        """

        def sleep(seconds: float) -> None:
            if cancel_event is None:
                (self._sleep or time.sleep)(seconds)
            elif cancel_event.wait(seconds):
                raise RequestCancelledError()

        retrying = Retrying(sleep=sleep, **self._policy())
        try:
            for attempt in retrying:
                with attempt:
                    if cancel_event is not None and cancel_event.is_set():
                        raise RequestCancelledError()
                    return fn()
        except RetryError as exc:
            raise self._exhausted(exc) from exc.last_attempt.exception()
        raise AssertionError("unreachable")

    async def acall(
        self,
        fn: Callable[[], Awaitable[T]],
        cancel_event: asyncio.Event | None = None,
    ) -> T:
        """Async counterpart of :meth:`call`."""

        async def sleep(seconds: float) -> None:
            if cancel_event is None:
                await asyncio.sleep(seconds)
                return
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                return
            raise RequestCancelledError()

        retrying = AsyncRetrying(sleep=sleep, **self._policy())
        try:
            async for attempt in retrying:
                with attempt:
                    if cancel_event is not None and cancel_event.is_set():
                        raise RequestCancelledError()
                    return await fn()
        except RetryError as exc:
            raise self._exhausted(exc) from exc.last_attempt.exception()
        raise AssertionError("unreachable")

    def _policy(self) -> dict:
        return {
            "stop": stop_after_attempt(self.max_attempts),
            "wait": self._wait,
            "retry": retry_if_exception(is_retryable_error),
            "before_sleep": self._log_retry,
        }

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.calculate_delay(retry_state.attempt_number - 1)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Attempt %d/%d failed (%s); retrying in %.2fs",
            retry_state.attempt_number,
            self.max_attempts,
            retry_state.outcome.exception() if retry_state.outcome else None,
            delay,
        )

    def _exhausted(self, exc: RetryError) -> RetryExhaustedError:
        last_error = exc.last_attempt.exception()
        logger.debug("Giving up after %d attempts: %s", self.max_attempts, last_error)
        return RetryExhaustedError.from_last_error(self.max_attempts, last_error)
