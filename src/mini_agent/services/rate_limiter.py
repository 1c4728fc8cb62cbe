"""Throttling gate shared by every call to the reasoning model."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, TypeVar

from openai import RateLimitError
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MIN_INTERVAL = 2.0
DEFAULT_OVERLOAD_DELAY = 30.0


def is_overload_error(exc: BaseException) -> bool:
    """Return True for a "too many requests" failure from the model API."""
    if isinstance(exc, RateLimitError):
        return True
    return getattr(exc, "status_code", None) == 429


def _log_overload(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Model API overloaded (%s), retrying in %.1fs",
        exc,
        retry_state.next_action.sleep if retry_state.next_action else 0.0,
    )


class RateLimitedCaller:
    """Serialises model calls and keeps their starts ``min_interval`` apart.

    One instance is meant to be shared by every call site that spends the
    same API quota. An overload error is retried once after
    ``overload_delay``; a second one propagates to the caller.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        overload_delay: float = DEFAULT_OVERLOAD_DELAY,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0 or overload_delay < 0:
            raise ValueError("delays must be non-negative")
        self.min_interval = min_interval
        self.overload_delay = overload_delay
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None
        self.calls_dispatched = 0

    @property
    def last_call(self) -> float | None:
        return self._last_call

    async def call(self, thunk: Callable[[], Awaitable[T]]) -> T:
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_overload_error),
            stop=stop_after_attempt(2),
            wait=wait_fixed(self.overload_delay),
            sleep=self._sleep,
            before_sleep=_log_overload,
            reraise=True,
        )
        return await retrying(self._dispatch, thunk)

    async def _dispatch(self, thunk: Callable[[], Awaitable[T]]) -> T:
        await self._wait_turn()
        return await thunk()

    async def _wait_turn(self) -> None:
        async with self._lock:
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval:
                    delay = self.min_interval - elapsed
                    logger.debug("Throttling model call for %.2fs", delay)
                    await self._sleep(delay)
            # Stamp the dispatch start, not the completion.
            self._last_call = self._clock()
            self.calls_dispatched += 1
