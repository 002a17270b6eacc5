"""Resilience – TenacityRetryPolicy adapter.

Bounded retry for transport-level failures, backed by ``tenacity``.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity as ten

from pulse_harness.kernel.errors import TransportError
from pulse_harness.observability.logging import get_logger

T = TypeVar("T")
logger = get_logger(__name__)


def _log_before_sleep(state: ten.RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome is not None else None
    delay = state.next_action.sleep if state.next_action is not None else 0.0
    logger.warning(
        "retry.scheduled",
        attempt=state.attempt_number,
        delay=round(delay, 3),
        error=repr(exc),
    )


class TenacityRetryPolicy:
    """Retry policy backed by the ``tenacity`` library.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy. Defaults to exponential backoff
        between ``min_backoff`` and ``max_backoff`` seconds.
    retry:
        A ``tenacity`` retry predicate. Defaults to retrying only
        :class:`~pulse_harness.kernel.errors.TransportError`.
    reraise:
        Re-raise the last exception once attempts are exhausted instead of
        wrapping it in ``tenacity.RetryError``. Defaults to ``True``.
    kwargs:
        Forwarded to :class:`tenacity.AsyncRetrying`.

    Example
    -------
    ::

        policy = TenacityRetryPolicy(max_attempts=5, max_backoff=4.0)
        reader = await policy.execute_async(lambda: stream.subscribe(topic, group, origin))
    """

    def __init__(
        self,
        max_attempts: int = 3,
        wait: Any = None,
        retry: Any = None,
        reraise: bool = True,
        *,
        min_backoff: float = 0.1,
        max_backoff: float = 2.0,
        **kwargs: Any,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._max_attempts = max_attempts
        self._wait = wait or ten.wait_exponential(multiplier=min_backoff, min=min_backoff, max=max_backoff)
        self._retry = retry or ten.retry_if_exception_type(TransportError)
        self._reraise = reraise
        self._extra_kwargs = kwargs

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _build_async_retrying(self) -> ten.AsyncRetrying:
        kwargs = {"before_sleep": _log_before_sleep, **self._extra_kwargs}
        return ten.AsyncRetrying(
            stop=ten.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=self._retry,
            reraise=self._reraise,
            **kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* asynchronously with tenacity retry."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["TenacityRetryPolicy"]
