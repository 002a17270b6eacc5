"""Correlation – CorrelationEngine and CorrelationHandle.

The engine answers one question for a test: did the action produce the
expected asynchronous effect on a topic within a bounded time?

Every subscription gets its own consumer group and its own asyncio task.
The task is the only place a subscription can resolve, and the handle
accepts exactly one resolution.

Usage::

    engine = CorrelationEngine(KafkaEventStream(settings.kafka))
    handle = await engine.arm("order-events", field_equals(orderId=oid), timeout=5)
    await api.post("/api/v1/orders", order)
    result = await handle
    assert result.is_matched()
"""

from __future__ import annotations

import asyncio
import dataclasses
import math
from collections.abc import Callable
from typing import Any

from pulse_harness.correlation.predicate import Predicate, as_predicate
from pulse_harness.correlation.result import (
    Cancelled,
    Errored,
    MatchResult,
    Matched,
    MatchedMany,
    TimedOut,
)
from pulse_harness.correlation.subscription import (
    MatchMode,
    Subscription,
    SubscriptionState,
    new_group_id,
)
from pulse_harness.kernel.errors import (
    InfrastructureError,
    InvariantViolationError,
    SerializationError,
    TransportError,
    ValidationError,
)
from pulse_harness.kernel.messaging import (
    Event,
    EventDecoder,
    JsonEventDecoder,
    MessageStream,
    Origin,
    RawRecord,
    StreamReader,
)
from pulse_harness.kernel.time import Clock, SystemClock
from pulse_harness.observability.logging import get_logger
from pulse_harness.resilience.retry import TenacityRetryPolicy
from pulse_harness.resilience.timeouts import Deadline

logger = get_logger(__name__)

_MIN_POLL = 0.001


@dataclasses.dataclass
class _Run:
    """Mutable state of one subscription's drive loop."""

    reader: StreamReader | None = None
    matches: list[Event] = dataclasses.field(default_factory=list)
    seen: set[tuple[str, int, int]] = dataclasses.field(default_factory=set)
    observed: int = 0
    uncommitted: bool = False
    last_error: TransportError | None = None
    releasing: bool = False
    attached: asyncio.Event = dataclasses.field(default_factory=asyncio.Event)


class CorrelationHandle:
    """Cancellable handle to one armed subscription.

    ``await handle`` (or ``await handle.result()``) suspends until the
    subscription resolves. The handle accepts a single resolution; a second
    one is an :class:`InvariantViolationError`.
    """

    def __init__(self, subscription: Subscription) -> None:
        self._subscription = subscription
        self._state = SubscriptionState.IDLE
        self._future: asyncio.Future[MatchResult] = asyncio.get_running_loop().create_future()
        self._task: asyncio.Task[None] | None = None
        self._run: _Run | None = None

    @property
    def subscription(self) -> Subscription:
        return self._subscription

    @property
    def state(self) -> SubscriptionState:
        return self._state

    def done(self) -> bool:
        return self._future.done()

    async def result(self) -> MatchResult:
        # shield: a caller giving up on the wait must not poison the future
        return await asyncio.shield(self._future)

    def __await__(self) -> Any:
        return self.result().__await__()

    async def cancel(self) -> MatchResult:
        """Cancel the wait and return once the consumer has been released.

        A subscription that is already releasing its consumer has decided its
        result; cancelling it only waits for the release to finish.
        """
        task = self._task
        if task is not None and not task.done():
            if self._run is None or not self._run.releasing:
                task.cancel()
            await asyncio.wait({task})
        if not self._future.done():
            self._resolve(Cancelled(self._subscription.topic))
        return self._future.result()

    def _arm(self, task: asyncio.Task[None], run: _Run) -> None:
        if self._state is not SubscriptionState.IDLE:
            raise InvariantViolationError(f"subscription already {self._state}")
        self._state = SubscriptionState.ARMED
        self._task = task
        self._run = run

    def _resolve(self, result: MatchResult) -> None:
        if self._future.done() or self._state.is_terminal:
            raise InvariantViolationError(
                f"subscription {self._subscription.group_id} resolved twice",
                detail={"state": str(self._state), "attempted": str(result.state)},
            )
        self._state = result.state
        self._future.set_result(result)

    def __repr__(self) -> str:
        return f"CorrelationHandle(topic={self._subscription.topic!r}, state={self._state})"


class CorrelationEngine:
    """Bounded-wait, content-filtered correlation over a :class:`MessageStream`.

    Parameters
    ----------
    stream:
        Transport used to open one reader per subscription.
    decoder:
        Turns records into events. Defaults to :class:`JsonEventDecoder`.
    retry_policy:
        Bounded retry for :class:`TransportError` while opening, polling or
        committing. Defaults to 3 attempts with exponential backoff.
    clock:
        Source of monotonic time for deadlines.
    client_id:
        Prefix of every generated consumer-group id.
    poll_interval:
        Longest single ``poll`` call, in seconds.
    default_timeout:
        Used when a caller passes ``timeout=None``.
    """

    def __init__(
        self,
        stream: MessageStream,
        *,
        decoder: EventDecoder | None = None,
        retry_policy: TenacityRetryPolicy | None = None,
        clock: Clock | None = None,
        client_id: str = "pulse-harness",
        poll_interval: float = 0.1,
        default_timeout: float = 10.0,
    ) -> None:
        if poll_interval <= 0:
            raise ValidationError("poll_interval must be > 0")
        self._stream = stream
        self._clock = clock or SystemClock()
        self._decoder = decoder or JsonEventDecoder(self._clock)
        self._retry = retry_policy or TenacityRetryPolicy()
        self._client_id = client_id
        self._poll_interval = poll_interval
        self._default_timeout = default_timeout
        self._active: set[CorrelationHandle] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def from_settings(cls, stream: MessageStream, settings: Any, *, client_id: str = "pulse-harness") -> "CorrelationEngine":
        """Build from a :class:`~pulse_harness.config.CorrelationSettings`."""
        return cls(
            stream,
            retry_policy=TenacityRetryPolicy(
                max_attempts=settings.retry_attempts,
                min_backoff=settings.retry_min_backoff,
                max_backoff=settings.retry_max_backoff,
            ),
            client_id=client_id,
            poll_interval=settings.poll_interval,
            default_timeout=settings.default_timeout,
        )

    async def __aenter__(self) -> "CorrelationEngine":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.cancel_all()

    @property
    def active_subscriptions(self) -> list[Subscription]:
        return [h.subscription for h in self._active if not h.done()]

    @property
    def loop(self) -> asyncio.AbstractEventLoop | None:
        """Event loop the most recent subscription was armed on."""
        return self._loop

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def await_one(
        self,
        topic: str,
        predicate: Callable[..., Any],
        timeout: float | None = None,
        origin: Origin | str = Origin.EARLIEST,
    ) -> MatchResult:
        """Wait for the first event on *topic* satisfying *predicate*.

        Returns :class:`Matched`, :class:`TimedOut` or :class:`Errored`.
        """
        handle = await self.arm(topic, predicate, timeout, origin=origin)
        return await self._wait(handle)

    async def await_many(
        self,
        topic: str,
        predicate: Callable[..., Any],
        max_matches: int,
        timeout: float | None = None,
        origin: Origin | str = Origin.EARLIEST,
    ) -> MatchResult:
        """Collect up to *max_matches* distinct matching events.

        Resolves early once the cap is reached; at the deadline resolves with
        whatever was collected, possibly nothing.
        """
        handle = await self.arm(
            topic, predicate, timeout, mode=MatchMode.MANY, max_matches=max_matches, origin=origin
        )
        return await self._wait(handle)

    async def arm(
        self,
        topic: str,
        predicate: Callable[..., Any],
        timeout: float | None = None,
        *,
        mode: MatchMode | str = MatchMode.SINGLE,
        max_matches: int = 1,
        origin: Origin | str = Origin.EARLIEST,
    ) -> CorrelationHandle:
        """Arm a subscription and return once its reader is attached.

        Call this before triggering the action; the returned handle resolves
        independently of the caller.
        """
        subscription = self._new_subscription(topic, predicate, timeout, mode, max_matches, origin)
        handle = CorrelationHandle(subscription)
        self._loop = asyncio.get_running_loop()
        run = _Run()
        task = asyncio.create_task(self._drive(handle, run), name=f"correlate:{subscription.group_id}")
        handle._arm(task, run)
        self._active.add(handle)
        task.add_done_callback(lambda t: self._on_task_done(handle, t))
        logger.info(
            "correlation.armed",
            topic=subscription.topic,
            group_id=subscription.group_id,
            mode=str(subscription.mode),
            max_matches=subscription.max_matches,
            origin=str(subscription.origin),
            timeout=round(subscription.deadline.timeout_seconds, 3),
            predicate=subscription.predicate.name,
        )
        attached = asyncio.ensure_future(run.attached.wait())
        try:
            await asyncio.wait({attached, task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await handle.cancel()
            raise
        finally:
            attached.cancel()
        return handle

    async def cancel_all(self) -> None:
        """Cancel every outstanding subscription (test teardown)."""
        for handle in list(self._active):
            if not handle.done():
                await handle.cancel()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_subscription(
        self,
        topic: str,
        predicate: Callable[..., Any],
        timeout: float | None,
        mode: MatchMode | str,
        max_matches: int,
        origin: Origin | str,
    ) -> Subscription:
        errors: list[dict[str, Any]] = []
        if not isinstance(topic, str) or not topic.strip():
            errors.append({"field": "topic", "error": "must be a non-empty string"})
        if timeout is None:
            timeout = self._default_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, int | float) or not math.isfinite(timeout) or timeout <= 0:
            errors.append({"field": "timeout", "error": "must be a finite number > 0", "value": timeout})
        try:
            mode = MatchMode(mode)
        except ValueError:
            errors.append({"field": "mode", "error": "unknown mode", "value": mode})
        try:
            origin = Origin(origin)
        except ValueError:
            errors.append({"field": "origin", "error": "unknown origin", "value": origin})
        if isinstance(max_matches, bool) or not isinstance(max_matches, int) or max_matches < 1:
            errors.append({"field": "max_matches", "error": "must be an integer >= 1", "value": max_matches})
        elif mode == MatchMode.SINGLE and max_matches != 1:
            errors.append({"field": "max_matches", "error": "single mode takes exactly one match"})
        if not callable(predicate):
            errors.append({"field": "predicate", "error": "not_callable"})
        if errors:
            raise ValidationError("Invalid subscription request", errors=errors)

        return Subscription(
            topic=topic,
            predicate=as_predicate(predicate),
            deadline=Deadline.after(float(timeout), self._clock),  # type: ignore[arg-type]
            group_id=new_group_id(self._client_id, topic),
            mode=MatchMode(mode),
            max_matches=max_matches,
            origin=Origin(origin),
        )

    async def _wait(self, handle: CorrelationHandle) -> MatchResult:
        try:
            return await handle.result()
        except asyncio.CancelledError:
            await handle.cancel()
            raise

    async def _drive(self, handle: CorrelationHandle, run: _Run) -> None:
        sub = handle.subscription
        timeout_cm = asyncio.timeout(sub.deadline.remaining_seconds)
        try:
            try:
                async with timeout_cm:
                    result = await self._consume(sub, run)
            except TimeoutError:
                if not timeout_cm.expired():
                    raise
                result = self._on_deadline(sub, run)
            except InfrastructureError as exc:
                result = Errored(exc)
        finally:
            run.releasing = True
            await self._release(sub, run)
            run.attached.set()
        self._log_resolution(sub, result, run)
        handle._resolve(result)

    async def _consume(self, sub: Subscription, run: _Run) -> MatchResult:
        while True:
            batch = await self._retry.execute_async(lambda: self._next_batch(sub, run))
            for record in batch:
                if record.identity in run.seen:
                    logger.debug("correlation.redelivered", topic=record.topic, partition=record.partition, offset=record.offset)
                    continue
                run.seen.add(record.identity)
                run.observed += 1
                event = self._decode(sub, record)
                if event is None or not self._evaluate(sub, event):
                    continue
                run.matches.append(event)
                if len(run.matches) >= sub.max_matches:
                    run.uncommitted = True
                    if sub.mode == MatchMode.SINGLE:
                        return Matched(run.matches[0])
                    return MatchedMany(run.matches, sub.max_matches)
            if batch:
                run.uncommitted = True

    async def _next_batch(self, sub: Subscription, run: _Run) -> list[RawRecord]:
        """One attempt: (re)attach if needed, acknowledge, then poll."""
        try:
            if run.reader is None:
                run.reader = await self._stream.subscribe(sub.topic, sub.group_id, sub.origin)
                run.attached.set()
            if run.uncommitted:
                await run.reader.commit()
                run.uncommitted = False
            wait = max(min(self._poll_interval, sub.deadline.remaining_seconds), _MIN_POLL)
            batch = await run.reader.poll(wait)
        except TransportError as exc:
            run.last_error = exc
            # the deadline may fire here; the close must still complete
            await asyncio.shield(self._close_reader(run))
            raise
        run.last_error = None
        return batch

    def _decode(self, sub: Subscription, record: RawRecord) -> Event | None:
        try:
            return self._decoder.decode(record)
        except SerializationError as exc:
            logger.warning(
                "correlation.decode_failed",
                topic=sub.topic,
                group_id=sub.group_id,
                partition=record.partition,
                offset=record.offset,
                error=exc.message,
            )
            return None

    def _evaluate(self, sub: Subscription, event: Event) -> bool:
        try:
            return sub.predicate(event.value)
        except Exception as exc:  # noqa: BLE001 – a faulty predicate is a non-match
            logger.warning(
                "correlation.predicate_failed",
                topic=sub.topic,
                group_id=sub.group_id,
                partition=event.partition,
                offset=event.offset,
                predicate=sub.predicate.name,
                error=repr(exc),
            )
            return False

    def _on_deadline(self, sub: Subscription, run: _Run) -> MatchResult:
        if run.last_error is not None:
            return Errored(run.last_error)
        if sub.mode == MatchMode.MANY:
            return MatchedMany(run.matches, sub.max_matches)
        return TimedOut(sub.topic, sub.deadline.elapsed_seconds, run.observed)

    async def _close_reader(self, run: _Run) -> None:
        reader, run.reader = run.reader, None
        if reader is None:
            return
        try:
            await reader.close()
        except TransportError as exc:
            logger.warning("correlation.reader_close_failed", error=exc.message)

    async def _release(self, sub: Subscription, run: _Run) -> None:
        try:
            if run.reader is not None and run.uncommitted:
                try:
                    await run.reader.commit()
                except TransportError as exc:
                    logger.warning("correlation.final_commit_failed", group_id=sub.group_id, error=exc.message)
        finally:
            try:
                await self._close_reader(run)
            finally:
                try:
                    await self._stream.unsubscribe(sub.group_id)
                except TransportError as exc:
                    logger.warning("correlation.unsubscribe_failed", group_id=sub.group_id, error=exc.message)
        logger.debug("correlation.released", topic=sub.topic, group_id=sub.group_id)

    def _on_task_done(self, handle: CorrelationHandle, task: asyncio.Task[None]) -> None:
        self._active.discard(handle)
        if handle.done():
            return
        if task.cancelled():
            logger.info("correlation.cancelled", topic=handle.subscription.topic, group_id=handle.subscription.group_id)
            handle._resolve(Cancelled(handle.subscription.topic))
            return
        exc = task.exception()
        logger.error(
            "correlation.crashed",
            topic=handle.subscription.topic,
            group_id=handle.subscription.group_id,
            error=repr(exc),
        )
        handle._resolve(Errored(InfrastructureError("Correlation task crashed", cause=exc)))

    def _log_resolution(self, sub: Subscription, result: MatchResult, run: _Run) -> None:
        fields = {
            "topic": sub.topic,
            "group_id": sub.group_id,
            "observed": run.observed,
            "elapsed": round(sub.deadline.elapsed_seconds, 3),
        }
        if isinstance(result, Matched):
            logger.info("correlation.matched", partition=result.unwrap().partition, offset=result.unwrap().offset, **fields)
        elif isinstance(result, MatchedMany):
            logger.info("correlation.matched_many", matches=len(result), complete=result.is_complete, **fields)
        elif isinstance(result, TimedOut):
            logger.warning("correlation.timed_out", **fields)
        elif isinstance(result, Errored):
            logger.error("correlation.errored", error=result.cause.message, code=result.cause.code, **fields)


__all__ = ["CorrelationEngine", "CorrelationHandle"]
