"""Request queue that paces outbound calls to the Notion API.

Notion allows roughly three requests per second per integration.  Every call
issued by a :class:`~notionblog.context.NotionContext` goes through one
shared :class:`RateLimiter`, which serialises them: a single drain task
takes queued operations in arrival order, awaits each one, and sleeps
``1 / requests_per_second`` seconds before starting the next.

The limiter runs on the asyncio event loop, which is single-threaded, so the
queue and the ``is_processing`` flag need no lock: nothing can interleave
between checking the flag and setting it.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from notionblog.observability import NoopMetricsHook, get_logger

log = get_logger("notionblog.rate_limit")

T = TypeVar("T")


@dataclass
class QueuedRequest:
    """A pending operation and the future its caller is awaiting."""

    invoke: Callable[[], Awaitable[Any]]
    future: asyncio.Future
    enqueued_at: float


class RateLimiter:
    """FIFO request queue with a fixed requests-per-second ceiling.

    Parameters
    ----------
    requests_per_second:
        Maximum number of operations dispatched per second.
    metrics:
        Optional metrics hook; receives ``notionblog.queue_depth`` and
        ``notionblog.rate_limit_wait_ms``.

    Notes
    -----
    A hung operation stalls every request queued behind it; the limiter
    imposes no timeout of its own (the HTTP client's timeout applies).
    An operation that raises ``CancelledError`` cancels only its own caller;
    if the drain task itself is cancelled, every request still queued is
    cancelled with it.
    """

    __slots__ = (
        "_drain_task",
        "_last_settled",
        "_metrics",
        "_processing",
        "_queue",
        "interval",
        "requests_per_second",
    )

    def __init__(self, requests_per_second: float = 3.0, metrics: Any | None = None) -> None:
        if requests_per_second <= 0:
            raise ValueError(
                f"requests_per_second must be > 0, got {requests_per_second}"
            )

        self.requests_per_second: float = requests_per_second
        self.interval: float = 1.0 / requests_per_second
        self._queue: deque[QueuedRequest] = deque()
        self._processing: bool = False
        self._drain_task: asyncio.Task | None = None
        self._last_settled: float | None = None
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

        log.debug(
            "Rate limiter created",
            extra={
                "extra_fields": {
                    "requests_per_second": requests_per_second,
                    "interval_s": self.interval,
                }
            },
        )

    # -- inspection ----------------------------------------------------------

    @property
    def queue_size(self) -> int:
        """Number of operations waiting to be dispatched."""
        return len(self._queue)

    @property
    def is_processing(self) -> bool:
        """Whether a drain task is currently running."""
        return self._processing

    # -- public API ----------------------------------------------------------

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Queue *operation* and return its result once it has run.

        Exceptions raised by *operation* are re-raised here and affect no
        other queued request.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._queue.append(QueuedRequest(operation, future, time.monotonic()))
        self._metrics.gauge("notionblog.queue_depth", len(self._queue))

        if not self._processing:
            self._processing = True
            self._drain_task = loop.create_task(self._drain())

        return await future

    # -- internals -----------------------------------------------------------

    async def _drain(self) -> None:
        try:
            # Keep spacing across idle gaps: a new cycle that starts right
            # after the previous one ended waits out the remaining interval.
            if self._last_settled is not None:
                remaining = self.interval - (time.monotonic() - self._last_settled)
                if remaining > 0:
                    await asyncio.sleep(remaining)

            while self._queue:
                request = self._queue.popleft()
                self._metrics.gauge("notionblog.queue_depth", len(self._queue))
                self._metrics.timing(
                    "notionblog.rate_limit_wait_ms",
                    (time.monotonic() - request.enqueued_at) * 1000,
                )

                if request.future.cancelled():
                    continue

                try:
                    result = await request.invoke()
                except asyncio.CancelledError:
                    request.future.cancel()
                except Exception as exc:
                    if not request.future.done():
                        request.future.set_exception(exc)
                except BaseException as exc:
                    if not request.future.done():
                        request.future.set_exception(exc)
                    raise
                else:
                    if not request.future.done():
                        request.future.set_result(result)
                self._last_settled = time.monotonic()

                if self._queue:
                    await asyncio.sleep(self.interval)
        finally:
            self._processing = False
            self._drain_task = None
            # Cancel callers still queued when the drain stops early.
            while self._queue:
                self._queue.popleft().future.cancel()
