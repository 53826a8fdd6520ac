"""Metrics hook protocol and no-op default implementation.

notionblog emits counters, timings and gauges at the points that matter for
running against a rate-limited API.  By default a :class:`NoopMetricsHook`
is used so there is zero overhead; supply any object satisfying
:class:`MetricsHook` through ``NotionBlogConfig(metrics=...)`` to route them
to StatsD, Prometheus, Datadog, etc.

Emitted metric names:

* ``notionblog.requests_total``            -- counter (tag ``status``)
* ``notionblog.request_duration_ms``       -- timing
* ``notionblog.rate_limit_wait_ms``        -- timing (time spent queued)
* ``notionblog.queue_depth``               -- gauge
* ``notionblog.retries_total``             -- counter
* ``notionblog.transform_failures_total``  -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
