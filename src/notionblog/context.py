"""Shared wiring for every Notion call.

A :class:`NotionContext` owns the HTTP transport, the endpoint wrappers and
the one :class:`~notionblog.notion_api.rate_limit.RateLimiter` that all
calls made through it share.  :meth:`NotionContext.call` composes the
per-call pipeline::

    retry_with_backoff(
        safe_call(
            limiter.execute(raw_call),
            operation_name),
        max_retries, initial_delay)

The limiter is innermost, so each retry attempt is queued and paced like a
fresh request; the classifier sees the raw error before the retry decision.

Tests create a context per test (or call :meth:`NotionContext.reset`)
instead of sharing process-wide state.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from notionblog.config import NotionBlogConfig, mask_api_key
from notionblog.notion_api import (
    AsyncBlockAPI,
    AsyncDatabaseAPI,
    AsyncNotionTransport,
    AsyncPageAPI,
    RateLimiter,
    retry_with_backoff,
    safe_call,
)
from notionblog.observability import NoopMetricsHook, get_logger

log = get_logger("notionblog.context")

T = TypeVar("T")


class NotionContext:
    """Transport, endpoint wrappers and rate limiter for one configuration.

    Parameters
    ----------
    config:
        A validated :class:`NotionBlogConfig`.
    """

    def __init__(self, config: NotionBlogConfig) -> None:
        self.config = config
        self.metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._build()

    def _build(self) -> None:
        self.transport = AsyncNotionTransport(self.config)
        self.limiter = RateLimiter(self.config.rate_limit_rps, metrics=self.metrics)
        self.databases = AsyncDatabaseAPI(self.transport)
        self.pages = AsyncPageAPI(self.transport)
        self.blocks = AsyncBlockAPI(self.transport)

    # -- call pipeline -------------------------------------------------------

    async def call(
        self,
        raw_call: Callable[[], Awaitable[T]],
        operation_name: str,
    ) -> T:
        """Run *raw_call* paced, classified and retried.

        Parameters
        ----------
        raw_call:
            Zero-argument coroutine function issuing one Notion request.
        operation_name:
            Label embedded in classified error messages and log lines.
        """
        return await retry_with_backoff(
            lambda: safe_call(lambda: self.limiter.execute(raw_call), operation_name),
            self.config.retry_max_attempts,
            self.config.retry_initial_delay,
            operation_name=operation_name,
            metrics=self.metrics,
        )

    # -- lifecycle -----------------------------------------------------------

    async def reset(self) -> None:
        """Close the transport and rebuild every component from the config.

        Pending requests on the old limiter are not carried over.
        """
        await self.close()
        self._build()
        log.info(
            "Notion context reset",
            extra={"extra_fields": {"token": mask_api_key(self.config.token)}},
        )

    def status(self) -> dict[str, Any]:
        """Diagnostics snapshot of the shared limiter and transport."""
        return {
            "initialized": not self.transport.closed,
            "queue_size": self.limiter.queue_size,
            "is_processing": self.limiter.is_processing,
            "rate_limit_per_second": self.limiter.requests_per_second,
        }

    async def close(self) -> None:
        if not self.transport.closed:
            await self.transport.close()

    async def __aenter__(self) -> NotionContext:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
