"""Retry decision logic and exponential backoff.

Only Notion's own ``rate_limited`` answer is retried.  Every other failure
(bad credentials, missing objects, invalid filters, outages) propagates on
the first attempt, because retrying it would only burn request budget.

* :func:`should_retry` -- decide whether a failed attempt is retryable.
* :func:`compute_backoff` -- the unjittered delay before the next attempt.
* :func:`retry_with_backoff` -- run an operation under that policy.

The policy sits *outside* the request queue: each attempt is a fresh call
through :class:`~notionblog.notion_api.rate_limit.RateLimiter`, so retries
never bypass the rate limit.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from notionblog.errors import ErrorCode, NotionAPIError, NotionRetryExhaustedError
from notionblog.observability import NoopMetricsHook, get_logger

log = get_logger("notionblog.retries")

T = TypeVar("T")


def is_rate_limited(error: BaseException) -> bool:
    """Return ``True`` if *error* is a classified ``rate_limited`` failure."""
    return isinstance(error, NotionAPIError) and error.code == ErrorCode.RATE_LIMITED


def should_retry(error: BaseException, attempt: int, max_retries: int) -> bool:
    """Decide whether a failed attempt should be retried.

    Parameters
    ----------
    error:
        The exception raised by the attempt.
    attempt:
        The current attempt index (0-based).
    max_retries:
        Total attempts allowed, including the first one.
    """
    if attempt + 1 >= max_retries:
        return False
    return is_rate_limited(error)


def compute_backoff(attempt: int, initial_delay: float = 1.0) -> float:
    """Return ``initial_delay * 2**attempt`` seconds.

    >>> [compute_backoff(i) for i in range(3)]
    [1.0, 2.0, 4.0]
    """
    return initial_delay * (2 ** attempt)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    *,
    operation_name: str | None = None,
    metrics: Any | None = None,
) -> T:
    """Run *operation*, retrying ``rate_limited`` failures with backoff.

    Parameters
    ----------
    operation:
        Zero-argument coroutine function.  It is called once per attempt.
    max_retries:
        Total attempts, including the first one.  Must be at least 1.
    initial_delay:
        Seconds to wait before the second attempt; doubles every retry.
    operation_name:
        Label used in log lines.
    metrics:
        Optional metrics hook; receives ``notionblog.retries_total``.

    Raises
    ------
    NotionRetryExhaustedError
        When the final attempt also failed with ``rate_limited``.
    Exception
        Any non-rate-limit failure, unchanged, from the attempt that
        raised it.
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be >= 1, got {max_retries}")

    hook = metrics if metrics is not None else NoopMetricsHook()

    for attempt in range(max_retries):
        try:
            return await operation()
        except Exception as exc:
            if should_retry(exc, attempt, max_retries):
                delay = compute_backoff(attempt, initial_delay)
                log.warning(
                    "Rate limited by Notion API, backing off",
                    extra={
                        "extra_fields": {
                            "operation": operation_name,
                            "attempt": attempt + 1,
                            "max_retries": max_retries,
                            "delay_s": delay,
                        }
                    },
                )
                hook.increment(
                    "notionblog.retries_total",
                    tags={"reason": "rate_limited"},
                )
                await asyncio.sleep(delay)
                continue

            if is_rate_limited(exc):
                raise NotionRetryExhaustedError(
                    message=f"Max retries exceeded ({max_retries}): {exc}",
                    context={
                        "attempts": max_retries,
                        "last_error_code": str(ErrorCode.RATE_LIMITED.value),
                        "operation": operation_name,
                    },
                    cause=exc,
                ) from exc
            raise

    # Unreachable: the loop either returns or raises.
    raise AssertionError("retry loop exited without a result")
