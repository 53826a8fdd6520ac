"""notionblog.notion_api -- Notion API access with pacing and retries.

This sub-package provides:

* :mod:`.rate_limit` -- FIFO request queue with a requests-per-second cap.
* :mod:`.retries` -- Rate-limit retry policy with exponential backoff.
* :mod:`.classify` -- Mapping of raw failures onto classified errors.
* :mod:`.transport` -- Single-attempt HTTP transport with auth headers.
* :mod:`.databases` -- Database query wrapper.
* :mod:`.pages` -- Page retrieval wrapper.
* :mod:`.blocks` -- Block children wrapper.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI
from .classify import classify_error, safe_call, safe_gather
from .databases import AsyncDatabaseAPI
from .pages import AsyncPageAPI
from .rate_limit import QueuedRequest, RateLimiter
from .retries import compute_backoff, retry_with_backoff, should_retry
from .transport import AsyncNotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "QueuedRequest",
    "RateLimiter",
    "classify_error",
    "compute_backoff",
    "retry_with_backoff",
    "safe_call",
    "safe_gather",
    "should_retry",
]
