"""notionblog: rate-limited, retrying read access to a Notion-backed blog.

Public re-exports
-----------------

* **Client:** :class:`AsyncNotionBlogClient`, :class:`NotionContext`
* **Configuration:** :class:`NotionBlogConfig`
* **Errors:** Every :class:`NotionBlogError` subclass and :class:`ErrorCode`
* **Models:** Posts, places, content blocks and result types

Usage::

    from notionblog import AsyncNotionBlogClient

    async with AsyncNotionBlogClient(
        token="ntn_xxx", database_id="<32 hex chars>"
    ) as client:
        post = await client.get_post_with_content("hello-world")
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from notionblog.async_client import AsyncNotionBlogClient
from notionblog.block_tree import BlockTreeResolver

# ── Configuration ───────────────────────────────────────────────────────
from notionblog.config import NotionBlogConfig, mask_api_key
from notionblog.context import NotionContext

# ── Errors ──────────────────────────────────────────────────────────────
from notionblog.errors import (
    APIResponseError,
    DataTransformError,
    ErrorCode,
    NotionAPIError,
    NotionBlogConfigError,
    NotionBlogError,
    NotionClientError,
    NotionRetryExhaustedError,
    RequestTimeoutError,
    UnknownHTTPResponseError,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionblog.models import (
    Annotations,
    BlogPost,
    CalloutPayload,
    CategoryInfo,
    CodePayload,
    ContentBlock,
    DividerPayload,
    ImagePayload,
    PaginatedResult,
    Place,
    PostListResult,
    PostStatus,
    RichTextRun,
    StatusCounts,
    TextPayload,
    ToDoPayload,
    UnsupportedPayload,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "AsyncNotionBlogClient",
    "NotionContext",
    "BlockTreeResolver",
    # Configuration
    "NotionBlogConfig",
    "mask_api_key",
    # Error base + code enum
    "NotionBlogError",
    "ErrorCode",
    # Classified errors
    "NotionAPIError",
    "NotionRetryExhaustedError",
    "DataTransformError",
    "NotionBlogConfigError",
    # Raw transport errors
    "APIResponseError",
    "NotionClientError",
    "RequestTimeoutError",
    "UnknownHTTPResponseError",
    # Models — content
    "BlogPost",
    "Place",
    "CategoryInfo",
    "PostStatus",
    "RichTextRun",
    "Annotations",
    # Models — blocks
    "ContentBlock",
    "TextPayload",
    "ToDoPayload",
    "CodePayload",
    "CalloutPayload",
    "ImagePayload",
    "DividerPayload",
    "UnsupportedPayload",
    # Models — result types
    "PostListResult",
    "StatusCounts",
    "PaginatedResult",
]
