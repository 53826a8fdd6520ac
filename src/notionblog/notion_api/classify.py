"""Turn raw Notion/transport failures into classified errors.

:func:`safe_call` is the single place where the heterogeneous error shapes
raised by :class:`~notionblog.notion_api.transport.AsyncNotionTransport`
(and anything else that escapes an operation) are mapped onto
:class:`~notionblog.errors.NotionAPIError` codes.  Calling code then
branches on ``error.code`` instead of on transport details.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from notionblog.errors import (
    APIResponseError,
    ErrorCode,
    NotionAPIError,
    NotionBlogError,
    NotionClientError,
    UnknownHTTPResponseError,
)
from notionblog.observability import get_logger

log = get_logger("notionblog.classify")

T = TypeVar("T")

# Tailored messages per Notion error code.  ``{op}`` is the operation label,
# ``{detail}`` the message Notion sent.
_API_MESSAGES: dict[str, str] = {
    ErrorCode.UNAUTHORIZED.value: (
        "Notion API authentication failed [{op}]: "
        "the API key is invalid or has expired."
    ),
    ErrorCode.RESTRICTED_RESOURCE.value: (
        "Notion resource access denied [{op}]: the integration has no access "
        "to this database. Check that it is connected to the database."
    ),
    ErrorCode.OBJECT_NOT_FOUND.value: (
        "Notion resource not found [{op}]: the database or page does not "
        "exist or has been deleted."
    ),
    ErrorCode.RATE_LIMITED.value: (
        "Notion API rate limit exceeded [{op}]: slow down requests "
        "(3 requests/second)."
    ),
    ErrorCode.INVALID_REQUEST.value: "Invalid Notion API request [{op}]: {detail}",
    ErrorCode.CONFLICT_ERROR.value: (
        "Notion API conflict [{op}]: the data was modified concurrently."
    ),
    ErrorCode.SERVICE_UNAVAILABLE.value: (
        "Notion service temporarily unavailable [{op}]: try again later."
    ),
}


def classify_error(error: BaseException, operation: str) -> NotionBlogError:
    """Map *error* to a :class:`NotionBlogError`.

    Already-classified errors are returned unchanged.
    """
    if isinstance(error, NotionBlogError):
        return error

    if isinstance(error, APIResponseError):
        template = _API_MESSAGES.get(error.code)
        if template is not None:
            message = template.format(op=operation, detail=error.message)
        else:
            message = (
                f"Notion API error [{operation}]: {error.message} "
                f"(code: {error.code})"
            )
        return NotionAPIError(
            message,
            code=error.code,
            status=error.status,
            operation=operation,
            cause=error,
        )

    if isinstance(error, NotionClientError):
        return NotionAPIError(
            f"Notion client error [{operation}]: {error}. "
            "Check NOTION_API_KEY and NOTION_DATABASE_ID.",
            code=ErrorCode.CLIENT_ERROR,
            operation=operation,
            cause=error,
        )

    if isinstance(error, UnknownHTTPResponseError):
        return NotionAPIError(
            f"Unknown HTTP error [{operation}]: {error}",
            code=ErrorCode.UNKNOWN_HTTP_ERROR,
            status=error.status,
            operation=operation,
            cause=error,
        )

    return NotionAPIError(
        f"Unexpected error [{operation}]: {error}",
        code=ErrorCode.UNKNOWN_ERROR,
        operation=operation,
        cause=error,
    )


async def safe_call(operation: Callable[[], Awaitable[T]], operation_name: str) -> T:
    """Await *operation*, re-raising any failure as a classified error.

    Parameters
    ----------
    operation:
        Zero-argument coroutine function performing the Notion call.
    operation_name:
        Human-readable label embedded in error messages, e.g.
        ``"get post by slug: hello-world"``.
    """
    try:
        return await operation()
    except Exception as exc:
        classified = classify_error(exc, operation_name)
        if classified is exc:
            raise
        log.debug(
            "Notion call failed",
            extra={
                "extra_fields": {
                    "operation": operation_name,
                    "code": classified.code,
                    "status": getattr(classified, "status", None),
                    "error_type": type(exc).__name__,
                }
            },
        )
        raise classified from exc


async def safe_gather(*aws: Awaitable[Any], operation_name: str) -> list[Any]:
    """Run *aws* concurrently and return their results in order.

    The first failure propagates.  Errors that are already classified pass
    through unchanged; anything else is wrapped as
    ``ErrorCode.PARALLEL_CALL_FAILED`` with *operation_name* as the label.
    """
    try:
        return await asyncio.gather(*aws)
    except NotionBlogError:
        raise
    except Exception as exc:
        raise NotionAPIError(
            f"Parallel call failed [{operation_name}]: {exc}",
            code=ErrorCode.PARALLEL_CALL_FAILED,
            operation=operation_name,
            cause=exc,
        ) from exc
