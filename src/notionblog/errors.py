"""Error hierarchy for the notionblog content layer.

Two families live here:

* **Raw transport errors** -- raised by
  :class:`~notionblog.notion_api.transport.AsyncNotionTransport` exactly as
  the Notion API (or the network) reported them.  They never reach callers
  of the content API directly; :func:`~notionblog.notion_api.classify.safe_call`
  turns them into classified errors.
* **Classified errors** -- every public error inherits from
  :class:`NotionBlogError` and carries a machine-readable ``code`` (from
  :class:`ErrorCode`), a human-readable ``message``, an optional structured
  ``context`` dict, and an optional ``cause`` (chained exception).

Error codes are a :class:`str` enum so that they serialise naturally to JSON
and compare equal to the plain strings the Notion API uses
(``ErrorCode.RATE_LIMITED == "rate_limited"``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable codes for every error the package can raise."""

    UNAUTHORIZED = "unauthorized"
    RESTRICTED_RESOURCE = "restricted_resource"
    OBJECT_NOT_FOUND = "object_not_found"
    RATE_LIMITED = "rate_limited"
    INVALID_REQUEST = "invalid_request"
    CONFLICT_ERROR = "conflict_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    CLIENT_ERROR = "client_error"
    UNKNOWN_HTTP_ERROR = "unknown_http_error"
    UNKNOWN_ERROR = "unknown_error"
    PARALLEL_CALL_FAILED = "parallel_call_failed"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"
    DATA_TRANSFORM_ERROR = "data_transform_error"
    CONFIG_ERROR = "config_error"


# ---------------------------------------------------------------------------
# Raw transport errors (pre-classification)
# ---------------------------------------------------------------------------

class NotionClientError(Exception):
    """The request never produced a usable response (connection failure,
    malformed request, client-side misconfiguration).
    """

    code: str = "request_failed"


class RequestTimeoutError(NotionClientError):
    """The HTTP request exceeded the configured timeout."""

    code = "request_timeout"


class APIResponseError(Exception):
    """The Notion API answered with a structured error object.

    Notion error bodies look like
    ``{"object": "error", "status": 404, "code": "object_not_found",
    "message": "..."}``.
    """

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        body: dict[str, Any] | None = None,
    ) -> None:
        self.status = status
        self.code = code
        self.message = message
        self.body = body or {}
        super().__init__(message)


class UnknownHTTPResponseError(Exception):
    """A non-2xx response whose body is not a recognisable Notion error."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"Request failed with status {status}: {body[:200]}")


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionBlogError(Exception):
    """Base exception for all classified notionblog errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: BaseException | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# API errors
# ---------------------------------------------------------------------------

class NotionAPIError(NotionBlogError):
    """A Notion call failed and the failure has been classified.

    Attributes
    ----------
    status:
        HTTP status code, when the failure came from an HTTP response.
    operation:
        The human-readable label of the call that failed (e.g.
        ``"list published posts"``).
    """

    def __init__(
        self,
        message: str,
        code: str,
        status: int | None = None,
        operation: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        context: dict[str, Any] = {}
        if status is not None:
            context["status"] = status
        if operation is not None:
            context["operation"] = operation
        super().__init__(code=code, message=message, context=context, cause=cause)
        self.status: int | None = status
        self.operation: str | None = operation


class NotionRetryExhaustedError(NotionBlogError):
    """Every retry attempt failed with a rate-limit error.

    Context keys: ``attempts``, ``last_error_code``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MAX_RETRIES_EXCEEDED,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Transform errors
# ---------------------------------------------------------------------------

class DataTransformError(NotionBlogError):
    """A raw Notion object could not be turned into a domain object.

    Attributes
    ----------
    field:
        The property that failed validation, when one is to blame.
    raw_data:
        The raw payload being transformed, kept for debugging.  It is not
        included in ``repr`` or the message.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        raw_data: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        context: dict[str, Any] = {}
        if field is not None:
            context["field"] = field
        super().__init__(
            code=ErrorCode.DATA_TRANSFORM_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
        self.field: str | None = field
        self.raw_data: Any = raw_data


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class NotionBlogConfigError(NotionBlogError, ValueError):
    """Configuration failed validation.

    ``issues`` lists every problem found, one ``"<field>: <message>"``
    string per entry, so that a misconfigured deployment can be fixed in a
    single pass.
    """

    def __init__(self, issues: list[str]) -> None:
        self.issues: list[str] = list(issues)
        lines = "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=f"Invalid notionblog configuration:\n{lines}",
            context={"issues": self.issues},
        )
