"""Async HTTP transport for the Notion API.

:class:`AsyncNotionTransport` performs exactly **one** HTTP exchange per
:meth:`~AsyncNotionTransport.request` call:

1. Send the request with auth and version headers.
2. On ``2xx`` -- return the parsed JSON body.
3. On a Notion error body (``{"object": "error", ...}``) -- raise
   :class:`~notionblog.errors.APIResponseError`.
4. On any other non-``2xx`` response -- raise
   :class:`~notionblog.errors.UnknownHTTPResponseError`.
5. On timeouts / network failures -- raise
   :class:`~notionblog.errors.RequestTimeoutError` or
   :class:`~notionblog.errors.NotionClientError`.

Pacing, retries and classification are layered on top by
:class:`~notionblog.context.NotionContext`, so that every retry attempt is
queued through the rate limiter like any other call.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from notionblog.config import NotionBlogConfig
from notionblog.errors import (
    APIResponseError,
    NotionClientError,
    RequestTimeoutError,
    UnknownHTTPResponseError,
)
from notionblog.observability import NoopMetricsHook, get_logger

log = get_logger("notionblog.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raise_for_status(response: httpx.Response) -> None:
    """Raise the raw error matching a non-``2xx`` *response*."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None

    if (
        isinstance(body, dict)
        and body.get("object") == "error"
        and isinstance(body.get("code"), str)
    ):
        raise APIResponseError(
            status=status,
            code=body["code"],
            message=str(body.get("message", "")),
            body=body,
        )

    raise UnknownHTTPResponseError(status=status, body=response.text[:500])


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous single-attempt HTTP transport with auth headers.

    Parameters
    ----------
    config:
        A :class:`NotionBlogConfig` controlling base URL, headers and timeout.
    """

    def __init__(self, config: NotionBlogConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    # -- public API --------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute one HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET`` or ``POST`` for the read endpoints).
        path:
            API path relative to ``base_url`` (e.g. ``/pages/<id>``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``).

        Returns
        -------
        dict
            Parsed JSON response body.

        Raises
        ------
        APIResponseError
            Notion answered with a structured error object.
        UnknownHTTPResponseError
            Any other non-``2xx`` response.
        RequestTimeoutError
            The request timed out.
        NotionClientError
            The request failed before a response was received.
        """
        t0 = time.monotonic()
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            self._record(method, path, "timeout", t0)
            raise RequestTimeoutError(
                f"Request to {method} {path} timed out after "
                f"{self._config.timeout_seconds:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            self._record(method, path, "error", t0)
            raise NotionClientError(f"{method} {path} failed: {exc}") from exc

        self._record(method, path, str(response.status_code), t0)

        if 200 <= response.status_code < 300:
            if not response.content:
                return {}
            result: dict = response.json()
            return result

        log.debug(
            "Notion API returned an error response",
            extra={
                "extra_fields": {
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                }
            },
        )
        _raise_for_status(response)
        raise AssertionError("unreachable")  # pragma: no cover

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    def _record(self, method: str, path: str, status: str, t0: float) -> None:
        elapsed_ms = (time.monotonic() - t0) * 1000
        tags = {"method": method, "status": status}
        self._metrics.increment("notionblog.requests_total", tags=tags)
        self._metrics.timing("notionblog.request_duration_ms", elapsed_ms, tags=tags)
