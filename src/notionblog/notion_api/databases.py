"""Database API wrapper for the Notion API.

Provides :class:`AsyncDatabaseAPI`, a thin wrapper around
``POST /databases/{id}/query``.  All HTTP concerns are delegated to the
transport; pacing and retries are applied by the caller.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def query(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        """Query one page of a database.

        Parameters
        ----------
        database_id:
            The database to query.
        filter:
            A Notion filter object, e.g.
            ``{"property": "status", "select": {"equals": "..."}}``.
        sorts:
            Notion sort objects, applied server-side.
        page_size:
            Maximum number of results (Notion caps this at 100).
        start_cursor:
            Opaque cursor from a previous response's ``next_cursor``.

        Returns
        -------
        dict
            The raw list response: ``results``, ``next_cursor``,
            ``has_more``.
        """
        body: dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        if page_size is not None:
            body["page_size"] = page_size
        if start_cursor is not None:
            body["start_cursor"] = start_cursor
        return await self._transport.request(
            "POST", f"/databases/{database_id}/query", json=body
        )
