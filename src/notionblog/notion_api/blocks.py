"""Block API wrapper for the Notion API.

Provides :class:`AsyncBlockAPI`, a thin wrapper around
``GET /blocks/{id}/children``.  Unlike a self-paginating helper it returns a
single page per call, so that each page request can be queued and retried
on its own; :class:`~notionblog.block_tree.BlockTreeResolver` follows the
cursors.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def list_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        """Retrieve one page of children of a block (or page).

        Parameters
        ----------
        block_id:
            The UUID of the parent block or page.
        start_cursor:
            Opaque cursor from a previous response's ``next_cursor``.
        page_size:
            Maximum number of children returned (Notion caps this at 100).

        Returns
        -------
        dict
            The raw list response: ``results``, ``next_cursor``,
            ``has_more``.
        """
        params: dict[str, Any] = {"page_size": page_size}
        if start_cursor is not None:
            params["start_cursor"] = start_cursor
        return await self._transport.request(
            "GET", f"/blocks/{block_id}/children", params=params
        )
