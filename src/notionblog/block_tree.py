"""Recursive resolution of a page's block tree.

:class:`BlockTreeResolver` pages through the children of a block, decodes
each one, and recursively resolves the children of every block that reports
``has_children``.  Nodes are built bottom-up as new
:class:`~notionblog.models.ContentBlock` values; nothing returned is mutated
afterwards.

Children are fetched sequentially.  Every page request goes through the
caller-supplied *fetch_page* coroutine, which in the client is a paced,
retried, classified call, so a deep tree costs one queued request per
children page.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from notionblog.models import ContentBlock
from notionblog.observability import get_logger
from notionblog.transform.blocks import decode_block

log = get_logger("notionblog.block_tree")

FetchPage = Callable[[str, str | None], Awaitable[dict[str, Any]]]


class BlockTreeResolver:
    """Resolve the full block tree under a page or block.

    Parameters
    ----------
    fetch_page:
        ``await fetch_page(block_id, start_cursor)`` must return one raw
        children page (``results``, ``next_cursor``, ``has_more``).
    max_depth:
        Optional maximum nesting depth.  Top-level blocks are depth 1.
        Blocks at the cap keep ``has_children=True`` but their children are
        not fetched.  ``None`` resolves the whole tree.
    """

    def __init__(self, fetch_page: FetchPage, max_depth: int | None = None) -> None:
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self._fetch_page = fetch_page
        self._max_depth = max_depth

    async def resolve(self, block_id: str) -> list[ContentBlock]:
        """Return the children of *block_id* with all descendants attached."""
        return await self._resolve(block_id, depth=1)

    async def fetch_children(self, block_id: str) -> list[dict[str, Any]]:
        """Collect every full raw child of *block_id* across all cursor pages."""
        results: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            page = await self._fetch_page(block_id, cursor)
            # Partial block objects carry no type and are skipped.
            results.extend(
                raw for raw in page.get("results") or [] if "type" in raw
            )
            cursor = page.get("next_cursor")
            if not page.get("has_more") or not cursor:
                return results

    async def _resolve(self, block_id: str, depth: int) -> list[ContentBlock]:
        raw_blocks = await self.fetch_children(block_id)
        nodes: list[ContentBlock] = []

        for raw in raw_blocks:
            block = decode_block(raw)
            if not block.has_children:
                nodes.append(block)
                continue

            if self._max_depth is not None and depth >= self._max_depth:
                log.warning(
                    "Block tree depth limit reached; children not fetched",
                    extra={
                        "extra_fields": {
                            "block_id": block.id,
                            "depth": depth,
                            "max_depth": self._max_depth,
                        }
                    },
                )
                nodes.append(block)
                continue

            children = await self._resolve(block.id, depth + 1)
            nodes.append(block.with_children(children))

        return nodes
