"""In-memory pagination of already-fetched lists."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from notionblog.models import PaginatedResult

T = TypeVar("T")


def paginate(items: Sequence[T], page: int = 1, per_page: int = 10) -> PaginatedResult[T]:
    """Return page *page* (1-based) of *items*.

    Out-of-range page numbers are clamped to ``[1, max(total_pages, 1)]``,
    so an empty list yields page 1 with no items.

    >>> result = paginate(list(range(25)), page=3, per_page=10)
    >>> result.items, result.total_pages, result.has_next
    ([20, 21, 22, 23, 24], 3, False)

    Raises
    ------
    ValueError
        If *per_page* is less than 1.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")

    total_items = len(items)
    total_pages = math.ceil(total_items / per_page)
    current = min(max(page, 1), max(total_pages, 1))
    start = (current - 1) * per_page

    return PaginatedResult(
        items=list(items[start:start + per_page]),
        total_pages=total_pages,
        current_page=current,
        has_next=current < total_pages,
        has_prev=current > 1,
        total_items=total_items,
    )
