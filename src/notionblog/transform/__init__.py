"""notionblog.transform -- raw Notion objects to domain models.

* :mod:`.extractors` -- one function per property kind, never raising.
* :mod:`.pages` -- pages to :class:`~notionblog.models.BlogPost` and
  :class:`~notionblog.models.Place`.
* :mod:`.blocks` -- raw blocks to :class:`~notionblog.models.ContentBlock`.
"""

from __future__ import annotations

from .blocks import SUPPORTED_BLOCK_TYPES, decode_block
from .extractors import (
    extract_date,
    extract_file_url,
    extract_multi_select,
    extract_number,
    extract_page_cover,
    extract_rich_text,
    extract_select,
    extract_title,
    extract_url,
    parse_timestamp,
)
from .pages import (
    transform_page_to_place,
    transform_page_to_post,
    transform_pages_to_places,
    transform_pages_to_posts,
)

__all__ = [
    "SUPPORTED_BLOCK_TYPES",
    "decode_block",
    "extract_date",
    "extract_file_url",
    "extract_multi_select",
    "extract_number",
    "extract_page_cover",
    "extract_rich_text",
    "extract_select",
    "extract_title",
    "extract_url",
    "parse_timestamp",
    "transform_page_to_place",
    "transform_page_to_post",
    "transform_pages_to_places",
    "transform_pages_to_posts",
]
