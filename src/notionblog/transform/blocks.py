"""Decoding of raw Notion blocks into :class:`ContentBlock` nodes.

Only the block types the site renders are decoded into typed payloads; any
other type becomes an ``"unsupported"`` block that keeps its id and
``has_children`` flag, so the tree shape is preserved.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionblog.models import (
    BlockPayload,
    CalloutPayload,
    CodePayload,
    ContentBlock,
    DividerPayload,
    ImagePayload,
    TextPayload,
    ToDoPayload,
    UnsupportedPayload,
)
from notionblog.properties import decode_file, decode_rich_text

TEXT_BLOCK_TYPES: frozenset[str] = frozenset({
    "paragraph",
    "heading_1",
    "heading_2",
    "heading_3",
    "bulleted_list_item",
    "numbered_list_item",
    "quote",
    "toggle",
})

SUPPORTED_BLOCK_TYPES: frozenset[str] = TEXT_BLOCK_TYPES | {
    "to_do",
    "code",
    "callout",
    "divider",
    "image",
}

UNSUPPORTED = "unsupported"


def _color(body: Mapping[str, Any]) -> str:
    color = body.get("color")
    return color if isinstance(color, str) else "default"


def _callout_icon(icon: Any) -> str | None:
    # Only emoji icons are kept; file icons are dropped.
    if isinstance(icon, Mapping) and icon.get("type") == "emoji":
        emoji = icon.get("emoji")
        if isinstance(emoji, str) and emoji:
            return emoji
    return None


def _decode_payload(block_type: str, body: Mapping[str, Any]) -> BlockPayload:
    if block_type in TEXT_BLOCK_TYPES:
        return TextPayload(rich_text=decode_rich_text(body.get("rich_text")), color=_color(body))
    if block_type == "to_do":
        return ToDoPayload(
            rich_text=decode_rich_text(body.get("rich_text")),
            checked=bool(body.get("checked", False)),
        )
    if block_type == "code":
        language = body.get("language")
        return CodePayload(
            rich_text=decode_rich_text(body.get("rich_text")),
            language=language if isinstance(language, str) and language else "plain text",
            caption=decode_rich_text(body.get("caption")),
        )
    if block_type == "callout":
        return CalloutPayload(
            rich_text=decode_rich_text(body.get("rich_text")),
            icon=_callout_icon(body.get("icon")),
        )
    if block_type == "image":
        ref = decode_file(body)
        return ImagePayload(
            url=ref.url if ref is not None else None,
            caption=decode_rich_text(body.get("caption")),
        )
    return DividerPayload()


def decode_block(raw: Mapping[str, Any]) -> ContentBlock:
    """Decode one raw block object.

    Parameters
    ----------
    raw:
        A block object from ``GET /blocks/{id}/children``.

    Returns
    -------
    ContentBlock
        With an empty ``children`` tuple; the block tree resolver fills
        children in.
    """
    block_id = str(raw.get("id", ""))
    has_children = bool(raw.get("has_children", False))
    block_type = raw.get("type")

    if not isinstance(block_type, str) or block_type not in SUPPORTED_BLOCK_TYPES:
        return ContentBlock(
            id=block_id,
            type=UNSUPPORTED,
            has_children=has_children,
            payload=UnsupportedPayload(
                raw_type=block_type if isinstance(block_type, str) else UNSUPPORTED
            ),
        )

    body = raw.get(block_type)
    if not isinstance(body, Mapping):
        body = {}

    return ContentBlock(
        id=block_id,
        type=block_type,
        has_children=has_children,
        payload=_decode_payload(block_type, body),
    )
