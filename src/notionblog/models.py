"""Public data models for notionblog.

Every domain object returned by the content API lives here.  They are frozen
dataclasses: callers receive value objects that are never mutated after
construction.  Sequences are stored as tuples for the same reason.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PostStatus(str, Enum):
    """Publication state of a post, stored as a select option in Notion."""

    DRAFT = "📝 초안"
    """Work in progress; never listed."""

    PUBLISHED = "✅ 발행됨"
    """Visible on the site."""

    @classmethod
    def from_label(cls, label: str | None) -> PostStatus | None:
        """Resolve a select option name (or member name) to a status.

        >>> PostStatus.from_label("✅ 발행됨") is PostStatus.PUBLISHED
        True
        >>> PostStatus.from_label("draft") is PostStatus.DRAFT
        True
        """
        if not label:
            return None
        for member in cls:
            if label == member.value or label.strip().upper() == member.name:
                return member
        return None


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotations:
    """Inline formatting of a rich-text run."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


@dataclass(frozen=True)
class RichTextRun:
    """One styled segment of Notion rich text.

    Attributes
    ----------
    plain_text:
        The text content without formatting.
    annotations:
        Bold/italic/... flags and colour.
    href:
        Link target, if the run is a link or mention.
    """

    plain_text: str
    annotations: Annotations = field(default_factory=Annotations)
    href: str | None = None


def plain_text(runs: tuple[RichTextRun, ...] | list[RichTextRun]) -> str:
    """Concatenate the ``plain_text`` of *runs*."""
    return "".join(run.plain_text for run in runs)


# ---------------------------------------------------------------------------
# Content blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextPayload:
    """Paragraphs, headings, list items, quotes and toggles."""

    rich_text: tuple[RichTextRun, ...] = ()
    color: str = "default"


@dataclass(frozen=True)
class ToDoPayload:
    rich_text: tuple[RichTextRun, ...] = ()
    checked: bool = False


@dataclass(frozen=True)
class CodePayload:
    rich_text: tuple[RichTextRun, ...] = ()
    language: str = "plain text"
    caption: tuple[RichTextRun, ...] = ()


@dataclass(frozen=True)
class CalloutPayload:
    """Callout text with its icon; only emoji icons are kept."""

    rich_text: tuple[RichTextRun, ...] = ()
    icon: str | None = None


@dataclass(frozen=True)
class ImagePayload:
    """Image source (external or Notion-hosted) and caption.

    ``url`` is ``None`` when the block carried no resolvable source.
    Notion-hosted URLs expire after about an hour.
    """

    url: str | None = None
    caption: tuple[RichTextRun, ...] = ()


@dataclass(frozen=True)
class DividerPayload:
    pass


@dataclass(frozen=True)
class UnsupportedPayload:
    """Placeholder for block types the renderer does not handle."""

    raw_type: str = "unsupported"


BlockPayload = Union[
    TextPayload,
    ToDoPayload,
    CodePayload,
    CalloutPayload,
    ImagePayload,
    DividerPayload,
    UnsupportedPayload,
]


@dataclass(frozen=True)
class ContentBlock:
    """One node of a post's body.

    Attributes
    ----------
    id:
        Notion block ID.
    type:
        One of :data:`~notionblog.transform.blocks.SUPPORTED_BLOCK_TYPES`
        or ``"unsupported"``.
    has_children:
        Whether Notion reports nested blocks under this one.
    payload:
        Type-specific content.
    children:
        Resolved child blocks, in order.  Empty until the block tree
        resolver has expanded this block.
    """

    id: str
    type: str
    has_children: bool = False
    payload: BlockPayload = field(default_factory=UnsupportedPayload)
    children: tuple[ContentBlock, ...] = ()

    def with_children(self, children: list[ContentBlock] | tuple[ContentBlock, ...]) -> ContentBlock:
        """Return a copy of this block with *children* attached."""
        return dataclasses.replace(self, children=tuple(children))


# ---------------------------------------------------------------------------
# Posts, places, categories
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BlogPost:
    """A post from the posts database, validated and typed.

    Attributes
    ----------
    id:
        Notion page ID.
    title:
        Non-empty post title.
    slug:
        Non-empty URL slug.  Assumed unique across the database; not
        enforced here.
    description:
        Summary used for listings and SEO, or ``None``.
    categories:
        Category labels (emoji included), in Notion order.
    tags:
        Tag labels, in Notion order.
    status:
        Draft or published.
    published_at:
        Publication date, or ``None`` when unset.
    cover_image_url:
        Cover image URL, or ``None``.
    created_at, updated_at:
        Notion's system timestamps.
    content:
        The post body.  ``None`` until fetched with :meth:`with_content`.
    """

    id: str
    title: str
    slug: str
    description: str | None
    categories: tuple[str, ...]
    tags: tuple[str, ...]
    status: PostStatus
    published_at: datetime | None
    cover_image_url: str | None
    created_at: datetime
    updated_at: datetime
    content: tuple[ContentBlock, ...] | None = None

    def with_content(self, blocks: list[ContentBlock] | tuple[ContentBlock, ...]) -> BlogPost:
        """Return a copy of this post with its body attached."""
        return dataclasses.replace(self, content=tuple(blocks))


@dataclass(frozen=True)
class Place:
    """An entry of the places database (restaurants, cafes, stays...)."""

    id: str
    name: str
    type: str | None = None
    district: str | None = None
    map_url: str | None = None
    notes: str | None = None
    rating: float | None = None
    visited_at: datetime | None = None


@dataclass(frozen=True)
class CategoryInfo:
    """A category label with the number of published posts using it.

    ``count`` is always computed from the current set of posts; it is never
    stored anywhere.
    """

    name: str
    color: str = "default"
    count: int = 0


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class PostListResult:
    """One page of published posts.

    Attributes
    ----------
    results:
        Transformed posts, after the optional in-page search filter.
    next_cursor:
        Cursor for the next page, verbatim from Notion.
    has_more:
        Whether Notion reported further pages, verbatim.
    """

    results: list[BlogPost] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


@dataclass
class StatusCounts:
    """Number of posts per status."""

    published: int = 0
    draft: int = 0


@dataclass
class PaginatedResult(Generic[T]):
    """A page of an in-memory list.

    Attributes
    ----------
    items:
        Items on the current page.
    total_pages:
        ``ceil(total_items / per_page)``; ``0`` for an empty list.
    current_page:
        1-based page number after clamping.
    has_next, has_prev:
        Whether neighbouring pages exist.
    total_items:
        Length of the full list.
    """

    items: list[T]
    total_pages: int
    current_page: int
    has_next: bool
    has_prev: bool
    total_items: int
