"""Asynchronous content client for a Notion-backed blog.

:class:`AsyncNotionBlogClient` is the read-only content API: published post
listings, slug and id lookups, category tallies, post bodies and a few
aggregate helpers.  Every Notion request it issues goes through its
:class:`~notionblog.context.NotionContext`, which paces, classifies and
retries it.

Usage::

    import asyncio
    from notionblog import AsyncNotionBlogClient

    async def main():
        async with AsyncNotionBlogClient.from_env() as client:
            page = await client.list_published(category="🍽️ 맛집")
            for post in page.results:
                print(post.title)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionblog.block_tree import BlockTreeResolver
from notionblog.config import NotionBlogConfig
from notionblog.context import NotionContext
from notionblog.errors import NotionBlogConfigError
from notionblog.models import (
    BlogPost,
    CategoryInfo,
    ContentBlock,
    Place,
    PostListResult,
    PostStatus,
    StatusCounts,
)
from notionblog.transform.pages import (
    transform_page_to_post,
    transform_pages_to_places,
    transform_pages_to_posts,
)
from notionblog.utils.categories import count_categories
from notionblog.utils.search import filter_posts

MAX_PAGE_SIZE = 100
"""Largest ``page_size`` the Notion query endpoint accepts."""


# ---------------------------------------------------------------------------
# Query builders
# ---------------------------------------------------------------------------

def status_filter(status: PostStatus) -> dict[str, Any]:
    return {"property": "status", "select": {"equals": status.value}}


def published_filter(category: str | None = None) -> dict[str, Any]:
    """Filter for published posts, optionally within one category."""
    base = status_filter(PostStatus.PUBLISHED)
    if not category:
        return base
    return {
        "and": [
            base,
            {"property": "category", "multi_select": {"contains": category}},
        ]
    }


def slug_filter(slug: str) -> dict[str, Any]:
    return {
        "and": [
            {"property": "slug", "rich_text": {"equals": slug}},
            status_filter(PostStatus.PUBLISHED),
        ]
    }


PUBLISHED_SORT: list[dict[str, str]] = [
    {"property": "published", "direction": "descending"},
]


def _full_pages(results: Any) -> list[dict[str, Any]]:
    # Partial page objects carry only ``object`` and ``id``.
    if not isinstance(results, list):
        return []
    return [r for r in results if isinstance(r, Mapping) and "properties" in r]


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class AsyncNotionBlogClient:
    """Asynchronous read-only client for the blog's Notion databases.

    Parameters
    ----------
    config:
        A :class:`NotionBlogConfig`.  When omitted, one is built from
        *kwargs*.
    context:
        An existing :class:`NotionContext` to share its transport and rate
        limiter.  Takes precedence over *config*.
    **kwargs:
        Forwarded to :class:`NotionBlogConfig` when *config* is ``None``.
    """

    def __init__(
        self,
        config: NotionBlogConfig | None = None,
        *,
        context: NotionContext | None = None,
        **kwargs: Any,
    ) -> None:
        if context is None:
            context = NotionContext(config if config is not None else NotionBlogConfig(**kwargs))
        self._ctx = context
        self._config = context.config

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> AsyncNotionBlogClient:
        """Build a client from ``NOTION_*`` environment variables."""
        return cls(NotionBlogConfig.from_env(environ, **overrides))

    @property
    def context(self) -> NotionContext:
        return self._ctx

    # ------------------------------------------------------------------
    # Raw calls
    # ------------------------------------------------------------------

    async def _query(
        self,
        operation_name: str,
        *,
        database_id: str | None = None,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        db_id = database_id or self._config.database_id
        return await self._ctx.call(
            lambda: self._ctx.databases.query(
                db_id,
                filter=filter,
                sorts=sorts,
                page_size=page_size,
                start_cursor=start_cursor,
            ),
            operation_name,
        )

    async def _count(self, status: PostStatus, operation_name: str) -> int:
        total = 0
        cursor: str | None = None
        while True:
            response = await self._query(
                operation_name,
                filter=status_filter(status),
                page_size=MAX_PAGE_SIZE,
                start_cursor=cursor,
            )
            total += len(_full_pages(response.get("results")))
            cursor = response.get("next_cursor")
            if not response.get("has_more") or not cursor:
                return total

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def list_published(
        self,
        page_size: int = 10,
        start_cursor: str | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> PostListResult:
        """List published posts, newest first.

        Parameters
        ----------
        page_size:
            Posts requested from Notion (1-100).
        start_cursor:
            ``next_cursor`` of a previous result.
        category:
            Only posts whose ``category`` contains this label.
        search:
            Case-insensitive substring matched against title, description
            and tags.  Applied to the fetched page only, after the query,
            so a page may hold fewer than *page_size* posts while
            ``has_more`` is still ``True``.

        Returns
        -------
        PostListResult
            ``next_cursor`` and ``has_more`` are Notion's, verbatim.
        """
        response = await self._query(
            "list published posts",
            filter=published_filter(category),
            sorts=PUBLISHED_SORT,
            page_size=page_size,
            start_cursor=start_cursor,
        )
        posts = transform_pages_to_posts(
            _full_pages(response.get("results")), metrics=self._ctx.metrics
        )
        if search:
            posts = filter_posts(posts, search)

        return PostListResult(
            results=posts,
            next_cursor=response.get("next_cursor"),
            has_more=bool(response.get("has_more", False)),
        )

    async def get_by_slug(self, slug: str) -> BlogPost | None:
        """Return the published post with *slug*, or ``None``.

        If several pages share the slug, the first one Notion returns wins.

        Raises
        ------
        DataTransformError
            The matching page is missing required properties.
        """
        response = await self._query(f"get post by slug: {slug}", filter=slug_filter(slug))
        results = response.get("results") or []
        if not results:
            return None
        page = results[0]
        if not isinstance(page, Mapping) or "properties" not in page:
            return None
        return transform_page_to_post(page)

    async def get_by_id(self, page_id: str) -> BlogPost | None:
        """Return the post stored in page *page_id*.

        Returns ``None`` when Notion answers with a partial page object.  The
        page's status is not checked.
        """
        page = await self._ctx.call(
            lambda: self._ctx.pages.retrieve(page_id),
            f"get post by id: {page_id}",
        )
        if "properties" not in page:
            return None
        return transform_page_to_post(page)

    async def get_recent(self, limit: int = 5) -> list[BlogPost]:
        """The *limit* most recently published posts."""
        result = await self.list_published(page_size=limit)
        return result.results

    async def count_published(self) -> int:
        """Number of published posts, counted across every result page."""
        return await self._count(PostStatus.PUBLISHED, "count published posts")

    async def get_status_counts(self) -> StatusCounts:
        return StatusCounts(
            published=await self._count(PostStatus.PUBLISHED, "count published posts"),
            draft=await self._count(PostStatus.DRAFT, "count draft posts"),
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[CategoryInfo]:
        """Categories in use among published posts, most used first.

        Only the first :data:`MAX_PAGE_SIZE` published posts are tallied.
        Colours are not read from Notion and are always ``"default"``.
        """
        result = await self.list_published(page_size=MAX_PAGE_SIZE)
        return count_categories(result.results)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def get_blocks(self, page_id: str) -> list[ContentBlock]:
        """Resolve the full block tree of *page_id*."""

        async def fetch_page(block_id: str, cursor: str | None) -> dict[str, Any]:
            return await self._ctx.call(
                lambda: self._ctx.blocks.list_children(block_id, start_cursor=cursor),
                f"get page blocks: {block_id}",
            )

        resolver = BlockTreeResolver(fetch_page, max_depth=self._config.max_block_depth)
        return await resolver.resolve(page_id)

    async def get_post_with_content(self, slug: str) -> BlogPost | None:
        """Slug lookup with the post body attached, or ``None``."""
        post = await self.get_by_slug(slug)
        if post is None:
            return None
        return post.with_content(await self.get_blocks(post.id))

    # ------------------------------------------------------------------
    # Places
    # ------------------------------------------------------------------

    async def list_places(
        self,
        page_size: int = MAX_PAGE_SIZE,
        start_cursor: str | None = None,
    ) -> list[Place]:
        """One page of entries from the places database.

        Raises
        ------
        NotionBlogConfigError
            ``places_database_id`` is not configured.
        """
        if not self._config.places_database_id:
            raise NotionBlogConfigError(
                ["places_database_id: NOTION_PLACES_DATABASE_ID is not set"]
            )
        response = await self._query(
            "list places",
            database_id=self._config.places_database_id,
            page_size=page_size,
            start_cursor=start_cursor,
        )
        return transform_pages_to_places(
            _full_pages(response.get("results")), metrics=self._ctx.metrics
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """Diagnostics: ``initialized``, ``queue_size``, ``is_processing``,
        ``rate_limit_per_second``.
        """
        return self._ctx.status()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._ctx.close()

    async def __aenter__(self) -> AsyncNotionBlogClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
