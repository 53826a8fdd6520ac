"""Shared test fixtures for the notionblog test suite.

Raw Notion payloads are built with the ``make_page`` / ``make_block``
factories; ``post_corpus`` is a twelve-post database (eleven published, one
draft) served by :class:`FakeNotion`, an in-memory stand-in for the three
read endpoints.
"""

from __future__ import annotations

import re
from typing import Any

import pytest

from notionblog.config import NotionBlogConfig

TOKEN = "ntn_test_token_1234567890"
DATABASE_ID = "0123456789abcdef0123456789abcdef"
PLACES_DATABASE_ID = "fedcba9876543210fedcba9876543210"

PUBLISHED = "✅ 발행됨"
DRAFT = "📝 초안"


# ---------------------------------------------------------------------------
# Raw payload builders
# ---------------------------------------------------------------------------

def rich_text(text: str, **annotations: Any) -> list[dict[str, Any]]:
    return [
        {
            "type": "text",
            "text": {"content": text, "link": None},
            "annotations": {
                "bold": False,
                "italic": False,
                "strikethrough": False,
                "underline": False,
                "code": False,
                "color": "default",
                **annotations,
            },
            "plain_text": text,
            "href": None,
        }
    ]


def build_page(
    page_id: str = "page-1",
    *,
    title: str | None = "Hello world",
    slug: str | None = "hello-world",
    status: str | None = PUBLISHED,
    description: str | None = None,
    categories: list[str] | None = None,
    tags: list[str] | None = None,
    published: str | None = None,
    cover_url: str | None = None,
    page_cover_url: str | None = None,
    omit: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Build a raw posts-database page.  ``None`` leaves a property empty;
    names in *omit* remove it entirely."""
    props: dict[str, Any] = {
        "title": {"id": "title", "type": "title", "title": rich_text(title) if title else []},
        "slug": {"id": "s", "type": "rich_text", "rich_text": rich_text(slug) if slug else []},
        "status": {
            "id": "st",
            "type": "select",
            "select": {"id": "o", "name": status, "color": "green"} if status else None,
        },
        "description": {
            "id": "d",
            "type": "rich_text",
            "rich_text": rich_text(description) if description else [],
        },
        "category": {
            "id": "c",
            "type": "multi_select",
            "multi_select": [{"id": n, "name": n, "color": "blue"} for n in categories or []],
        },
        "tags": {
            "id": "t",
            "type": "multi_select",
            "multi_select": [{"id": n, "name": n, "color": "gray"} for n in tags or []],
        },
        "published": {
            "id": "p",
            "type": "date",
            "date": {"start": published, "end": None, "time_zone": None} if published else None,
        },
        "cover": {
            "id": "cv",
            "type": "files",
            "files": (
                [{"name": "cover.jpg", "type": "external", "external": {"url": cover_url}}]
                if cover_url
                else []
            ),
        },
        "Places": {"id": "pl", "type": "relation", "relation": [], "has_more": False},
    }
    for name in omit:
        props.pop(name, None)

    page: dict[str, Any] = {
        "object": "page",
        "id": page_id,
        "created_time": "2025-12-01T09:00:00.000Z",
        "last_edited_time": "2025-12-02T10:30:00.000Z",
        "cover": (
            {"type": "external", "external": {"url": page_cover_url}}
            if page_cover_url
            else None
        ),
        "archived": False,
        "properties": props,
    }
    return page


def build_place(
    page_id: str = "place-1",
    *,
    name: str | None = "성수 카페",
    place_type: str | None = "☕ 카페",
    district: str | None = "성수",
    map_url: str | None = "https://naver.me/53l4s0SD",
    notes: str | None = None,
    rating: float | None = 4,
    visited: str | None = "2025-12-30",
) -> dict[str, Any]:
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2025-12-01T09:00:00.000Z",
        "last_edited_time": "2025-12-01T09:00:00.000Z",
        "cover": None,
        "properties": {
            "name": {"id": "title", "type": "title", "title": rich_text(name) if name else []},
            "type": {
                "id": "ty",
                "type": "select",
                "select": {"name": place_type, "color": "brown"} if place_type else None,
            },
            "district": {
                "id": "di",
                "type": "rich_text",
                "rich_text": rich_text(district) if district else [],
            },
            "naver-maps": {"id": "nm", "type": "url", "url": map_url},
            "notes": {"id": "no", "type": "rich_text", "rich_text": rich_text(notes) if notes else []},
            "rating": {"id": "ra", "type": "number", "number": rating},
            "visited-date": {
                "id": "vd",
                "type": "date",
                "date": {"start": visited, "end": None} if visited else None,
            },
            "Posts": {"id": "po", "type": "relation", "relation": []},
        },
    }


def build_block(
    block_id: str,
    block_type: str = "paragraph",
    text: str = "",
    *,
    has_children: bool = False,
    **body: Any,
) -> dict[str, Any]:
    content: dict[str, Any] = {"rich_text": rich_text(text) if text else [], "color": "default"}
    content.update(body)
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: content,
    }


# ---------------------------------------------------------------------------
# Twelve-post corpus
# ---------------------------------------------------------------------------

_CORPUS_ROWS: list[tuple[str, str, list[str], list[str], str, str]] = [
    # slug, title, categories, tags, published, status
    ("seoul-seongsu-restaurants", "서울 성수동 맛집 베스트 5", ["🍽️ 맛집"], ["서울", "성수"], "2025-12-20", PUBLISHED),
    ("jeju-trip", "제주도 3박 4일 여행기", ["✈️ 여행"], ["제주", "여행"], "2025-12-18", PUBLISHED),
    ("nextjs-notion-blog", "Notion으로 블로그 만들기", ["💻 기술"], ["Notion", "Next.js"], "2025-12-16", PUBLISHED),
    ("busan-seafood", "부산 해산물 맛집", ["🍽️ 맛집", "✈️ 여행"], ["부산"], "2025-12-14", PUBLISHED),
    ("daily-morning", "아침 루틴 기록", ["📚 일상"], ["루틴"], "2025-12-12", PUBLISHED),
    ("python-asyncio", "Python asyncio 정리", ["💻 기술"], ["Python"], "2025-12-10", PUBLISHED),
    ("gangneung-cafe", "강릉 카페 투어", ["✈️ 여행"], ["강릉", "카페"], "2025-12-08", PUBLISHED),
    ("exhibition-review", "전시회 후기", ["🎨 문화"], ["전시"], "2025-12-06", PUBLISHED),
    ("weekend-notes", "주말 기록", ["📚 일상"], [], "2025-12-04", PUBLISHED),
    ("euljiro-bar", "을지로 노포 탐방", ["🍽️ 맛집"], ["서울", "을지로"], "2025-12-02", PUBLISHED),
    ("typescript-tips", "TypeScript 팁", ["💻 기술"], ["TypeScript"], "2025-11-30", PUBLISHED),
    ("draft-ideas", "아이디어 메모", ["📚 일상"], [], "2025-11-28", DRAFT),
]


@pytest.fixture
def post_corpus() -> list[dict[str, Any]]:
    """Twelve raw pages; three published posts are in ``"🍽️ 맛집"``."""
    return [
        build_page(
            f"post-{i:02d}",
            title=title,
            slug=slug,
            status=status,
            description=f"{title} 요약",
            categories=categories,
            tags=tags,
            published=published,
        )
        for i, (slug, title, categories, tags, published, status) in enumerate(_CORPUS_ROWS, 1)
    ]


# ---------------------------------------------------------------------------
# In-memory Notion
# ---------------------------------------------------------------------------

def _prop(page: dict[str, Any], name: str) -> dict[str, Any]:
    return page.get("properties", {}).get(name) or {}


def _matches(page: dict[str, Any], flt: dict[str, Any] | None) -> bool:
    if not flt or "properties" not in page:
        return True
    if "and" in flt:
        return all(_matches(page, f) for f in flt["and"])
    prop = _prop(page, flt["property"])
    if "select" in flt:
        selected = prop.get("select") or {}
        return selected.get("name") == flt["select"]["equals"]
    if "multi_select" in flt:
        names = [o["name"] for o in prop.get("multi_select") or []]
        return flt["multi_select"]["contains"] in names
    if "rich_text" in flt:
        text = "".join(r["plain_text"] for r in prop.get("rich_text") or [])
        return text == flt["rich_text"]["equals"]
    raise AssertionError(f"unsupported filter {flt!r}")


class FakeNotion:
    """Serves databases, pages and block children from dicts.

    Install with ``patch.object(ctx.transport, "request", fake.request)``.
    """

    def __init__(self) -> None:
        self.databases: dict[str, list[dict[str, Any]]] = {}
        self.children: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self.children_page_size = 100

    def _paged(self, items: list[dict[str, Any]], size: int, cursor: str | None) -> dict[str, Any]:
        start = int(cursor) if cursor else 0
        chunk = items[start:start + size]
        end = start + len(chunk)
        has_more = end < len(items)
        return {
            "object": "list",
            "results": chunk,
            "next_cursor": str(end) if has_more else None,
            "has_more": has_more,
        }

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        self.calls.append((method, path))

        m = re.fullmatch(r"/databases/([^/]+)/query", path)
        if m and method == "POST":
            body = kwargs.get("json") or {}
            pages = [p for p in self.databases.get(m.group(1), []) if _matches(p, body.get("filter"))]
            for sort in reversed(body.get("sorts") or []):
                pages.sort(
                    key=lambda p, s=sort: ((_prop(p, s["property"]).get("date") or {}).get("start") or ""),
                    reverse=sort["direction"] == "descending",
                )
            return self._paged(pages, body.get("page_size", 100), body.get("start_cursor"))

        m = re.fullmatch(r"/pages/([^/]+)", path)
        if m and method == "GET":
            for pages in self.databases.values():
                for page in pages:
                    if page["id"] == m.group(1):
                        return page
            return {"object": "page", "id": m.group(1)}

        m = re.fullmatch(r"/blocks/([^/]+)/children", path)
        if m and method == "GET":
            params = kwargs.get("params") or {}
            return self._paged(
                self.children.get(m.group(1), []),
                min(params.get("page_size", 100), self.children_page_size),
                params.get("start_cursor"),
            )

        raise AssertionError(f"unexpected request {method} {path}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> NotionBlogConfig:
    """Fast test configuration: no retry delay, top rate limit."""
    return NotionBlogConfig(
        token=TOKEN,
        database_id=DATABASE_ID,
        places_database_id=PLACES_DATABASE_ID,
        rate_limit_rps=10,
        retry_initial_delay=0.0,
    )


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def make_place():
    return build_place


@pytest.fixture
def make_block():
    return build_block


@pytest.fixture
def fake_notion(post_corpus) -> FakeNotion:
    fake = FakeNotion()
    fake.databases[DATABASE_ID] = post_corpus
    return fake
