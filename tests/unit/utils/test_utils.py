"""Tests for notionblog.utils: pagination, search and category helpers."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from notionblog.models import BlogPost, CategoryInfo, PostStatus
from notionblog.utils import (
    category_to_slug,
    count_categories,
    filter_posts,
    matches_search,
    paginate,
    remove_category_emoji,
    slug_to_category,
    with_counts,
)

NOW = datetime(2025, 12, 15, tzinfo=timezone.utc)


def make_post(
    slug: str = "p",
    title: str = "Title",
    description: str | None = None,
    categories: tuple[str, ...] = (),
    tags: tuple[str, ...] = (),
) -> BlogPost:
    return BlogPost(
        id=slug,
        title=title,
        slug=slug,
        description=description,
        categories=categories,
        tags=tags,
        status=PostStatus.PUBLISHED,
        published_at=NOW,
        cover_image_url=None,
        created_at=NOW,
        updated_at=NOW,
    )


# ---------------------------------------------------------------------------
# paginate
# ---------------------------------------------------------------------------

class TestPaginate:
    def test_middle_page(self):
        result = paginate(list(range(25)), page=2, per_page=10)
        assert result.items == list(range(10, 20))
        assert result.total_pages == 3
        assert result.current_page == 2
        assert result.has_next is True
        assert result.has_prev is True
        assert result.total_items == 25

    def test_page_clamped_high(self):
        result = paginate(list(range(12)), page=99, per_page=6)
        assert result.current_page == 2
        assert result.items == list(range(6, 12))
        assert result.has_next is False

    def test_page_clamped_low(self):
        result = paginate(list(range(12)), page=-3, per_page=6)
        assert result.current_page == 1
        assert result.has_prev is False

    def test_empty_list(self):
        result = paginate([], page=5, per_page=6)
        assert result.items == []
        assert result.total_pages == 0
        assert result.current_page == 1
        assert result.has_next is False
        assert result.has_prev is False

    def test_invalid_per_page(self):
        with pytest.raises(ValueError):
            paginate([1, 2], per_page=0)

    @given(
        n=st.integers(min_value=0, max_value=200),
        page=st.integers(min_value=-5, max_value=50),
        per_page=st.integers(min_value=1, max_value=30),
    )
    def test_invariants(self, n, page, per_page):
        result = paginate(list(range(n)), page, per_page)
        assert result.total_pages == math.ceil(n / per_page)
        assert 1 <= result.current_page <= max(result.total_pages, 1)
        assert len(result.items) <= per_page
        assert result.has_prev == (result.current_page > 1)
        assert result.has_next == (result.current_page < result.total_pages)
        if n:
            assert result.items


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------

class TestSearch:
    def test_matches_title_description_tags(self):
        post = make_post(title="제주 여행", description="Three days", tags=("Island",))
        assert matches_search(post, "제주")
        assert matches_search(post, "three")
        assert matches_search(post, "ISLAND")
        assert not matches_search(post, "서울")

    def test_blank_query_matches(self):
        assert matches_search(make_post(), "   ")

    def test_description_none(self):
        assert not matches_search(make_post(description=None), "x-y-z")

    def test_filter_posts_preserves_order(self):
        posts = [make_post("a", "Alpha"), make_post("b", "Beta"), make_post("c", "Alphabet")]
        assert [p.slug for p in filter_posts(posts, "alpha")] == ["a", "c"]
        assert len(filter_posts(posts, None)) == 3


# ---------------------------------------------------------------------------
# categories
# ---------------------------------------------------------------------------

class TestCategories:
    def test_count_sorted_descending_stable(self):
        posts = [
            make_post("1", categories=("✈️ 여행",)),
            make_post("2", categories=("🍽️ 맛집", "✈️ 여행")),
            make_post("3", categories=("🍽️ 맛집",)),
            make_post("4", categories=("💻 기술",)),
        ]
        assert [(c.name, c.count) for c in count_categories(posts)] == [
            ("✈️ 여행", 2),
            ("🍽️ 맛집", 2),
            ("💻 기술", 1),
        ]

    def test_with_counts_recomputes(self):
        categories = [CategoryInfo("🍽️ 맛집", "orange", 99), CategoryInfo("🎨 문화", "pink")]
        posts = [make_post("1", categories=("🍽️ 맛집",)), make_post("2", categories=("🍽️ 맛집",))]
        result = with_counts(categories, posts)
        assert [(c.name, c.color, c.count) for c in result] == [
            ("🍽️ 맛집", "orange", 2),
            ("🎨 문화", "pink", 0),
        ]

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("🍽️ 맛집", "맛집"),
            ("✈️ 여행", "여행"),
            ("💻 기술", "기술"),
            ("📚 일상", "일상"),
            ("Plain", "Plain"),
        ],
    )
    def test_remove_category_emoji(self, name, expected):
        assert remove_category_emoji(name) == expected

    def test_category_to_slug_lowercases(self):
        assert category_to_slug("💻 Tech") == "tech"

    def test_slug_to_category(self):
        categories = [CategoryInfo("🍽️ 맛집"), CategoryInfo("💻 Tech")]
        assert slug_to_category("맛집", categories) == "🍽️ 맛집"
        assert slug_to_category("TECH", categories) == "💻 Tech"
        assert slug_to_category("없음", categories) is None
