from .categories import (
    category_to_slug,
    count_categories,
    remove_category_emoji,
    slug_to_category,
    with_counts,
)
from .pagination import paginate
from .search import filter_posts, matches_search

__all__ = [
    "paginate",
    "matches_search",
    "filter_posts",
    "count_categories",
    "with_counts",
    "remove_category_emoji",
    "category_to_slug",
    "slug_to_category",
]
