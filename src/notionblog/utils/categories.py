"""Category helpers: counting, emoji stripping and URL slugs.

Category labels carry a leading emoji (``"🍽️ 맛집"``).  URL slugs drop it
and are lower-cased (``"맛집"``); :func:`slug_to_category` maps a slug back
to the full label.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from notionblog.models import BlogPost, CategoryInfo

# Pictographs, dingbats and misc symbols, plus the variation selector and
# zero-width joiner that follow them in composed emoji.
_EMOJI_RE = re.compile(r"[\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF\uFE0F\u200D]\s*")


def count_categories(posts: Iterable[BlogPost]) -> list[CategoryInfo]:
    """Tally category usage across *posts*.

    Sorted by count, highest first; ties keep first-seen order.
    """
    counts: Counter[str] = Counter()
    for post in posts:
        counts.update(post.categories)
    # Counter preserves insertion order and sorted() is stable.
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [CategoryInfo(name=name, count=count) for name, count in ordered]


def with_counts(
    categories: Iterable[CategoryInfo],
    posts: Iterable[BlogPost],
) -> list[CategoryInfo]:
    """Return *categories* with ``count`` recomputed from *posts*."""
    post_list = list(posts)
    return [
        CategoryInfo(
            name=category.name,
            color=category.color,
            count=sum(1 for post in post_list if category.name in post.categories),
        )
        for category in categories
    ]


def remove_category_emoji(name: str) -> str:
    """``"🍽️ 맛집"`` -> ``"맛집"``."""
    return _EMOJI_RE.sub("", name).strip()


def category_to_slug(name: str) -> str:
    """``"💻 Tech"`` -> ``"tech"``."""
    return remove_category_emoji(name).lower()


def slug_to_category(slug: str, categories: Iterable[CategoryInfo]) -> str | None:
    """Full category label whose slug equals *slug*, or ``None``."""
    wanted = slug.lower()
    for category in categories:
        if category_to_slug(category.name) == wanted:
            return category.name
    return None
