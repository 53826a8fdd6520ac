"""Client-side text search over transformed posts."""

from __future__ import annotations

from collections.abc import Iterable

from notionblog.models import BlogPost


def matches_search(post: BlogPost, query: str) -> bool:
    """Case-insensitive substring match on title, description and tags.

    A blank query matches every post.
    """
    needle = query.strip().lower()
    if not needle:
        return True
    if needle in post.title.lower():
        return True
    if post.description and needle in post.description.lower():
        return True
    return any(needle in tag.lower() for tag in post.tags)


def filter_posts(posts: Iterable[BlogPost], query: str | None) -> list[BlogPost]:
    """Keep the posts matching *query*, preserving order."""
    if not query:
        return list(posts)
    return [post for post in posts if matches_search(post, query)]
