"""Page transformer: raw Notion pages to :class:`BlogPost` / :class:`Place`.

The single-page functions validate and raise
:class:`~notionblog.errors.DataTransformError`; the batch functions never
raise and instead skip (and log) every page that fails.

Posts database schema
---------------------

======================  =============  =========
Property                Kind           Required
======================  =============  =========
``title``               title          yes
``status``              select         yes
``slug``                rich_text      yes
``description``         rich_text      no
``category``            multi_select   no
``tags``                multi_select   no
``published``           date           no
``cover``               files          no
======================  =============  =========
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from notionblog.errors import DataTransformError
from notionblog.models import BlogPost, Place, PostStatus
from notionblog.observability import NoopMetricsHook, get_logger
from notionblog.properties import Property, decode_properties
from notionblog.transform.extractors import (
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

log = get_logger("notionblog.transform")

POST_REQUIRED_PROPERTIES: tuple[str, ...] = ("title", "status", "slug")
PLACE_REQUIRED_PROPERTIES: tuple[str, ...] = ("name",)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page_properties(page: Any, required: tuple[str, ...]) -> dict[str, Property]:
    if not isinstance(page, Mapping):
        raise DataTransformError(
            "Expected a Notion page object", raw_data=page
        )
    raw_props = page.get("properties")
    if not isinstance(raw_props, Mapping):
        raise DataTransformError(
            "Page has no properties", field="properties", raw_data=page
        )
    for name in required:
        if name not in raw_props:
            raise DataTransformError(
                f"Missing required property: {name}", field=name, raw_data=page
            )
    return decode_properties(raw_props)


def _require_value(value: str | None, field: str, page: Any) -> str:
    if not value:
        raise DataTransformError(
            f"Required property '{field}' is empty", field=field, raw_data=page
        )
    return value


def _system_time(page: Mapping[str, Any], key: str) -> datetime:
    parsed = parse_timestamp(page.get(key))
    return parsed if parsed is not None else _EPOCH


def _page_id(page: Any) -> Any:
    return page.get("id") if isinstance(page, Mapping) else None


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

def transform_page_to_post(page: Mapping[str, Any]) -> BlogPost:
    """Turn one posts-database page into a :class:`BlogPost`.

    Parameters
    ----------
    page:
        A full page object as returned by the Notion API.

    Raises
    ------
    DataTransformError
        A required property (``title``, ``status``, ``slug``) is missing or
        empty, the status label is not a known :class:`PostStatus`, or the
        page is otherwise malformed.  ``raw_data`` holds the page.
    """
    try:
        props = _page_properties(page, POST_REQUIRED_PROPERTIES)

        title = _require_value(extract_title(props.get("title")), "title", page)
        slug = _require_value(extract_rich_text(props.get("slug")), "slug", page)
        label = _require_value(extract_select(props.get("status")), "status", page)

        status = PostStatus.from_label(label)
        if status is None:
            raise DataTransformError(
                f"Unknown post status: {label!r}", field="status", raw_data=page
            )

        cover = extract_file_url(props.get("cover")) or extract_page_cover(page)

        return BlogPost(
            id=str(page["id"]),
            title=title,
            slug=slug,
            description=extract_rich_text(props.get("description")) or None,
            categories=tuple(extract_multi_select(props.get("category"))),
            tags=tuple(extract_multi_select(props.get("tags"))),
            status=status,
            published_at=extract_date(props.get("published")),
            cover_image_url=cover,
            created_at=_system_time(page, "created_time"),
            updated_at=_system_time(page, "last_edited_time"),
        )
    except DataTransformError:
        raise
    except Exception as exc:
        raise DataTransformError(
            f"Failed to transform page {_page_id(page)!r}: {exc}",
            raw_data=page,
            cause=exc,
        ) from exc


def _transform_batch(
    pages: Iterable[Mapping[str, Any]],
    transform: Any,
    kind: str,
    metrics: Any | None,
) -> list[Any]:
    hook = metrics if metrics is not None else NoopMetricsHook()
    results: list[Any] = []
    failures: list[dict[str, Any]] = []

    for page in pages:
        try:
            results.append(transform(page))
        except DataTransformError as exc:
            failures.append(
                {"page_id": _page_id(page), "field": exc.field, "error": exc.message}
            )

    if failures:
        hook.increment(
            "notionblog.transform_failures_total",
            value=len(failures),
            tags={"kind": kind},
        )
        log.warning(
            "Skipped pages that failed to transform",
            extra={
                "extra_fields": {
                    "kind": kind,
                    "skipped": len(failures),
                    "transformed": len(results),
                    "failures": failures,
                }
            },
        )
    return results


def transform_pages_to_posts(
    pages: Iterable[Mapping[str, Any]],
    metrics: Any | None = None,
) -> list[BlogPost]:
    """Transform many pages, skipping the ones that fail.

    Never raises.  Output order matches input order.
    """
    return _transform_batch(pages, transform_page_to_post, "post", metrics)


# ---------------------------------------------------------------------------
# Places
# ---------------------------------------------------------------------------

def transform_page_to_place(page: Mapping[str, Any]) -> Place:
    """Turn one places-database page into a :class:`Place`.

    Only ``name`` is required.  ``type``, ``district``, ``naver-maps``,
    ``notes``, ``rating`` and ``visited-date`` degrade to ``None``.
    """
    try:
        props = _page_properties(page, PLACE_REQUIRED_PROPERTIES)
        name = _require_value(extract_title(props.get("name")), "name", page)

        return Place(
            id=str(page["id"]),
            name=name,
            type=extract_select(props.get("type")),
            district=extract_rich_text(props.get("district")) or extract_select(props.get("district")),
            map_url=extract_url(props.get("naver-maps")),
            notes=extract_rich_text(props.get("notes")) or None,
            rating=extract_number(props.get("rating")),
            visited_at=extract_date(props.get("visited-date")),
        )
    except DataTransformError:
        raise
    except Exception as exc:
        raise DataTransformError(
            f"Failed to transform place {_page_id(page)!r}: {exc}",
            raw_data=page,
            cause=exc,
        ) from exc


def transform_pages_to_places(
    pages: Iterable[Mapping[str, Any]],
    metrics: Any | None = None,
) -> list[Place]:
    """Batch variant of :func:`transform_page_to_place`.  Never raises."""
    return _transform_batch(pages, transform_page_to_place, "place", metrics)
