"""Property extractors.

Each function reads exactly one property kind and returns a plain Python
value.  They are pure and never raise: a missing property, a property of the
wrong kind, or an empty value all yield the natural empty value (``""``,
``None`` or ``[]``).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from notionblog.models import plain_text
from notionblog.properties import (
    DateProperty,
    FilesProperty,
    MultiSelectProperty,
    NumberProperty,
    Property,
    RichTextProperty,
    SelectProperty,
    TitleProperty,
    URLProperty,
    decode_file,
)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a Notion ISO-8601 date or datetime string.

    Date-only values (``"2025-12-15"``) become UTC midnight; naive datetimes
    are taken as UTC.  Unparsable input returns ``None``.

    >>> parse_timestamp("2025-12-15T10:00:00.000Z")
    datetime.datetime(2025, 12, 15, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_title(prop: Property | None) -> str:
    """Concatenated plain text of a title property, or ``""``."""
    if isinstance(prop, (TitleProperty, RichTextProperty)):
        return plain_text(prop.runs)
    return ""


def extract_rich_text(prop: Property | None) -> str:
    """Concatenated plain text of a rich-text property, or ``""``."""
    if isinstance(prop, (RichTextProperty, TitleProperty)):
        return plain_text(prop.runs)
    return ""


def extract_select(prop: Property | None) -> str | None:
    """Name of the selected option, or ``None``."""
    if isinstance(prop, SelectProperty) and prop.option is not None:
        return prop.option.name
    return None


def extract_multi_select(prop: Property | None) -> list[str]:
    """Names of the selected options in Notion order, or ``[]``."""
    if isinstance(prop, MultiSelectProperty):
        return [option.name for option in prop.options]
    return []


def extract_date(prop: Property | None) -> datetime | None:
    """Start of a date property, or ``None``.  The end bound is ignored."""
    if isinstance(prop, DateProperty):
        return parse_timestamp(prop.start)
    return None


def extract_file_url(prop: Property | None) -> str | None:
    """URL of the first file of a files property, or ``None``.

    Only the first entry is considered; if it has no resolvable URL the
    result is ``None`` even when later entries do.
    """
    if isinstance(prop, FilesProperty) and prop.files:
        return prop.files[0].url
    return None


def extract_number(prop: Property | None) -> float | None:
    if isinstance(prop, NumberProperty):
        return prop.number
    return None


def extract_url(prop: Property | None) -> str | None:
    if isinstance(prop, URLProperty) and prop.url:
        return prop.url
    return None


def extract_page_cover(page: Mapping[str, Any]) -> str | None:
    """URL of a page's own cover (not a property), or ``None``."""
    if not isinstance(page, Mapping):
        return None
    ref = decode_file(page.get("cover"))
    return ref.url if ref is not None else None
