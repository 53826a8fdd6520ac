"""Typed decoding of Notion property values.

Notion returns page properties as a loosely-typed mapping::

    {"title": {"id": "title", "type": "title", "title": [...]},
     "status": {"id": "abc", "type": "select", "select": {"name": "..."}}}

:func:`decode_properties` turns that mapping into a closed set of frozen
dataclasses (one per property kind) in a single pass at the API boundary.
Everything downstream -- the extractors and transformers -- works only with
these types and never indexes into raw dicts.

Decoding is total: a malformed or unknown property becomes an
:class:`UnknownProperty` instead of raising, and malformed items inside a
known property are skipped.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from notionblog.models import Annotations, RichTextRun

# ---------------------------------------------------------------------------
# Property types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectOption:
    name: str
    color: str = "default"


@dataclass(frozen=True)
class FileRef:
    """One entry of a files property or a page cover.

    ``kind`` is ``"external"`` for externally hosted files and ``"file"``
    for files uploaded to Notion.
    """

    kind: str
    url: str | None
    name: str | None = None


@dataclass(frozen=True)
class TitleProperty:
    runs: tuple[RichTextRun, ...] = ()


@dataclass(frozen=True)
class RichTextProperty:
    runs: tuple[RichTextRun, ...] = ()


@dataclass(frozen=True)
class SelectProperty:
    option: SelectOption | None = None


@dataclass(frozen=True)
class MultiSelectProperty:
    options: tuple[SelectOption, ...] = ()


@dataclass(frozen=True)
class DateProperty:
    start: str | None = None
    end: str | None = None
    time_zone: str | None = None


@dataclass(frozen=True)
class FilesProperty:
    files: tuple[FileRef, ...] = ()


@dataclass(frozen=True)
class NumberProperty:
    number: float | None = None


@dataclass(frozen=True)
class URLProperty:
    url: str | None = None


@dataclass(frozen=True)
class RelationProperty:
    ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnknownProperty:
    """A property of a kind this package does not read, or a malformed one."""

    type: str | None = None


Property = Union[
    TitleProperty,
    RichTextProperty,
    SelectProperty,
    MultiSelectProperty,
    DateProperty,
    FilesProperty,
    NumberProperty,
    URLProperty,
    RelationProperty,
    UnknownProperty,
]


# ---------------------------------------------------------------------------
# Rich text / shared shapes
# ---------------------------------------------------------------------------

def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _decode_annotations(raw: Any) -> Annotations:
    if not isinstance(raw, Mapping):
        return Annotations()
    return Annotations(
        bold=bool(raw.get("bold", False)),
        italic=bool(raw.get("italic", False)),
        strikethrough=bool(raw.get("strikethrough", False)),
        underline=bool(raw.get("underline", False)),
        code=bool(raw.get("code", False)),
        color=_str_or_none(raw.get("color")) or "default",
    )


def decode_rich_text(raw: Any) -> tuple[RichTextRun, ...]:
    """Decode a Notion ``rich_text`` array into :class:`RichTextRun` objects.

    Items without a string ``plain_text`` fall back to ``text.content``;
    items with neither are skipped.
    """
    if not isinstance(raw, list):
        return ()
    runs: list[RichTextRun] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        text = item.get("plain_text")
        if not isinstance(text, str):
            inner = item.get("text")
            text = inner.get("content") if isinstance(inner, Mapping) else None
        if not isinstance(text, str):
            continue
        runs.append(
            RichTextRun(
                plain_text=text,
                annotations=_decode_annotations(item.get("annotations")),
                href=_str_or_none(item.get("href")),
            )
        )
    return tuple(runs)


def _decode_option(raw: Any) -> SelectOption | None:
    if not isinstance(raw, Mapping) or not isinstance(raw.get("name"), str):
        return None
    return SelectOption(name=raw["name"], color=_str_or_none(raw.get("color")) or "default")


def decode_file(raw: Any) -> FileRef | None:
    """Decode a file object (``external`` or Notion-hosted ``file``).

    Whichever variant carries a URL wins, so a payload whose ``type`` tag
    disagrees with its populated key still resolves.
    """
    if not isinstance(raw, Mapping):
        return None
    kind = _str_or_none(raw.get("type"))
    name = _str_or_none(raw.get("name"))

    ordered = [kind] if kind in ("external", "file") else []
    ordered += [k for k in ("external", "file") if k not in ordered]
    for variant in ordered:
        inner = raw.get(variant)
        if isinstance(inner, Mapping) and isinstance(inner.get("url"), str) and inner["url"]:
            return FileRef(kind=variant, url=inner["url"], name=name)

    return FileRef(kind=kind or "unknown", url=None, name=name)


# ---------------------------------------------------------------------------
# Property decoding
# ---------------------------------------------------------------------------

def _decode_title(raw: Mapping[str, Any]) -> Property:
    return TitleProperty(runs=decode_rich_text(raw.get("title")))


def _decode_rich_text_property(raw: Mapping[str, Any]) -> Property:
    return RichTextProperty(runs=decode_rich_text(raw.get("rich_text")))


def _decode_select(raw: Mapping[str, Any]) -> Property:
    return SelectProperty(option=_decode_option(raw.get("select")))


def _decode_status(raw: Mapping[str, Any]) -> Property:
    # Notion's dedicated "status" property type reads like a select.
    return SelectProperty(option=_decode_option(raw.get("status")))


def _decode_multi_select(raw: Mapping[str, Any]) -> Property:
    items = raw.get("multi_select")
    if not isinstance(items, list):
        return MultiSelectProperty()
    options = (_decode_option(item) for item in items)
    return MultiSelectProperty(options=tuple(o for o in options if o is not None))


def _decode_date(raw: Mapping[str, Any]) -> Property:
    value = raw.get("date")
    if not isinstance(value, Mapping):
        return DateProperty()
    return DateProperty(
        start=_str_or_none(value.get("start")),
        end=_str_or_none(value.get("end")),
        time_zone=_str_or_none(value.get("time_zone")),
    )


def _decode_files(raw: Mapping[str, Any]) -> Property:
    items = raw.get("files")
    if not isinstance(items, list):
        return FilesProperty()
    files = (decode_file(item) for item in items)
    return FilesProperty(files=tuple(f for f in files if f is not None))


def _decode_number(raw: Mapping[str, Any]) -> Property:
    value = raw.get("number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return NumberProperty()
    return NumberProperty(number=float(value))


def _decode_url(raw: Mapping[str, Any]) -> Property:
    return URLProperty(url=_str_or_none(raw.get("url")))


def _decode_relation(raw: Mapping[str, Any]) -> Property:
    items = raw.get("relation")
    if not isinstance(items, list):
        return RelationProperty()
    ids = (item.get("id") for item in items if isinstance(item, Mapping))
    return RelationProperty(ids=tuple(i for i in ids if isinstance(i, str)))


_DECODERS = {
    "title": _decode_title,
    "rich_text": _decode_rich_text_property,
    "select": _decode_select,
    "status": _decode_status,
    "multi_select": _decode_multi_select,
    "date": _decode_date,
    "files": _decode_files,
    "number": _decode_number,
    "url": _decode_url,
    "relation": _decode_relation,
}


def decode_property(raw: Any) -> Property:
    """Decode one raw property value.  Never raises."""
    if not isinstance(raw, Mapping):
        return UnknownProperty()
    kind = raw.get("type")
    decoder = _DECODERS.get(kind) if isinstance(kind, str) else None
    if decoder is None:
        return UnknownProperty(type=_str_or_none(kind))
    return decoder(raw)


def decode_properties(raw: Any) -> dict[str, Property]:
    """Decode a page's ``properties`` mapping.  Never raises.

    Keys are kept verbatim, so presence checks on the result mirror
    presence checks on the raw payload.
    """
    if not isinstance(raw, Mapping):
        return {}
    return {
        name: decode_property(value)
        for name, value in raw.items()
        if isinstance(name, str)
    }
