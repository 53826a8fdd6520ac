"""Tests for notionblog.models."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from notionblog.models import (
    BlogPost,
    ContentBlock,
    PostStatus,
    RichTextRun,
    TextPayload,
    plain_text,
)

NOW = datetime(2025, 12, 15, tzinfo=timezone.utc)


class TestPostStatus:
    def test_labels(self):
        assert PostStatus.PUBLISHED.value == "✅ 발행됨"
        assert PostStatus.DRAFT.value == "📝 초안"

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("✅ 발행됨", PostStatus.PUBLISHED),
            ("📝 초안", PostStatus.DRAFT),
            ("published", PostStatus.PUBLISHED),
            (" Draft ", PostStatus.DRAFT),
            ("발행됨", None),
            ("", None),
            (None, None),
        ],
    )
    def test_from_label(self, label, expected):
        assert PostStatus.from_label(label) is expected


class TestValueObjects:
    def test_with_content_returns_new_post(self):
        post = BlogPost(
            id="p", title="t", slug="s", description=None, categories=(), tags=(),
            status=PostStatus.PUBLISHED, published_at=None, cover_image_url=None,
            created_at=NOW, updated_at=NOW,
        )
        block = ContentBlock(id="b", type="paragraph", payload=TextPayload())
        with_body = post.with_content([block])

        assert with_body is not post
        assert post.content is None
        assert with_body.content == (block,)

    def test_with_children_returns_new_block(self):
        parent = ContentBlock(id="t", type="toggle", has_children=True)
        child = ContentBlock(id="c", type="paragraph")
        expanded = parent.with_children([child])

        assert parent.children == ()
        assert expanded.children == (child,)

    def test_frozen(self):
        block = ContentBlock(id="b", type="divider")
        with pytest.raises(dataclasses.FrozenInstanceError):
            block.id = "other"

    def test_plain_text(self):
        assert plain_text([RichTextRun("a"), RichTextRun("b")]) == "ab"
