"""Tests for notionblog.config."""

from __future__ import annotations

import pytest

from notionblog.config import NotionBlogConfig, mask_api_key
from notionblog.errors import ErrorCode, NotionBlogConfigError

TOKEN = "ntn_abcdefghijklmnopqrstuvwxyz"
DB = "0123456789abcdef0123456789abcdef"


def make_config(**overrides) -> NotionBlogConfig:
    values = dict(token=TOKEN, database_id=DB)
    values.update(overrides)
    return NotionBlogConfig(**values)


class TestDefaults:
    def test_defaults(self):
        config = make_config()
        assert config.cache_ttl_seconds == 60
        assert config.rate_limit_rps == 3.0
        assert config.retry_max_attempts == 3
        assert config.retry_initial_delay == 1.0
        assert config.max_block_depth is None
        assert config.places_database_id is None
        assert config.base_url == "https://api.notion.com/v1"

    @pytest.mark.parametrize("token", ["ntn_abc123xyz", "secret_abc123xyz"])
    def test_token_prefixes(self, token):
        assert make_config(token=token).token == token


class TestValidation:
    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"token": ""}, "token"),
            ({"token": "sk_live_123"}, "token"),
            ({"database_id": ""}, "database_id"),
            ({"database_id": "0123456789ABCDEF0123456789ABCDEF"}, "database_id"),
            ({"database_id": "01234567-89ab-cdef-0123-456789abcdef"}, "database_id"),
            ({"places_database_id": "short"}, "places_database_id"),
            ({"cache_ttl_seconds": 5}, "cache_ttl_seconds"),
            ({"cache_ttl_seconds": 3601}, "cache_ttl_seconds"),
            ({"rate_limit_rps": 0.5}, "rate_limit_rps"),
            ({"rate_limit_rps": 11}, "rate_limit_rps"),
            ({"retry_max_attempts": 0}, "retry_max_attempts"),
            ({"retry_initial_delay": -1}, "retry_initial_delay"),
            ({"timeout_seconds": 0}, "timeout_seconds"),
            ({"max_block_depth": 0}, "max_block_depth"),
            ({"base_url": "http://api.notion.com/v1"}, "base_url"),
            ({"base_url": "ftp://api.notion.com"}, "base_url"),
        ],
    )
    def test_invalid_field(self, overrides, field):
        with pytest.raises(NotionBlogConfigError) as exc_info:
            make_config(**overrides)
        assert [issue.split(":")[0] for issue in exc_info.value.issues] == [field]

    @pytest.mark.parametrize("ttl", [10, 3600])
    def test_ttl_bounds_inclusive(self, ttl):
        assert make_config(cache_ttl_seconds=ttl).cache_ttl_seconds == ttl

    def test_localhost_http_allowed(self):
        assert make_config(base_url="http://localhost:8080/v1").base_url.startswith("http://")

    def test_reports_every_issue(self):
        with pytest.raises(NotionBlogConfigError) as exc_info:
            NotionBlogConfig(token="bad", database_id="bad", cache_ttl_seconds=1)
        err = exc_info.value
        assert len(err.issues) == 3
        assert err.code == ErrorCode.CONFIG_ERROR
        assert isinstance(err, ValueError)
        for issue in err.issues:
            assert issue in err.message


class TestFromEnv:
    def test_reads_all_variables(self):
        config = NotionBlogConfig.from_env(
            {
                "NOTION_API_KEY": TOKEN,
                "NOTION_DATABASE_ID": DB,
                "NOTION_PLACES_DATABASE_ID": "f" * 32,
                "NOTION_CACHE_TTL": "120",
                "NOTION_RATE_LIMIT": "2",
            }
        )
        assert config.token == TOKEN
        assert config.places_database_id == "f" * 32
        assert config.cache_ttl_seconds == 120
        assert config.rate_limit_rps == 2.0

    def test_optional_variables_default(self):
        config = NotionBlogConfig.from_env({"NOTION_API_KEY": TOKEN, "NOTION_DATABASE_ID": DB})
        assert config.cache_ttl_seconds == 60
        assert config.rate_limit_rps == 3.0

    def test_overrides_win(self):
        config = NotionBlogConfig.from_env(
            {"NOTION_API_KEY": TOKEN, "NOTION_DATABASE_ID": DB, "NOTION_RATE_LIMIT": "2"},
            rate_limit_rps=7,
        )
        assert config.rate_limit_rps == 7

    def test_missing_required(self):
        with pytest.raises(NotionBlogConfigError) as exc_info:
            NotionBlogConfig.from_env({})
        fields = {issue.split(":")[0] for issue in exc_info.value.issues}
        assert fields == {"token", "database_id"}

    def test_non_numeric_reported_with_other_issues(self):
        with pytest.raises(NotionBlogConfigError) as exc_info:
            NotionBlogConfig.from_env(
                {"NOTION_API_KEY": TOKEN, "NOTION_DATABASE_ID": "nope", "NOTION_CACHE_TTL": "soon"}
            )
        fields = sorted(issue.split(":")[0] for issue in exc_info.value.issues)
        assert fields == ["cache_ttl_seconds", "database_id"]

    def test_non_numeric_alone(self):
        with pytest.raises(NotionBlogConfigError) as exc_info:
            NotionBlogConfig.from_env(
                {"NOTION_API_KEY": TOKEN, "NOTION_DATABASE_ID": DB, "NOTION_RATE_LIMIT": "fast"}
            )
        assert "NOTION_RATE_LIMIT" in exc_info.value.issues[0]

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", TOKEN)
        monkeypatch.setenv("NOTION_DATABASE_ID", DB)
        monkeypatch.delenv("NOTION_CACHE_TTL", raising=False)
        monkeypatch.delenv("NOTION_RATE_LIMIT", raising=False)
        monkeypatch.delenv("NOTION_PLACES_DATABASE_ID", raising=False)
        assert NotionBlogConfig.from_env().database_id == DB


class TestMasking:
    def test_mask_api_key(self):
        assert mask_api_key("ntn_1234567890abcdefghij") == "ntn_12345...defghij"

    def test_short_key_fully_masked(self):
        assert mask_api_key("ntn_1") == "***"
        assert mask_api_key("") == "***"

    def test_repr_hides_token(self):
        text = repr(make_config())
        assert TOKEN not in text
        assert "token='ntn_abcde...tuvwxyz'" in text
