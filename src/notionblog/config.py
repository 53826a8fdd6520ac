"""Configuration for notionblog.

:class:`NotionBlogConfig` is a dataclass that captures every tuneable knob of
the content layer.  It validates itself on construction and, unlike a chain
of individual checks, reports **all** problems at once through
:class:`~notionblog.errors.NotionBlogConfigError` so that a broken
deployment fails fast at startup with a field-by-field diagnostic.

:meth:`NotionBlogConfig.from_env` builds a configuration from the process
environment:

=============================  =====================================
Variable                       Field
=============================  =====================================
``NOTION_API_KEY``             ``token``
``NOTION_DATABASE_ID``         ``database_id``
``NOTION_PLACES_DATABASE_ID``  ``places_database_id``
``NOTION_CACHE_TTL``           ``cache_ttl_seconds``
``NOTION_RATE_LIMIT``          ``rate_limit_rps``
=============================  =====================================
"""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from notionblog.errors import NotionBlogConfigError

# ---------------------------------------------------------------------------
# Validation constants
# ---------------------------------------------------------------------------

TOKEN_PREFIXES: tuple[str, ...] = ("ntn_", "secret_")
"""Accepted integration-token prefixes (current and legacy formats)."""

_DATABASE_ID_RE = re.compile(r"^[a-f0-9]{32}$")

CACHE_TTL_RANGE: tuple[int, int] = (10, 3600)
RATE_LIMIT_RANGE: tuple[float, float] = (1, 10)


def mask_api_key(api_key: str) -> str:
    """Return *api_key* with its middle replaced, safe to log.

    >>> mask_api_key("ntn_1234567890abcdefghij")
    'ntn_12345...defghij'
    """
    if not api_key or len(api_key) < 10:
        return "***"
    return f"{api_key[:9]}...{api_key[-7:]}"


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotionBlogConfig:
    """Complete configuration for a notionblog client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Must start with ``ntn_``
        or ``secret_``.  Never logged in full.
    database_id:
        ID of the posts database: 32 lowercase hex characters, no hyphens.
        **Required.**
    places_database_id:
        Optional ID of the places database (same format).
    cache_ttl_seconds:
        How long rendered content may be cached by consumers, 10-3600.
    rate_limit_rps:
        Requests per second allowed through the request queue, 1-10.
    retry_max_attempts:
        Total attempts per call when Notion answers ``rate_limited``.
    retry_initial_delay:
        Delay (seconds) before the first retry; doubles on every retry.
    timeout_seconds:
        HTTP request timeout in seconds.
    max_block_depth:
        Optional cap on block-tree recursion depth.  ``None`` resolves the
        full tree.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    metrics:
        Optional :class:`~notionblog.observability.MetricsHook`.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    database_id: str = ""

    places_database_id: str | None = None

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Caching ─────────────────────────────────────────────────────────
    cache_ttl_seconds: int = 60

    # ── Retry & rate ────────────────────────────────────────────────────
    rate_limit_rps: float = 3.0

    retry_max_attempts: int = 3

    retry_initial_delay: float = 1.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 10.0

    # ── Content ─────────────────────────────────────────────────────────
    max_block_depth: int | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        issues = self.validate()
        if issues:
            raise NotionBlogConfigError(issues)

    def validate(self) -> list[str]:
        """Return every configuration problem as ``"<field>: <message>"``."""
        from urllib.parse import urlparse

        issues: list[str] = []

        if not self.token:
            issues.append("token: NOTION_API_KEY is not set")
        elif not self.token.startswith(TOKEN_PREFIXES):
            issues.append(
                "token: must start with "
                + " or ".join(f"'{p}'" for p in TOKEN_PREFIXES)
            )

        if not self.database_id:
            issues.append("database_id: NOTION_DATABASE_ID is not set")
        elif not _DATABASE_ID_RE.match(self.database_id):
            issues.append(
                "database_id: must be 32 lowercase hex characters without hyphens"
            )

        if self.places_database_id is not None and not _DATABASE_ID_RE.match(
            self.places_database_id
        ):
            issues.append(
                "places_database_id: must be 32 lowercase hex characters without hyphens"
            )

        low, high = CACHE_TTL_RANGE
        if not low <= self.cache_ttl_seconds <= high:
            issues.append(
                f"cache_ttl_seconds: must be between {low} and {high}, "
                f"got {self.cache_ttl_seconds}"
            )

        low_rps, high_rps = RATE_LIMIT_RANGE
        if not low_rps <= self.rate_limit_rps <= high_rps:
            issues.append(
                f"rate_limit_rps: must be between {low_rps:g} and {high_rps:g}, "
                f"got {self.rate_limit_rps}"
            )

        if self.retry_max_attempts < 1:
            issues.append(
                f"retry_max_attempts: must be >= 1, got {self.retry_max_attempts}"
            )
        if self.retry_initial_delay < 0:
            issues.append(
                f"retry_initial_delay: must be >= 0, got {self.retry_initial_delay}"
            )
        if self.timeout_seconds <= 0:
            issues.append(f"timeout_seconds: must be > 0, got {self.timeout_seconds}")
        if self.max_block_depth is not None and self.max_block_depth < 1:
            issues.append(f"max_block_depth: must be >= 1, got {self.max_block_depth}")

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            issues.append(
                f"base_url: insecure HTTP for non-local host '{parsed.hostname}'"
            )
        elif parsed.scheme not in ("http", "https"):
            issues.append(f"base_url: unsupported scheme '{parsed.scheme}'")

        return issues

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> NotionBlogConfig:
        """Build a configuration from environment variables.

        Parameters
        ----------
        environ:
            Mapping to read from.  Defaults to :data:`os.environ`.
        **overrides:
            Field values that take precedence over the environment.

        Raises
        ------
        NotionBlogConfigError
            Listing every missing or malformed variable, including values
            that are not numbers where a number is expected.
        """
        env = os.environ if environ is None else environ
        issues: list[str] = []
        values: dict[str, Any] = {
            "token": env.get("NOTION_API_KEY", ""),
            "database_id": env.get("NOTION_DATABASE_ID", ""),
        }

        places = env.get("NOTION_PLACES_DATABASE_ID")
        if places:
            values["places_database_id"] = places

        for var, field_name, kind in (
            ("NOTION_CACHE_TTL", "cache_ttl_seconds", int),
            ("NOTION_RATE_LIMIT", "rate_limit_rps", float),
        ):
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                values[field_name] = kind(raw)
            except ValueError:
                issues.append(f"{field_name}: {var} must be a number, got {raw!r}")

        values.update(overrides)

        # Unparsable numbers fall back to their defaults so the remaining
        # fields are still validated and reported in the same error.
        try:
            config = cls(**values)
        except NotionBlogConfigError as exc:
            raise NotionBlogConfigError(issues + exc.issues) from None
        if issues:
            raise NotionBlogConfigError(issues)
        return config

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                parts.append(f"token='{mask_api_key(val)}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionBlogConfig({', '.join(parts)})"
