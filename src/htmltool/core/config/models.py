"""
Pydantic configuration models for html-tool.

These models provide type-safe configuration with validation for:
- Fetch settings (headers, concurrency, rate limiting, timeouts)
- Extraction mode and its arguments
- Logging settings
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class ExtractionMode(str, Enum):
    """Extraction strategy modes."""

    TAGS = "tags"
    ATTRIBS = "attribs"
    COMMENTS = "comments"
    QUERY = "query"


# =============================================================================
# Fetch Configuration
# =============================================================================


def parse_header_spec(spec: str) -> tuple[str, str] | None:
    """Split a ``name:value`` header spec on its first colon.

    Returns None for specs without a colon or with an empty name.
    """
    name, sep, value = spec.partition(":")
    name = name.strip()
    if not sep or not name:
        logger.debug("Dropping malformed header spec: %r", spec)
        return None
    return name, value.strip()


class FetchConfig(BaseModel):
    """HTTP fetch and politeness settings."""

    headers: list[str] = Field(
        default_factory=list,
        description="Header specs in 'name:value' form, applied to every request",
    )
    concurrency: int = Field(
        default=40,
        ge=1,
        description="Max concurrent in-flight fetches",
    )
    delay_ms: int = Field(
        default=100,
        ge=0,
        description="Minimum delay between successive fetch dispatches in milliseconds",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Transport timeout per request in seconds",
    )
    user_agent: str | None = Field(
        default=None,
        description="Default User-Agent (a User-Agent header spec overrides it)",
    )
    verify_tls: bool = Field(
        default=False,
        description="Verify TLS certificates (off by default)",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow HTTP redirects; the final URL becomes the document origin",
    )

    @property
    def header_pairs(self) -> list[tuple[str, str]]:
        """Parsed headers in spec order, malformed specs dropped."""
        pairs = []
        for spec in self.headers:
            pair = parse_header_spec(spec)
            if pair is not None:
                pairs.append(pair)
        return pairs


# =============================================================================
# Extraction Configuration
# =============================================================================


class ExtractionConfig(BaseModel):
    """Selected extraction mode and its fixed arguments."""

    mode: ExtractionMode
    tags: list[str] = Field(default_factory=list, description="Tag names for tags mode")
    attribs: list[str] = Field(default_factory=list, description="Attribute names for attribs mode")
    selector: str | None = Field(default=None, description="CSS selector for query mode")

    @model_validator(mode="after")
    def selector_required_for_query(self) -> "ExtractionConfig":
        """Query mode needs a selector string."""
        if self.mode == ExtractionMode.QUERY and self.selector is None:
            raise ValueError("query mode requires a CSS selector")
        return self


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root configuration, loadable from YAML and overridden by CLI flags."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
