# src/feedscope/config/settings.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Feedscope Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the aggregation service: where the
    remote source lives, how long cached collections stay fresh, and how often
    each derived view is polled. Only the composition root (bootstrap, CLI)
    should call :func:`get_settings`; everything else receives values via DI.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown fields.
    - Every field has an explicit `FEEDSCOPE_*` environment alias.
    - Durations are seconds (floats), matching the transport settings.
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedscope.infrastructure.external_apis.jsonplaceholder.settings import (
    JsonPlaceholderSettings,
)

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration for Feedscope."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="FEEDSCOPE_ENVIRONMENT",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level name.",
        validation_alias="FEEDSCOPE_LOG_LEVEL",
    )

    # ---------------------------
    # Remote source
    # ---------------------------
    source_base_url: str = Field(
        default="https://jsonplaceholder.typicode.com",
        description="Base URL of the people/posts/comments source.",
        validation_alias="FEEDSCOPE_SOURCE_BASE_URL",
    )
    source_timeout_s: float = Field(
        default=8.0,
        gt=0,
        le=120.0,
        description="Per-request timeout in seconds.",
        validation_alias="FEEDSCOPE_SOURCE_TIMEOUT_S",
    )
    source_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries for retryable upstream failures (not counting the first attempt).",
        validation_alias="FEEDSCOPE_SOURCE_MAX_RETRIES",
    )

    # ---------------------------
    # Resource cache
    # ---------------------------
    cache_expiration_s: float = Field(
        default=300.0,
        gt=0,
        description="Freshness window shared by the people, posts and comments slots.",
        validation_alias="FEEDSCOPE_CACHE_EXPIRATION_S",
    )
    timestamp_window_s: int = Field(
        default=86_400,
        ge=1,
        description="Posts are stamped with a random time within this many seconds in the past.",
        validation_alias="FEEDSCOPE_TIMESTAMP_WINDOW_S",
    )
    timestamp_seed: int | None = Field(
        default=None,
        description="Seed for the post timestamp generator. Unset means unseeded.",
        validation_alias="FEEDSCOPE_TIMESTAMP_SEED",
    )

    # ---------------------------
    # Views
    # ---------------------------
    top_users_default_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Default number of contributors returned by the top users view.",
        validation_alias="FEEDSCOPE_TOP_USERS_DEFAULT_LIMIT",
    )
    top_users_poll_interval_s: float = Field(
        default=120.0,
        gt=0,
        validation_alias="FEEDSCOPE_TOP_USERS_POLL_INTERVAL_S",
    )
    trending_poll_interval_s: float = Field(
        default=120.0,
        gt=0,
        validation_alias="FEEDSCOPE_TRENDING_POLL_INTERVAL_S",
    )
    feed_poll_interval_s: float = Field(
        default=30.0,
        gt=0,
        validation_alias="FEEDSCOPE_FEED_POLL_INTERVAL_S",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _normalize(self) -> Settings:
        """Normalize the base URL and log level.

        Returns:
            Settings: The same instance, normalized in place.
        """
        self.source_base_url = self.source_base_url.rstrip("/")
        self.log_level = self.log_level.upper()
        return self

    def source_settings(self) -> JsonPlaceholderSettings:
        """Return the transport settings derived from this configuration."""
        return JsonPlaceholderSettings(
            base_url=self.source_base_url,
            timeout_s=self.source_timeout_s,
            max_retries=self.source_max_retries,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated application settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "environment": settings.environment.value,
            "source_base_url": settings.source_base_url,
            "source_timeout_s": settings.source_timeout_s,
            "source_max_retries": settings.source_max_retries,
            "cache_expiration_s": settings.cache_expiration_s,
            "timestamp_seeded": settings.timestamp_seed is not None,
            "poll_intervals_s": {
                "top_users": settings.top_users_poll_interval_s,
                "trending": settings.trending_poll_interval_s,
                "feed": settings.feed_poll_interval_s,
            },
        },
    )
    return settings
