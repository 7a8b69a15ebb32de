# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Pydantic settings for the JSONPlaceholder-style transport client."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JsonPlaceholderSettings(BaseSettings):
    """Configuration for the people/posts/comments transport client.

    Environment variables (with ``model_config.env_prefix``):

    * ``JSONPLACEHOLDER_BASE_URL``
    * ``JSONPLACEHOLDER_TIMEOUT_S``
    * ``JSONPLACEHOLDER_MAX_RETRIES``

    The application normally builds this from :class:`feedscope.config.settings.Settings`
    via ``Settings.source_settings()``; the prefix exists for standalone use.
    """

    base_url: str = Field(
        "https://jsonplaceholder.typicode.com",
        description="Base URL exposing /users, /posts and /comments.",
    )
    timeout_s: float = Field(
        8.0,
        description="Per-request timeout in seconds for the transport client.",
    )
    max_retries: int = Field(
        2,
        description="Maximum number of retry attempts for retryable failures.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="JSONPLACEHOLDER_",
        extra="ignore",
    )
