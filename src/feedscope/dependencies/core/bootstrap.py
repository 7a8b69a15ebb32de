# src/feedscope/dependencies/core/bootstrap.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Core bootstrap for shared infrastructure (HTTP client, cache, queries).

This module owns the lifecycle of the objects shared by the FastAPI app and
the CLI. Configuration is read from Settings; construction of each piece is
delegated to its own module.

The public surface is :func:`build_feed_queries` (pure wiring, no I/O) and
:func:`bootstrap`, an async context manager yielding a state object that
owns the shared ``httpx.AsyncClient``.
"""

from __future__ import annotations

import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from feedscope.adapters.gateways.jsonplaceholder_gateway import JsonPlaceholderGateway
from feedscope.application.services.resource_cache import ResourceCache
from feedscope.application.use_cases.feed_queries import FeedQueries
from feedscope.config.settings import Settings, get_settings
from feedscope.domain.services.timestamps import TimestampStamper
from feedscope.infrastructure.external_apis.jsonplaceholder.client import JsonPlaceholderClient
from feedscope.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    http_client: httpx.AsyncClient
    queries: FeedQueries


def build_feed_queries(settings: Settings, http_client: httpx.AsyncClient) -> FeedQueries:
    """Wire transport client → gateway → resource cache → query API.

    Args:
        settings: Resolved application settings.
        http_client: Shared client; the caller owns its lifecycle.

    Returns:
        A query API over a fresh, empty resource cache.
    """
    client = JsonPlaceholderClient(settings.source_settings(), http=http_client)
    stamper = TimestampStamper(
        rng=random.Random(settings.timestamp_seed),  # noqa: S311
        window_ms=settings.timestamp_window_s * 1000,
    )
    gateway = JsonPlaceholderGateway(client, stamper=stamper)
    cache = ResourceCache(gateway, expiration_s=settings.cache_expiration_s)
    return FeedQueries(cache, default_limit=settings.top_users_default_limit)


@asynccontextmanager
async def bootstrap(settings: Settings | None = None) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Args:
        settings: Optional explicit settings; resolved via :func:`get_settings`
            when omitted.

    Yields:
        BootstrapState: Settings, the shared HTTP client and the query API.
    """
    resolved = settings or get_settings()
    logger.info("bootstrap.start", extra={"source_base_url": resolved.source_base_url})

    http_client = httpx.AsyncClient(timeout=resolved.source_timeout_s)
    state = BootstrapState(
        settings=resolved,
        http_client=http_client,
        queries=build_feed_queries(resolved, http_client),
    )

    try:
        yield state
    finally:
        try:
            await http_client.aclose()
        except Exception:
            logger.exception("bootstrap.http_client_close_failed")
        logger.info("bootstrap.stop")
