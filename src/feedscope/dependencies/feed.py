# src/feedscope/dependencies/feed.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the feed views.

Overview:
    FastAPI providers that hand routers the process-wide :class:`FeedQueries`
    built by the bootstrap. Tests override :func:`get_feed_queries` via
    ``app.dependency_overrides`` to inject a query API over a fake fetcher.

Layer:
    dependencies
"""

from __future__ import annotations

from fastapi import Request

from feedscope.application.use_cases.feed_queries import FeedQueries


def get_feed_queries(request: Request) -> FeedQueries:
    """Return the query API stored on ``app.state`` by the lifespan."""
    queries = getattr(request.app.state, "feed_queries", None)
    if queries is None:
        raise RuntimeError("FeedQueries not initialized; is the app lifespan running?")
    return queries
