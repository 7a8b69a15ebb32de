# src/feedscope/application/use_cases/feed_queries.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Use Cases: Feed Queries

Purpose:
    The consumer-facing query API. Each query reads the collections it needs
    from the resource cache (concurrently), runs the matching pure aggregation
    over that snapshot and returns a ``ViewResult``.

    Queries are safe to call at any time and any number of times: the only
    side effect is the cache's normal refresh on expiry. Transport and shape
    failures never escape; they show up as degraded source statuses.

Layer: application/use_cases
"""

from __future__ import annotations

import asyncio
from typing import Any

from feedscope.application.schemas.results import (
    CollectionResult,
    SnapshotStatus,
    ViewResult,
)
from feedscope.application.services.resource_cache import ResourceCache
from feedscope.domain.entities.comment import Comment
from feedscope.domain.entities.views import EnrichedPost, RankedPerson
from feedscope.domain.enums.resource_kind import ResourceKind
from feedscope.domain.exceptions.feed import ShapeError, TransportError
from feedscope.domain.services.aggregations import (
    enriched_feed,
    most_commented,
    top_contributors,
)
from feedscope.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

TOP_USERS = "top_users"
TRENDING = "trending"
FEED = "feed"
POST_COMMENTS = "post_comments"


class FeedQueries:
    """Query API over a :class:`ResourceCache`.

    Args:
        cache: The process-wide resource cache.
        default_limit: Limit used by :meth:`get_top_users` when none is given.
    """

    def __init__(self, cache: ResourceCache, *, default_limit: int = 5) -> None:
        self._cache = cache
        self._default_limit = default_limit

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    async def get_top_users(self, limit: int | None = None) -> ViewResult[RankedPerson]:
        """Top contributors by post count.

        Args:
            limit: Maximum entries; defaults to the configured limit.

        Returns:
            At most ``limit`` people, highest ``post_count`` first.
        """
        effective = self._default_limit if limit is None else limit
        people, posts = await self._collections(ResourceKind.PEOPLE, ResourceKind.POSTS)
        items = top_contributors(people.items, posts.items, effective)
        return self._result(TOP_USERS, items, people, posts)

    async def get_trending_posts(self) -> ViewResult[EnrichedPost]:
        """Posts tied for the highest comment count (empty when no comments exist)."""
        posts, comments, people = await self._collections(
            ResourceKind.POSTS, ResourceKind.COMMENTS, ResourceKind.PEOPLE
        )
        items = most_commented(people.items, posts.items, comments.items)
        return self._result(TRENDING, items, posts, comments, people)

    async def get_feed_posts(self) -> ViewResult[EnrichedPost]:
        """Every post with owner and comments, newest ``timestamp`` first."""
        posts, people, comments = await self._collections(
            ResourceKind.POSTS, ResourceKind.PEOPLE, ResourceKind.COMMENTS
        )
        items = enriched_feed(people.items, posts.items, comments.items)
        return self._result(FEED, items, posts, people, comments)

    async def get_post_comments(self, post_id: int) -> ViewResult[Comment]:
        """Comments of one post, in source order.

        Served from the comments slot once it holds data (honoring its
        freshness window). Before that, the per-post endpoint is used; a
        failure there yields an empty ``EMPTY``-status result.
        """
        if self._cache.has_data(ResourceKind.COMMENTS):
            comments = await self._cache.get_collection(ResourceKind.COMMENTS)
            items = tuple(c for c in comments.items if c.post_id == post_id)
            return self._result(POST_COMMENTS, items, comments)

        try:
            fetched = tuple(await self._cache.fetcher.fetch_post_comments(post_id))
        except (TransportError, ShapeError) as exc:
            logger.warning(
                "feed_queries.post_comments_failed",
                extra={"post_id": post_id, "error": type(exc).__name__, "details": exc.details},
            )
            return ViewResult(
                view=POST_COMMENTS,
                items=(),
                sources={ResourceKind.COMMENTS: SnapshotStatus.EMPTY},
            )
        return ViewResult(
            view=POST_COMMENTS,
            items=fetched,
            sources={ResourceKind.COMMENTS: SnapshotStatus.REFRESHED},
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    async def _collections(self, *kinds: ResourceKind) -> list[CollectionResult[Any]]:
        return list(await asyncio.gather(*(self._cache.get_collection(k) for k in kinds)))

    @staticmethod
    def _result(
        view: str, items: tuple[Any, ...], *sources: CollectionResult[Any]
    ) -> ViewResult[Any]:
        result = ViewResult(view=view, items=items, sources={s.kind: s.status for s in sources})
        if result.degraded:
            logger.info(
                "feed_queries.degraded",
                extra={
                    "view": view,
                    "items": len(items),
                    "sources": {k.value: v.value for k, v in result.sources.items()},
                },
            )
        return result
