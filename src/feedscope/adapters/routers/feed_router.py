# src/feedscope/adapters/routers/feed_router.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Feed Routers.

Summary:
    Read-only endpoints for the derived views:

        GET /v1/users/top?limit=5
        GET /v1/posts/trending
        GET /v1/posts/feed
        GET /v1/posts/{post_id}/comments

    Every response is a ``SuccessEnvelope`` whose ``meta`` reports the
    freshness of each source collection. Source outages never surface as
    errors here: the views degrade to stale or empty data and say so in
    ``meta.degraded``.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Path, Query, Request, Response, status

from feedscope.adapters.presenters.feed_presenter import FeedPresenter
from feedscope.adapters.routers.base_router import BaseRouter
from feedscope.adapters.schemas.http.envelopes import ErrorEnvelope, SuccessEnvelope
from feedscope.adapters.schemas.http.feed_schemas import (
    CommentHTTP,
    PostHTTP,
    RankedPersonHTTP,
)
from feedscope.application.use_cases.feed_queries import FeedQueries
from feedscope.dependencies.feed import get_feed_queries
from feedscope.domain.exceptions.base import DomainError

users_router = BaseRouter(version="v1", resource="users", tags=["Users"])
posts_router = BaseRouter(version="v1", resource="posts", tags=["Posts"])
presenter = FeedPresenter()

Queries = Annotated[FeedQueries, Depends(get_feed_queries)]


@users_router.get(
    "/top",
    response_model=SuccessEnvelope[list[RankedPersonHTTP]] | ErrorEnvelope,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Top contributors by post count.",
)
async def get_top_users(
    request: Request,
    response: Response,
    queries: Queries,
    limit: Annotated[
        int | None, Query(ge=0, le=100, description="Maximum number of people.")
    ] = None,
) -> Any:
    """Return people ranked by how many posts they authored, most first."""
    try:
        result = await queries.get_top_users(limit)
    except DomainError as exc:
        return BaseRouter.send_error(response, exc)
    return BaseRouter.send_success(request, response, presenter.present_top_users(result))


@posts_router.get(
    "/trending",
    response_model=SuccessEnvelope[list[PostHTTP]] | ErrorEnvelope,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Posts with the most comments.",
)
async def get_trending_posts(request: Request, response: Response, queries: Queries) -> Any:
    """Return every post tied for the highest comment count.

    ``data`` is empty when no comments exist at all.
    """
    try:
        result = await queries.get_trending_posts()
    except DomainError as exc:
        return BaseRouter.send_error(response, exc)
    return BaseRouter.send_success(request, response, presenter.present_posts(result))


@posts_router.get(
    "/feed",
    response_model=SuccessEnvelope[list[PostHTTP]] | ErrorEnvelope,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="All posts with owner and comments, newest first.",
)
async def get_feed_posts(request: Request, response: Response, queries: Queries) -> Any:
    try:
        result = await queries.get_feed_posts()
    except DomainError as exc:
        return BaseRouter.send_error(response, exc)
    return BaseRouter.send_success(request, response, presenter.present_posts(result))


@posts_router.get(
    "/{post_id}/comments",
    response_model=SuccessEnvelope[list[CommentHTTP]] | ErrorEnvelope,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Comments of one post.",
)
async def get_post_comments(
    request: Request,
    response: Response,
    queries: Queries,
    post_id: Annotated[int, Path(ge=1)],
) -> Any:
    try:
        result = await queries.get_post_comments(post_id)
    except DomainError as exc:
        return BaseRouter.send_error(response, exc)
    return BaseRouter.send_success(request, response, presenter.present_comments(result))
