# src/feedscope/adapters/routers/health_router.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Health and metrics endpoints (Adapters Layer).

Purpose:
    ``/healthz`` reports liveness plus a no-I/O description of every cache
    slot. ``/metrics`` exposes the Prometheus registry in text format.

    The service stays up while the source is down, so health is ``degraded``
    (never an error status) when a slot has been fetched before but is past
    its freshness window, and ``ok`` otherwise.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import Field

from feedscope.adapters.schemas.http.base import BaseHTTPSchema
from feedscope.application.use_cases.feed_queries import FeedQueries
from feedscope.dependencies.feed import get_feed_queries

router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class SlotHealth(BaseHTTPSchema):
    """State of one cache slot."""

    items: int = Field(..., ge=0)
    fetched: bool
    age_s: float | None = None
    fresh: bool
    refreshing: bool


class HealthResponse(BaseHTTPSchema):
    status: HealthState
    cache: dict[str, SlotHealth]


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Liveness and cache state.",
    operation_id="get_healthz",
)
async def healthz(
    queries: Annotated[FeedQueries, Depends(get_feed_queries)],
) -> HealthResponse:
    report = queries.cache.snapshot_status()
    cache = {kind.value: SlotHealth(**slot) for kind, slot in report.items()}
    stale = any(slot.fetched and not slot.fresh for slot in cache.values())
    return HealthResponse(
        status=HealthState.DEGRADED if stale else HealthState.OK,
        cache=cache,
    )


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
