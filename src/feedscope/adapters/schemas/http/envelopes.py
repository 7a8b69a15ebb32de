# src/feedscope/adapters/schemas/http/envelopes.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing HTTP envelopes:
      - ErrorEnvelope
      - SuccessEnvelope[T] with view metadata
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import ConfigDict, Field

from feedscope.adapters.schemas.http.base import BaseHTTPSchema

T = TypeVar("T")

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "ViewMeta",
    "SuccessEnvelope",
]


class ErrorObject(BaseHTTPSchema):
    """Structured error object inside ErrorEnvelope.

    Error codes are UPPER_SNAKE_CASE and stable across releases.
    """

    model_config = ConfigDict(title="ErrorObject", extra="forbid", frozen=True)

    code: str = Field(..., description="Stable machine-readable error code.")
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable error description.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional structured details safe for clients.",
    )


class ErrorEnvelope(BaseHTTPSchema):
    r"""Canonical error envelope: {"error": ErrorObject}."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid", frozen=True)

    error: ErrorObject = Field(..., description="Structured error details.")


class ViewMeta(BaseHTTPSchema):
    """Where a view's data came from."""

    view: str = Field(..., description="View name.")
    count: int = Field(..., ge=0, description="Number of items in `data`.")
    degraded: bool = Field(
        ...,
        description="True when a source collection could not be refreshed and "
        "stale or empty data was used. Clients should suggest retrying later.",
    )
    sources: dict[str, str] = Field(
        default_factory=dict,
        description="Snapshot status per collection: fresh, refreshed, stale or empty.",
    )


class SuccessEnvelope(BaseHTTPSchema, Generic[T]):
    r"""Success envelope: {"data": T, "meta": ViewMeta}."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid", frozen=True)

    data: T = Field(..., description="Returned resource or value.")
    meta: ViewMeta = Field(..., description="Provenance of the data.")
