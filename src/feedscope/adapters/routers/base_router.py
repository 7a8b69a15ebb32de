# src/feedscope/adapters/routers/base_router.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Base Router (Adapters Layer).

Purpose:
    Canonical APIRouter wrapper for Feedscope HTTP endpoints:
        - Versioned routing with stable prefixes (e.g., "/v1/posts").
        - Helpers to emit presenter results with headers (ETag, Cache-Control).
        - Conditional GET handling via ``If-None-Match``.
        - Standard error response mapping using ErrorEnvelope.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter, Request, Response, status

from feedscope.adapters.presenters.feed_presenter import PresentResult
from feedscope.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)
from feedscope.domain.exceptions.base import DomainError
from feedscope.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper for Feedscope HTTP endpoints."""

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the router with a versioned prefix.

        Args:
            version: API version segment (e.g., "v1").
            resource: Resource segment (e.g., "posts").
            prefix: Optional explicit prefix; defaults to f"/{version}/{resource}".
            tags: Optional default tags for the router's endpoints.
            **kwargs: Additional keyword arguments forwarded to APIRouter.
        """
        computed_prefix = prefix if prefix is not None else f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            **kwargs,
        )
        _LOGGER.info(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def send_success(
        request: Request,
        response: Response,
        result: PresentResult,
    ) -> SuccessEnvelope[Any] | Response:
        """Apply presenter headers, answering 304 when the client's ETag matches."""
        if request.headers.get("If-None-Match") == result.etag:
            return Response(
                status_code=status.HTTP_304_NOT_MODIFIED,
                headers=dict(result.headers),
            )
        response.headers.update(dict(result.headers))
        return result.body

    @staticmethod
    def send_error(response: Response, exc: DomainError) -> ErrorEnvelope:
        """Map an unexpected domain failure onto a 500 ErrorEnvelope."""
        _LOGGER.error(
            "router_request_failed",
            extra={"code": exc.code, "reason": str(exc), "details": exc.details},
        )
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return ErrorEnvelope(
            error=ErrorObject(
                code=exc.code,
                http_status=response.status_code,
                message=str(exc) or "Internal server error.",
                details=dict(exc.details),
            )
        )

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error responses for OpenAPI."""
        return {
            304: {"description": "Not modified (ETag matched)."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }
