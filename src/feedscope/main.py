# src/feedscope/main.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires the feed routers, health/metrics endpoints
    and a structured fallback error handler. Provides an application factory
    (`create_app`) and a module-level eager app (`app`) for tooling.

Design:
    • Bootstrap only (no business logic).
    • Lifespan builds the shared HTTP client, resource cache and query API
      and tears them down safely.
    • Root JSON logging configured at import time.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.responses import JSONResponse

from feedscope import __version__
from feedscope.adapters.routers.feed_router import posts_router, users_router
from feedscope.adapters.routers.health_router import router as health_router
from feedscope.adapters.schemas.http.envelopes import ErrorEnvelope, ErrorObject
from feedscope.dependencies.core.bootstrap import bootstrap
from feedscope.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)

configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_posts_feed``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Expose the bootstrap state on ``app.state`` for the dependency providers."""
    async with bootstrap() as state:
        app.state.settings = state.settings
        app.state.http_client = state.http_client
        app.state.feed_queries = state.queries
        yield


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    envelope = ErrorEnvelope(
        error=ErrorObject(
            code="INTERNAL_ERROR",
            http_status=500,
            message="Internal server error.",
        )
    )
    return JSONResponse(status_code=500, content=envelope.model_dump_http())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    app = FastAPI(
        title="Feedscope",
        version=__version__,
        description="Cached people/posts/comments views: top contributors, trending, feed.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
    )
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(users_router)
    app.include_router(posts_router)
    app.include_router(health_router)

    logger.info("service_startup", extra={"version": __version__, "status": "starting"})
    return app


# Eager app for tools.
app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "feedscope.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
    )
