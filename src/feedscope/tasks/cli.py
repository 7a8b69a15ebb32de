# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Feedscope CLI: print the derived views once, or watch them poll.

Commands:
    top-users   Top contributors by post count.
    trending    Posts tied for the most comments.
    feed        All posts with owner and comments, newest first.
    watch       Run the per-view poll schedulers and print every result.

Output is one JSON document per view result (the same envelope the HTTP API
returns). Logs go to stderr.

Environment:
    FEEDSCOPE_SOURCE_BASE_URL      Base URL of the people/posts/comments source.
    FEEDSCOPE_CACHE_EXPIRATION_S   Freshness window of the cached collections.
    FEEDSCOPE_*_POLL_INTERVAL_S    Poll interval per view (watch).
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import typer

from feedscope.adapters.presenters.feed_presenter import FeedPresenter, PresentResult
from feedscope.application.schemas.results import ViewResult
from feedscope.application.services.poll_scheduler import build_view_schedulers
from feedscope.application.use_cases.feed_queries import (
    FEED,
    TOP_USERS,
    TRENDING,
    FeedQueries,
)
from feedscope.dependencies.core.bootstrap import bootstrap
from feedscope.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)
presenter = FeedPresenter()

_RENDERERS: dict[str, Callable[[ViewResult[Any]], PresentResult]] = {
    TOP_USERS: presenter.present_top_users,
    TRENDING: presenter.present_posts,
    FEED: presenter.present_posts,
}


def _echo(result: ViewResult[Any]) -> None:
    body = _RENDERERS[result.view](result).body.model_dump_http()
    typer.echo(json.dumps(body, ensure_ascii=False))


def _run_query(query: Callable[[FeedQueries], Awaitable[ViewResult[Any]]]) -> None:
    async def _run() -> None:
        async with bootstrap() as state:
            _echo(await query(state.queries))

    asyncio.run(_run())


@app.command("top-users")
def top_users(
    limit: int | None = typer.Option(
        None, min=0, help="Maximum number of people (defaults to the configured limit)."
    ),  # noqa: B008
) -> None:
    """Print the top contributors by post count."""
    _run_query(lambda q: q.get_top_users(limit))


@app.command("trending")
def trending() -> None:
    """Print the posts with the highest comment count."""
    _run_query(lambda q: q.get_trending_posts())


@app.command("feed")
def feed() -> None:
    """Print every post with owner and comments, newest first."""
    _run_query(lambda q: q.get_feed_posts())


@app.command("watch")
def watch(
    duration: float = typer.Option(
        60.0, min=0.0, help="Seconds to keep polling before exiting."
    ),  # noqa: B008
    view: list[str] | None = typer.Option(
        None, "--view", help="View to poll (repeatable); all views when omitted."
    ),  # noqa: B008
) -> None:
    """Start the poll schedulers and print each view result as it arrives.

    Each view runs once immediately and then on its own interval; all of them
    share one resource cache, so the source is hit at most once per
    collection per freshness window.
    """
    selected = view or [TOP_USERS, TRENDING, FEED]
    unknown = sorted(set(selected) - set(_RENDERERS))
    if unknown:
        raise typer.BadParameter(f"unknown views: {', '.join(unknown)}", param_hint="--view")

    async def _run() -> None:
        async with bootstrap() as state:
            schedulers = build_view_schedulers(
                state.queries,
                state.settings,
                {name: _echo for name in selected},
            )
            for scheduler in schedulers.values():
                scheduler.start()
            try:
                await asyncio.sleep(duration)
            finally:
                for scheduler in schedulers.values():
                    await scheduler.stop()
            log.info(
                "watch.done",
                extra={
                    "duration_s": duration,
                    "runs": {name: s.runs for name, s in schedulers.items()},
                    "failures": {name: s.failures for name, s in schedulers.items()},
                },
            )

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        log.info("watch.interrupted")


if __name__ == "__main__":  # pragma: no cover
    app()
