# src/feedscope/application/services/poll_scheduler.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Poll Schedulers.

Synopsis:
    One cancellable timer per view. Each scheduler runs its job immediately
    on start and then at a fixed rate of one run every ``interval_s`` seconds
    (measured start to start, so job duration does not drift the schedule),
    handing every result to a
    consumer callback. There is no global scheduler: each view owns its task,
    and all of them share the resource cache.

Design:
    * ``trigger()`` is a manual refresh: an ordinary one-off run of the same
      job, so it goes through the cache's freshness check like any tick.
    * A job or consumer failure is logged and the loop carries on; the next
      tick retries independently.
    * ``stop()`` cancels the timer task and awaits it, leaving nothing
      scheduled behind.

Layer:
    application/services
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Generic, TypeVar

from feedscope.application.schemas.results import ViewResult
from feedscope.application.use_cases.feed_queries import (
    FEED,
    TOP_USERS,
    TRENDING,
    FeedQueries,
)
from feedscope.config.settings import Settings
from feedscope.infrastructure.logging.logger import get_json_logger, view_context

logger = get_json_logger(__name__)

T = TypeVar("T")

Consumer = Callable[[T], Awaitable[None] | None]


class PollScheduler(Generic[T]):
    """Periodic runner for one view.

    Args:
        name: View name used for logs and the task name.
        interval_s: Seconds between the starts of consecutive runs. A run
            that outlasts the interval is followed immediately by the next.
        job: Zero-arg coroutine function producing the view.
        consumer: Callback receiving each result; may be sync or async.
    """

    def __init__(
        self,
        name: str,
        interval_s: float,
        job: Callable[[], Awaitable[T]],
        consumer: Consumer[T],
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.name = name
        self.interval_s = interval_s
        self._job = job
        self._consumer = consumer
        self._task: asyncio.Task[None] | None = None
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling. The first run happens immediately. Idempotent."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"poll.{self.name}")
        logger.info("poll.started", extra={"view": self.name, "interval_s": self.interval_s})

    async def stop(self) -> None:
        """Cancel the timer and wait until it has fully stopped."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info("poll.stopped", extra={"view": self.name, "runs": self.runs})

    async def trigger(self) -> T | None:
        """Run the job once now (manual refresh) and deliver the result.

        Returns:
            The job result, or ``None`` if the run failed.
        """
        return await self.run_once()

    async def run_once(self) -> T | None:
        """Run the job and hand the result to the consumer; never raises."""
        with view_context(self.name):
            self.runs += 1
            try:
                result = await self._job()
            except Exception:  # noqa: BLE001
                self.failures += 1
                logger.exception("poll.job_failed", extra={"run": self.runs})
                return None
            try:
                delivered = self._consumer(result)
                if inspect.isawaitable(delivered):
                    await delivered
            except Exception:  # noqa: BLE001
                self.failures += 1
                logger.exception("poll.consumer_failed", extra={"run": self.runs})
            return result

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            await self.run_once()
            next_at += self.interval_s
            delay = next_at - loop.time()
            if delay < 0:
                # Overran one or more ticks: run again now, drop the missed ones.
                logger.warning(
                    "poll.overrun",
                    extra={"view": self.name, "late_s": round(-delay, 3)},
                )
                next_at = loop.time()
                delay = 0.0
            await asyncio.sleep(delay)

    async def __aenter__(self) -> PollScheduler[T]:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()


def build_view_schedulers(
    queries: FeedQueries,
    settings: Settings,
    consumers: Mapping[str, Consumer[ViewResult[Any]]],
) -> dict[str, PollScheduler[ViewResult[Any]]]:
    """Create the per-view schedulers with their configured intervals.

    Args:
        queries: Query API the jobs call.
        settings: Source of the poll intervals and the top users limit.
        consumers: Callback per view name (``"top_users"``, ``"trending"``,
            ``"feed"``). Views without a consumer are not scheduled.

    Returns:
        Schedulers keyed by view name, not yet started.
    """
    limit = settings.top_users_default_limit
    jobs: dict[str, tuple[float, Callable[[], Awaitable[ViewResult[Any]]]]] = {
        TOP_USERS: (settings.top_users_poll_interval_s, lambda: queries.get_top_users(limit)),
        TRENDING: (settings.trending_poll_interval_s, queries.get_trending_posts),
        FEED: (settings.feed_poll_interval_s, queries.get_feed_posts),
    }
    unknown = set(consumers) - set(jobs)
    if unknown:
        raise ValueError(f"unknown views: {sorted(unknown)}")
    return {
        name: PollScheduler(name, interval, job, consumers[name])
        for name, (interval, job) in jobs.items()
        if name in consumers
    }
