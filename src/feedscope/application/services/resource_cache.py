# src/feedscope/application/services/resource_cache.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Resource Cache (in-memory, per-process).

Synopsis:
    Holds the people, posts and comments snapshots with one freshness
    timestamp per slot, and is the only place that calls the fetcher.

Design:
    * Fresh hit (``now - fetched_at < expiration_s``): return without I/O.
    * Miss or stale: refresh through the fetcher. Success replaces the
      snapshot and restarts the window.
    * Failure is absorbed here: the previous snapshot (possibly empty) is
      returned with a ``STALE``/``EMPTY`` status and the error attached.
      Nothing is raised to callers and existing data is never cleared.
    * Single-flight per slot: concurrent misses for the same kind share one
      in-flight refresh task, so the source sees one request and the slot sees
      one write. Slots are independent of each other.
    * The shared refresh is shielded; cancelling one waiter does not cancel
      the refresh for the others.

Layer:
    application/services
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from feedscope.application.interfaces.resource_fetcher import ResourceFetcher
from feedscope.application.schemas.results import CollectionResult, SnapshotStatus
from feedscope.domain.enums.resource_kind import ResourceKind
from feedscope.domain.exceptions.base import DomainError
from feedscope.domain.exceptions.feed import ShapeError, TransportError
from feedscope.infrastructure.logging.logger import get_json_logger
from feedscope.infrastructure.observability.metrics import (
    get_cache_lookups_total,
    get_cache_refresh_failures_total,
)

logger = get_json_logger(__name__)

#: Default freshness window (5 minutes).
DEFAULT_EXPIRATION_S = 300.0


@dataclass
class _Slot:
    items: tuple[Any, ...] = ()
    fetched_at: float | None = None

    def is_fresh(self, now: float, expiration_s: float) -> bool:
        return self.fetched_at is not None and now - self.fetched_at < expiration_s


class ResourceCache:
    """Three independently-expiring collection slots in front of a fetcher.

    Args:
        fetcher: Loader for the collections.
        expiration_s: Freshness window shared by all slots, tracked per slot.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        fetcher: ResourceFetcher,
        *,
        expiration_s: float = DEFAULT_EXPIRATION_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if expiration_s <= 0:
            raise ValueError("expiration_s must be > 0")
        self._fetcher = fetcher
        self._expiration_s = expiration_s
        self._clock = clock
        self._slots: dict[ResourceKind, _Slot] = {kind: _Slot() for kind in ResourceKind}
        self._inflight: dict[ResourceKind, asyncio.Task[CollectionResult[Any]]] = {}
        self._lookups = get_cache_lookups_total()
        self._failures = get_cache_refresh_failures_total()

    @property
    def fetcher(self) -> ResourceFetcher:
        return self._fetcher

    @property
    def expiration_s(self) -> float:
        return self._expiration_s

    async def get_collection(self, kind: ResourceKind) -> CollectionResult[Any]:
        """Return the collection for ``kind``, refreshing it if needed.

        Args:
            kind: Which collection to return.

        Returns:
            The snapshot and how it was obtained. Never raises for fetch failures.
        """
        slot = self._slots[kind]
        if slot.is_fresh(self._clock(), self._expiration_s):
            self._count(kind, SnapshotStatus.FRESH)
            return CollectionResult(
                kind=kind,
                items=slot.items,
                status=SnapshotStatus.FRESH,
                fetched_at=slot.fetched_at,
            )

        task = self._inflight.get(kind)
        if task is None:
            task = asyncio.create_task(
                self._refresh(kind), name=f"resource_cache.refresh.{kind.value}"
            )
            self._inflight[kind] = task
            task.add_done_callback(lambda done, k=kind: self._clear_inflight(k, done))
        else:
            logger.debug("resource_cache.join_inflight", extra={"kind": kind.value})
        return await asyncio.shield(task)

    def peek(self, kind: ResourceKind) -> tuple[Any, ...]:
        """Return the current snapshot for ``kind`` without any I/O."""
        return self._slots[kind].items

    def has_data(self, kind: ResourceKind) -> bool:
        """True once ``kind`` has been fetched successfully at least once."""
        return self._slots[kind].fetched_at is not None

    def snapshot_status(self) -> Mapping[ResourceKind, dict[str, Any]]:
        """Describe every slot: size, age and freshness. No I/O."""
        now = self._clock()
        report: dict[ResourceKind, dict[str, Any]] = {}
        for kind, slot in self._slots.items():
            report[kind] = {
                "items": len(slot.items),
                "fetched": slot.fetched_at is not None,
                "age_s": None if slot.fetched_at is None else max(0.0, now - slot.fetched_at),
                "fresh": slot.is_fresh(now, self._expiration_s),
                "refreshing": kind in self._inflight,
            }
        return report

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    async def _refresh(self, kind: ResourceKind) -> CollectionResult[Any]:
        slot = self._slots[kind]
        try:
            items = tuple(await self._fetcher.fetch(kind))
        except (TransportError, ShapeError) as exc:
            return self._degrade(kind, slot, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("resource_cache.refresh_crashed", extra={"kind": kind.value})
            wrapped = DomainError(str(exc), details={"error": type(exc).__name__})
            return self._degrade(kind, slot, wrapped)

        slot.items = items
        slot.fetched_at = self._clock()
        self._count(kind, SnapshotStatus.REFRESHED)
        logger.info("resource_cache.refreshed", extra={"kind": kind.value, "items": len(items)})
        return CollectionResult(
            kind=kind,
            items=items,
            status=SnapshotStatus.REFRESHED,
            fetched_at=slot.fetched_at,
        )

    def _degrade(self, kind: ResourceKind, slot: _Slot, exc: DomainError) -> CollectionResult[Any]:
        status = SnapshotStatus.STALE if slot.fetched_at is not None else SnapshotStatus.EMPTY
        logger.warning(
            "resource_cache.refresh_failed",
            extra={
                "kind": kind.value,
                "error": type(exc).__name__,
                "code": exc.code,
                "details": exc.details,
                "serving": status.value,
                "items": len(slot.items),
            },
        )
        with suppress(Exception):
            self._failures.labels(kind=kind.value, reason=type(exc).__name__).inc()
        self._count(kind, status)
        return CollectionResult(
            kind=kind,
            items=slot.items,
            status=status,
            fetched_at=slot.fetched_at,
            error=exc,
        )

    def _clear_inflight(self, kind: ResourceKind, done: asyncio.Task[Any]) -> None:
        if self._inflight.get(kind) is done:
            del self._inflight[kind]

    def _count(self, kind: ResourceKind, status: SnapshotStatus) -> None:
        with suppress(Exception):
            self._lookups.labels(kind=kind.value, outcome=status.value).inc()
