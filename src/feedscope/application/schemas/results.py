# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Application Results.

Synopsis:
    Explicit result types returned by the resource cache and the query API.
    They carry the data together with where it came from, so callers can tell
    "genuinely empty" apart from "fetch failed, serving stale or empty data".

Layer: application/schemas
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from feedscope.domain.enums.resource_kind import ResourceKind
from feedscope.domain.exceptions.base import DomainError

T = TypeVar("T")


class SnapshotStatus(str, Enum):
    """How a collection snapshot was obtained."""

    FRESH = "fresh"  # served from cache inside the freshness window
    REFRESHED = "refreshed"  # fetched just now
    STALE = "stale"  # refresh failed; previous snapshot served
    EMPTY = "empty"  # refresh failed and nothing was ever fetched

    @property
    def degraded(self) -> bool:
        return self in (SnapshotStatus.STALE, SnapshotStatus.EMPTY)


@dataclass(frozen=True, slots=True)
class CollectionResult(Generic[T]):
    """One collection as served by the resource cache.

    Attributes:
        kind: Which collection this is.
        items: The snapshot, in source order.
        status: How the snapshot was obtained.
        fetched_at: Clock reading of the last successful fetch, ``None`` if never.
        error: The failure behind a degraded status, if any.
    """

    kind: ResourceKind
    items: tuple[T, ...]
    status: SnapshotStatus
    fetched_at: float | None = None
    error: DomainError | None = None

    @property
    def is_degraded(self) -> bool:
        return self.status.degraded

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True, slots=True)
class ViewResult(Generic[T]):
    """A derived view plus the status of every collection it was built from.

    Attributes:
        view: View name (``"top_users"``, ``"trending"``, ``"feed"``, ``"post_comments"``).
        items: The computed view.
        sources: Snapshot status per collection used.
    """

    view: str
    items: tuple[T, ...]
    sources: Mapping[ResourceKind, SnapshotStatus] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        """True when any source collection is stale or empty after a failure."""
        return any(status.degraded for status in self.sources.values())
