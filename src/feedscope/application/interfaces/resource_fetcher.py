# src/feedscope/application/interfaces/resource_fetcher.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Application Interface: Resource Fetcher.

Synopsis:
    What the resource cache needs from the outside world: load one whole
    collection, or the comments of a single post. Implementations raise
    ``TransportError`` / ``ShapeError``; the cache decides what a failure means.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from feedscope.domain.entities.comment import Comment
from feedscope.domain.enums.resource_kind import ResourceKind


class ResourceFetcher(Protocol):
    """Loader for the people, posts and comments collections."""

    async def fetch(self, kind: ResourceKind) -> Sequence[object]:
        """Fetch the full collection for ``kind``.

        Args:
            kind: Which collection to load.

        Returns:
            The collection as domain entities (``Person``, ``Post`` or ``Comment``),
            in source order, with unique ids.

        Raises:
            TransportError: On network failure or non-success status.
            ShapeError: If the payload does not match the entity shape.
        """

    async def fetch_post_comments(self, post_id: int) -> Sequence[Comment]:
        """Fetch the comments of one post, in source order.

        Raises:
            TransportError: On network failure or non-success status.
            ShapeError: If the payload does not match the entity shape.
        """
