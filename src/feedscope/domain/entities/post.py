# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Post Entity

Purpose:
    Immutable representation of a post owned by a person.

Notes:
    ``timestamp`` is NOT the creation time of the post. The source carries no
    time at all; the posts fetcher stamps each post with a random instant in
    the past 24 hours the first time it sees the post id and keeps that value
    for the life of the process. It exists only to order the feed.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Post(BaseEntity):
    """Post entity.

    Args:
        id: Unique positive identifier; join key for ``Comment.post_id``.
        user_id: Identifier of the owning person.
        title: Title text.
        body: Body text.
        timestamp: Feed ordering stamp in epoch milliseconds, or ``None``
            when the post was never stamped.

    Raises:
        ValueError: If ``id`` is not positive.
    """

    id: int
    user_id: int
    title: str
    body: str
    timestamp: int | None = None

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise ValueError("post id must be > 0")
