# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Derived View Entities

Purpose:
    Output shapes of the aggregations. They wrap a canonical entity and add
    the derived fields (``post_count``, ``user``, ``comments``,
    ``comment_count``). They are rebuilt on every aggregation call and are
    never written back into the resource cache.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from .base import BaseEntity
from .comment import Comment
from .person import Person
from .post import Post


@dataclass(frozen=True, slots=True)
class RankedPerson(BaseEntity):
    """A person with the number of posts they authored."""

    person: Person
    post_count: int

    def __post_init__(self) -> None:
        if self.post_count < 0:
            raise ValueError("post_count must be >= 0")


@dataclass(frozen=True, slots=True)
class EnrichedPost(BaseEntity):
    """A post joined with its owner and its discussion.

    Args:
        post: The canonical post.
        user: Owning person, or ``None`` when the owner is not in the people
            snapshot (for example because that slot is empty).
        comments: The post's comments in source order.
        comment_count: Number of comments attached to the post.
    """

    post: Post
    user: Person | None
    comments: tuple[Comment, ...]
    comment_count: int

    @property
    def timestamp(self) -> int:
        """Ordering stamp, treating an unstamped post as 0 (oldest)."""
        return self.post.timestamp or 0
