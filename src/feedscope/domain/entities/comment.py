# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Comment Entity

Purpose:
    Immutable comment attached to exactly one post.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Comment(BaseEntity):
    """Comment entity.

    Args:
        id: Unique positive identifier.
        post_id: Identifier of the post this comment belongs to.
        name: Commenter name (the source uses it as a subject line).
        email: Commenter email.
        body: Comment text.
    """

    id: int
    post_id: int
    name: str
    email: str
    body: str

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise ValueError("comment id must be > 0")
