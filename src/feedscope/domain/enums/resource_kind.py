# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Resource kinds held by the resource cache."""

from __future__ import annotations

from enum import Enum


class ResourceKind(str, Enum):
    """The three remote collections."""

    PEOPLE = "people"
    POSTS = "posts"
    COMMENTS = "comments"

    @property
    def path(self) -> str:
        """Return the source list endpoint for this collection."""
        # The source calls people "users".
        return "/users" if self is ResourceKind.PEOPLE else f"/{self.value}"
