# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""HTTP schemas for people, posts, comments and the derived views."""

from __future__ import annotations

from pydantic import Field

from feedscope.adapters.schemas.http.base import BaseHTTPSchema


class GeoHTTP(BaseHTTPSchema):
    lat: str
    lng: str


class AddressHTTP(BaseHTTPSchema):
    street: str
    suite: str
    city: str
    zipcode: str
    geo: GeoHTTP | None = None


class CompanyHTTP(BaseHTTPSchema):
    name: str
    catch_phrase: str = ""
    bs: str = ""


class PersonHTTP(BaseHTTPSchema):
    """A person (post author)."""

    id: int
    name: str
    username: str
    email: str
    address: AddressHTTP | None = None
    phone: str | None = None
    website: str | None = None
    company: CompanyHTTP | None = None


class RankedPersonHTTP(PersonHTTP):
    """A person in the top contributors view."""

    rank: int = Field(..., ge=1, description="1-based position in the ranking.")
    post_count: int = Field(..., ge=0)


class CommentHTTP(BaseHTTPSchema):
    id: int
    post_id: int
    name: str
    email: str
    body: str


class PostHTTP(BaseHTTPSchema):
    """A post joined with its owner and discussion."""

    id: int
    user_id: int
    title: str
    body: str
    timestamp: int | None = Field(
        None,
        description="Synthetic ordering stamp (epoch ms) assigned when the post was "
        "first fetched. Not the creation time.",
    )
    user: PersonHTTP | None = None
    comment_count: int = Field(..., ge=0)
    comments: list[CommentHTTP] = Field(default_factory=list)
