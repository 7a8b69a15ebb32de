# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Wire models for the people/posts/comments source.

These Pydantic models describe the rows exactly as the source serves them
(camelCase aliases such as ``userId``). They are validation-only: the gateway
converts validated rows into domain entities immediately.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class _WireModel(BaseModel):
    """Base for wire rows: alias-aware, tolerant of extra fields, immutable."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class GeoRow(_WireModel):
    lat: str
    lng: str


class AddressRow(_WireModel):
    street: str
    suite: str
    city: str
    zipcode: str
    geo: GeoRow | None = None


class CompanyRow(_WireModel):
    name: str
    catch_phrase: str = Field("", alias="catchPhrase")
    bs: str = ""


class UserRow(_WireModel):
    """One row of ``GET /users``."""

    id: StrictInt
    name: str
    username: str
    email: str
    address: AddressRow | None = None
    phone: str | None = None
    website: str | None = None
    company: CompanyRow | None = None


class PostRow(_WireModel):
    """One row of ``GET /posts``."""

    id: StrictInt
    user_id: StrictInt = Field(alias="userId")
    title: str
    body: str


class CommentRow(_WireModel):
    """One row of ``GET /comments`` or ``GET /posts/{id}/comments``."""

    id: StrictInt
    post_id: StrictInt = Field(alias="postId")
    name: str
    email: str
    body: str
