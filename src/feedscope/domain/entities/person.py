# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Person Entity

Purpose:
    Immutable representation of a person (a post author) as returned by the
    remote source. Only canonical fields live here; ``post_count`` is derived
    by the top contributors aggregation (see ``RankedPerson``).

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Geo(BaseEntity):
    """Latitude/longitude pair, kept as the source's strings."""

    lat: str
    lng: str


@dataclass(frozen=True, slots=True)
class Address(BaseEntity):
    """Postal address."""

    street: str
    suite: str
    city: str
    zipcode: str
    geo: Geo | None = None


@dataclass(frozen=True, slots=True)
class Company(BaseEntity):
    """Employer details."""

    name: str
    catch_phrase: str = ""
    bs: str = ""


@dataclass(frozen=True, slots=True)
class Person(BaseEntity):
    """Person entity.

    Args:
        id: Unique positive identifier; join key for ``Post.user_id``.
        name: Display name.
        username: Handle.
        email: Contact email.
        address: Optional postal address.
        phone: Optional phone number.
        website: Optional website.
        company: Optional employer.

    Raises:
        ValueError: If ``id`` is not positive.
    """

    id: int
    name: str
    username: str
    email: str
    address: Address | None = None
    phone: str | None = None
    website: str | None = None
    company: Company | None = None

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise ValueError("person id must be > 0")
