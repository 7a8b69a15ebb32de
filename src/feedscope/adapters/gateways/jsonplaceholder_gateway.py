# src/feedscope/adapters/gateways/jsonplaceholder_gateway.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Adapter Gateway: people/posts/comments source → domain entities.

This gateway sits on top of the transport client and implements the
``ResourceFetcher`` port:

* One fetcher per resource kind (people, posts, comments) plus the per-post
  comments endpoint.
* Validates every row against the wire models; any mismatch, including a
  duplicate id, is a ``ShapeError`` carrying the offending index.
* Stamps posts with a synthetic ordering timestamp through a
  :class:`TimestampStamper` (random instant in the past 24 hours, remembered
  per post id). This is not a creation time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from feedscope.domain.entities.comment import Comment
from feedscope.domain.entities.person import Address, Company, Geo, Person
from feedscope.domain.entities.post import Post
from feedscope.domain.enums.resource_kind import ResourceKind
from feedscope.domain.exceptions.feed import ShapeError
from feedscope.domain.services.timestamps import TimestampStamper
from feedscope.infrastructure.external_apis.jsonplaceholder.client import JsonPlaceholderClient
from feedscope.infrastructure.external_apis.jsonplaceholder.types import (
    CommentRow,
    PostRow,
    UserRow,
)
from feedscope.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)
EntityT = TypeVar("EntityT")


def _to_person(row: UserRow) -> Person:
    address = None
    if row.address is not None:
        geo = Geo(lat=row.address.geo.lat, lng=row.address.geo.lng) if row.address.geo else None
        address = Address(
            street=row.address.street,
            suite=row.address.suite,
            city=row.address.city,
            zipcode=row.address.zipcode,
            geo=geo,
        )
    company = None
    if row.company is not None:
        company = Company(
            name=row.company.name,
            catch_phrase=row.company.catch_phrase,
            bs=row.company.bs,
        )
    return Person(
        id=row.id,
        name=row.name,
        username=row.username,
        email=row.email,
        address=address,
        phone=row.phone,
        website=row.website,
        company=company,
    )


def _to_comment(row: CommentRow) -> Comment:
    return Comment(id=row.id, post_id=row.post_id, name=row.name, email=row.email, body=row.body)


class JsonPlaceholderGateway:
    """Fetchers for the three collections, backed by the transport client."""

    def __init__(
        self,
        client: JsonPlaceholderClient,
        *,
        stamper: TimestampStamper | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            client: Transport client exposing ``list_rows(path)``.
            stamper: Post timestamp source. A fresh unseeded stamper is used
                when omitted; pass a seeded one for reproducible feeds.
        """
        self._client = client
        self._stamper = stamper or TimestampStamper()

    async def fetch(self, kind: ResourceKind) -> Sequence[object]:
        """Fetch and validate the full collection for ``kind``."""
        if kind is ResourceKind.PEOPLE:
            return await self.fetch_people()
        if kind is ResourceKind.POSTS:
            return await self.fetch_posts()
        return await self.fetch_comments()

    async def fetch_people(self) -> list[Person]:
        rows = await self._client.list_rows(ResourceKind.PEOPLE.path)
        return self._parse(rows, UserRow, _to_person, source=ResourceKind.PEOPLE.path)

    async def fetch_posts(self) -> list[Post]:
        """Fetch posts and stamp each with its (stable) feed timestamp."""
        rows = await self._client.list_rows(ResourceKind.POSTS.path)
        return self._parse(rows, PostRow, self._to_post, source=ResourceKind.POSTS.path)

    async def fetch_comments(self) -> list[Comment]:
        rows = await self._client.list_rows(ResourceKind.COMMENTS.path)
        return self._parse(rows, CommentRow, _to_comment, source=ResourceKind.COMMENTS.path)

    async def fetch_post_comments(self, post_id: int) -> list[Comment]:
        """Fetch the comments of one post from ``/posts/{post_id}/comments``."""
        path = f"/posts/{post_id}/comments"
        rows = await self._client.list_rows(path, endpoint="/posts/{id}/comments")
        comments = self._parse(rows, CommentRow, _to_comment, source=path)
        stray = [c.id for c in comments if c.post_id != post_id]
        if stray:
            raise ShapeError(
                "foreign_comment",
                details={"source": path, "post_id": post_id, "comment_ids": stray},
            )
        return comments

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #
    def _to_post(self, row: PostRow) -> Post:
        return Post(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            body=row.body,
            timestamp=self._stamper.stamp(row.id),
        )

    @staticmethod
    def _parse(
        rows: Sequence[Mapping[str, Any]],
        model: type[RowT],
        convert: Callable[[RowT], EntityT],
        *,
        source: str,
    ) -> list[EntityT]:
        """Validate ``rows`` against ``model`` and convert them to entities.

        Raises:
            ShapeError: On the first invalid row or a repeated id.
        """
        entities: list[EntityT] = []
        seen: set[int] = set()
        for index, raw in enumerate(rows):
            try:
                row = model.model_validate(raw)
                entity = convert(row)
            except (ValidationError, ValueError) as exc:
                raise ShapeError(
                    "bad_row",
                    details={"source": source, "index": index, "error": str(exc)},
                ) from exc
            row_id: int = row.id  # type: ignore[attr-defined]
            if row_id in seen:
                raise ShapeError(
                    "duplicate_id",
                    details={"source": source, "index": index, "id": row_id},
                )
            seen.add(row_id)
            entities.append(entity)
        logger.debug("gateway.parsed", extra={"source": source, "rows": len(entities)})
        return entities
