# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Presenter: ViewResult → HTTP SuccessEnvelope.

Synopsis:
    Renders the query API's view results into the canonical SuccessEnvelope
    and attaches a strong ETag computed from the canonical JSON of the view
    data. Views are deterministic for a given snapshot, so repeated polls get
    the same ETag and can be answered with 304.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from feedscope.adapters.schemas.http.envelopes import SuccessEnvelope, ViewMeta
from feedscope.adapters.schemas.http.feed_schemas import (
    AddressHTTP,
    CommentHTTP,
    CompanyHTTP,
    GeoHTTP,
    PersonHTTP,
    PostHTTP,
    RankedPersonHTTP,
)
from feedscope.application.schemas.results import ViewResult
from feedscope.domain.entities.comment import Comment
from feedscope.domain.entities.person import Person
from feedscope.domain.entities.views import EnrichedPost, RankedPerson


@dataclass(slots=True)
class PresentResult:
    """Presentation result.

    Attributes:
        body: The envelope to return.
        headers: Extra HTTP headers to apply (``ETag``, ``Cache-Control``).
    """

    body: SuccessEnvelope[Any]
    headers: Mapping[str, str]

    @property
    def etag(self) -> str:
        return self.headers["ETag"]


def _compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return f'"{hashlib.sha256(material).hexdigest()}"'


def _person_fields(person: Person) -> dict[str, Any]:
    address = None
    if person.address is not None:
        geo = person.address.geo
        address = AddressHTTP(
            street=person.address.street,
            suite=person.address.suite,
            city=person.address.city,
            zipcode=person.address.zipcode,
            geo=GeoHTTP(lat=geo.lat, lng=geo.lng) if geo else None,
        )
    company = None
    if person.company is not None:
        company = CompanyHTTP(
            name=person.company.name,
            catch_phrase=person.company.catch_phrase,
            bs=person.company.bs,
        )
    return {
        "id": person.id,
        "name": person.name,
        "username": person.username,
        "email": person.email,
        "address": address,
        "phone": person.phone,
        "website": person.website,
        "company": company,
    }


def _comment(comment: Comment) -> CommentHTTP:
    return CommentHTTP(
        id=comment.id,
        post_id=comment.post_id,
        name=comment.name,
        email=comment.email,
        body=comment.body,
    )


def _post(item: EnrichedPost) -> PostHTTP:
    post = item.post
    return PostHTTP(
        id=post.id,
        user_id=post.user_id,
        title=post.title,
        body=post.body,
        timestamp=post.timestamp,
        user=PersonHTTP(**_person_fields(item.user)) if item.user else None,
        comment_count=item.comment_count,
        comments=[_comment(c) for c in item.comments],
    )


class FeedPresenter:
    """Presenter for the `/v1/users` and `/v1/posts` views."""

    def __init__(self, *, cache_ttl_s: int = 30) -> None:
        self._cache_ttl_s = cache_ttl_s

    def present_top_users(self, result: ViewResult[RankedPerson]) -> PresentResult:
        data = [
            RankedPersonHTTP(rank=i, post_count=r.post_count, **_person_fields(r.person))
            for i, r in enumerate(result.items, start=1)
        ]
        return self._envelope(data, result)

    def present_posts(self, result: ViewResult[EnrichedPost]) -> PresentResult:
        return self._envelope([_post(item) for item in result.items], result)

    def present_comments(self, result: ViewResult[Comment]) -> PresentResult:
        return self._envelope([_comment(c) for c in result.items], result)

    def _envelope(self, data: list[Any], result: ViewResult[Any]) -> PresentResult:
        meta = ViewMeta(
            view=result.view,
            count=len(data),
            degraded=result.degraded,
            sources={kind.value: status.value for kind, status in result.sources.items()},
        )
        body = SuccessEnvelope[list[Any]](data=data, meta=meta)
        # ETag covers the view data only; per-source statuses change between polls.
        dumped = body.model_dump_http()
        etag = _compute_quoted_etag(
            {"view": meta.view, "degraded": meta.degraded, "data": dumped["data"]}
        )
        headers = {"ETag": etag}
        # Degraded responses must not be cached downstream.
        headers["Cache-Control"] = (
            "no-store" if result.degraded else f"public, max-age={self._cache_ttl_s}"
        )
        return PresentResult(body=body, headers=headers)
