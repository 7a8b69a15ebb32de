"""
Feed Test Kit (Unit fixtures & helpers)

Purpose:
    Entity factories, a manual clock and an in-memory ResourceFetcher so the
    cache, queries, schedulers, routers and CLI can be tested without network.

Layer: tests/fixtures
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from feedscope.domain.entities.comment import Comment
from feedscope.domain.entities.person import Person
from feedscope.domain.entities.post import Post
from feedscope.domain.enums.resource_kind import ResourceKind
from feedscope.domain.exceptions.base import DomainError


def make_person(pid: int, name: str | None = None) -> Person:
    return Person(
        id=pid,
        name=name or f"Person {pid}",
        username=f"user{pid}",
        email=f"user{pid}@example.test",
    )


def make_post(pid: int, user_id: int, timestamp: int | None = None) -> Post:
    return Post(
        id=pid, user_id=user_id, title=f"title {pid}", body=f"body {pid}", timestamp=timestamp
    )


def make_comment(cid: int, post_id: int) -> Comment:
    return Comment(
        id=cid,
        post_id=post_id,
        name=f"comment {cid}",
        email=f"c{cid}@example.test",
        body=f"text {cid}",
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """In-memory ResourceFetcher with call counting and injectable failures.

    ``failures[kind]`` is raised by every fetch of that kind until removed.
    ``gate`` holds fetches until a test sets it.
    """

    def __init__(
        self,
        people: Sequence[Person] = (),
        posts: Sequence[Post] = (),
        comments: Sequence[Comment] = (),
    ) -> None:
        self.data: dict[ResourceKind, list[object]] = {
            ResourceKind.PEOPLE: list(people),
            ResourceKind.POSTS: list(posts),
            ResourceKind.COMMENTS: list(comments),
        }
        self.calls: dict[ResourceKind, int] = {kind: 0 for kind in ResourceKind}
        self.post_comment_calls: list[int] = []
        self.failures: dict[ResourceKind, Exception] = {}
        self.post_comments_failure: DomainError | None = None
        self.gate: asyncio.Event | None = None

    async def fetch(self, kind: ResourceKind) -> Sequence[object]:
        self.calls[kind] += 1
        if self.gate is not None:
            await self.gate.wait()
        failure = self.failures.get(kind)
        if failure is not None:
            raise failure
        return list(self.data[kind])

    async def fetch_post_comments(self, post_id: int) -> Sequence[Comment]:
        self.post_comment_calls.append(post_id)
        if self.post_comments_failure is not None:
            raise self.post_comments_failure
        comments: list[Comment] = self.data[ResourceKind.COMMENTS]  # type: ignore[assignment]
        return [c for c in comments if c.post_id == post_id]


def scenario_fetcher() -> FakeFetcher:
    """Two people; posts 10/11/12/5/6; comments concentrated on post 5.

    Person 1 authored 10, 11 and 6; person 2 authored 12 and 5.
    """
    people = [make_person(1, "Leanne"), make_person(2, "Ervin")]
    posts = [
        make_post(10, 1, timestamp=3_000),
        make_post(11, 1, timestamp=1_000),
        make_post(12, 2, timestamp=2_000),
        make_post(5, 2, timestamp=5_000),
        make_post(6, 1, timestamp=4_000),
    ]
    comments = [make_comment(1, 5), make_comment(2, 5), make_comment(3, 6)]
    return FakeFetcher(people, posts, comments)
