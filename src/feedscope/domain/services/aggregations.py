# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Aggregations (Domain Service)

Purpose:
    Pure join / group-by / sort functions that turn the three canonical
    collections into the derived views. No I/O and no hidden state: identical
    inputs always produce identical outputs, in identical order.

Ordering policy:
    All sorts are stable. Ties keep the order in which the source returned the
    rows (people order for contributors, posts order for trending and feed).

Layer:
    domain/services
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence

from feedscope.domain.entities.comment import Comment
from feedscope.domain.entities.person import Person
from feedscope.domain.entities.post import Post
from feedscope.domain.entities.views import EnrichedPost, RankedPerson
from feedscope.domain.exceptions.feed import NoDataError

__all__ = [
    "count_posts_by_user",
    "count_comments_by_post",
    "group_comments_by_post",
    "index_people",
    "peak_comment_count",
    "top_contributors",
    "most_commented",
    "enriched_feed",
]


def index_people(people: Iterable[Person]) -> dict[int, Person]:
    """Return people keyed by id."""
    return {person.id: person for person in people}


def count_posts_by_user(posts: Iterable[Post]) -> Counter[int]:
    """Return the number of posts per ``user_id``."""
    return Counter(post.user_id for post in posts)


def count_comments_by_post(comments: Iterable[Comment]) -> Counter[int]:
    """Return the number of comments per ``post_id``.

    Posts without comments are absent from the result, not present with 0.
    """
    return Counter(comment.post_id for comment in comments)


def group_comments_by_post(comments: Iterable[Comment]) -> dict[int, list[Comment]]:
    """Group comments by ``post_id`` preserving their source order."""
    grouped: dict[int, list[Comment]] = defaultdict(list)
    for comment in comments:
        grouped[comment.post_id].append(comment)
    return dict(grouped)


def peak_comment_count(counts: Mapping[int, int]) -> int:
    """Return the highest per-post comment count.

    Args:
        counts: Comment counts keyed by post id (only posts with comments).

    Returns:
        The maximum count.

    Raises:
        NoDataError: If ``counts`` is empty, so no maximum exists.
    """
    if not counts:
        raise NoDataError("no comments tracked", details={"aggregation": "most_commented"})
    return max(counts.values())


def top_contributors(
    people: Sequence[Person],
    posts: Sequence[Post],
    limit: int,
) -> tuple[RankedPerson, ...]:
    """Rank people by the number of posts they authored.

    Args:
        people: People snapshot, in source order.
        posts: Posts snapshot.
        limit: Maximum number of entries to return. ``limit <= 0`` yields ``()``.

    Returns:
        Up to ``limit`` ranked people, highest ``post_count`` first. Every
        person gets a count (0 when they authored nothing); ties keep source order.
    """
    if limit <= 0:
        return ()
    per_user = count_posts_by_user(posts)
    ranked = [RankedPerson(person=p, post_count=per_user.get(p.id, 0)) for p in people]
    ranked.sort(key=lambda r: r.post_count, reverse=True)
    return tuple(ranked[:limit])


def most_commented(
    people: Sequence[Person],
    posts: Sequence[Post],
    comments: Sequence[Comment],
) -> tuple[EnrichedPost, ...]:
    """Return every post that has the highest comment count.

    The maximum is taken over posts present in ``posts`` that have at least
    one comment; comments pointing at unknown posts are ignored. When no known
    post has any comment the maximum is undefined and the result is ``()``,
    never "every post with 0 comments".

    Args:
        people: People snapshot, used to attach each post's owner.
        posts: Posts snapshot, in source order.
        comments: Comments snapshot.

    Returns:
        The tied most-commented posts in source order, each enriched with
        ``user`` and ``comment_count`` (``comments`` left empty).
    """
    known = {post.id for post in posts}
    counts = {
        post_id: n for post_id, n in count_comments_by_post(comments).items() if post_id in known
    }
    try:
        peak = peak_comment_count(counts)
    except NoDataError:
        return ()

    owners = index_people(people)
    return tuple(
        EnrichedPost(post=post, user=owners.get(post.user_id), comments=(), comment_count=peak)
        for post in posts
        if counts.get(post.id) == peak
    )


def enriched_feed(
    people: Sequence[Person],
    posts: Sequence[Post],
    comments: Sequence[Comment],
) -> tuple[EnrichedPost, ...]:
    """Join every post with its owner and comments, newest first.

    Args:
        people: People snapshot.
        posts: Posts snapshot, in source order.
        comments: Comments snapshot, in source order.

    Returns:
        All posts exactly once, sorted by ``timestamp`` descending (unstamped
        posts count as 0 and sink to the end; ties keep source order).
    """
    owners = index_people(people)
    threads = group_comments_by_post(comments)
    feed = []
    for post in posts:
        thread = tuple(threads.get(post.id, ()))
        feed.append(
            EnrichedPost(
                post=post,
                user=owners.get(post.user_id),
                comments=thread,
                comment_count=len(thread),
            )
        )
    feed.sort(key=lambda item: item.timestamp, reverse=True)
    return tuple(feed)
