from __future__ import annotations

import pytest

from feedscope.domain.exceptions.feed import NoDataError
from feedscope.domain.services.aggregations import (
    count_comments_by_post,
    count_posts_by_user,
    enriched_feed,
    group_comments_by_post,
    most_commented,
    peak_comment_count,
    top_contributors,
)
from tests.fixtures.feed_testkit import make_comment, make_person, make_post


def test_top_contributors_ranks_by_post_count() -> None:
    people = [make_person(1), make_person(2)]
    posts = [make_post(10, 1), make_post(11, 1), make_post(12, 2)]

    ranked = top_contributors(people, posts, 2)

    assert [(r.person.id, r.post_count) for r in ranked] == [(1, 2), (2, 1)]


def test_top_contributors_respects_limit_and_counts_zero_authors() -> None:
    people = [make_person(1), make_person(2), make_person(3)]
    posts = [make_post(10, 3), make_post(11, 3), make_post(12, 1)]

    assert [r.person.id for r in top_contributors(people, posts, 2)] == [3, 1]
    full = top_contributors(people, posts, 10)
    assert [(r.person.id, r.post_count) for r in full] == [(3, 2), (1, 1), (2, 0)]


def test_top_contributors_ties_keep_source_order() -> None:
    people = [make_person(4), make_person(2), make_person(9)]
    posts = [make_post(1, 9), make_post(2, 2), make_post(3, 4)]

    ranked = top_contributors(people, posts, 3)

    assert [r.person.id for r in ranked] == [4, 2, 9]


@pytest.mark.parametrize("limit", [0, -3])
def test_top_contributors_non_positive_limit_is_empty(limit: int) -> None:
    assert top_contributors([make_person(1)], [make_post(1, 1)], limit) == ()


def test_top_contributors_counts_match_and_are_non_increasing() -> None:
    people = [make_person(i) for i in range(1, 6)]
    posts = [make_post(i, (i * 7) % 5 + 1) for i in range(1, 30)]
    truth = count_posts_by_user(posts)

    ranked = top_contributors(people, posts, 5)

    counts = [r.post_count for r in ranked]
    assert counts == sorted(counts, reverse=True)
    assert all(r.post_count == truth.get(r.person.id, 0) for r in ranked)


def test_most_commented_returns_only_the_peak_post() -> None:
    people = [make_person(1)]
    posts = [make_post(5, 1), make_post(6, 1)]
    comments = [make_comment(1, 5), make_comment(2, 5), make_comment(3, 6)]

    trending = most_commented(people, posts, comments)

    assert [(p.post.id, p.comment_count) for p in trending] == [(5, 2)]
    assert trending[0].user == people[0]
    assert trending[0].comments == ()


def test_most_commented_returns_every_tied_post_in_source_order() -> None:
    people = [make_person(1), make_person(2)]
    posts = [make_post(7, 2), make_post(5, 1), make_post(6, 1)]
    comments = [make_comment(1, 5), make_comment(2, 7), make_comment(3, 6), make_comment(4, 7)]
    comments.append(make_comment(5, 5))

    trending = most_commented(people, posts, comments)

    assert [p.post.id for p in trending] == [7, 5]
    assert {p.comment_count for p in trending} == {2}
    assert [p.user.id if p.user else None for p in trending] == [2, 1]


def test_most_commented_without_comments_is_empty() -> None:
    posts = [make_post(1, 1), make_post(2, 1)]

    assert most_commented([make_person(1)], posts, []) == ()


def test_most_commented_ignores_comments_on_unknown_posts() -> None:
    posts = [make_post(1, 1), make_post(2, 1)]
    comments = [make_comment(1, 99), make_comment(2, 99), make_comment(3, 2)]

    trending = most_commented([make_person(1)], posts, comments)

    assert [(p.post.id, p.comment_count) for p in trending] == [(2, 1)]


def test_most_commented_with_only_orphan_comments_is_empty() -> None:
    assert most_commented([], [make_post(1, 1)], [make_comment(1, 42)]) == ()


def test_most_commented_missing_owner_leaves_user_none() -> None:
    trending = most_commented([], [make_post(1, 3)], [make_comment(1, 1)])

    assert trending[0].user is None


def test_peak_comment_count_raises_on_empty_counts() -> None:
    with pytest.raises(NoDataError) as info:
        peak_comment_count({})
    assert info.value.code == "NO_DATA"
    assert peak_comment_count({1: 3, 2: 7}) == 7


def test_enriched_feed_sorts_newest_first_and_attaches_everything() -> None:
    people = [make_person(1), make_person(2)]
    posts = [
        make_post(1, 1, timestamp=10),
        make_post(2, 2, timestamp=30),
        make_post(3, 1, timestamp=20),
    ]
    comments = [make_comment(11, 3), make_comment(12, 2), make_comment(13, 3)]

    feed = enriched_feed(people, posts, comments)

    assert [p.post.id for p in feed] == [2, 3, 1]
    by_id = {p.post.id: p for p in feed}
    assert [c.id for c in by_id[3].comments] == [11, 13]
    assert by_id[3].comment_count == 2
    assert by_id[1].comments == ()
    assert by_id[1].comment_count == 0
    assert by_id[2].user == people[1]


def test_enriched_feed_contains_every_post_once_with_non_increasing_timestamps() -> None:
    posts = [make_post(i, 1, timestamp=(i * 37) % 11) for i in range(1, 20)]

    feed = enriched_feed([make_person(1)], posts, [])

    assert sorted(p.post.id for p in feed) == list(range(1, 20))
    stamps = [p.timestamp for p in feed]
    assert stamps == sorted(stamps, reverse=True)


def test_enriched_feed_unstamped_posts_sink_and_ties_keep_order() -> None:
    posts = [
        make_post(1, 1),
        make_post(2, 1, timestamp=5),
        make_post(3, 1),
        make_post(4, 1, timestamp=5),
    ]

    feed = enriched_feed([], posts, [])

    assert [p.post.id for p in feed] == [2, 4, 1, 3]
    assert feed[2].user is None


def test_grouping_helpers_preserve_source_order() -> None:
    comments = [make_comment(3, 2), make_comment(1, 1), make_comment(2, 2)]

    assert count_comments_by_post(comments) == {2: 2, 1: 1}
    assert [c.id for c in group_comments_by_post(comments)[2]] == [3, 2]
