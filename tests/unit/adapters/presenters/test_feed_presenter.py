from __future__ import annotations

from feedscope.adapters.presenters.feed_presenter import FeedPresenter
from feedscope.application.schemas.results import SnapshotStatus, ViewResult
from feedscope.domain.entities.views import EnrichedPost, RankedPerson
from feedscope.domain.enums.resource_kind import ResourceKind
from tests.fixtures.feed_testkit import make_comment, make_person, make_post

FRESH = {ResourceKind.PEOPLE: SnapshotStatus.FRESH, ResourceKind.POSTS: SnapshotStatus.REFRESHED}


def test_top_users_are_ranked_from_one() -> None:
    result = ViewResult(
        view="top_users",
        items=(
            RankedPerson(person=make_person(1), post_count=2),
            RankedPerson(person=make_person(2), post_count=1),
        ),
        sources=FRESH,
    )

    body = FeedPresenter().present_top_users(result).body.model_dump_http()

    assert [(p["id"], p["rank"], p["post_count"]) for p in body["data"]] == [(1, 1, 2), (2, 2, 1)]
    assert body["meta"] == {
        "view": "top_users",
        "count": 2,
        "degraded": False,
        "sources": {"people": "fresh", "posts": "refreshed"},
    }


def test_posts_carry_owner_comments_and_timestamp() -> None:
    item = EnrichedPost(
        post=make_post(5, 1, timestamp=123),
        user=make_person(1),
        comments=(make_comment(7, 5),),
        comment_count=1,
    )
    result = ViewResult(view="feed", items=(item,), sources=FRESH)

    post = FeedPresenter().present_posts(result).body.model_dump_http()["data"][0]

    assert post["timestamp"] == 123
    assert post["user"]["username"] == "user1"
    assert post["comments"] == [
        {"id": 7, "post_id": 5, "name": "comment 7", "email": "c7@example.test", "body": "text 7"}
    ]
    assert post["comment_count"] == 1


def test_etag_is_deterministic_and_content_sensitive() -> None:
    presenter = FeedPresenter(cache_ttl_s=15)
    one = ViewResult(view="post_comments", items=(make_comment(1, 1),), sources=FRESH)
    same = ViewResult(view="post_comments", items=(make_comment(1, 1),), sources=FRESH)
    other = ViewResult(view="post_comments", items=(make_comment(2, 1),), sources=FRESH)

    first = presenter.present_comments(one)

    assert first.etag == presenter.present_comments(same).etag
    assert first.etag != presenter.present_comments(other).etag
    assert first.etag.startswith('"') and first.etag.endswith('"')
    assert first.headers["Cache-Control"] == "public, max-age=15"


def test_degraded_results_are_not_cacheable() -> None:
    result = ViewResult(
        view="trending", items=(), sources={ResourceKind.COMMENTS: SnapshotStatus.STALE}
    )

    present = FeedPresenter().present_posts(result)

    assert present.headers["Cache-Control"] == "no-store"
    assert present.body.meta.degraded is True
    assert present.body.meta.count == 0


def test_etag_ignores_fresh_versus_refreshed() -> None:
    items = (make_comment(1, 1),)
    refreshed = ViewResult(
        view="post_comments", items=items, sources={ResourceKind.COMMENTS: SnapshotStatus.REFRESHED}
    )
    fresh = ViewResult(
        view="post_comments", items=items, sources={ResourceKind.COMMENTS: SnapshotStatus.FRESH}
    )

    presenter = FeedPresenter()

    assert presenter.present_comments(refreshed).etag == presenter.present_comments(fresh).etag
