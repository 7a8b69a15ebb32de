from __future__ import annotations

from feedscope.application.schemas.results import CollectionResult, SnapshotStatus, ViewResult
from feedscope.domain.enums.resource_kind import ResourceKind


def test_only_stale_and_empty_are_degraded() -> None:
    assert [s.value for s in SnapshotStatus if s.degraded] == ["stale", "empty"]


def test_view_result_is_degraded_when_any_source_is() -> None:
    healthy = ViewResult(
        view="feed",
        items=(),
        sources={
            ResourceKind.POSTS: SnapshotStatus.FRESH,
            ResourceKind.PEOPLE: SnapshotStatus.REFRESHED,
        },
    )
    partial = ViewResult(
        view="feed",
        items=(),
        sources={
            ResourceKind.POSTS: SnapshotStatus.FRESH,
            ResourceKind.PEOPLE: SnapshotStatus.EMPTY,
        },
    )

    assert not healthy.degraded
    assert partial.degraded
    assert healthy == ViewResult(view="feed", items=(), sources=dict(healthy.sources))


def test_collection_result_flags() -> None:
    empty = CollectionResult(kind=ResourceKind.COMMENTS, items=(), status=SnapshotStatus.EMPTY)

    assert empty.is_empty
    assert empty.is_degraded
