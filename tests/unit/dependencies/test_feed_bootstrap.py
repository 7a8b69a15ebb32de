from __future__ import annotations

import httpx
import pytest
import respx

from feedscope.config.settings import Settings
from feedscope.dependencies.core.bootstrap import bootstrap, build_feed_queries

BASE = "https://source.test"

USERS = [
    {"id": 1, "name": "A", "username": "a", "email": "a@x"},
    {"id": 2, "name": "B", "username": "b", "email": "b@x"},
]
POSTS = [
    {"id": 10, "userId": 1, "title": "t", "body": "b"},
    {"id": 11, "userId": 1, "title": "t", "body": "b"},
    {"id": 12, "userId": 2, "title": "t", "body": "b"},
]
COMMENTS = [
    {"id": 1, "postId": 12, "name": "n", "email": "e", "body": "b"},
    {"id": 2, "postId": 12, "name": "n", "email": "e", "body": "b"},
    {"id": 3, "postId": 10, "name": "n", "email": "e", "body": "b"},
]


def _settings(**overrides: object) -> Settings:
    return Settings(source_base_url=BASE, source_max_retries=0, timestamp_seed=7, **overrides)


@pytest.mark.anyio
async def test_wired_queries_read_the_source_once_per_collection() -> None:
    async with httpx.AsyncClient() as http:
        queries = build_feed_queries(_settings(), http)
        with respx.mock:
            users = respx.get(f"{BASE}/users").mock(return_value=httpx.Response(200, json=USERS))
            posts = respx.get(f"{BASE}/posts").mock(return_value=httpx.Response(200, json=POSTS))
            comments = respx.get(f"{BASE}/comments").mock(
                return_value=httpx.Response(200, json=COMMENTS)
            )

            top = await queries.get_top_users(2)
            trending = await queries.get_trending_posts()
            feed = await queries.get_feed_posts()

    assert [(r.person.id, r.post_count) for r in top.items] == [(1, 2), (2, 1)]
    assert [(p.post.id, p.comment_count) for p in trending.items] == [(12, 2)]
    assert sorted(p.post.id for p in feed.items) == [10, 11, 12]
    assert (users.call_count, posts.call_count, comments.call_count) == (1, 1, 1)
    assert not feed.degraded


@pytest.mark.anyio
async def test_seeded_stamps_are_reproducible_across_processes() -> None:
    async def feed_order() -> list[int]:
        async with httpx.AsyncClient() as http:
            queries = build_feed_queries(_settings(), http)
            with respx.mock:
                respx.get(f"{BASE}/users").mock(return_value=httpx.Response(200, json=USERS))
                respx.get(f"{BASE}/posts").mock(return_value=httpx.Response(200, json=POSTS))
                respx.get(f"{BASE}/comments").mock(return_value=httpx.Response(200, json=[]))
                feed = await queries.get_feed_posts()
        return [p.post.id for p in feed.items]

    assert await feed_order() == await feed_order()


@pytest.mark.anyio
async def test_source_outage_degrades_instead_of_failing() -> None:
    async with httpx.AsyncClient() as http:
        queries = build_feed_queries(_settings(), http)
        with respx.mock:
            respx.get(f"{BASE}/users").mock(return_value=httpx.Response(503))
            respx.get(f"{BASE}/posts").mock(return_value=httpx.Response(200, json=POSTS))

            top = await queries.get_top_users()

    assert top.items == ()
    assert top.degraded


@pytest.mark.anyio
async def test_bootstrap_owns_and_closes_the_http_client() -> None:
    settings = _settings(top_users_default_limit=3)

    async with bootstrap(settings) as state:
        assert state.settings is settings
        assert state.queries.cache.expiration_s == settings.cache_expiration_s
        assert not state.http_client.is_closed

    assert state.http_client.is_closed
