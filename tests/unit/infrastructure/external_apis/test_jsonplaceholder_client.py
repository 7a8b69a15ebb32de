from __future__ import annotations

import httpx
import pytest
import respx

from feedscope.domain.exceptions.feed import ShapeError, UpstreamRejected, UpstreamUnavailable
from feedscope.infrastructure.external_apis.jsonplaceholder.client import (
    JsonPlaceholderClient,
    _parse_retry_after,
)
from feedscope.infrastructure.external_apis.jsonplaceholder.settings import (
    JsonPlaceholderSettings,
)
from feedscope.infrastructure.resilience.circuit_breaker import CircuitBreaker
from feedscope.infrastructure.resilience.retry import RetryPolicy

BASE = "https://source.test"


def _client(
    http: httpx.AsyncClient, *, retries: int = 0, breaker: CircuitBreaker | None = None
) -> JsonPlaceholderClient:
    return JsonPlaceholderClient(
        JsonPlaceholderSettings(base_url=BASE + "/", timeout_s=1.0, max_retries=retries),
        http=http,
        retry_policy=RetryPolicy(total=retries, base=0.0, cap=0.0, jitter=False),
        breaker=breaker,
    )


@pytest.mark.anyio
async def test_list_rows_returns_array_of_objects() -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http)
        with respx.mock:
            route = respx.get(f"{BASE}/posts").mock(
                return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}])
            )
            rows = await client.list_rows("/posts")

    assert route.called
    assert client.base_url == BASE
    assert rows == [{"id": 1}, {"id": 2}]
    assert route.calls.last.request.headers["Accept"] == "application/json"


@pytest.mark.anyio
async def test_retryable_status_is_retried_then_succeeds() -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http, retries=2)
        with respx.mock:
            route = respx.get(f"{BASE}/users").mock(
                side_effect=[
                    httpx.Response(503),
                    httpx.Response(429),
                    httpx.Response(200, json=[]),
                ]
            )
            rows = await client.list_rows("/users")

    assert rows == []
    assert route.call_count == 3


@pytest.mark.anyio
async def test_exhausted_retries_raise_upstream_unavailable() -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http, retries=1)
        with respx.mock:
            route = respx.get(f"{BASE}/comments").mock(return_value=httpx.Response(500))
            with pytest.raises(UpstreamUnavailable) as info:
                await client.list_rows("/comments")

    assert route.call_count == 2
    assert info.value.details["status"] == 500


@pytest.mark.anyio
async def test_network_error_maps_to_upstream_unavailable() -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http)
        with respx.mock:
            respx.get(f"{BASE}/posts").mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(UpstreamUnavailable) as info:
                await client.list_rows("/posts")

    assert info.value.details["error"] == "ConnectError"


@pytest.mark.anyio
async def test_client_error_is_rejected_without_retry() -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http, retries=3)
        with respx.mock:
            route = respx.get(f"{BASE}/posts").mock(return_value=httpx.Response(404))
            with pytest.raises(UpstreamRejected):
                await client.list_rows("/posts")

    assert route.call_count == 1


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"data": []}),
        httpx.Response(200, json=[{"id": 1}, 7]),
    ],
)
async def test_bad_payloads_raise_shape_error(response: httpx.Response) -> None:
    async with httpx.AsyncClient() as http:
        client = _client(http)
        with respx.mock:
            respx.get(f"{BASE}/posts").mock(return_value=response)
            with pytest.raises(ShapeError):
                await client.list_rows("/posts")


@pytest.mark.anyio
async def test_open_circuit_short_circuits_calls() -> None:
    breaker = CircuitBreaker(failure_threshold=1, recovery_timeout_s=60.0)
    async with httpx.AsyncClient() as http:
        client = _client(http, breaker=breaker)
        with respx.mock:
            route = respx.get(f"{BASE}/posts").mock(return_value=httpx.Response(502))
            with pytest.raises(UpstreamUnavailable):
                await client.list_rows("/posts")
            with pytest.raises(UpstreamUnavailable, match="circuit_open"):
                await client.list_rows("/posts")

    assert breaker.state == "OPEN"
    assert route.call_count == 1


@pytest.mark.anyio
async def test_owned_client_is_closed_but_shared_client_is_not() -> None:
    owned = JsonPlaceholderClient(JsonPlaceholderSettings(base_url=BASE))
    await owned.aclose()
    assert owned._client.is_closed

    async with httpx.AsyncClient() as http:
        shared = _client(http)
        await shared.aclose()
        assert not http.is_closed


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, None), ("", None), ("soon", None), ("3", 3.0), ("-1", 0.0), ("600", 10.0)],
)
def test_parse_retry_after(raw: str | None, expected: float | None) -> None:
    assert _parse_retry_after(raw) == expected


@pytest.mark.anyio
async def test_retry_after_replaces_backoff_and_last_attempt_does_not_sleep() -> None:
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    async with httpx.AsyncClient() as http:
        client = JsonPlaceholderClient(
            JsonPlaceholderSettings(base_url=BASE, timeout_s=1.0, max_retries=2),
            http=http,
            retry_policy=RetryPolicy(total=2, base=0.5, cap=0.5, jitter=False),
            sleep=fake_sleep,
        )
        with respx.mock:
            route = respx.get(f"{BASE}/posts").mock(
                side_effect=[
                    httpx.Response(429, headers={"Retry-After": "3"}),
                    httpx.Response(503),
                    httpx.Response(503, headers={"Retry-After": "7"}),
                ]
            )
            with pytest.raises(UpstreamUnavailable) as info:
                await client.list_rows("/posts")

    assert route.call_count == 3
    assert sleeps == [3.0, 0.5]
    assert info.value.details["retry_after_s"] == 7.0
