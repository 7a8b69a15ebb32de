# src/feedscope/infrastructure/external_apis/jsonplaceholder/client.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""People/Posts/Comments Transport Client: resilient, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with per-request timeout.
* Jittered exponential retries (bounded); honors ``Retry-After`` seconds.
* Circuit breaker (CLOSED ↔ OPEN ↔ HALF-OPEN).
* Deterministic mapping to domain errors:
    - network errors, timeouts, 429, 5xx, open circuit → ``UpstreamUnavailable``
    - any other non-2xx status → ``UpstreamRejected``
    - non-JSON body or a body that is not a JSON array → ``ShapeError``
* Prometheus metrics + OpenTelemetry spans.

Return shape: ``list_rows(path)`` returns the decoded JSON array as a list of
mappings. Row-level validation belongs to the gateway.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from contextlib import suppress
from typing import Any, Final

import httpx

from feedscope.domain.exceptions.feed import (
    ShapeError,
    TransportError,
    UpstreamRejected,
    UpstreamUnavailable,
)
from feedscope.infrastructure.external_apis.jsonplaceholder.settings import (
    JsonPlaceholderSettings,
)
from feedscope.infrastructure.logging.logger import get_json_logger
from feedscope.infrastructure.observability.metrics import (
    get_upstream_errors_total,
    get_upstream_latency_seconds,
    get_upstream_retries_total,
)
from feedscope.infrastructure.observability.tracing import traced
from feedscope.infrastructure.resilience.circuit_breaker import CircuitBreaker, CircuitOpenError
from feedscope.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = get_json_logger(__name__)

_DEFAULT_BASE_BACKOFF: Final[float] = 0.25
_DEFAULT_MAX_BACKOFF: Final[float] = 2.5
_MAX_RETRY_AFTER_S: Final[float] = 10.0

_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "feedscope-client/0.1",
}


def _parse_retry_after(val: str | None) -> float | None:
    """Parse the HTTP ``Retry-After`` header (seconds form only).

    Args:
        val: Header value as a string, or ``None``.

    Returns:
        Seconds to wait (capped) if parseable, otherwise ``None``.
    """
    if not val:
        return None
    try:
        return min(_MAX_RETRY_AFTER_S, max(0.0, float(val)))
    except ValueError:
        return None


def _is_retryable(exc: Exception) -> bool:
    return isinstance(exc, UpstreamUnavailable)


def _retry_after_hint(exc: Exception) -> float | None:
    if isinstance(exc, UpstreamUnavailable):
        hint = exc.details.get("retry_after_s")
        return float(hint) if hint is not None else None
    return None


class JsonPlaceholderClient:
    """Resilient, instrumented transport client for the list endpoints."""

    def __init__(
        self,
        settings: JsonPlaceholderSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the transport client.

        Args:
            settings: Provider settings.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            retry_policy: Optional retry configuration; built from
                ``settings.max_retries`` when omitted.
            breaker: Circuit breaker instance to use; created if omitted.
            sleep: Awaitable sleep between retries, injectable for tests.
        """
        self._settings = settings
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = float(settings.timeout_s)

        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=self._timeout,
            headers=_DEFAULT_HEADERS.copy(),
        )
        if http is not None:
            for key, value in _DEFAULT_HEADERS.items():
                self._client.headers.setdefault(key, value)

        self._retry = retry_policy or RetryPolicy(
            total=int(settings.max_retries),
            base=_DEFAULT_BASE_BACKOFF,
            cap=_DEFAULT_MAX_BACKOFF,
            jitter=True,
        )
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=5,
            recovery_timeout_s=30.0,
            half_open_max_calls=1,
        )

        self._sleep = sleep

        self._latency = get_upstream_latency_seconds()
        self._errors = get_upstream_errors_total()
        self._retries_total = get_upstream_retries_total()

    @property
    def base_url(self) -> str:
        """Normalized base URL (no trailing slash)."""
        return self._base_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ---------------------------- Public API ----------------------------- #

    async def list_rows(self, path: str, *, endpoint: str | None = None) -> list[Mapping[str, Any]]:
        """GET ``path`` and return its JSON array body.

        Args:
            path: Endpoint path such as ``"/posts"`` or ``"/posts/3/comments"``.
            endpoint: Low-cardinality label for metrics and spans
                (e.g. ``"/posts/{id}/comments"``); defaults to ``path``.

        Returns:
            The decoded array; every element is a mapping.

        Raises:
            TransportError: ``UpstreamUnavailable`` or ``UpstreamRejected``.
            ShapeError: If the body is not JSON, not an array, or holds non-objects.
        """
        payload = await self._observe_call(path, endpoint or path)
        if not isinstance(payload, list):
            raise ShapeError(
                "bad_shape",
                details={"path": path, "expected": "array", "got": type(payload).__name__},
            )
        for index, row in enumerate(payload):
            if not isinstance(row, Mapping):
                raise ShapeError(
                    "bad_shape",
                    details={"path": path, "index": index, "expected": "object"},
                )
        return payload

    # --------------------------- Internal helpers ------------------------- #

    async def _observe_call(self, path: str, endpoint: str) -> Any:
        """Wrap a GET call with breaker, retry, metrics, and tracing."""
        url = f"{self._base_url}{path}"

        async def _call() -> Any:
            """Execute a single HTTP GET under breaker control."""
            try:
                async with self._breaker.guard(path):
                    try:
                        response = await self._client.get(url, timeout=self._timeout)
                    except httpx.RequestError as exc:
                        raise UpstreamUnavailable(
                            "request_failed",
                            details={"path": path, "error": type(exc).__name__},
                        ) from exc
                    if response.status_code == 429 or response.status_code >= 500:
                        details: dict[str, Any] = {"path": path, "status": response.status_code}
                        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                        if retry_after is not None:
                            details["retry_after_s"] = retry_after
                        raise UpstreamUnavailable("upstream_unavailable", details=details)
            except CircuitOpenError as exc:
                raise UpstreamUnavailable(str(exc), details={"path": path}) from exc

            if not response.is_success:
                raise UpstreamRejected(
                    "upstream_rejected",
                    details={"path": path, "status": response.status_code},
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ShapeError("non_json", details={"path": path, "error": str(exc)}) from exc

        def _retry_predicate_with_metrics(exc: Exception) -> bool:
            retryable = _is_retryable(exc)
            if retryable:
                with suppress(Exception):
                    self._retries_total.labels(endpoint=endpoint, reason=type(exc).__name__).inc()
                logger.info(
                    "source.retry",
                    extra={"path": path, "reason": type(exc).__name__},
                )
            return retryable

        start = time.perf_counter()
        error_reason: str | None = None
        try:
            async with traced("source.list", endpoint=endpoint, base_url=self._base_url):
                return await retry_async(
                    _call,
                    policy=self._retry,
                    retry_on=_retry_predicate_with_metrics,
                    delay_hint=_retry_after_hint,
                    sleep=self._sleep,
                )
        except (TransportError, ShapeError) as exc:
            error_reason = type(exc).__name__
            raise
        finally:
            elapsed = time.perf_counter() - start
            with suppress(Exception):
                outcome = "error" if error_reason else "success"
                self._latency.labels(endpoint=endpoint, outcome=outcome).observe(elapsed)
                if error_reason:
                    self._errors.labels(endpoint=endpoint, reason=error_reason).inc()
