# src/feedscope/infrastructure/observability/metrics.py
# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Prometheus metrics for the upstream source and the resource cache.

Exports
-------
Collectors (names are part of the public contract and must remain stable):

* ``feedscope_upstream_latency_seconds`` (Histogram; endpoint, outcome)
* ``feedscope_upstream_errors_total`` (Counter; endpoint, reason)
* ``feedscope_upstream_retries_total`` (Counter; endpoint, reason)
* ``feedscope_cache_lookups_total`` (Counter; kind, outcome)
* ``feedscope_cache_refresh_failures_total`` (Counter; kind, reason)

Design
------
All collectors are created against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name is
already registered it is reused, so module re-imports and tests that swap the
registry never hit duplicate-registration errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry

_BUCKETS: Final[tuple[float, ...]] = (
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
)


def _existing(registry: CollectorRegistry, name: str) -> object | None:
    # internal but stable in prometheus_client
    mapping = getattr(registry, "_names_to_collectors", {})
    return mapping.get(name)


def _get_or_create_histogram(name: str, doc: str, labelnames: Sequence[str]) -> Histogram:
    """Return a histogram bound to the current default registry.

    Args:
        name: Metric name.
        doc: Human-readable description.
        labelnames: Label names.

    Returns:
        A :class:`Histogram` registered on :data:`prom.REGISTRY`.
    """
    registry: CollectorRegistry = prom.REGISTRY
    existing = _existing(registry, name)
    if isinstance(existing, Histogram):
        return existing
    try:
        return Histogram(name, doc, tuple(labelnames), buckets=_BUCKETS, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = _existing(registry, name)
            if isinstance(again, Histogram):
                return again
        raise


def _get_or_create_counter(name: str, doc: str, labelnames: Sequence[str]) -> Counter:
    """Return a counter bound to the current default registry.

    Counters register under their base name and expose ``<name>_total``; both
    spellings are looked up.
    """
    registry: CollectorRegistry = prom.REGISTRY
    base = name[: -len("_total")] if name.endswith("_total") else name
    for candidate in (name, base):
        existing = _existing(registry, candidate)
        if isinstance(existing, Counter):
            return existing
    try:
        return Counter(base, doc, tuple(labelnames), registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            for candidate in (name, base):
                again = _existing(registry, candidate)
                if isinstance(again, Counter):
                    return again
        raise


def get_upstream_latency_seconds() -> Histogram:
    """Latency of one logical upstream call (retries included)."""
    return _get_or_create_histogram(
        "feedscope_upstream_latency_seconds",
        "Latency of upstream list calls in seconds.",
        ("endpoint", "outcome"),
    )


def get_upstream_errors_total() -> Counter:
    """Upstream calls that ended in an error, by reason."""
    return _get_or_create_counter(
        "feedscope_upstream_errors_total",
        "Upstream calls that failed, by error class.",
        ("endpoint", "reason"),
    )


def get_upstream_retries_total() -> Counter:
    """Retries attempted against the upstream source."""
    return _get_or_create_counter(
        "feedscope_upstream_retries_total",
        "Retries attempted for retryable upstream failures.",
        ("endpoint", "reason"),
    )


def get_cache_lookups_total() -> Counter:
    """Resource cache lookups by outcome (fresh, refreshed, stale, empty)."""
    return _get_or_create_counter(
        "feedscope_cache_lookups_total",
        "Resource cache lookups by slot and outcome.",
        ("kind", "outcome"),
    )


def get_cache_refresh_failures_total() -> Counter:
    """Refreshes that failed and fell back to the previous snapshot."""
    return _get_or_create_counter(
        "feedscope_cache_refresh_failures_total",
        "Resource cache refreshes that failed, by slot and error class.",
        ("kind", "reason"),
    )
