# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""OpenTelemetry span helper.

Provides a small async context manager ``traced(name, **attrs)`` to wrap an
operation with an OTEL span. Only the OpenTelemetry API is used; without a
configured SDK tracer provider the spans are non-recording and cost nothing.

Layer:
    infrastructure/observability
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from opentelemetry import trace

_tracer = trace.get_tracer("feedscope")


@asynccontextmanager
async def traced(span_name: str, **attrs: Any) -> AsyncIterator[trace.Span]:
    """Open a span named ``span_name`` carrying ``attrs`` as attributes.

    Args:
        span_name: Logical span name (e.g. ``"source.list"``).
        **attrs: Span attributes; ``None`` values are dropped.

    Yields:
        The active span. Exceptions raised inside the block are recorded on
        the span and re-raised.
    """
    attributes = {k: v for k, v in attrs.items() if v is not None}
    with _tracer.start_as_current_span(span_name, attributes=attributes) as span:
        yield span
