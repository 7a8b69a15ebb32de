# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""
Feed Domain Exceptions

Purpose:
    Error conditions raised while fetching the people/posts/comments
    collections and while aggregating them into views.

    * Fetchers raise ``TransportError`` and ``ShapeError``; the resource cache
      absorbs both and degrades to its last-known-good snapshot.
    * ``NoDataError`` is raised by aggregation helpers that have no valid
      maximum to report.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class TransportError(DomainError):
    """The remote call failed or returned a non-success status."""

    code = "SOURCE_TRANSPORT_ERROR"


class UpstreamUnavailable(TransportError):
    """Network failure, timeout, 429/5xx or an open circuit (retryable)."""

    code = "SOURCE_UNAVAILABLE"


class UpstreamRejected(TransportError):
    """The source answered with a non-retryable 4xx status."""

    code = "SOURCE_REJECTED"


class ShapeError(DomainError):
    """The payload could not be parsed into the expected entity shape."""

    code = "SOURCE_SCHEMA_ERROR"


class NoDataError(DomainError):
    """An aggregation has no data from which to derive its result."""

    code = "NO_DATA"
