# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Base HTTP Schema (Adapters Layer).

Purpose:
    Canonical Pydantic base for all adapter-layer HTTP schemas.
    Enforces strict config and deterministic JSON encoding.

Layer: adapters/schemas/http

Notes:
    - Transport-facing only. Application code must not import from this module.
    - All HTTP envelopes and resource schemas subclass BaseHTTPSchema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Base class for all HTTP-facing schemas.

    Provides:
        • Strict `extra='forbid'` validation.
        • Immutable instances (responses are built once, never edited).
        • Consistent `model_dump_http()` for presenters and routers.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Return a JSON-serializable dict suitable for HTTP responses."""
        return self.model_dump(mode="json", **kwargs)
