# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface: the canonical envelopes and
    the people/posts/comments resource schemas used by routers and
    presenters. BaseHTTPSchema stays internal to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from feedscope.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
    ViewMeta,
)
from feedscope.adapters.schemas.http.feed_schemas import (
    CommentHTTP,
    PersonHTTP,
    PostHTTP,
    RankedPersonHTTP,
)

__all__ = [
    # Envelopes
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "ViewMeta",
    # Resources
    "PersonHTTP",
    "RankedPersonHTTP",
    "PostHTTP",
    "CommentHTTP",
]
