# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Feedscope: cached people/posts/comments aggregation with derived views."""

__version__ = "0.1.0"
