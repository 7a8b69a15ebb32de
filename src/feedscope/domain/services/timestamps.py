# Copyright (c) Feedscope.
# SPDX-License-Identifier: MIT
"""Post timestamp stamping.

The source has no notion of time, so posts receive a synthetic ordering stamp:
a uniformly random instant within ``window_ms`` before "now". This is a
presentation convenience for feed ordering and must never be read as a
creation time.

Stamps are remembered per post id. A post keeps the stamp from the first time
it was seen, so refreshing the posts collection after expiry does not reshuffle
the feed.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable

DAY_MS = 86_400_000


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TimestampStamper:
    """Assign and remember synthetic epoch-millisecond stamps per post id.

    Args:
        rng: Randomness source. Pass ``random.Random(seed)`` for reproducible stamps.
        clock_ms: Wall clock returning epoch milliseconds.
        window_ms: Width of the window into the past that stamps are drawn from.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        clock_ms: Callable[[], int] = _wall_clock_ms,
        window_ms: int = DAY_MS,
    ) -> None:
        if window_ms <= 0:
            raise ValueError("window_ms must be > 0")
        self._rng = rng or random.Random()  # noqa: S311
        self._clock_ms = clock_ms
        self._window_ms = window_ms
        self._stamps: dict[int, int] = {}

    def stamp(self, post_id: int) -> int:
        """Return the stamp for ``post_id``, drawing a new one on first sight."""
        existing = self._stamps.get(post_id)
        if existing is not None:
            return existing
        value = self._clock_ms() - self._rng.randrange(self._window_ms)
        self._stamps[post_id] = value
        return value

    def __len__(self) -> int:
        return len(self._stamps)
