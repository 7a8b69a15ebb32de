from __future__ import annotations

import random

import pytest

from feedscope.domain.services.timestamps import DAY_MS, TimestampStamper


def test_stamps_fall_within_the_window_before_now() -> None:
    now = 1_700_000_000_000
    stamper = TimestampStamper(rng=random.Random(7), clock_ms=lambda: now)

    stamps = [stamper.stamp(pid) for pid in range(1, 200)]

    assert all(now - DAY_MS < s <= now for s in stamps)


def test_stamp_is_remembered_per_post_id() -> None:
    ticks = iter(range(1_000_000, 2_000_000, 1000))
    stamper = TimestampStamper(rng=random.Random(1), clock_ms=lambda: next(ticks), window_ms=500)

    first = stamper.stamp(3)

    assert stamper.stamp(3) == first
    assert len(stamper) == 1
    stamper.stamp(4)
    assert len(stamper) == 2


def test_seeded_stampers_are_reproducible() -> None:
    def build() -> TimestampStamper:
        return TimestampStamper(rng=random.Random(99), clock_ms=lambda: 10_000_000)

    a, b = build(), build()

    assert [a.stamp(i) for i in range(1, 20)] == [b.stamp(i) for i in range(1, 20)]


def test_window_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TimestampStamper(window_ms=0)
