"""Shared test fixtures."""

from __future__ import annotations

import pytest

from chartcache.services.cache import ChartCache


class FakeClock:
    """Manually advanced replacement for time.monotonic (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ChartCache:
    return ChartCache(clock=clock)


@pytest.fixture
def populated_cache(cache) -> ChartCache:
    """Three entries: two for student-1 (crawl, costas), one for student-2."""
    cache.set({"subject_id": "student-1", "category": "crawl", "metric": "technique"}, "data1")
    cache.set({"subject_id": "student-1", "category": "costas", "metric": "technique"}, "data2")
    cache.set({"subject_id": "student-2", "category": "crawl", "metric": "technique"}, "data3")
    return cache


@pytest.fixture
def evolution_payload() -> dict:
    """An /evolution response body as the backend sends it."""
    return {
        "success": True,
        "data": [
            {
                "studentId": "student-1",
                "strokeType": "crawl",
                "evaluations": [
                    {"date": "2026-03-01T10:00:00Z", "technique": 6, "resistance": 5},
                    {"date": "2026-04-01T10:00:00Z", "technique": 7, "resistance": 6, "timeSeconds": 48.2},
                ],
            },
        ],
    }


@pytest.fixture
def summary_payload() -> dict:
    return {
        "success": True,
        "data": {
            "overallProgress": 12.5,
            "strongestStroke": "crawl",
            "weakestStroke": "borboleta",
            "recentTrend": "improving",
            "daysToNextLevel": 30,
            "recommendedFocus": ["borboleta technique"],
        },
    }
