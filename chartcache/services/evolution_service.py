"""Cache-aside fetches of per-student evolution chart data."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from chartcache.api.client import EvaluationsAPIClient
from chartcache.api.endpoints import (
    get_detailed_metrics,
    get_evolution,
    get_summary,
    get_trends,
)
from chartcache.api.models import (
    DetailedMetrics,
    EvolutionData,
    EvolutionSummary,
    EvolutionTrends,
)
from chartcache.config import Settings
from chartcache.main import get_cache
from chartcache.services.cache import MISSING, ChartCache
from chartcache.services.keys import ChartCacheKey

log = logging.getLogger(__name__)

T = TypeVar("T")


class EvolutionService:
    """Serves evolution series from the chart cache, fetching on a miss."""

    def __init__(
        self,
        settings: Settings,
        client: EvaluationsAPIClient | None = None,
        cache: ChartCache | None = None,
    ) -> None:
        self.settings = settings
        self.client = client or EvaluationsAPIClient(
            settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout,
        )
        self.cache = cache if cache is not None else get_cache()

    async def close(self) -> None:
        await self.client.close()

    async def _cached(
        self,
        key: ChartCacheKey,
        fetch: Callable[[], Awaitable[T]],
        use_cache: bool,
    ) -> T:
        if use_cache:
            cached = self.cache.get(key, MISSING)
            if cached is not MISSING:
                return cached
        try:
            data = await fetch()
        except httpx.HTTPError:
            log.exception("Failed to fetch %s for student %s", key.metric, key.subject_id)
            raise
        self.cache.set(key, data)
        return data

    async def get_evolution_data(
        self,
        student_id: str,
        stroke_type: str | None = None,
        use_cache: bool = True,
    ) -> list[EvolutionData]:
        key = ChartCacheKey(subject_id=student_id, category=stroke_type, metric="evolution")
        return await self._cached(
            key,
            lambda: get_evolution(self.client, student_id, stroke_type=stroke_type),
            use_cache,
        )

    async def get_evolution_trends(
        self,
        student_id: str,
        stroke_type: str | None = None,
        time_range: str | None = None,
        use_cache: bool = True,
    ) -> list[EvolutionTrends]:
        key = ChartCacheKey(
            subject_id=student_id, category=stroke_type, time_range=time_range, metric="trends",
        )
        return await self._cached(
            key,
            lambda: get_trends(
                self.client, student_id, stroke_type=stroke_type, time_range=time_range,
            ),
            use_cache,
        )

    async def get_detailed_metrics(
        self,
        student_id: str,
        stroke_type: str | None = None,
        time_range: str | None = None,
        use_cache: bool = True,
    ) -> list[DetailedMetrics]:
        key = ChartCacheKey(
            subject_id=student_id, category=stroke_type, time_range=time_range, metric="detailed",
        )
        return await self._cached(
            key,
            lambda: get_detailed_metrics(
                self.client, student_id, stroke_type=stroke_type, time_range=time_range,
            ),
            use_cache,
        )

    async def get_evolution_summary(
        self, student_id: str, use_cache: bool = True,
    ) -> EvolutionSummary:
        key = ChartCacheKey(subject_id=student_id, metric="summary")
        return await self._cached(key, lambda: get_summary(self.client, student_id), use_cache)

    def invalidate_student_cache(self, student_id: str) -> int:
        """Drop every cached series for a student after their evaluations change."""
        return self.cache.invalidate_subject(student_id)
