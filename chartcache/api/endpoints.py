"""Typed fetch functions for the evaluations evolution endpoints."""

from __future__ import annotations

from typing import Any

from chartcache.api.client import EvaluationsAPIClient
from chartcache.api.models import (
    DetailedMetrics,
    EvolutionData,
    EvolutionSummary,
    EvolutionTrends,
)


def _student_path(student_id: str, resource: str) -> str:
    return f"/api/evaluations/student/{student_id}/{resource}"


def _unwrap(body: Any) -> Any:
    # The backend wraps payloads as {"success": ..., "data": ...}
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


async def get_evolution(
    client: EvaluationsAPIClient,
    student_id: str,
    *,
    stroke_type: str | None = None,
) -> list[EvolutionData]:
    """Per-stroke evaluation history for a student."""
    body = await client.get(
        _student_path(student_id, "evolution"), params={"strokeType": stroke_type},
    )
    return [EvolutionData.model_validate(d) for d in _unwrap(body)]


async def get_trends(
    client: EvaluationsAPIClient,
    student_id: str,
    *,
    stroke_type: str | None = None,
    time_range: str | None = None,
) -> list[EvolutionTrends]:
    body = await client.get(
        _student_path(student_id, "trends"),
        params={"strokeType": stroke_type, "timeRange": time_range},
    )
    return [EvolutionTrends.model_validate(d) for d in _unwrap(body)]


async def get_detailed_metrics(
    client: EvaluationsAPIClient,
    student_id: str,
    *,
    stroke_type: str | None = None,
    time_range: str | None = None,
) -> list[DetailedMetrics]:
    body = await client.get(
        _student_path(student_id, "detailed-metrics"),
        params={"strokeType": stroke_type, "timeRange": time_range},
    )
    return [DetailedMetrics.model_validate(d) for d in _unwrap(body)]


async def get_summary(client: EvaluationsAPIClient, student_id: str) -> EvolutionSummary:
    body = await client.get(_student_path(student_id, "summary"))
    return EvolutionSummary.model_validate(_unwrap(body))
