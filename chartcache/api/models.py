"""Pydantic models for evaluations API responses and change events."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

StrokeType = Literal["crawl", "costas", "peito", "borboleta"]
Direction = Literal["improving", "declining", "stable"]


class APIModel(BaseModel):
    """Accepts the API's camelCase fields as well as snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvolutionPoint(APIModel):
    date: datetime
    technique: float
    resistance: float
    time_seconds: float | None = None


class EvolutionData(APIModel):
    student_id: str
    stroke_type: StrokeType
    evaluations: list[EvolutionPoint] = Field(default_factory=list)


class TrendAnalysis(APIModel):
    slope: float
    direction: Direction
    improvement: float = 0.0


class ScoreSet(APIModel):
    technique: float
    resistance: float
    overall: float


class TrendStatistics(APIModel):
    total_evaluations: int
    average_scores: ScoreSet
    best_scores: ScoreSet
    latest_scores: ScoreSet
    improvement_rate: float


class EvolutionTrends(APIModel):
    student_id: str
    stroke_type: StrokeType
    evaluations: list[EvolutionPoint] = Field(default_factory=list)
    trends: dict[str, TrendAnalysis] = Field(default_factory=dict)  # technique/resistance/overall
    statistics: TrendStatistics | None = None


class MetricPoint(APIModel):
    date: datetime
    technique: float
    resistance: float
    overall: float
    evaluation_id: str
    time_seconds: float | None = None


class MetricTrend(APIModel):
    slope: float
    correlation: float
    direction: Direction
    confidence: float


class Milestone(APIModel):
    date: datetime
    type: Literal["improvement", "decline", "plateau", "breakthrough"]
    description: str
    impact: Literal["high", "medium", "low"]
    stroke_type: StrokeType


class DetailedMetrics(APIModel):
    student_id: str
    stroke_type: StrokeType
    time_range: str
    data_points: list[MetricPoint] = Field(default_factory=list)
    trends: dict[str, MetricTrend] = Field(default_factory=dict)
    milestones: list[Milestone] = Field(default_factory=list)


class EvolutionSummary(APIModel):
    overall_progress: float
    strongest_stroke: StrokeType | None = None
    weakest_stroke: StrokeType | None = None
    recent_trend: Direction = "stable"
    days_to_next_level: int | None = None
    recommended_focus: list[str] = Field(default_factory=list)


class ChangeEvent(APIModel):
    """Server push telling clients that a student's source data changed."""

    event: str  # evaluation:changed, student:changed, ...
    type: str
    student_id: str = Field(min_length=1)
    evaluation_id: str | None = None
    timestamp: datetime | None = None
