"""Structured cache keys: {subject_id}:{category}:{time_range}:{metric}."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

WILDCARD = "all"

FACETS = ("subject_id", "category", "time_range", "metric")


class CanonicalKey(NamedTuple):
    """Lookup form of a structured key, one string per facet in fixed order."""

    subject_id: str
    category: str
    time_range: str
    metric: str

    def __str__(self) -> str:
        return ":".join(self)


class ChartCacheKey(BaseModel):
    """Caller-facing key for a cached chart series."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subject_id: str = Field(min_length=1)
    category: str | None = None
    time_range: str | None = None
    metric: str | None = None

    def canonical(self) -> CanonicalKey:
        return CanonicalKey(
            self.subject_id,
            self.category or WILDCARD,
            self.time_range or WILDCARD,
            self.metric or WILDCARD,
        )


class PartialKey(BaseModel):
    """Key with any facet left unspecified. None matches every value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subject_id: str | None = None
    category: str | None = None
    time_range: str | None = None
    metric: str | None = None

    def specified(self) -> dict[int, str]:
        """Facet position -> required value, for the facets that were given."""
        return {
            i: value
            for i, value in enumerate(
                (self.subject_id, self.category, self.time_range, self.metric)
            )
            if value is not None
        }

    def matches(self, key: CanonicalKey) -> bool:
        return all(key[i] == value for i, value in self.specified().items())


def to_key(key: ChartCacheKey | Mapping[str, Any]) -> ChartCacheKey:
    if isinstance(key, ChartCacheKey):
        return key
    return ChartCacheKey.model_validate(dict(key))


def to_partial(partial: PartialKey | ChartCacheKey | Mapping[str, Any] | None) -> PartialKey:
    if partial is None:
        return PartialKey()
    if isinstance(partial, PartialKey):
        return partial
    if isinstance(partial, ChartCacheKey):
        return PartialKey.model_validate(partial.model_dump())
    return PartialKey.model_validate(dict(partial))


def canonicalize(key: ChartCacheKey | Mapping[str, Any]) -> CanonicalKey:
    return to_key(key).canonical()
