"""Tests for structured and partial cache keys."""

import pytest
from pydantic import ValidationError

from chartcache.services.keys import (
    WILDCARD,
    CanonicalKey,
    ChartCacheKey,
    PartialKey,
    canonicalize,
    to_partial,
)


def test_absent_facets_become_wildcard():
    assert canonicalize({"subject_id": "s1"}) == CanonicalKey("s1", WILDCARD, WILDCARD, WILDCARD)


def test_canonical_order_is_fixed():
    ck = canonicalize({"metric": "technique", "time_range": "30d", "subject_id": "s1", "category": "crawl"})
    assert ck == CanonicalKey("s1", "crawl", "30d", "technique")
    assert str(ck) == "s1:crawl:30d:technique"


def test_explicit_wildcard_equals_absent_facet():
    assert canonicalize({"subject_id": "s1", "category": "all"}) == canonicalize({"subject_id": "s1"})


def test_subject_id_is_required():
    with pytest.raises(ValidationError):
        ChartCacheKey(category="crawl")
    with pytest.raises(ValidationError):
        canonicalize({"subject_id": ""})


def test_keys_are_hashable():
    assert len({ChartCacheKey(subject_id="s1"), ChartCacheKey(subject_id="s1")}) == 1


def test_partial_matches_all_given_facets():
    ck = CanonicalKey("s1", "crawl", "all", "technique")
    assert PartialKey().matches(ck)
    assert PartialKey(subject_id="s1").matches(ck)
    assert PartialKey(subject_id="s1", metric="technique").matches(ck)
    assert not PartialKey(subject_id="s1", metric="resistance").matches(ck)
    assert not PartialKey(subject_id="s2", category="crawl").matches(ck)


def test_to_partial_accepts_full_key():
    partial = to_partial(ChartCacheKey(subject_id="s1", category="crawl"))
    assert partial == PartialKey(subject_id="s1", category="crawl")
    assert to_partial(None) == PartialKey()


def test_unknown_facets_rejected():
    with pytest.raises(ValidationError):
        ChartCacheKey(subject_id="s1", categroy="crawl")
    with pytest.raises(ValidationError):
        to_partial({"subjectId": "s1"})
