"""In-memory chart-series cache keyed by {subject_id}:{category}:{time_range}:{metric}."""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, Field

from chartcache.services.keys import (
    CanonicalKey,
    ChartCacheKey,
    PartialKey,
    canonicalize,
    to_partial,
)

log = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000

# Miss marker for callers that store None as a real value
MISSING: Any = object()

T = TypeVar("T")

KeyLike = ChartCacheKey | Mapping[str, Any]
InvalidationListener = Callable[[CanonicalKey], Any]


class _Entry(NamedTuple):
    value: Any
    stored_at: float
    expires_at: float


class EntryStats(BaseModel):
    key: CanonicalKey
    stored_at: float
    expires_at: float


class CacheStats(BaseModel):
    size: int
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0
    entries: list[EntryStats] = Field(default_factory=list)


class ChartCache:
    """TTL cache for derived chart data with partial-key invalidation.

    Entries expire lazily on read and in bulk via ``cleanup()``. Explicit
    invalidation notifies registered listeners once per removed key; expiry
    does not.
    """

    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or time.monotonic
        self._store: dict[CanonicalKey, _Entry] = {}
        self._listeners: dict[int, InvalidationListener] = {}
        self._listener_ids = itertools.count()
        self._hits = 0
        self._misses = 0

    def _now(self) -> float:
        return self._clock() * 1000

    def get(self, key: KeyLike, default: Any = None) -> Any:
        ck = canonicalize(key)
        entry = self._store.get(ck)
        if entry is None:
            self._misses += 1
            return default
        if self._now() >= entry.expires_at:
            del self._store[ck]
            self._misses += 1
            log.debug("Expired on read: %s", ck)
            return default
        self._hits += 1
        return entry.value

    def set(self, key: KeyLike, value: Any, ttl_ms: float | None = None) -> None:
        ck = canonicalize(key)
        now = self._now()
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        self._store[ck] = _Entry(value, now, now + ttl)

    def get_or_set(
        self, key: KeyLike, producer: Callable[[], T], ttl_ms: float | None = None,
    ) -> T:
        """Return the live value for key, computing and storing it on a miss."""
        cached = self.get(key, MISSING)
        if cached is not MISSING:
            return cached
        value = producer()
        self.set(key, value, ttl_ms)
        return value

    def __contains__(self, key: KeyLike) -> bool:
        entry = self._store.get(canonicalize(key))
        return entry is not None and self._now() < entry.expires_at

    def __len__(self) -> int:
        return len(self._store)

    def cleanup(self) -> int:
        """Evict every expired entry. Listeners are not notified."""
        now = self._now()
        expired = [ck for ck, entry in self._store.items() if now >= entry.expires_at]
        for ck in expired:
            del self._store[ck]
        if expired:
            log.debug("Swept %d expired entries", len(expired))
        return len(expired)

    # -- invalidation -----------------------------------------------------

    def invalidate(self, partial: PartialKey | KeyLike | None = None) -> int:
        """Remove every entry whose facets match all facets given in partial.

        The removal set is fixed before any listener runs, so listeners may
        safely write to or invalidate this cache.
        """
        match = to_partial(partial)
        removed = [ck for ck in self._store if match.matches(ck)]
        for ck in removed:
            del self._store[ck]
        if removed:
            log.debug("Invalidated %d entries matching %s", len(removed), match)
        self._notify(removed)
        return len(removed)

    def invalidate_subject(self, subject_id: str) -> int:
        return self.invalidate(PartialKey(subject_id=subject_id))

    def invalidate_all(self) -> int:
        removed = list(self._store)
        self._store.clear()
        log.info("Cleared %d cache entries", len(removed))
        self._notify(removed)
        return len(removed)

    def add_invalidation_listener(self, callback: InvalidationListener) -> Callable[[], None]:
        """Register callback(canonical_key); returns an idempotent unsubscribe."""
        listener_id = next(self._listener_ids)
        self._listeners[listener_id] = callback

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    def _notify(self, keys: list[CanonicalKey]) -> None:
        for ck in keys:
            for callback in list(self._listeners.values()):
                try:
                    callback(ck)
                except Exception:
                    log.exception(
                        "Invalidation listener %s failed for %s",
                        getattr(callback, "__qualname__", repr(callback)),
                        ck,
                    )

    # -- diagnostics ------------------------------------------------------

    def get_stats(self) -> CacheStats:
        """Snapshot of current state, including expired-but-unswept entries."""
        reads = self._hits + self._misses
        return CacheStats(
            size=len(self._store),
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / reads if reads else 0.0,
            entries=[
                EntryStats(key=ck, stored_at=e.stored_at, expires_at=e.expires_at)
                for ck, e in self._store.items()
            ],
        )

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0
