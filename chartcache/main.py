"""Process-wide chart cache and its cleanup timer."""

from __future__ import annotations

from chartcache.config import Settings, load_settings
from chartcache.services.cache import ChartCache
from chartcache.services.sweeper import CacheSweeper

_cache: ChartCache | None = None
_settings: Settings | None = None
_sweeper: CacheSweeper | None = None


def create_cache(settings: Settings | None = None) -> ChartCache:
    """Build a new, independent cache."""
    settings = settings or Settings()
    return ChartCache(default_ttl_ms=settings.default_ttl_ms)


def create_sweeper(cache: ChartCache, settings: Settings | None = None) -> CacheSweeper:
    settings = settings or Settings()
    return CacheSweeper(cache, interval=settings.sweep_interval)


def get_cache() -> ChartCache:
    """Return the shared cache, creating it from loaded settings on first use."""
    global _cache, _settings
    if _cache is None:
        _settings = load_settings()
        _cache = create_cache(_settings)
    return _cache


def start_sweeper() -> CacheSweeper:
    """Start the periodic cleanup of the shared cache on the running loop."""
    global _sweeper
    cache = get_cache()
    if _sweeper is None:
        _sweeper = create_sweeper(cache, _settings)
    _sweeper.start()
    return _sweeper


async def shutdown() -> None:
    """Stop the shared sweeper and drop the shared cache."""
    global _sweeper
    if _sweeper is not None:
        await _sweeper.stop()
        _sweeper = None
    reset_cache()


def reset_cache() -> None:
    global _cache, _settings, _sweeper
    if _sweeper is not None:
        _sweeper.cancel()
        _sweeper = None
    _cache = None
    _settings = None
