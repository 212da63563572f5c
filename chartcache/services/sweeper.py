"""Background task that evicts expired cache entries on a fixed interval."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from chartcache.services.cache import ChartCache

log = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 60.0


class CacheSweeper:
    """Calls ``cache.cleanup()`` every ``interval`` seconds on the running loop."""

    def __init__(self, cache: ChartCache, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        self.cache = cache
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop. Must be called with a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        log.debug("Cache sweeper started (every %.1fs)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.debug("Cache sweeper stopped")

    def cancel(self) -> None:
        """Cancel the loop without waiting for it to finish."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def sweep(self) -> int:
        try:
            return self.cache.cleanup()
        except Exception:
            log.exception("Cache sweep failed")
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.sweep()
