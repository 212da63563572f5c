"""Map server change events to cache invalidation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from chartcache.api.models import ChangeEvent
from chartcache.services.cache import ChartCache

log = logging.getLogger(__name__)

INVALIDATING_EVENTS = frozenset({"evaluation:changed", "student:changed"})


def handle_change_event(cache: ChartCache, payload: ChangeEvent | Mapping[str, Any]) -> int:
    """Invalidate the student's cached series if the event changes their data.

    Returns the number of entries removed. Raises ``pydantic.ValidationError``
    for malformed payloads.
    """
    event = payload if isinstance(payload, ChangeEvent) else ChangeEvent.model_validate(payload)
    if event.event not in INVALIDATING_EVENTS:
        log.debug("Ignoring change event %s", event.event)
        return 0
    removed = cache.invalidate_subject(event.student_id)
    log.info(
        "%s (%s) for student %s: invalidated %d entries",
        event.event, event.type, event.student_id, removed,
    )
    return removed
