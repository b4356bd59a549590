"""Per-run cache of first-seen times for calls assumed to be running."""
from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class RunningStartTimes:
    """Caller-owned start-time table for one active run.

    When a declared call has no live status yet, the reconciler assumes
    it is running and needs a start time that stays put across repeated
    reconciliations, otherwise elapsed-time displays would reset on every
    render. The owner creates one instance per run and passes it into
    every reconcile call; entries are evicted as soon as the call has
    concrete state from a feed.
    """

    def __init__(self) -> None:
        self._times: dict[str, int] = {}

    def get(self, call_id: str) -> int | None:
        return self._times.get(call_id)

    def record(self, call_id: str, now_ms: int) -> int:
        """Return the stored start for *call_id*, recording *now_ms* if new."""
        existing = self._times.get(call_id)
        if existing is not None:
            return existing
        self._times[call_id] = now_ms
        return now_ms

    def evict(self, call_ids: Iterable[str]) -> int:
        """Drop entries for *call_ids*; returns how many were removed."""
        removed = 0
        for call_id in call_ids:
            if self._times.pop(call_id, None) is not None:
                removed += 1
        if removed:
            logger.debug("Evicted %d running start time(s)", removed)
        return removed

    def clear(self) -> None:
        self._times.clear()

    def snapshot(self) -> dict[str, int]:
        return dict(self._times)

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._times

    def __len__(self) -> int:
        return len(self._times)
