"""Display ordering of reconciled tool call records."""
from __future__ import annotations

from collections.abc import Iterable

from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

STATUS_PRIORITY: dict[str, int] = {
    ToolStatus.RUNNING.value: 0,
    ToolStatus.QUEUED.value: 1,
    ToolStatus.PENDING.value: 2,
    ToolStatus.ERROR.value: 3,
    ToolStatus.COMPLETED.value: 4,
}
_UNRANKED = len(STATUS_PRIORITY)

# Ranks whose most recent activity should surface first
_NEWEST_FIRST = frozenset({STATUS_PRIORITY["running"], STATUS_PRIORITY["queued"]})


def status_rank(status: ToolStatus | str) -> int:
    """Priority rank of *status*; unknown statuses sort last."""
    value = status.value if isinstance(status, ToolStatus) else str(status)
    return STATUS_PRIORITY.get(value, _UNRANKED)


def _sort_key(record: ToolCallRecord) -> tuple[int, int]:
    rank = status_rank(record.status)
    started = record.start_time or 0
    return (rank, -started if rank in _NEWEST_FIRST else started)


def sort_records(records: Iterable[ToolCallRecord]) -> list[ToolCallRecord]:
    """Sort by status rank, then recency.

    In-flight work (running, queued) shows newest first; everything else
    keeps chronological order. ``sorted`` is stable, so records with equal
    keys keep their incoming order and the result is deterministic.
    """
    return sorted(records, key=_sort_key)
