"""Tool-call reconciliation and presentation engine.

All functions here are synchronous and pure apart from the explicit,
caller-owned ``RunningStartTimes`` cache.
"""
from __future__ import annotations

__all__ = [
    "RunningStartTimes",
    "ToolView",
    "build_tool_view",
    "compute_diff_stats",
    "group_records",
    "reconcile",
    "sort_records",
    "status_rank",
]

from toolview.engine.diff_stats import compute_diff_stats
from toolview.engine.grouping import group_records
from toolview.engine.pipeline import ToolView, build_tool_view
from toolview.engine.ranking import sort_records, status_rank
from toolview.engine.reconciler import reconcile
from toolview.engine.start_times import RunningStartTimes
