"""End-to-end projection: messages + feeds -> renderable view model.

    reconcile -> sort_records -> group_records -> ToolView

``build_tool_view`` is meant to be called on every UI update; it is pure
apart from the caller's ``RunningStartTimes`` cache.
"""
from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from toolview.engine.grouping import group_records
from toolview.engine.ranking import sort_records
from toolview.engine.reconciler import reconcile
from toolview.engine.start_times import RunningStartTimes
from toolview.shared.formatters.action_description import describe
from toolview.shared.formatters.display import (
    duration_text,
    error_preview,
    file_operation_info,
    format_elapsed,
    group_summary,
    read_metadata_info,
)
from toolview.shared.models.feeds import ExecutingTool, PendingTool, QueuedTool, ToolResultEvent
from toolview.shared.models.group import GroupKind, ToolGroup
from toolview.shared.models.message import Message
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus
from toolview.shared.services.config import ViewConfig


@dataclass
class ToolItemView:
    """Everything the renderer shows for one tool call."""
    call_id: str
    name: str
    status: ToolStatus
    description: str
    queue_position: int | None = None
    elapsed_text: str = ""
    duration_text: str = ""
    read_info: str | None = None
    file_path: str | None = None
    file_action: str | None = None
    error_preview: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_id": self.call_id,
            "name": self.name,
            "status": self.status.value,
            "description": self.description,
            "queue_position": self.queue_position,
            "elapsed_text": self.elapsed_text,
            "duration_text": self.duration_text,
            "read_info": self.read_info,
            "file_path": self.file_path,
            "file_action": self.file_action,
            "error_preview": self.error_preview,
        }


@dataclass
class ToolViewEntry:
    group: ToolGroup
    items: list[ToolItemView]
    summary: str = ""

    @property
    def is_group(self) -> bool:
        return self.group.is_group

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.group.kind.value,
            "items": [item.to_dict() for item in self.items],
        }
        if self.is_group:
            d["category"] = self.group.category
            d["summary"] = self.summary
            d["stats"] = self.group.stats.to_dict() if self.group.stats else None
        return d


@dataclass
class ToolView:
    entries: list[ToolViewEntry] = field(default_factory=list)

    @property
    def records(self) -> list[ToolCallRecord]:
        return [record for entry in self.entries for record in entry.group.members]

    def find(self, call_id: str) -> ToolItemView | None:
        for entry in self.entries:
            for item in entry.items:
                if item.call_id == call_id:
                    return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [entry.to_dict() for entry in self.entries]}


def build_item_view(
    record: ToolCallRecord,
    now_ms: int,
    config: ViewConfig | None = None,
) -> ToolItemView:
    config = config or ViewConfig()
    item = ToolItemView(
        call_id=record.call_id,
        name=record.name,
        status=record.status,
        description=describe(
            record.name, record.status, record.arguments, record.partial_args_json
        ),
        queue_position=record.queue_position,
    )
    if record.status in (ToolStatus.RUNNING, ToolStatus.QUEUED):
        if config.display.show_elapsed:
            item.elapsed_text = format_elapsed(record.start_time, now_ms)
    elif record.is_terminal:
        item.duration_text = duration_text(record.result_metadata)

    if record.status == ToolStatus.COMPLETED:
        item.read_info = read_metadata_info(record.result_metadata)
        file_info = file_operation_info(record)
        if file_info is not None:
            item.file_path, item.file_action = file_info
            item.file_path = item.file_path or None
    elif record.status == ToolStatus.ERROR:
        item.error_preview = error_preview(
            record.full_output, config.display.error_preview_chars
        )
    return item


def build_tool_view(
    messages: Iterable[Message],
    executing_tools: Mapping[str, ExecutingTool] | None = None,
    queued_tools: Iterable[QueuedTool] | None = None,
    pending_tools: Iterable[PendingTool] | None = None,
    *,
    result_events: Mapping[str, ToolResultEvent] | None = None,
    is_running: bool = False,
    start_times: RunningStartTimes | None = None,
    config: ViewConfig | None = None,
    now: Callable[[], int] | None = None,
) -> ToolView:
    """Run the whole projection and return the view model."""
    config = config or ViewConfig()
    clock = now or (lambda: int(time.time() * 1000))
    now_ms = clock()

    records = reconcile(
        messages,
        executing_tools,
        queued_tools,
        pending_tools,
        result_events=result_events,
        is_running=is_running,
        start_times=start_times,
        now=lambda: now_ms,
    )
    ranked = sort_records(records)
    if config.grouping.enabled:
        groups = group_records(ranked, config.grouping.min_group_size)
    else:
        groups = [ToolGroup(kind=GroupKind.SINGLE, members=[r]) for r in ranked]

    entries: list[ToolViewEntry] = []
    for group in groups:
        items = [build_item_view(record, now_ms, config) for record in group.members]
        summary = ""
        if group.is_group:
            stats = group.stats if config.display.show_stats else None
            summary = group_summary(group.category, len(group.members), stats)
        entries.append(ToolViewEntry(group=group, items=items, summary=summary))
    return ToolView(entries=entries)
