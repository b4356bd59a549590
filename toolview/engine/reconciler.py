"""Merge persisted tool history with the real-time status feeds.

The chat history holds assistant tool-call declarations and tool-role
result messages. Independently, the host delivers three live feeds
(executing, queued, pending approval) plus live result events, in any
order and possibly stale. ``reconcile`` folds all of them into exactly
one ``ToolCallRecord`` per call id.

Precedence, highest first:

    persisted result  >  executing  >  queued  >  pending  >  assumed running

A persisted result is ground truth: a stale executing/queued entry for
the same id is ignored. The "assumed running" fallback applies only
while the run is active, to declared calls no feed has reported yet.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from toolview.engine.start_times import RunningStartTimes
from toolview.shared.models.feeds import (
    ExecutingTool,
    PendingTool,
    QueuedTool,
    ToolResultEvent,
)
from toolview.shared.models.message import Message, MessageRole
from toolview.shared.models.metadata import parse_result_metadata
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

logger = logging.getLogger(__name__)

UNKNOWN_TOOL_NAME = "unknown"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _Declaration:
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    partial_args_json: str | None = None


def index_declarations(messages: Iterable[Message]) -> dict[str, _Declaration]:
    """Map call id -> declaration for every assistant tool call."""
    declared: dict[str, _Declaration] = {}
    for message in messages:
        if message.role != MessageRole.ASSISTANT:
            continue
        for call in message.tool_calls:
            if not call.call_id:
                continue
            declared[call.call_id] = _Declaration(
                name=call.name or UNKNOWN_TOOL_NAME,
                arguments=call.arguments if isinstance(call.arguments, dict) else {},
                partial_args_json=call.partial_args_json,
            )
    return declared


def reconcile(
    messages: Iterable[Message],
    executing_tools: Mapping[str, ExecutingTool] | None = None,
    queued_tools: Iterable[QueuedTool] | None = None,
    pending_tools: Iterable[PendingTool] | None = None,
    *,
    result_events: Mapping[str, ToolResultEvent] | None = None,
    is_running: bool = False,
    start_times: RunningStartTimes | None = None,
    now: Callable[[], int] | None = None,
) -> list[ToolCallRecord]:
    """Fold persisted messages and live feeds into one record per call id.

    The returned list is in precedence order, not display order; pass it
    through ``ranking.sort_records`` for display. ``start_times`` is the
    caller's per-run cache and is the only state this function mutates.
    """
    messages = list(messages)
    executing_tools = executing_tools or {}
    result_events = result_events or {}
    clock = now or _now_ms

    declared = index_declarations(messages)
    records: list[ToolCallRecord] = []
    processed: set[str] = set()

    # 1. Persisted results: authoritative
    for message in messages:
        if not message.is_tool_result:
            continue
        call_id = message.tool_call_id
        if call_id in processed:
            logger.debug("Duplicate persisted result for %s ignored", call_id)
            continue

        decl = declared.get(call_id)
        if decl is None:
            logger.debug("Tool result %s has no matching declaration", call_id)
            decl = _Declaration(name=message.tool_name or UNKNOWN_TOOL_NAME)

        live = result_events.get(call_id)
        raw_metadata = (
            live.metadata if live is not None and live.metadata is not None
            else message.result_metadata
        )
        output = live.output if live is not None and live.output is not None else message.content

        records.append(
            ToolCallRecord(
                call_id=call_id,
                name=decl.name,
                status=ToolStatus.COMPLETED if message.tool_success else ToolStatus.ERROR,
                arguments=dict(decl.arguments),
                start_time=message.created_at,
                result_metadata=parse_result_metadata(decl.name, raw_metadata),
                full_output=output or None,
            )
        )
        processed.add(call_id)

    # 2. Executing feed
    for call_id, tool in executing_tools.items():
        if call_id in processed:
            logger.debug("Stale executing entry for finished call %s ignored", call_id)
            continue
        records.append(
            _live_record(call_id, tool.name, tool.arguments, ToolStatus.RUNNING,
                         tool.started_at, declared.get(call_id))
        )
        processed.add(call_id)

    # 3. Queued feed
    for tool in queued_tools or ():
        if tool.call_id in processed:
            continue
        record = _live_record(tool.call_id, tool.name, tool.arguments, ToolStatus.QUEUED,
                              tool.queued_at, declared.get(tool.call_id))
        record.queue_position = tool.queue_position
        records.append(record)
        processed.add(tool.call_id)

    # 4. Pending approval feed
    for tool in pending_tools or ():
        if tool.call_id in processed:
            continue
        records.append(
            _live_record(tool.call_id, tool.name, tool.arguments, ToolStatus.PENDING,
                         tool.requested_at, declared.get(tool.call_id))
        )
        processed.add(tool.call_id)

    # 5. Declared but unreported calls of an active run are assumed running
    if is_running:
        for call_id, decl in declared.items():
            if call_id in processed:
                continue
            if start_times is not None:
                started = start_times.record(call_id, clock())
            else:
                started = clock()
            records.append(
                ToolCallRecord(
                    call_id=call_id,
                    name=decl.name,
                    status=ToolStatus.RUNNING,
                    arguments=dict(decl.arguments),
                    partial_args_json=decl.partial_args_json,
                    start_time=started,
                )
            )

    # 6. Calls with concrete feed state no longer need a fallback start time
    if start_times is not None:
        start_times.evict(processed)

    return records


def _live_record(
    call_id: str,
    name: str,
    arguments: dict[str, Any] | None,
    status: ToolStatus,
    start_time: int | None,
    decl: _Declaration | None,
) -> ToolCallRecord:
    """Build a record from a real-time feed entry, filling gaps from the declaration."""
    if not arguments and decl is not None:
        arguments = decl.arguments
    return ToolCallRecord(
        call_id=call_id,
        name=name or (decl.name if decl is not None else UNKNOWN_TOOL_NAME),
        status=status,
        arguments=dict(arguments or {}),
        partial_args_json=decl.partial_args_json if decl is not None else None,
        start_time=start_time,
    )
