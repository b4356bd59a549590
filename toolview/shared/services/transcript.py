"""Load a chat transcript snapshot (messages + live feeds) from disk.

Accepts JSON or YAML with camelCase or snake_case keys:

    messages: [...]            # persisted chat/tool messages
    executingTools: {callId: {name, arguments, startedAt}}
    queuedTools: [{callId, name, arguments, queuePosition, queuedAt}]
    pendingTools: [{callId, name, arguments}]
    resultEvents: {callId: {toolName, metadata, output}}
    isRunning: true
    now: 1700000000000         # optional fixed clock (epoch ms)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from toolview.shared.models.feeds import (
    ExecutingTool,
    PendingTool,
    QueuedTool,
    ToolResultEvent,
    executing_from_dict,
    pending_from_dict,
    queued_from_dict,
    result_event_from_dict,
)
from toolview.shared.models.message import Message, message_from_dict

logger = logging.getLogger(__name__)


class TranscriptLoadError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""


@dataclass
class TranscriptSnapshot:
    messages: list[Message] = field(default_factory=list)
    executing_tools: dict[str, ExecutingTool] = field(default_factory=dict)
    queued_tools: list[QueuedTool] = field(default_factory=list)
    pending_tools: list[PendingTool] = field(default_factory=list)
    result_events: dict[str, ToolResultEvent] = field(default_factory=dict)
    is_running: bool = False
    now: int | None = None


def _get(data: dict, camel: str, snake: str, default: Any = None) -> Any:
    value = data.get(camel)
    if value is None:
        value = data.get(snake)
    return default if value is None else value


def _keyed(entries: Any, parse) -> dict:
    """Parse a callId-keyed mapping, filling call ids from the keys."""
    parsed = {}
    if isinstance(entries, dict):
        for call_id, raw in entries.items():
            if isinstance(raw, dict):
                item = parse({**raw, "callId": raw.get("callId") or raw.get("call_id") or call_id})
                parsed[item.call_id] = item
    elif isinstance(entries, list):
        for raw in entries:
            if isinstance(raw, dict):
                item = parse(raw)
                if item.call_id:
                    parsed[item.call_id] = item
    return parsed


def snapshot_from_dict(data: dict[str, Any]) -> TranscriptSnapshot:
    if not isinstance(data, dict):
        raise TranscriptLoadError("snapshot root must be a mapping")

    messages = [
        message_from_dict(m) for m in _get(data, "messages", "messages", []) if isinstance(m, dict)
    ]
    queued = [
        queued_from_dict(q)
        for q in _get(data, "queuedTools", "queued_tools", [])
        if isinstance(q, dict)
    ]
    pending = [
        pending_from_dict(p)
        for p in _get(data, "pendingTools", "pending_tools", [])
        if isinstance(p, dict)
    ]
    now = _get(data, "now", "now")
    return TranscriptSnapshot(
        messages=messages,
        executing_tools=_keyed(_get(data, "executingTools", "executing_tools", {}), executing_from_dict),
        queued_tools=queued,
        pending_tools=pending,
        result_events=_keyed(_get(data, "resultEvents", "result_events", {}), result_event_from_dict),
        is_running=bool(_get(data, "isRunning", "is_running", False)),
        now=int(now) if isinstance(now, (int, float)) and not isinstance(now, bool) else None,
    )


def load_transcript(path: Path) -> TranscriptSnapshot:
    """Read a JSON or YAML snapshot file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TranscriptLoadError(f"cannot read {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise TranscriptLoadError(f"cannot parse {path}: {exc}") from exc

    snapshot = snapshot_from_dict(data)
    logger.debug(
        "Loaded snapshot %s: %d messages, %d executing, %d queued, %d pending",
        path,
        len(snapshot.messages),
        len(snapshot.executing_tools),
        len(snapshot.queued_tools),
        len(snapshot.pending_tools),
    )
    return snapshot
