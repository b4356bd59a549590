"""Entries of the real-time tool status feeds.

These are advisory and ephemeral: the reconciler lets a persisted tool
result override any of them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExecutingTool:
    call_id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    started_at: int | None = None


@dataclass
class QueuedTool:
    call_id: str
    name: str
    queue_position: int
    arguments: dict[str, Any] = field(default_factory=dict)
    queued_at: int | None = None


@dataclass
class PendingTool:
    """A tool call awaiting user approval."""
    call_id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    requested_at: int | None = None


@dataclass
class ToolResultEvent:
    """A live result delivered before (or alongside) the persisted message."""
    call_id: str
    tool_name: str = ""
    metadata: dict[str, Any] | None = None
    output: str | None = None
    received_at: int | None = None


def _args(data: dict) -> dict[str, Any]:
    arguments = data.get("arguments")
    return arguments if isinstance(arguments, dict) else {}


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _call_id(data: dict) -> str:
    return str(data.get("callId") or data.get("call_id") or "")


def executing_from_dict(data: dict[str, Any]) -> ExecutingTool:
    return ExecutingTool(
        call_id=_call_id(data),
        name=str(data.get("name") or ""),
        arguments=_args(data),
        started_at=_int_or_none(data.get("startedAt", data.get("started_at"))),
    )


def queued_from_dict(data: dict[str, Any]) -> QueuedTool:
    position = _int_or_none(data.get("queuePosition", data.get("queue_position")))
    return QueuedTool(
        call_id=_call_id(data),
        name=str(data.get("name") or ""),
        queue_position=position if position is not None else 0,
        arguments=_args(data),
        queued_at=_int_or_none(data.get("queuedAt", data.get("queued_at"))),
    )


def pending_from_dict(data: dict[str, Any]) -> PendingTool:
    return PendingTool(
        call_id=_call_id(data),
        name=str(data.get("name") or ""),
        arguments=_args(data),
        requested_at=_int_or_none(data.get("requestedAt", data.get("requested_at"))),
    )


def result_event_from_dict(data: dict[str, Any]) -> ToolResultEvent:
    metadata = data.get("metadata")
    output = data.get("output")
    return ToolResultEvent(
        call_id=_call_id(data),
        tool_name=str(data.get("toolName") or data.get("tool_name") or ""),
        metadata=metadata if isinstance(metadata, dict) else None,
        output=output if isinstance(output, str) else None,
        received_at=_int_or_none(data.get("receivedAt", data.get("received_at"))),
    )
