"""Event types delivered on the real-time tool status channel.

Each event corresponds to a host callback dict, parsed into a typed
dataclass. Events carry a ``run_id`` because several runs can report
tool activity concurrently.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ToolChannelEvent:
    """Base event from the tool status channel."""
    event_type: str = ""
    run_id: str = ""


@dataclass
class ToolExecutionStarted(ToolChannelEvent):
    event_type: str = "tool_execution_start"
    call_id: str = ""
    name: str = ""
    arguments: dict = field(default_factory=dict)
    started_at: int | None = None


@dataclass
class ToolExecutionFinished(ToolChannelEvent):
    event_type: str = "tool_execution_finish"
    call_id: str = ""


@dataclass
class ToolsQueued(ToolChannelEvent):
    """Full replacement of a run's queue."""
    event_type: str = "tools_queued"
    tools: list = field(default_factory=list)  # [{call_id, name, arguments, queue_position}]
    queued_at: int | None = None


@dataclass
class ToolDequeued(ToolChannelEvent):
    event_type: str = "tool_dequeued"
    call_id: str = ""


@dataclass
class ToolApprovalRequested(ToolChannelEvent):
    event_type: str = "tool_approval_requested"
    call_id: str = ""
    name: str = ""
    arguments: dict = field(default_factory=dict)
    requested_at: int | None = None


@dataclass
class ToolApprovalResolved(ToolChannelEvent):
    event_type: str = "tool_approval_resolved"
    call_id: str = ""
    approved: bool = True


@dataclass
class ToolResultReceived(ToolChannelEvent):
    event_type: str = "tool_result"
    call_id: str = ""
    tool_name: str = ""
    metadata: dict | None = None
    output: str | None = None
    received_at: int | None = None


@dataclass
class RunToolStateCleared(ToolChannelEvent):
    """Drop executing and queued state, keep live results."""
    event_type: str = "run_toolstate_clear"


@dataclass
class RunCleanup(ToolChannelEvent):
    """Drop everything the channel holds for a run."""
    event_type: str = "run_cleanup"


_EVENT_TYPES: dict[str, type[ToolChannelEvent]] = {
    cls.event_type: cls
    for cls in (
        ToolExecutionStarted,
        ToolExecutionFinished,
        ToolsQueued,
        ToolDequeued,
        ToolApprovalRequested,
        ToolApprovalResolved,
        ToolResultReceived,
        RunToolStateCleared,
        RunCleanup,
    )
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def event_to_dict(event: ToolChannelEvent) -> dict[str, Any]:
    """Serialize an event in the host's wire shape: camelCase keys, ``event`` tag."""
    d: dict[str, Any] = {"event": event.event_type}
    for f in fields(event):
        if f.name == "event_type":
            continue
        value = getattr(event, f.name)
        if value is not None:
            d[_camel_case(f.name)] = value
    return d


def dict_to_event(data: dict[str, Any]) -> ToolChannelEvent:
    """Parse a host callback dict (camelCase or snake_case keys) into its event type.

    An unknown ``event`` tag yields a bare ``ToolChannelEvent`` so the
    caller can log and skip it.
    """
    event_type = str(data.get("event") or data.get("event_type") or "")
    cls = _EVENT_TYPES.get(event_type, ToolChannelEvent)
    accepted = {f.name for f in fields(cls)}

    kwargs: dict[str, Any] = {"event_type": event_type}
    for key, value in data.items():
        name = _snake_case(str(key))
        if name in ("event", "event_type"):
            continue
        if name not in accepted:
            logger.debug("Dropping unknown %s field %r", event_type or "event", key)
            continue
        # An exact snake_case key beats its camelCase spelling
        if name in kwargs and key != name:
            continue
        kwargs[name] = value

    for id_field in ("run_id", "call_id"):
        if id_field in kwargs and kwargs[id_field] is not None:
            kwargs[id_field] = str(kwargs[id_field])
    return cls(**kwargs)
