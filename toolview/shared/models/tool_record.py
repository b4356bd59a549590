"""Canonical tool call record produced by the reconciler."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from toolview.shared.models.metadata import ResultMetadata


class ToolStatus(str, Enum):
    """Execution status of a single tool call."""
    PENDING = "pending"
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


TERMINAL_STATUSES = frozenset({ToolStatus.COMPLETED, ToolStatus.ERROR})


@dataclass
class ToolCallRecord:
    """One tool invocation as shown to the user.

    There is exactly one record per ``call_id`` in any reconciler output,
    no matter how many feeds mentioned the call.
    """
    call_id: str
    name: str
    status: ToolStatus
    arguments: dict[str, Any] = field(default_factory=dict)
    partial_args_json: str | None = None
    queue_position: int | None = None
    start_time: int | None = None  # epoch milliseconds
    result_metadata: ResultMetadata = field(default_factory=ResultMetadata)
    full_output: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_id": self.call_id,
            "name": self.name,
            "status": self.status.value,
            "arguments": dict(self.arguments),
            "partial_args_json": self.partial_args_json,
            "queue_position": self.queue_position,
            "start_time": self.start_time,
            "result_metadata": self.result_metadata.to_dict(),
            "full_output": self.full_output,
        }
