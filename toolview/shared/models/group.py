"""Display groups derived from ranked tool call records."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

from toolview.shared.models.tool_record import ToolCallRecord


class GroupKind(str, Enum):
    SINGLE = "single"
    FILE_GROUP = "file_group"
    TOOL_GROUP = "tool_group"


@dataclass
class DiffStats:
    """Line/file statistics for a group of file operations."""
    added: int = 0
    removed: int = 0
    created: int = 0
    modified: int = 0
    errors: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ToolTally:
    """Success/error counts for a non-file tool group."""
    success_count: int = 0
    error_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ToolGroup:
    """A single record, or a batch of same-category completed records.

    Recomputed on every reconciliation pass; never persisted.
    """
    kind: GroupKind
    members: list[ToolCallRecord] = field(default_factory=list)
    category: str | None = None
    stats: DiffStats | ToolTally | None = None

    @property
    def is_group(self) -> bool:
        return self.kind != GroupKind.SINGLE

    @property
    def record(self) -> ToolCallRecord:
        """The sole member of a single-item group."""
        return self.members[0]
