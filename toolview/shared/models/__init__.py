"""Data models shared by the engine, adapters and renderers."""
from __future__ import annotations

from toolview.shared.models.group import DiffStats, GroupKind, ToolGroup, ToolTally
from toolview.shared.models.message import Message, MessageRole, ToolCallDeclaration
from toolview.shared.models.metadata import (
    FileOpMetadata,
    ReadMetadata,
    ResultMetadata,
    parse_result_metadata,
)
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

__all__ = [
    "DiffStats",
    "FileOpMetadata",
    "GroupKind",
    "Message",
    "MessageRole",
    "ReadMetadata",
    "ResultMetadata",
    "ToolCallDeclaration",
    "ToolCallRecord",
    "ToolGroup",
    "ToolStatus",
    "ToolTally",
    "parse_result_metadata",
]
