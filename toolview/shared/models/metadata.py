"""Typed tool result metadata.

Tools attach an untyped mapping to their results. It is validated once,
here, into one of a few tagged variants so the engine never reads
ad-hoc keys out of a raw dict:

    ResultMetadata   kind="generic" : anything else (raw mapping kept)
    FileOpMetadata   kind="file_op" : write/edit/create_file results
    ReadMetadata     kind="read"    : read/read_file results

Every variant carries the optional ``duration_ms`` timing field.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

FILE_OP_TOOLS = frozenset({"write", "edit", "create_file", "write_file", "edit_file"})
READ_TOOLS = frozenset({"read", "read_file"})


@dataclass
class ResultMetadata:
    """Generic metadata: the raw mapping plus timing."""
    raw: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None

    kind = "generic"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "duration_ms": self.duration_ms, "raw": dict(self.raw)}


@dataclass
class FileOpMetadata(ResultMetadata):
    file_path: str = ""
    original_content: str = ""
    new_content: str = ""
    action: str = ""

    kind = "file_op"

    @property
    def is_new_file(self) -> bool:
        return not self.original_content

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(
            file_path=self.file_path,
            original_content=self.original_content,
            new_content=self.new_content,
            action=self.action,
        )
        return d


@dataclass
class ReadMetadata(ResultMetadata):
    lines_read: int | None = None
    total_lines: int | None = None
    start_line: int | None = None
    truncated: bool = False

    kind = "read"

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(
            lines_read=self.lines_read,
            total_lines=self.total_lines,
            start_line=self.start_line,
            truncated=self.truncated,
        )
        return d


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _duration(raw: dict) -> float | None:
    value = _first(raw, "durationMs", "duration_ms")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return value


def parse_result_metadata(tool_name: str, raw: Any) -> ResultMetadata:
    """Validate a raw metadata mapping into its typed variant.

    Never raises: non-mapping input and wrongly-typed fields degrade to
    empty values.
    """
    if isinstance(raw, ResultMetadata):
        return raw
    if raw is None:
        raw = {}
    elif not isinstance(raw, dict):
        logger.debug("Ignoring non-mapping metadata for %s: %r", tool_name, type(raw))
        raw = {}

    name = (tool_name or "").lower()
    duration_ms = _duration(raw)

    if name in FILE_OP_TOOLS:
        # "newContent" wins; some tools only report the written "content"
        new_content = _as_str(raw.get("newContent")) or _as_str(raw.get("content"))
        return FileOpMetadata(
            raw=dict(raw),
            duration_ms=duration_ms,
            file_path=_as_str(_first(raw, "filePath", "path", "file_path")),
            original_content=_as_str(raw.get("originalContent")),
            new_content=new_content,
            action=_as_str(raw.get("action")),
        )

    if name in READ_TOOLS:
        return ReadMetadata(
            raw=dict(raw),
            duration_ms=duration_ms,
            lines_read=_as_int(_first(raw, "linesRead", "lines_read")),
            total_lines=_as_int(_first(raw, "totalLines", "total_lines")),
            start_line=_as_int(_first(raw, "startLine", "start_line")),
            truncated=raw.get("truncated") is True,
        )

    return ResultMetadata(raw=dict(raw), duration_ms=duration_ms)
