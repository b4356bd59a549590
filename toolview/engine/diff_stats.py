"""Line and file statistics for groups of file operations.

The line accounting is an order-insensitive membership approximation,
not a sequence diff: a modified file's ``added`` lines are new lines
absent from the original, and ``removed`` lines are original lines absent
from the new content. Duplicated or merely reordered lines are therefore
miscounted; that is accepted for a one-line summary.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from toolview.shared.models.group import DiffStats, ToolTally
from toolview.shared.models.metadata import FileOpMetadata, parse_result_metadata
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

logger = logging.getLogger(__name__)


def line_count(content: str | None) -> int:
    if not content:
        return 0
    return len(content.splitlines())


def _file_metadata(record: ToolCallRecord) -> FileOpMetadata:
    metadata = record.result_metadata
    if isinstance(metadata, FileOpMetadata):
        return metadata
    # Registered under a name the metadata parser does not treat as a file op
    coerced = parse_result_metadata("write", metadata.raw)
    logger.debug("Coerced %s metadata of %s to file-op metadata", metadata.kind, record.call_id)
    return coerced


def compute_diff_stats(members: Iterable[ToolCallRecord]) -> DiffStats:
    stats = DiffStats()
    for record in members:
        stats.total += 1
        if record.status == ToolStatus.ERROR:
            stats.errors += 1
            continue

        metadata = _file_metadata(record)
        if not metadata.original_content:
            stats.created += 1
            stats.added += line_count(metadata.new_content)
            continue

        stats.modified += 1
        original_lines = metadata.original_content.splitlines()
        new_lines = metadata.new_content.splitlines()
        original_set = set(original_lines)
        new_set = set(new_lines)
        stats.added += sum(1 for line in new_lines if line not in original_set)
        stats.removed += sum(1 for line in original_lines if line not in new_set)
    return stats


def compute_tally(members: Iterable[ToolCallRecord]) -> ToolTally:
    tally = ToolTally()
    for record in members:
        if record.status == ToolStatus.ERROR:
            tally.error_count += 1
        else:
            tally.success_count += 1
    return tally
