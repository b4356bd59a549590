"""Partition ranked records into single items and category groups."""
from __future__ import annotations

from collections.abc import Iterable

from toolview.engine.diff_stats import compute_diff_stats, compute_tally
from toolview.shared.models.group import GroupKind, ToolGroup
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

FILE_OPS = "file_ops"

GROUP_CATEGORIES: dict[str, str] = {
    "write": FILE_OPS,
    "edit": FILE_OPS,
    "create_file": FILE_OPS,
    "ls": "ls",
    "list_directory": "ls",
    "read": "read",
    "read_file": "read",
    "search": "search",
    "grep": "search",
}

DEFAULT_MIN_GROUP_SIZE = 2


def grouping_category(tool_name: str) -> str | None:
    return GROUP_CATEGORIES.get((tool_name or "").lower())


def _groupable_category(record: ToolCallRecord) -> str | None:
    if record.status != ToolStatus.COMPLETED:
        return None
    return grouping_category(record.name)


def _build_group(category: str, members: list[ToolCallRecord]) -> ToolGroup:
    if category == FILE_OPS:
        return ToolGroup(
            kind=GroupKind.FILE_GROUP,
            members=members,
            category=category,
            stats=compute_diff_stats(members),
        )
    return ToolGroup(
        kind=GroupKind.TOOL_GROUP,
        members=members,
        category=category,
        stats=compute_tally(members),
    )


def group_records(
    records: Iterable[ToolCallRecord],
    min_group_size: int = DEFAULT_MIN_GROUP_SIZE,
) -> list[ToolGroup]:
    """Group completed same-category records; everything else stays single.

    Single items come first, in their incoming (status-sorted) order, so
    in-flight and pending work is always ahead of historical batches.
    Groups follow in the order their category was first seen. A category
    with fewer than ``min_group_size`` members is not worth nesting and
    its records are emitted as single items; a lone record never forms
    a group whatever ``min_group_size`` says.
    """
    records = list(records)
    min_group_size = max(min_group_size, DEFAULT_MIN_GROUP_SIZE)

    by_category: dict[str, list[ToolCallRecord]] = {}
    for record in records:
        category = _groupable_category(record)
        if category is not None:
            by_category.setdefault(category, []).append(record)

    qualifying = {
        category for category, members in by_category.items()
        if len(members) >= min_group_size
    }

    singles: list[ToolGroup] = []
    for record in records:
        if _groupable_category(record) in qualifying:
            continue
        singles.append(ToolGroup(kind=GroupKind.SINGLE, members=[record]))

    # dicts keep insertion order, i.e. first-seen category order
    groups = [
        _build_group(category, members)
        for category, members in by_category.items()
        if category in qualifying
    ]
    return singles + groups
