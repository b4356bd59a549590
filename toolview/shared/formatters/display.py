"""Display helpers for tool items: timing text, previews, Rich markup.

The Rich renderers produce markup strings (not renderables) so the
same output can be written to a Textual ``RichLog`` or printed with a
Rich ``Console``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from toolview.shared.models.metadata import FileOpMetadata, ReadMetadata, ResultMetadata
from toolview.shared.models.group import DiffStats, ToolTally
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus

if TYPE_CHECKING:
    from toolview.engine.pipeline import ToolItemView, ToolViewEntry


# ── Timing ──


def format_duration_ms(ms: float | None) -> str:
    """Compact duration: "850ms", "1.5s", "2m 03s", "1h 04m"."""
    if ms is None or ms < 0:
        return ""
    if ms < 1000:
        return f"{int(ms)}ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m"


def format_elapsed(start_ms: int | None, now_ms: int) -> str:
    """Elapsed time since *start_ms*; empty when the start is unknown."""
    if not start_ms:
        return ""
    return format_duration_ms(max(0, now_ms - start_ms))


def duration_text(metadata: ResultMetadata) -> str:
    return format_duration_ms(metadata.duration_ms)


# ── Previews ──


def error_preview(output: str | None, limit: int = 60) -> str | None:
    """First line of an error output, truncated for inline display."""
    if not output:
        return None
    first_line = output.split("\n")[0].strip()
    if not first_line:
        return None
    if len(first_line) > limit:
        return first_line[: limit - 3] + "..."
    return first_line


def read_metadata_info(metadata: ResultMetadata) -> str | None:
    """Short badge for read results, e.g. "lines 1-120 of 300"."""
    if not isinstance(metadata, ReadMetadata) or metadata.lines_read is None:
        return None
    start = metadata.start_line or 1
    end = start + max(metadata.lines_read, 1) - 1
    text = f"lines {start}-{end}"
    if metadata.total_lines is not None:
        text += f" of {metadata.total_lines}"
    if metadata.truncated:
        text += " (truncated)"
    return text


def file_operation_info(record: ToolCallRecord) -> tuple[str, str] | None:
    """(path, action label) for a successful file operation, else None.

    The path is what the host's file-open action receives when the user
    selects the item.
    """
    metadata = record.result_metadata
    if record.status != ToolStatus.COMPLETED or not isinstance(metadata, FileOpMetadata):
        return None
    path = (
        metadata.file_path
        or record.arguments.get("file_path")
        or record.arguments.get("path")
        or ""
    )
    if not isinstance(path, str):
        path = ""
    if metadata.is_new_file:
        label = "Created"
    elif metadata.action == "edit":
        label = "Edited"
    else:
        label = "Modified"
    return path, label


# ── Group summaries ──

_CATEGORY_NOUNS = {
    "file_ops": ("Changed", "file"),
    "read": ("Read", "file"),
    "ls": ("Listed", "directory"),
    "search": ("Ran", "search"),
}


def _plural(noun: str, count: int) -> str:
    if count == 1:
        return noun
    if noun.endswith("y"):
        return noun[:-1] + "ies"
    if noun.endswith("h"):
        return noun + "es"
    return noun + "s"


def group_summary(category: str | None, count: int, stats: DiffStats | ToolTally | None) -> str:
    """One-line summary for a group, e.g. "Changed 3 files  +12 -4"."""
    verb, noun = _CATEGORY_NOUNS.get(category or "", ("Ran", "tool call"))
    text = f"{verb} {count} {_plural(noun, count)}"
    if isinstance(stats, DiffStats):
        text += f"  +{stats.added} -{stats.removed}"
        if stats.created:
            text += f"  ({stats.created} new)"
        if stats.errors:
            text += f"  {stats.errors} failed"
    elif isinstance(stats, ToolTally) and stats.error_count:
        text += f"  {stats.error_count} failed"
    return text


# ── Rich Markup Renderer ──

_STATUS_MARKUP = {
    "running": "[yellow]running[/yellow]",
    "queued": "[blue]queued[/blue]",
    "pending": "[cyan]awaiting approval[/cyan]",
    "error": "[red]error[/red]",
    "completed": "[green]done[/green]",
}


def _esc(text: str) -> str:
    """Escape Rich markup characters."""
    return text.replace("[", "\\[")


def render_item_rich(item: ToolItemView, indent: str = "") -> str:
    """Render one tool item as a Rich markup line."""
    status = item.status.value
    parts = [_STATUS_MARKUP.get(status, f"[dim]{_esc(status)}[/dim]")]
    parts.append(f"[bold]{_esc(item.description)}[/bold]")
    if item.queue_position is not None:
        parts.append(f"[dim]#{item.queue_position}[/dim]")
    if item.read_info:
        parts.append(f"[dim]{_esc(item.read_info)}[/dim]")
    if item.file_action:
        parts.append(f"[magenta]{item.file_action}[/magenta]")
    if item.elapsed_text:
        parts.append(f"[dim]{item.elapsed_text}[/dim]")
    elif item.duration_text:
        parts.append(f"[dim]{item.duration_text}[/dim]")
    if item.error_preview:
        parts.append(f"[red]{_esc(item.error_preview)}[/red]")
    return indent + "  ".join(parts)


def render_entry_rich(entry: ToolViewEntry) -> str:
    """Render a view entry (single item or group) as Rich markup lines."""
    if not entry.is_group:
        return render_item_rich(entry.items[0])
    lines = [f"[bold cyan]▼ {_esc(entry.summary)}[/bold cyan]"]
    lines.extend(render_item_rich(item, indent="    ") for item in entry.items)
    return "\n".join(lines)


def render_plain(entry: ToolViewEntry) -> str:
    """Plain-text rendering for non-terminal output."""
    def line(item: ToolItemView, indent: str = "") -> str:
        text = f"{indent}[{item.status.value}] {item.description}"
        extra = item.elapsed_text or item.duration_text
        if extra:
            text += f" ({extra})"
        if item.error_preview:
            text += f" - {item.error_preview}"
        return text

    if not entry.is_group:
        return line(entry.items[0])
    return "\n".join([entry.summary] + [line(item, "  ") for item in entry.items])
