"""Tests for toolview.shared.formatters.display: timing, previews, summaries."""

import pytest

from toolview.engine.pipeline import ToolItemView
from toolview.shared.formatters.display import (
    error_preview,
    file_operation_info,
    format_duration_ms,
    format_elapsed,
    group_summary,
    read_metadata_info,
    render_item_rich,
)
from toolview.shared.models.group import DiffStats, ToolTally
from toolview.shared.models.metadata import FileOpMetadata, ReadMetadata, ResultMetadata
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus


class TestFormatDuration:
    @pytest.mark.parametrize("ms,expected", [
        (0, "0ms"),
        (850, "850ms"),
        (1500, "1.5s"),
        (59_900, "59.9s"),
        (123_000, "2m 03s"),
        (3_840_000, "1h 04m"),
    ])
    def test_formats(self, ms, expected):
        assert format_duration_ms(ms) == expected

    def test_missing_or_negative(self):
        assert format_duration_ms(None) == ""
        assert format_duration_ms(-5) == ""


class TestFormatElapsed:
    def test_elapsed(self):
        assert format_elapsed(1000, 3500) == "2.5s"

    def test_unknown_start(self):
        assert format_elapsed(None, 5000) == ""

    def test_clock_skew_clamped(self):
        assert format_elapsed(5000, 1000) == "0ms"


class TestErrorPreview:
    def test_short_output(self):
        assert error_preview("File not found") == "File not found"

    def test_truncated_to_limit(self):
        preview = error_preview("x" * 80)
        assert preview == "x" * 57 + "..."
        assert len(preview) == 60

    def test_first_line_only(self):
        assert error_preview("  Permission denied  \nstack trace") == "Permission denied"

    def test_custom_limit(self):
        assert error_preview("abcdefghijklmnopqrstuvwxyz", limit=10) == "abcdefg..."

    def test_empty(self):
        assert error_preview("") is None
        assert error_preview(None) is None
        assert error_preview("\nsecond line") is None


class TestReadMetadataInfo:
    def test_range(self):
        meta = ReadMetadata(lines_read=120, total_lines=300, start_line=1)
        assert read_metadata_info(meta) == "lines 1-120 of 300"

    def test_offset_and_truncated(self):
        meta = ReadMetadata(lines_read=50, start_line=101, truncated=True)
        assert read_metadata_info(meta) == "lines 101-150 (truncated)"

    def test_not_a_read(self):
        assert read_metadata_info(ResultMetadata()) is None
        assert read_metadata_info(ReadMetadata()) is None


def _file_record(metadata, status=ToolStatus.COMPLETED, arguments=None):
    return ToolCallRecord(
        call_id="c1",
        name="write",
        status=status,
        arguments=arguments or {},
        result_metadata=metadata,
    )


class TestFileOperationInfo:
    def test_created(self):
        meta = FileOpMetadata(file_path="src/new.py", new_content="x")
        assert file_operation_info(_file_record(meta)) == ("src/new.py", "Created")

    def test_edited(self):
        meta = FileOpMetadata(file_path="a.py", original_content="x", action="edit")
        assert file_operation_info(_file_record(meta)) == ("a.py", "Edited")

    def test_modified(self):
        meta = FileOpMetadata(file_path="a.py", original_content="x", new_content="y")
        assert file_operation_info(_file_record(meta)) == ("a.py", "Modified")

    def test_path_from_arguments(self):
        meta = FileOpMetadata(original_content="x")
        record = _file_record(meta, arguments={"file_path": "from/args.py"})
        assert file_operation_info(record) == ("from/args.py", "Modified")

    def test_failed_operation(self):
        meta = FileOpMetadata(file_path="a.py")
        assert file_operation_info(_file_record(meta, status=ToolStatus.ERROR)) is None

    def test_not_a_file_operation(self):
        assert file_operation_info(_file_record(ResultMetadata())) is None


class TestGroupSummary:
    def test_file_ops(self):
        stats = DiffStats(added=12, removed=4, created=1, modified=2, total=3)
        assert group_summary("file_ops", 3, stats) == "Changed 3 files  +12 -4  (1 new)"

    def test_file_ops_with_errors(self):
        stats = DiffStats(added=1, errors=2, total=3)
        assert group_summary("file_ops", 3, stats) == "Changed 3 files  +1 -0  2 failed"

    def test_directories(self):
        assert group_summary("ls", 2, ToolTally(2, 0)) == "Listed 2 directories"

    def test_searches_with_failures(self):
        assert group_summary("search", 2, ToolTally(1, 1)) == "Ran 2 searches  1 failed"

    def test_without_stats(self):
        assert group_summary("read", 1, None) == "Read 1 file"

    def test_unknown_category(self):
        assert group_summary(None, 4, None) == "Ran 4 tool calls"


class TestRenderItemRich:
    def test_markup_escaped(self):
        item = ToolItemView(
            call_id="c1", name="read", status=ToolStatus.RUNNING,
            description="Reading [x].py", elapsed_text="2.0s",
        )
        line = render_item_rich(item)
        assert "\\[x].py" in line
        assert line.startswith("[yellow]running[/yellow]")
        assert "2.0s" in line

    def test_queue_position_and_error(self):
        item = ToolItemView(
            call_id="c1", name="bash", status=ToolStatus.ERROR,
            description="Bash command failed", error_preview="exit 1",
        )
        assert "[red]exit 1[/red]" in render_item_rich(item)
        queued = ToolItemView(
            call_id="c2", name="bash", status=ToolStatus.QUEUED,
            description="Waiting to run", queue_position=3,
        )
        assert "#3" in render_item_rich(queued, indent="  ")
