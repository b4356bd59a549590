"""Tests for toolview.shared.models: messages, metadata and records."""

from toolview.engine.start_times import RunningStartTimes
from toolview.shared.models.message import (
    Message,
    MessageRole,
    ToolCallDeclaration,
    message_from_dict,
    message_to_dict,
)
from toolview.shared.models.metadata import (
    FileOpMetadata,
    ReadMetadata,
    ResultMetadata,
    parse_result_metadata,
)
from toolview.shared.models.tool_record import ToolCallRecord, ToolStatus


class TestParseResultMetadata:
    def test_file_op(self):
        meta = parse_result_metadata("Edit", {
            "filePath": "a.py", "originalContent": "x", "newContent": "y",
            "action": "edit", "durationMs": 12,
        })
        assert isinstance(meta, FileOpMetadata)
        assert meta.kind == "file_op"
        assert (meta.file_path, meta.action, meta.duration_ms) == ("a.py", "edit", 12)
        assert not meta.is_new_file

    def test_content_used_when_new_content_missing(self):
        meta = parse_result_metadata("write", {"content": "hello"})
        assert meta.new_content == "hello"
        assert meta.is_new_file

    def test_read(self):
        meta = parse_result_metadata("read_file", {
            "linesRead": 20, "totalLines": 100, "startLine": 5, "truncated": True,
        })
        assert isinstance(meta, ReadMetadata)
        assert (meta.lines_read, meta.total_lines, meta.start_line) == (20, 100, 5)
        assert meta.truncated is True

    def test_generic_keeps_raw(self):
        meta = parse_result_metadata("bash", {"exitCode": 0})
        assert type(meta) is ResultMetadata
        assert meta.raw == {"exitCode": 0}

    def test_wrong_types_degrade(self):
        meta = parse_result_metadata("read", {"linesRead": "ten", "durationMs": -4})
        assert meta.lines_read is None
        assert meta.duration_ms is None

    def test_non_mapping(self):
        assert parse_result_metadata("write", "garbage").original_content == ""
        assert parse_result_metadata("bash", None).raw == {}

    def test_already_typed_passes_through(self):
        meta = ReadMetadata(lines_read=1)
        assert parse_result_metadata("read", meta) is meta


class TestMessageDicts:
    def test_round_trip(self):
        message = Message(
            role=MessageRole.ASSISTANT,
            content="calling tools",
            created_at=42,
            tool_calls=[ToolCallDeclaration(call_id="c1", name="grep",
                                            arguments={"pattern": "x"})],
        )
        restored = message_from_dict(message_to_dict(message))
        assert restored == message

    def test_tool_result_keys(self):
        message = message_from_dict({
            "role": "tool", "toolCallId": "c1", "toolName": "read",
            "toolSuccess": False, "content": "denied",
        })
        assert message.is_tool_result
        assert message.tool_success is False

    def test_unknown_role(self):
        assert message_from_dict({"role": "narrator"}).role == MessageRole.SYSTEM

    def test_tool_role_without_call_id_is_not_result(self):
        assert not message_from_dict({"role": "tool"}).is_tool_result


class TestToolCallRecord:
    def test_terminal(self):
        assert ToolCallRecord(call_id="a", name="x", status=ToolStatus.ERROR).is_terminal
        assert not ToolCallRecord(call_id="a", name="x", status=ToolStatus.QUEUED).is_terminal

    def test_to_dict(self):
        d = ToolCallRecord(call_id="a", name="x", status=ToolStatus.PENDING).to_dict()
        assert d["status"] == "pending"
        assert d["result_metadata"]["kind"] == "generic"


class TestRunningStartTimes:
    def test_first_record_wins(self):
        cache = RunningStartTimes()
        assert cache.record("c1", 100) == 100
        assert cache.record("c1", 900) == 100
        assert cache.get("c1") == 100

    def test_evict(self):
        cache = RunningStartTimes()
        cache.record("c1", 1)
        cache.record("c2", 2)
        assert cache.evict(["c1", "c9"]) == 1
        assert len(cache) == 1
        assert "c2" in cache
        assert cache.snapshot() == {"c2": 2}

    def test_clear(self):
        cache = RunningStartTimes()
        cache.record("c1", 1)
        cache.clear()
        assert cache.get("c1") is None


class TestMessageNormalization:
    def test_numeric_call_ids_become_strings(self):
        message = message_from_dict({
            "role": "assistant",
            "toolCalls": [{"callId": 7, "name": "read"}],
        })
        result = message_from_dict({"role": "tool", "toolCallId": 7})
        assert message.tool_calls[0].call_id == "7"
        assert result.tool_call_id == "7"

    def test_blank_call_id_is_absent(self):
        result = message_from_dict({"role": "tool", "toolCallId": "  "})
        assert result.tool_call_id is None
        assert not result.is_tool_result

    def test_string_success_flags(self):
        for raw, expected in [("false", False), ("0", False), ("True", True), (0, False), (1, True)]:
            message = message_from_dict({"role": "tool", "toolCallId": "c1", "toolSuccess": raw})
            assert message.tool_success is expected, raw

    def test_missing_success_defaults_true(self):
        assert message_from_dict({"role": "tool", "toolCallId": "c1"}).tool_success is True
