"""Tests for toolview.shared.services.transcript: snapshot loading."""

import json

import pytest

from toolview.engine.reconciler import reconcile
from toolview.engine.start_times import RunningStartTimes
from toolview.shared.models.message import MessageRole
from toolview.shared.models.tool_record import ToolStatus
from toolview.shared.services.transcript import (
    TranscriptLoadError,
    load_transcript,
    snapshot_from_dict,
)

SNAPSHOT = {
    "messages": [
        {
            "role": "assistant",
            "createdAt": 1000,
            "toolCalls": [
                {"callId": "c1", "name": "read", "arguments": {"path": "a.py"}},
                {"callId": "c2", "name": "bash", "arguments": {"command": "make"}},
            ],
        },
        {
            "role": "tool",
            "toolCallId": "c1",
            "content": "contents",
            "createdAt": 2000,
            "resultMetadata": {"linesRead": 3},
        },
    ],
    "executingTools": {"c2": {"name": "bash", "startedAt": 1500}},
    "queuedTools": [{"callId": "c3", "name": "grep", "queuePosition": 1}],
    "pendingTools": [{"callId": "c4", "name": "edit"}],
    "resultEvents": {"c1": {"toolName": "read", "output": "live"}},
    "isRunning": True,
    "now": 5000,
}


class TestSnapshotFromDict:
    def test_camel_case(self):
        snap = snapshot_from_dict(SNAPSHOT)
        assert [m.role for m in snap.messages] == [MessageRole.ASSISTANT, MessageRole.TOOL]
        assert snap.messages[0].tool_calls[1].arguments == {"command": "make"}
        assert snap.messages[1].result_metadata == {"linesRead": 3}
        assert snap.executing_tools["c2"].call_id == "c2"
        assert snap.executing_tools["c2"].started_at == 1500
        assert snap.queued_tools[0].queue_position == 1
        assert snap.pending_tools[0].call_id == "c4"
        assert snap.result_events["c1"].output == "live"
        assert snap.is_running is True
        assert snap.now == 5000

    def test_snake_case(self):
        snap = snapshot_from_dict({
            "messages": [{"role": "tool", "tool_call_id": "c1", "tool_success": False}],
            "executing_tools": [{"call_id": "c2", "name": "bash"}],
            "is_running": False,
        })
        assert snap.messages[0].tool_call_id == "c1"
        assert snap.messages[0].tool_success is False
        assert list(snap.executing_tools) == ["c2"]

    def test_empty_mapping(self):
        snap = snapshot_from_dict({})
        assert snap.messages == []
        assert snap.now is None

    def test_malformed_entries_skipped(self):
        snap = snapshot_from_dict({"messages": ["junk", 3], "queuedTools": [None]})
        assert snap.messages == []
        assert snap.queued_tools == []

    def test_root_must_be_mapping(self):
        with pytest.raises(TranscriptLoadError):
            snapshot_from_dict(["not", "a", "mapping"])


class TestLoadTranscript:
    def test_json(self, tmp_path):
        path = tmp_path / "snap.json"
        path.write_text(json.dumps(SNAPSHOT))
        snap = load_transcript(path)
        assert len(snap.messages) == 2

    def test_yaml(self, tmp_path):
        path = tmp_path / "snap.yaml"
        path.write_text(
            "messages:\n"
            "  - role: assistant\n"
            "    toolCalls:\n"
            "      - {callId: c1, name: ls, arguments: {path: src}}\n"
            "isRunning: true\n"
        )
        snap = load_transcript(path)
        assert snap.messages[0].tool_calls[0].name == "ls"
        assert snap.is_running is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(TranscriptLoadError, match="cannot read"):
            load_transcript(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(TranscriptLoadError, match="cannot parse"):
            load_transcript(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("messages: [unclosed\n")
        with pytest.raises(TranscriptLoadError):
            load_transcript(path)


class TestCallIdNormalization:
    def test_numeric_ids_reconcile_to_one_record(self):
        snap = snapshot_from_dict({
            "messages": [
                {"role": "assistant", "toolCalls": [{"callId": 7, "name": "read"}]},
                {"role": "tool", "toolCallId": 7, "toolSuccess": True},
            ],
            "isRunning": True,
        })
        cache = RunningStartTimes()
        cache.record("7", 1)
        records = reconcile(snap.messages, is_running=snap.is_running, start_times=cache)
        assert [(r.call_id, r.name, r.status) for r in records] == [
            ("7", "read", ToolStatus.COMPLETED),
        ]
        assert "7" not in cache

    def test_string_false_marks_error(self):
        snap = snapshot_from_dict({
            "messages": [
                {"role": "assistant", "toolCalls": [{"callId": "c1", "name": "bash"}]},
                {"role": "tool", "toolCallId": "c1", "toolSuccess": "false", "content": "boom"},
            ],
        })
        assert reconcile(snap.messages)[0].status == ToolStatus.ERROR
