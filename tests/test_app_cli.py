"""Tests for the toolview command line entry point."""

import json

import pytest

import toolview.app as cli

SNAPSHOT = {
    "messages": [
        {
            "role": "assistant",
            "createdAt": 1000,
            "toolCalls": [
                {"callId": "r1", "name": "read", "arguments": {"path": "src/a.py"}},
                {"callId": "r2", "name": "read", "arguments": {"path": "src/b.py"}},
                {"callId": "g1", "name": "grep", "arguments": {"pattern": "TODO"}},
            ],
        },
        {"role": "tool", "toolCallId": "r1", "content": "a", "createdAt": 2000},
        {"role": "tool", "toolCallId": "r2", "content": "b", "createdAt": 2100},
    ],
    "executingTools": {"g1": {"name": "grep", "startedAt": 1000}},
    "now": 4000,
}


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT))
    return path


@pytest.fixture
def config_args(tmp_path):
    return ["--config", str(tmp_path / "missing-config.yaml")]


class TestMain:
    def test_json_output(self, snapshot_file, config_args, capsys):
        assert cli.main([str(snapshot_file), "--json", *config_args]) == 0
        data = json.loads(capsys.readouterr().out)
        kinds = [entry["kind"] for entry in data["entries"]]
        assert kinds == ["single", "tool_group"]
        assert data["entries"][0]["items"][0]["description"] == 'Searching for "TODO"'
        assert data["entries"][1]["summary"] == "Read 2 files"

    def test_plain_output(self, snapshot_file, config_args, capsys):
        assert cli.main([str(snapshot_file), "--plain", *config_args]) == 0
        out = capsys.readouterr().out
        assert '[running] Searching for "TODO" (3.0s)' in out
        assert "Read 2 files" in out
        assert "  [completed] Read a.py" in out

    def test_rich_output(self, snapshot_file, config_args, capsys):
        assert cli.main([str(snapshot_file), *config_args]) == 0
        out = capsys.readouterr().out
        assert "Read 2 files" in out
        assert "[bold" not in out

    def test_config_disables_grouping(self, snapshot_file, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("grouping:\n  enabled: false\n")
        assert cli.main([str(snapshot_file), "--json", "--config", str(config)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert {entry["kind"] for entry in data["entries"]} == {"single"}

    def test_missing_snapshot(self, tmp_path, config_args):
        assert cli.main([str(tmp_path / "absent.json"), *config_args]) == 1

    def test_empty_snapshot(self, tmp_path, config_args, capsys):
        path = tmp_path / "empty.yaml"
        path.write_text("messages: []\n")
        assert cli.main([str(path), "--plain", *config_args]) == 0
        assert "No tool activity" in capsys.readouterr().out


class TestConfigureLogging:
    def test_verbose_sets_debug(self, tmp_path, monkeypatch):
        import logging

        monkeypatch.undo()
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            cli.configure_logging(verbose=True, log_file=tmp_path / "logs" / "toolview.log")
            assert root.level == logging.DEBUG
            assert (tmp_path / "logs" / "toolview.log").exists()
            for handler in root.handlers:
                handler.close()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_env_level(self, monkeypatch):
        import logging

        monkeypatch.undo()
        monkeypatch.setenv("TOOLVIEW_LOG_LEVEL", "error")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            cli.configure_logging()
            assert root.level == logging.ERROR
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
