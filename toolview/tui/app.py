"""toolview TUI: Textual application showing one transcript snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from toolview.engine.pipeline import build_tool_view
from toolview.engine.start_times import RunningStartTimes
from toolview.shared.services.config import ViewConfig
from toolview.shared.services.transcript import (
    TranscriptLoadError,
    TranscriptSnapshot,
    load_transcript,
)
from toolview.tui.widgets.tool_log import ToolLog

logger = logging.getLogger(__name__)


class ToolViewApp(App):
    """Live view of the tool calls in a transcript snapshot."""

    TITLE = "toolview"
    SUB_TITLE = "Tool activity"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("r", "reload", "Reload"),
        ("f1", "toggle_tool_log", "Tool Log"),
    ]

    def __init__(
        self,
        snapshot_path: Path | None = None,
        config: ViewConfig | None = None,
        snapshot: TranscriptSnapshot | None = None,
    ) -> None:
        super().__init__()
        self.snapshot_path = snapshot_path
        self.config = config or ViewConfig()
        self.snapshot = snapshot or TranscriptSnapshot()
        # One cache per displayed run, kept across refreshes
        self.start_times = RunningStartTimes()

    def compose(self) -> ComposeResult:
        yield Header()
        yield ToolLog(id="tool-log", classes="visible")
        yield Footer()

    def on_mount(self) -> None:
        if self.snapshot_path is not None:
            self.action_reload()
        else:
            self.refresh_view()
        self.set_interval(1.0, self.refresh_view)

    def refresh_view(self) -> None:
        snap = self.snapshot
        view = build_tool_view(
            snap.messages,
            snap.executing_tools,
            snap.queued_tools,
            snap.pending_tools,
            result_events=snap.result_events,
            is_running=snap.is_running,
            start_times=self.start_times,
            config=self.config,
            now=(lambda: snap.now) if snap.now is not None else None,
        )
        self.query_one(ToolLog).show_view(view)

    def action_reload(self) -> None:
        if self.snapshot_path is None:
            return
        try:
            self.snapshot = load_transcript(self.snapshot_path)
        except TranscriptLoadError as exc:
            logger.warning("Reload failed: %s", exc)
            self.notify(str(exc), severity="error")
            return
        if not self.snapshot.is_running:
            self.start_times.clear()
        self.refresh_view()

    def action_toggle_tool_log(self) -> None:
        self.query_one(ToolLog).toggle()

    def on_tool_log_open_file_requested(self, message: ToolLog.OpenFileRequested) -> None:
        # Opening the file is the host's job; surface the path
        self.notify(message.file_path, title="Open file")
