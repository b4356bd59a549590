"""Tool log: RichLog panel showing the reconciled tool view."""

from __future__ import annotations

from textual.message import Message
from textual.widgets import RichLog

from toolview.engine.pipeline import ToolView
from toolview.shared.formatters.display import render_entry_rich


class ToolLog(RichLog):
    """Log of tool calls, redrawn from a ToolView on every update."""

    class OpenFileRequested(Message):
        """Posted when the user asks to open the file of a file operation."""

        def __init__(self, file_path: str, call_id: str) -> None:
            super().__init__()
            self.file_path = file_path
            self.call_id = call_id

    def __init__(self, **kwargs) -> None:
        super().__init__(
            auto_scroll=True,
            wrap=True,
            markup=True,
            highlight=False,
            max_lines=5000,
            **kwargs,
        )
        self._view = ToolView()

    @property
    def view(self) -> ToolView:
        return self._view

    def show_view(self, view: ToolView) -> None:
        self._view = view
        self.clear()
        if not view.entries:
            self.write("[dim]No tool activity[/dim]")
            return
        for entry in view.entries:
            self.write(render_entry_rich(entry))

    def file_paths(self) -> list[tuple[str, str]]:
        """(call id, path) for every file operation currently shown."""
        return [
            (item.call_id, item.file_path)
            for entry in self._view.entries
            for item in entry.items
            if item.file_path
        ]

    def request_open_file(self, call_id: str) -> bool:
        """Post OpenFileRequested for *call_id*; False if it has no file."""
        item = self._view.find(call_id)
        if item is None or not item.file_path:
            return False
        self.post_message(self.OpenFileRequested(item.file_path, call_id))
        return True

    def toggle(self) -> None:
        self.toggle_class("visible")
