"""toolview CLI: render the tool activity of a transcript snapshot."""

from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console

from toolview.engine.pipeline import ToolView, build_tool_view
from toolview.engine.start_times import RunningStartTimes
from toolview.shared.formatters.display import render_entry_rich, render_plain
from toolview.shared.services.config import ViewConfig
from toolview.shared.services.transcript import (
    TranscriptLoadError,
    TranscriptSnapshot,
    load_transcript,
)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Route logs to stderr (and optionally a rotating file)."""
    log_level = "DEBUG" if verbose else os.getenv("TOOLVIEW_LOG_LEVEL", "WARNING").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.WARNING))
    root.handlers.clear()
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def view_for_snapshot(
    snapshot: TranscriptSnapshot,
    config: ViewConfig,
    start_times: RunningStartTimes | None = None,
) -> ToolView:
    return build_tool_view(
        snapshot.messages,
        snapshot.executing_tools,
        snapshot.queued_tools,
        snapshot.pending_tools,
        result_events=snapshot.result_events,
        is_running=snapshot.is_running,
        start_times=start_times if start_times is not None else RunningStartTimes(),
        config=config,
        now=(lambda: snapshot.now) if snapshot.now is not None else None,
    )


def render_view(view: ToolView, console: Console, plain: bool = False) -> None:
    if not view.entries:
        console.print("No tool activity", markup=False)
        return
    for entry in view.entries:
        if plain:
            console.print(render_plain(entry), markup=False, highlight=False)
        else:
            console.print(render_entry_rich(entry), highlight=False)


def main(argv: list[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog="toolview",
        description="toolview: reconcile and display tool-call activity",
    )
    parser.add_argument(
        "snapshot", metavar="SNAPSHOT",
        help="JSON or YAML transcript snapshot (messages + live feeds)",
    )
    parser.add_argument(
        "--config", metavar="PATH",
        help="YAML view config (default: ~/.toolview/config.yaml)",
    )
    parser.add_argument(
        "--plain", action="store_true",
        help="Plain text output without Rich markup",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the view model as JSON",
    )
    parser.add_argument(
        "--tui", action="store_true",
        help="Open the snapshot in the terminal UI",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Debug logging on stderr",
    )
    parser.add_argument(
        "--log-file", metavar="PATH",
        help="Also write logs to a rotating file",
    )
    args = parser.parse_args(argv)

    configure_logging(args.verbose, Path(args.log_file) if args.log_file else None)
    config = ViewConfig.load(Path(args.config) if args.config else None)
    snapshot_path = Path(args.snapshot)

    if args.tui:
        from toolview.tui.app import ToolViewApp

        ToolViewApp(snapshot_path=snapshot_path, config=config).run()
        return 0

    try:
        snapshot = load_transcript(snapshot_path)
    except TranscriptLoadError as exc:
        logger.error("%s", exc)
        return 1

    view = view_for_snapshot(snapshot, config)
    if args.json:
        print(json.dumps(view.to_dict(), indent=2))
    else:
        render_view(view, Console(), plain=args.plain)
    return 0


if __name__ == "__main__":
    sys.exit(main())
