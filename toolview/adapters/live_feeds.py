"""Per-run real-time tool state, maintained from channel events.

The channel delivers events out of order and sometimes drops one (a
result may arrive without the matching execution-finish). ``apply`` is
written so each event leaves the feeds consistent on its own:

- a result removes the call from executing (falling back to a same-name
  entry when the call id is unknown), from the queue and from pending;
- removing from the queue renumbers the remaining positions from 1.
- a denied approval also drops the call from the queue.

The feeds never decide a call is finished; ``reconcile`` only trusts a
persisted result for that.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from toolview.adapters.events import (
    RunCleanup,
    RunToolStateCleared,
    ToolApprovalRequested,
    ToolApprovalResolved,
    ToolChannelEvent,
    ToolDequeued,
    ToolExecutionFinished,
    ToolExecutionStarted,
    ToolResultReceived,
    ToolsQueued,
)
from toolview.shared.models.feeds import (
    ExecutingTool,
    PendingTool,
    QueuedTool,
    ToolResultEvent,
    queued_from_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class FeedSnapshot:
    """The feed arguments ``reconcile`` takes, for one run."""
    executing_tools: dict[str, ExecutingTool] = field(default_factory=dict)
    queued_tools: list[QueuedTool] = field(default_factory=list)
    pending_tools: list[PendingTool] = field(default_factory=list)
    result_events: dict[str, ToolResultEvent] = field(default_factory=dict)


def _renumber(queue: list[QueuedTool]) -> list[QueuedTool]:
    return [replace(tool, queue_position=index + 1) for index, tool in enumerate(queue)]


class LiveToolFeeds:
    """Executing / queued / pending / result state keyed by run id."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._executing: dict[str, dict[str, ExecutingTool]] = {}
        self._queued: dict[str, list[QueuedTool]] = {}
        self._pending: dict[str, dict[str, PendingTool]] = {}
        self._results: dict[str, dict[str, ToolResultEvent]] = {}

    def apply(self, event: ToolChannelEvent) -> None:
        """Fold one channel event into the feeds."""
        run_id = event.run_id
        if isinstance(event, ToolExecutionStarted):
            self._executing.setdefault(run_id, {})[event.call_id] = ExecutingTool(
                call_id=event.call_id,
                name=event.name,
                arguments=dict(event.arguments or {}),
                started_at=event.started_at or self._clock(),
            )
        elif isinstance(event, ToolExecutionFinished):
            self._remove_executing(run_id, event.call_id)
        elif isinstance(event, ToolsQueued):
            queued_at = event.queued_at or self._clock()
            queue = []
            for raw in event.tools:
                if not isinstance(raw, dict):
                    continue
                tool = queued_from_dict(raw)
                tool.queued_at = tool.queued_at or queued_at
                queue.append(tool)
            if queue:
                self._queued[run_id] = queue
            else:
                self._queued.pop(run_id, None)
        elif isinstance(event, ToolDequeued):
            self._remove_queued(run_id, event.call_id)
        elif isinstance(event, ToolApprovalRequested):
            self._pending.setdefault(run_id, {})[event.call_id] = PendingTool(
                call_id=event.call_id,
                name=event.name,
                arguments=dict(event.arguments or {}),
                requested_at=event.requested_at or self._clock(),
            )
        elif isinstance(event, ToolApprovalResolved):
            self._remove_pending(run_id, event.call_id)
            if not event.approved:
                # A denied call never runs; its result arrives as an error
                self._remove_queued(run_id, event.call_id)
                logger.debug("Approval denied for %s", event.call_id)
        elif isinstance(event, ToolResultReceived):
            self._apply_result(event)
        elif isinstance(event, RunToolStateCleared):
            self._executing.pop(run_id, None)
            self._queued.pop(run_id, None)
        elif isinstance(event, RunCleanup):
            self.drop_run(run_id)
        else:
            logger.debug("Ignoring unknown tool channel event %r", event.event_type)

    def _apply_result(self, event: ToolResultReceived) -> None:
        run_id = event.run_id
        self._results.setdefault(run_id, {})[event.call_id] = ToolResultEvent(
            call_id=event.call_id,
            tool_name=event.tool_name,
            metadata=event.metadata,
            output=event.output,
            received_at=event.received_at or self._clock(),
        )
        if not self._remove_executing(run_id, event.call_id):
            # Fallback for hosts that report results under a different id
            for call_id, tool in self._executing.get(run_id, {}).items():
                if event.tool_name and tool.name == event.tool_name:
                    logger.debug(
                        "Result %s matched executing %s by tool name", event.call_id, call_id
                    )
                    self._remove_executing(run_id, call_id)
                    break
        self._remove_queued(run_id, event.call_id)
        self._remove_pending(run_id, event.call_id)

    def _remove_executing(self, run_id: str, call_id: str) -> bool:
        run_tools = self._executing.get(run_id)
        if not run_tools or call_id not in run_tools:
            return False
        del run_tools[call_id]
        if not run_tools:
            del self._executing[run_id]
        return True

    def _remove_queued(self, run_id: str, call_id: str) -> bool:
        queue = self._queued.get(run_id)
        if not queue:
            return False
        remaining = [tool for tool in queue if tool.call_id != call_id]
        if len(remaining) == len(queue):
            return False
        if remaining:
            self._queued[run_id] = _renumber(remaining)
        else:
            del self._queued[run_id]
        return True

    def _remove_pending(self, run_id: str, call_id: str) -> bool:
        run_pending = self._pending.get(run_id)
        if not run_pending or call_id not in run_pending:
            return False
        del run_pending[call_id]
        if not run_pending:
            del self._pending[run_id]
        return True

    def drop_run(self, run_id: str) -> None:
        for table in (self._executing, self._queued, self._pending, self._results):
            table.pop(run_id, None)

    def run_ids(self) -> set[str]:
        return set(self._executing) | set(self._queued) | set(self._pending) | set(self._results)

    def snapshot(self, run_id: str) -> FeedSnapshot:
        """Copy of one run's feeds, safe to hand to ``reconcile``."""
        return FeedSnapshot(
            executing_tools=dict(self._executing.get(run_id, {})),
            queued_tools=list(self._queued.get(run_id, [])),
            pending_tools=list(self._pending.get(run_id, {}).values()),
            result_events=dict(self._results.get(run_id, {})),
        )
