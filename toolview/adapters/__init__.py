"""Adapters package - bridge between the host's tool status channel and the engine."""
from __future__ import annotations

__all__ = [
    "FeedSnapshot",
    "LiveToolFeeds",
    "dict_to_event",
    "event_to_dict",
]

from toolview.adapters.events import dict_to_event, event_to_dict
from toolview.adapters.live_feeds import FeedSnapshot, LiveToolFeeds
