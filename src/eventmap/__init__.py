"""Ordered key/value maps with a list-like surface and mutation events."""

from __future__ import annotations

from .domain.ordered_event_map import OrderedEventMap
from .services.entry_sort import SortKey
from .services.event_bus import (
    Event,
    EventBus,
    MapEvent,
    Subscription,
    TraceEntry,
    UnknownEventError,
)
from .services.event_tracing import (
    disable_event_tracing,
    enable_event_tracing,
    get_recent_event_traces,
)

__all__ = [
    "OrderedEventMap",
    "SortKey",
    "Event",
    "EventBus",
    "MapEvent",
    "Subscription",
    "TraceEntry",
    "UnknownEventError",
    "enable_event_tracing",
    "disable_event_tracing",
    "get_recent_event_traces",
]

__version__ = "0.1.0"
