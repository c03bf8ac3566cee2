"""Event tracing convenience API.

Provides a thin abstraction around `EventBus` tracing so callers can switch
tracing on for a map without reaching into its bus directly.
"""

from __future__ import annotations

from typing import Any

from .event_bus import EventBus, TraceEntry

__all__ = [
    "enable_event_tracing",
    "disable_event_tracing",
    "get_recent_event_traces",
]


def _bus(target: Any) -> EventBus:
    if isinstance(target, EventBus):
        return target
    bus = getattr(target, "events", None)
    if not isinstance(bus, EventBus):
        raise TypeError(f"Expected an EventBus or an object exposing one, got {type(target)!r}")
    return bus


def enable_event_tracing(target: Any, *, capacity: int | None = None) -> None:
    bus = _bus(target)
    bus.enable_tracing(True, capacity=capacity)


def disable_event_tracing(target: Any) -> None:
    _bus(target).enable_tracing(False)


def get_recent_event_traces(target: Any) -> list[TraceEntry]:
    return _bus(target).recent_trace_entries()
