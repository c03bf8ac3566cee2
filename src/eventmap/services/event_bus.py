"""EventBus core for ordered event maps.

Lightweight synchronous publish/subscribe mechanism scoped to a single
container instance.

Goals:
 - Ordered, synchronous, multi-listener delivery on the caller's stack
 - Allow one-shot (once) subscriptions
 - Provide unsubscribe handles as well as handler-based removal
 - Optional error isolation: one failing handler doesn't break the publish cycle

Handlers receive the ``(key, value)`` payload positionally. Each publish also
builds an ``Event`` record which feeds the optional tracing ring buffer.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Any, Deque, Dict, Iterable, List, Protocol, Tuple

from ..config import settings

__all__ = [
    "MapEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
    "TraceEntry",
    "UnknownEventError",
]

_logger = logging.getLogger(__name__)


class MapEvent(str, Enum):  # str subclass so plain names compare equal
    SET = "set"
    DELETE = "delete"


class UnknownEventError(ValueError):
    """Raised when subscribing to or publishing an event the bus does not declare."""


@dataclass
class Event:
    name: str
    key: Any
    value: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, key: Any, value: Any) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(frozen=True)
class TraceEntry:
    name: str
    timestamp: float
    summary: str


class EventBus:
    """Synchronous event dispatcher with optional tracing.

    Dispatch works on a snapshot of the subscription list, so handlers may
    subscribe or unsubscribe recursively without affecting the publish in
    progress. One-shot subscriptions are deactivated before their handler
    runs, which keeps a re-entrant publish from delivering them twice.

    Error policy:
        - ``isolate_errors=False`` (default): the first handler exception
          propagates to the publisher; remaining handlers are skipped.
        - ``isolate_errors=True``: exceptions are recorded in ``errors``,
          logged, and dispatch continues with the next handler.

    Tracing:
        - Disabled by default
        - When enabled, stores a fixed-size ring buffer of recent events
          (name, timestamp, short payload summary)
    """

    DEFAULT_TRACE_CAPACITY = settings.DEFAULT_TRACE_CAPACITY

    def __init__(
        self, *, events: Iterable[str] | None = None, isolate_errors: bool = False
    ) -> None:
        self._declared: frozenset[str] | None = (
            frozenset(self._normalize(e) for e in events) if events is not None else None
        )
        self._isolate_errors = isolate_errors
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []
        # Tracing state
        self._tracing_enabled: bool = False
        self._trace_capacity: int = self.DEFAULT_TRACE_CAPACITY
        self._traces: Deque[Tuple[str, float, str]] = deque(maxlen=self._trace_capacity)

    @staticmethod
    def _normalize(name: str | MapEvent) -> str:
        return name.value if isinstance(name, MapEvent) else name

    def _check(self, name: str | MapEvent) -> str:
        key = self._normalize(name)
        if self._declared is not None and key not in self._declared:
            raise UnknownEventError(
                f"Unknown event '{key}' (expected one of {sorted(self._declared)})"
            )
        return key

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def subscribe(
        self, name: str | MapEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = self._check(name)
        sub = Subscription(event=key, handler=handler, once=once)
        self._subs.setdefault(key, []).append(sub)
        _logger.debug("subscribed %r to '%s' (once=%s)", handler, key, once)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        bucket = self._subs.get(sub.event)
        sub.active = False
        if not bucket:
            return
        for i, existing in enumerate(bucket):
            if existing is sub:
                bucket.pop(i)
                break
        if not bucket:
            self._subs.pop(sub.event, None)

    def remove_handler(self, name: str | MapEvent, handler: EventHandler) -> bool:
        """Remove the most recently added subscription of ``handler`` for ``name``.

        Returns True when a subscription was removed.
        """
        key = self._check(name)
        bucket = self._subs.get(key, [])
        for sub in reversed(bucket):
            if sub.handler == handler:
                self.unsubscribe(sub)
                return True
        return False

    def clear(self) -> None:
        for bucket in self._subs.values():
            for sub in bucket:
                sub.active = False
        self._subs.clear()
        self._errors.clear()

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, name: str | MapEvent, key: Any = None, value: Any = None) -> Event:
        event_name = self._check(name)
        evt = Event(name=event_name, key=key, value=value, timestamp=perf_counter())
        if self._tracing_enabled:
            text = f"{key}={value}"
            limit = settings.TRACE_SUMMARY_LIMIT
            summary = text if len(text) <= limit else text[: limit - 3] + "..."
            self._traces.append((evt.name, evt.timestamp, summary))
        # Snapshot subscribers first
        subs = list(self._subs.get(event_name, ()))
        for sub in subs:
            if not sub.active:
                continue
            if sub.once:
                self.unsubscribe(sub)
            try:
                sub.handler(key, value)
            except Exception as exc:
                if not self._isolate_errors:
                    raise
                self._errors.append((evt, exc))
                _logger.warning(
                    "handler %r failed for '%s' event: %s", sub.handler, event_name, exc
                )
        return evt

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def subscriber_count(self, name: str | MapEvent) -> int:
        return len(self._subs.get(self._normalize(name), ()))

    def list_events(self) -> list[str]:
        return list(self._subs.keys())

    @property
    def declared_events(self) -> frozenset[str] | None:
        return self._declared

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        return list(self._errors)

    # ------------------------------------------------------------------
    # Tracing API
    # ------------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        """Enable or disable event tracing.

        Parameters
        ----------
        enabled: bool
            New tracing state.
        capacity: int | None
            Optional new ring buffer capacity (keeps the most recent traces if changed).
        """
        self._tracing_enabled = enabled
        if capacity is not None and capacity != self._trace_capacity:
            self._trace_capacity = capacity
            self._traces = deque(self._traces, maxlen=capacity)

    def clear_traces(self) -> None:
        self._traces.clear()

    def recent_traces(self) -> list[Tuple[str, float, str]]:
        return list(self._traces)

    def recent_trace_entries(self) -> list[TraceEntry]:
        return [TraceEntry(name=n, timestamp=ts, summary=s) for (n, ts, s) in self._traces]

    @property
    def tracing_enabled(self) -> bool:
        return self._tracing_enabled
