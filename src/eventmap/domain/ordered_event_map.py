"""Insertion-ordered mapping with a sequence-style surface and mutation events.

``OrderedEventMap`` is a ``MutableMapping`` whose entries keep first-insertion
order and can also be addressed by position (``at``, ``slice``, ``splice`` ...).

Design:
 - A ``dict`` is the single source of truth for both lookup and order.
 - Positional access goes through a cached key list which is rebuilt lazily
   after structural changes (new key, removal, reorder). Value updates leave
   it intact.
 - Bulk reorders (reverse, sort, splice, copy_within, fill, unshift) compute
   the complete new entry list first and swap it in with one assignment.
 - ``set`` and ``delete`` publish on the instance's ``EventBus`` *before* the
   write happens. The write is committed even when a handler raises; the
   handler's exception then propagates to the caller.
 - Bulk reorders never publish. Operations built from ``set`` / ``delete``
   (push, pop, shift, popitem, pop_key, filter, concat) do.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union

from ..config import settings
from ..services.entry_sort import CompareFunc, KeyFunc, SortKey, sort_entries, sort_entries_multi
from ..services.event_bus import EventBus, EventHandler, MapEvent, Subscription
from ..utils.indexing import copy_within, position, relative_index, resolve_range, splice_bounds
from ..utils.text import join_values, locale_string

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

EntrySource = Union[Mapping[K, V], Iterable[Tuple[K, V]]]

__all__ = ["OrderedEventMap"]

_logger = logging.getLogger(__name__)
_MISSING: Any = object()


def _flatten(items: Iterable[Any], depth: float) -> List[Any]:
    out: List[Any] = []
    for item in items:
        if depth >= 1 and isinstance(item, (list, tuple)):
            out.extend(_flatten(item, depth - 1))
        else:
            out.append(item)
    return out


def _pairs(source: EntrySource) -> Iterable[Tuple[Any, Any]]:
    return source.items() if isinstance(source, Mapping) else source


class OrderedEventMap(MutableMapping[K, V], Generic[K, V]):
    """Ordered key/value container usable like a list and observable via events.

    Usage:
        m = OrderedEventMap([("a", 1), ("b", 2)])
        m.on("set", lambda key, value: print("about to set", key, value))
        m.push(("c", 3))
        m.map(lambda value, key: value * 2)   # [2, 4, 6]
    """

    def __init__(self, entries: Optional[EntrySource] = None) -> None:
        self._data: Dict[K, V] = {}
        self._keys: Optional[List[K]] = None
        if entries is not None:
            for key, value in _pairs(entries):
                self._data[key] = value
        # Wired after initial population so construction never publishes
        self.events = EventBus(events=settings.MAP_EVENTS)

    # ------------------------------------------------------------------
    # Internal storage helpers
    # ------------------------------------------------------------------
    def _spawn(self, entries: Optional[EntrySource] = None) -> "OrderedEventMap[K, V]":
        return type(self)(entries)

    def _key_list(self) -> List[K]:
        if self._keys is None:
            self._keys = list(self._data)
        return self._keys

    def _write(self, key: K, value: V) -> None:
        if key not in self._data and self._keys is not None:
            self._keys.append(key)
        self._data[key] = value

    def _remove(self, key: K) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        self._keys = None
        return True

    def _rebuild(self, entries: Iterable[Tuple[K, V]], operation: str) -> None:
        data = dict(entries)
        self._data = data
        self._keys = None
        _logger.debug("%s rebuilt map with %d entries", operation, len(data))

    # ------------------------------------------------------------------
    # Event registration
    # ------------------------------------------------------------------
    def on(self, name: str | MapEvent, handler: EventHandler) -> Subscription:
        return self.events.subscribe(name, handler)

    def once(self, name: str | MapEvent, handler: EventHandler) -> Subscription:
        return self.events.subscribe(name, handler, once=True)

    def off(
        self, name: str | MapEvent | Subscription, handler: Optional[EventHandler] = None
    ) -> bool:
        """Remove a listener by subscription handle or by ``(name, handler)``."""
        if isinstance(name, Subscription):
            was_active = name.active
            self.events.unsubscribe(name)
            return was_active
        if handler is None:
            raise TypeError("off() needs a handler when called with an event name")
        return self.events.remove_handler(name, handler)

    # ------------------------------------------------------------------
    # Core mutation primitives
    # ------------------------------------------------------------------
    def set(self, key: K, value: V) -> "OrderedEventMap[K, V]":
        try:
            self.events.publish(MapEvent.SET, key, value)
        finally:
            self._write(key, value)
        return self

    def delete(self, key: K) -> bool:
        """Remove ``key`` if present and report whether anything was removed.

        The ``delete`` event fires for absent keys too, with ``None`` as the
        previous value.
        """
        previous = self._data.get(key)
        try:
            self.events.publish(MapEvent.DELETE, key, previous)
        finally:
            removed = self._remove(key)
        return removed

    def clear(self) -> None:
        self._data = {}
        self._keys = None

    def has(self, key: object) -> bool:
        return key in self._data

    # Checks key membership, not value membership
    includes = has

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------
    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __reversed__(self) -> Iterator[K]:
        return reversed(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._data.items())!r})"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def length(self) -> int:
        return len(self._data)

    def copy(self) -> "OrderedEventMap[K, V]":
        return self._spawn(self._data.items())

    def popitem(self) -> Tuple[K, V]:
        if not self._data:
            raise KeyError("popitem(): map is empty")
        key = next(reversed(self._data))
        value = self._data[key]
        self.delete(key)
        return key, value

    def pop_key(self, key: K, default: Any = _MISSING) -> Any:
        """Mapping-style removal by key (``dict.pop`` semantics)."""
        if key in self._data:
            value = self._data[key]
            self.delete(key)
            return value
        if default is _MISSING:
            raise KeyError(key)
        return default

    # ------------------------------------------------------------------
    # Index-based accessors
    # ------------------------------------------------------------------
    def at(self, index: int, default: Any = None) -> Optional[V]:
        pos = position(index, len(self._data))
        if pos is None:
            return default
        return self._data[self._key_list()[pos]]

    def index_of(self, value: Any, from_index: int = 0) -> int:
        values = list(self._data.values())
        for i in range(relative_index(from_index, len(values)), len(values)):
            if values[i] == value:
                return i
        return -1

    def last_index_of(self, value: Any, from_index: Optional[int] = None) -> int:
        values = list(self._data.values())
        last = len(values) - 1
        if from_index is None:
            start = last
        else:
            from_index = operator.index(from_index)
            start = min(from_index, last) if from_index >= 0 else len(values) + from_index
        for i in range(start, -1, -1):
            if values[i] == value:
                return i
        return -1

    def find_index(self, fn: Callable[[V, K], Any]) -> int:
        for i, (key, value) in enumerate(self._data.items()):
            if fn(value, key):
                return i
        return -1

    def find_last_index(self, fn: Callable[[V, K], Any]) -> int:
        entries = list(self._data.items())
        for i in range(len(entries) - 1, -1, -1):
            key, value = entries[i]
            if fn(value, key):
                return i
        return -1

    # ------------------------------------------------------------------
    # Search & predicates
    # ------------------------------------------------------------------
    def find(self, fn: Callable[[V, K], Any]) -> Optional[V]:
        for key, value in self._data.items():
            if fn(value, key):
                return value
        return None

    def find_last(self, fn: Callable[[V, K], Any]) -> Optional[V]:
        for key, value in reversed(list(self._data.items())):
            if fn(value, key):
                return value
        return None

    def every(self, fn: Callable[[V, K], Any]) -> bool:
        for key, value in self._data.items():
            if not fn(value, key):
                return False
        return True

    def some(self, fn: Callable[[V, K], Any]) -> bool:
        for key, value in self._data.items():
            if fn(value, key):
                return True
        return False

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------
    def map(self, fn: Callable[[V, K], T]) -> List[T]:
        return [fn(value, key) for key, value in list(self._data.items())]

    def filter(self, fn: Callable[[V, K], Any]) -> "OrderedEventMap[K, V]":
        result = self._spawn()
        for key, value in list(self._data.items()):
            if fn(value, key):
                result.set(key, value)
        return result

    def flat(self, depth: float = 1) -> List[Any]:
        """Flatten list/tuple values up to ``depth`` levels; keys are dropped."""
        return _flatten(self._data.values(), depth)

    def flat_map(self, fn: Callable[[V, K], Any]) -> List[Any]:
        return _flatten(self.map(fn), 1)

    def reduce(self, fn: Callable[[T, V, K], T], initial: T) -> T:
        acc = initial
        for key, value in list(self._data.items()):
            acc = fn(acc, value, key)
        return acc

    def reduce_right(self, fn: Callable[[T, V, K], T], initial: T) -> T:
        acc = initial
        for key, value in reversed(list(self._data.items())):
            acc = fn(acc, value, key)
        return acc

    def join(self, separator: str = settings.DEFAULT_SEPARATOR) -> str:
        return join_values(self._data.values(), separator)

    def to_string(self) -> str:
        return self.join(settings.DEFAULT_SEPARATOR)

    def to_locale_string(self) -> str:
        return settings.DEFAULT_SEPARATOR.join(locale_string(v) for v in self._data.values())

    # ------------------------------------------------------------------
    # In-place reordering
    # ------------------------------------------------------------------
    def reverse(self) -> "OrderedEventMap[K, V]":
        self._rebuild(reversed(list(self._data.items())), "reverse")
        return self

    def sort(
        self,
        compare: Optional[CompareFunc] = None,
        *,
        key: Optional[KeyFunc] = None,
        reverse: bool = False,
    ) -> "OrderedEventMap[K, V]":
        """Sort entries in place (stable).

        ``compare(a, b)`` and ``key(entry)`` both receive ``(key, value)``
        tuples. Without either, entries are ordered by their string form.
        """
        self._rebuild(sort_entries(self._data.items(), compare, key=key, reverse=reverse), "sort")
        return self

    def sort_by(self, *keys: SortKey) -> "OrderedEventMap[K, V]":
        """Sort in place by several ``SortKey``s, first key most significant."""
        self._rebuild(sort_entries_multi(self._data.items(), keys), "sort_by")
        return self

    def copy_within(
        self, target: int, start: int, end: Optional[int] = None
    ) -> "OrderedEventMap[K, V]":
        entries = copy_within(list(self._data.items()), target, start, end)
        self._rebuild(entries, "copy_within")
        return self

    def fill(self, value: V, start: int = 0, end: Optional[int] = None) -> "OrderedEventMap[K, V]":
        lo, hi = resolve_range(start, end, len(self._data))
        data = dict(self._data)
        for key in self._key_list()[lo:hi]:
            data[key] = value
        # Keys and order are unchanged, so the positional cache stays valid
        self._data = data
        _logger.debug("fill overwrote %d values", hi - lo)
        return self

    def splice(
        self, start: int, delete_count: Optional[int] = None, *items: Tuple[K, V]
    ) -> "OrderedEventMap[K, V]":
        """Remove ``delete_count`` entries at ``start`` and insert ``items`` there.

        Returns the removed entries as a new map, in their original order.
        """
        entries = list(self._data.items())
        lo, count = splice_bounds(start, delete_count, len(entries))
        removed = entries[lo : lo + count]
        entries[lo : lo + count] = list(items)
        self._rebuild(entries, "splice")
        return self._spawn(removed)

    def unshift(self, *items: Tuple[K, V]) -> int:
        self._rebuild([*items, *self._data.items()], "unshift")
        return len(self._data)

    def push(self, *items: Tuple[K, V]) -> int:
        for key, value in items:
            self.set(key, value)
        return len(self._data)

    def pop(self) -> Optional[V]:  # type: ignore[override]
        """Remove the last entry and return its value (None when empty).

        Use ``pop_key`` for the mapping-style removal by key.
        """
        if not self._data:
            return None
        key = next(reversed(self._data))
        value = self._data[key]
        self.delete(key)
        return value

    def shift(self) -> Optional[V]:
        if not self._data:
            return None
        key = next(iter(self._data))
        value = self._data[key]
        self.delete(key)
        return value

    # ------------------------------------------------------------------
    # Non-mutating derived maps
    # ------------------------------------------------------------------
    def slice(self, start: int = 0, end: Optional[int] = None) -> "OrderedEventMap[K, V]":
        lo, hi = resolve_range(start, end, len(self._data))
        return self._spawn(list(self._data.items())[lo:hi])

    def to_reversed(self) -> "OrderedEventMap[K, V]":
        return self._spawn(reversed(list(self._data.items())))

    def to_sorted(
        self,
        compare: Optional[CompareFunc] = None,
        *,
        key: Optional[KeyFunc] = None,
        reverse: bool = False,
    ) -> "OrderedEventMap[K, V]":
        return self._spawn(sort_entries(self._data.items(), compare, key=key, reverse=reverse))

    def to_spliced(
        self, start: int, delete_count: Optional[int] = None, *items: Tuple[K, V]
    ) -> "OrderedEventMap[K, V]":
        entries = list(self._data.items())
        lo, count = splice_bounds(start, delete_count, len(entries))
        entries[lo : lo + count] = list(items)
        return self._spawn(entries)

    def with_(self, index: int, value: V) -> "OrderedEventMap[K, V]":
        """Copy with the value at ``index`` replaced.

        Negative or out-of-range indices return an unmodified copy.
        """
        entries = list(self._data.items())
        index = operator.index(index)
        if 0 <= index < len(entries):
            entries[index] = (entries[index][0], value)
        return self._spawn(entries)

    def concat(self, *others: EntrySource) -> "OrderedEventMap[K, V]":
        """Merge copies of this map and ``others``; later keys overwrite values.

        Entries from ``others`` go through ``set`` on the result.
        """
        result = self.copy()
        for other in others:
            for key, value in list(_pairs(other)):
                result.set(key, value)
        return result
