"""Stable sorting of ``(key, value)`` entries.

Provides the ordering rules behind ``OrderedEventMap.sort`` / ``to_sorted``:

 - A numeric comparator ``compare(a, b)`` (negative / zero / positive) over
   entry tuples, adapted via ``functools.cmp_to_key``.
 - A Python-native ``key`` function over entry tuples.
 - The default ordering when neither is given: entries compared by their
   stringified form (``"key,value"``), like a default array sort.

Sorting is always stable; ``reverse=True`` keeps stability as ``sorted`` does.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..utils.text import display_string

Entry = Tuple[Any, Any]
CompareFunc = Callable[[Entry, Entry], float]
KeyFunc = Callable[[Entry], Any]

__all__ = [
    "Entry",
    "CompareFunc",
    "KeyFunc",
    "SortKey",
    "default_sort_key",
    "sort_entries",
    "sort_entries_multi",
]


def default_sort_key(entry: Entry) -> str:
    return display_string(entry)


def _compare_key(compare: CompareFunc) -> KeyFunc:
    def sign(a: Entry, b: Entry) -> int:
        result = compare(a, b)
        # NaN / None compare as equal
        if result is None or result != result:
            return 0
        return -1 if result < 0 else (1 if result > 0 else 0)

    return cmp_to_key(sign)


def sort_entries(
    entries: Iterable[Entry],
    compare: Optional[CompareFunc] = None,
    *,
    key: Optional[KeyFunc] = None,
    reverse: bool = False,
) -> List[Entry]:
    if compare is not None and key is not None:
        raise TypeError("sort accepts either a compare function or a key function, not both")
    if compare is not None:
        key = _compare_key(compare)
    elif key is None:
        key = default_sort_key
    return sorted(entries, key=key, reverse=reverse)


@dataclass(frozen=True)
class SortKey:
    key_func: KeyFunc
    ascending: bool = True


def sort_entries_multi(entries: Iterable[Entry], keys: Sequence[SortKey]) -> List[Entry]:
    """Sort by several keys in priority order, first key most significant.

    Usage:
        sort_entries_multi(m.items(), [
            SortKey(lambda e: e[1]["points"], ascending=False),
            SortKey(lambda e: e[0]),
        ])
    """
    # Apply from lowest precedence to highest for stability
    result = list(entries)
    for sk in reversed(keys):
        result.sort(key=sk.key_func, reverse=not sk.ascending)
    return result
