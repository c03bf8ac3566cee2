"""Relative index helpers shared by the positional map operations.

All helpers follow the usual sequence conventions: negative indices count
from the end and results are clamped into ``[0, length]`` instead of raising.
"""

from __future__ import annotations

import operator
from typing import List, Optional, Tuple, TypeVar

T = TypeVar("T")

__all__ = [
    "relative_index",
    "position",
    "resolve_range",
    "splice_bounds",
    "copy_within",
]


def relative_index(index: int, length: int) -> int:
    index = operator.index(index)
    if index < 0:
        return max(length + index, 0)
    return min(index, length)


def position(index: int, length: int) -> Optional[int]:
    """Return the concrete position for ``index`` or None when out of range."""
    index = operator.index(index)
    if index < 0:
        index += length
    if 0 <= index < length:
        return index
    return None


def resolve_range(start: int, end: Optional[int], length: int) -> Tuple[int, int]:
    lo = relative_index(start, length)
    hi = length if end is None else relative_index(end, length)
    return lo, max(lo, hi)


def splice_bounds(start: int, delete_count: Optional[int], length: int) -> Tuple[int, int]:
    """Return ``(start, count)`` for a splice; a missing count removes the rest."""
    lo = relative_index(start, length)
    if delete_count is None:
        return lo, length - lo
    count = operator.index(delete_count)
    return lo, min(max(count, 0), length - lo)


def copy_within(items: List[T], target: int, start: int, end: Optional[int] = None) -> List[T]:
    """Copy ``items[start:end]`` over the positions starting at ``target`` in place.

    The copied run is truncated at the end of the list, so the length never
    changes. Overlapping ranges are safe in both directions because the source
    run is materialised before assignment.
    """
    length = len(items)
    to = relative_index(target, length)
    lo, hi = resolve_range(start, end, length)
    count = min(hi - lo, length - to)
    if count > 0:
        items[to : to + count] = items[lo : lo + count]
    return items
