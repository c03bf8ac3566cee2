"""Value stringification used by join / str / locale rendering."""

from __future__ import annotations

import locale
from numbers import Number
from typing import Any, Iterable

__all__ = ["display_string", "join_values", "locale_string"]

# Fraction digits kept when rendering floats for the active locale
LOCALE_FRACTION_DIGITS = 3


def display_string(value: Any) -> str:
    """Render a value the way sequence joins do.

    ``None`` becomes the empty string and nested lists/tuples are rendered
    comma-joined (recursively); everything else goes through ``str``.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(display_string(v) for v in value)
    return str(value)


def join_values(values: Iterable[Any], separator: str = ",") -> str:
    return separator.join(display_string(v) for v in values)


def locale_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, Number):
        if isinstance(value, (list, tuple)):
            return ",".join(locale_string(v) for v in value)
        return str(value)
    if isinstance(value, int):
        return locale.format_string("%d", value, grouping=True)
    if isinstance(value, float):
        text = locale.format_string(f"%.{LOCALE_FRACTION_DIGITS}f", value, grouping=True)
        point = locale.localeconv()["decimal_point"]
        if point in text:
            text = text.rstrip("0").rstrip(point)
        return text
    return str(value)
