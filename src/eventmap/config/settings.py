"""Global configuration and constants for ordered event maps."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_SEPARATOR: Final = ","
# Ring buffer size used when tracing is enabled without an explicit capacity
DEFAULT_TRACE_CAPACITY: Final = int(os.environ.get("EVENTMAP_TRACE_CAPACITY", "50"))
TRACE_SUMMARY_LIMIT: Final = 40  # characters kept per traced payload

MAP_EVENTS: Final = ("set", "delete")
