"""
Shared utility functions.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a `time.monotonic()` reading."""
    return int((time.monotonic() - start) * 1000)
