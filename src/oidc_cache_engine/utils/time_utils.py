"""Epoch-seconds helpers"""

import time
from datetime import datetime, timezone


def now_seconds() -> int:
    """Current time in whole seconds since the epoch"""
    return int(time.time())


def to_datetime(epoch_seconds: int) -> datetime:
    """Convert epoch seconds into a timezone-aware UTC datetime"""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
