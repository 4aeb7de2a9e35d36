"""
Core Module - Clock.

============================================================
RESPONSIBILITY
============================================================
Supplies "now" to the engine.

- Writes (event timestamps, baseline updated_at) and the
  snapshot's day boundaries read the clock, never
  datetime.now() inline
- Tests pin the clock to a fixed instant
- Every instant is UTC

============================================================
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
import threading


class ClockProtocol(ABC):
    """Source of the current UTC instant."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(ClockProtocol):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class MockClock(ClockProtocol):
    """Fixed clock for deterministic day and window boundaries."""

    def __init__(self, fixed_time: datetime):
        self._time = ensure_utc(fixed_time)

    def now(self) -> datetime:
        return self._time


class ClockFactory:
    """Holds the process-wide SystemClock."""

    _instance: Optional[ClockProtocol] = None
    _lock = threading.Lock()

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        with cls._lock:
            if cls._instance is None:
                cls._instance = SystemClock()
            return cls._instance


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Current instant from the process clock."""
    return ClockFactory.get_clock().now()


__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "ensure_utc",
    "now_utc",
]
