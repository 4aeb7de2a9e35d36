"""
Storage - In-Memory Stores.

============================================================
PURPOSE
============================================================
Process-local EventStore and BaselineStore.

Used by tests and by the dashboard when no database is
configured. read_all() returns a tuple copied under a lock,
so later writes never show up in a read already taken.

============================================================
FAULT INJECTION
============================================================
    store.fail_with(StoreUnavailableError("down"))
    store.delay(2.0)

Every subsequent call raises the injected error, or sleeps
before answering. clear_faults() restores normal behaviour.

============================================================
"""

import asyncio
import threading
from typing import Dict, List, Optional, Tuple

from waste_analytics.stores import BaselineStore, EventStore
from waste_analytics.types import Department, DepartmentBaseline, WasteEvent


class _FaultInjection:
    def __init__(self) -> None:
        self._error: Optional[Exception] = None
        self._delay_seconds = 0.0
        self.calls = 0

    def fail_with(self, error: Exception) -> None:
        self._error = error

    def delay(self, seconds: float) -> None:
        self._delay_seconds = seconds

    def clear_faults(self) -> None:
        self._error = None
        self._delay_seconds = 0.0

    async def _before_call(self) -> None:
        self.calls += 1
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        if self._error is not None:
            raise self._error


class InMemoryEventStore(_FaultInjection, EventStore):
    """List-backed append-only event log."""

    def __init__(self, events: Optional[List[WasteEvent]] = None):
        super().__init__()
        self._lock = threading.Lock()
        self._events: List[WasteEvent] = list(events or [])

    async def read_all(self) -> Tuple[WasteEvent, ...]:
        await self._before_call()
        with self._lock:
            return tuple(self._events)

    async def append(self, event: WasteEvent) -> WasteEvent:
        await self._before_call()
        with self._lock:
            self._events.append(event)
        return event

    async def clear(self) -> int:
        await self._before_call()
        with self._lock:
            removed = len(self._events)
            self._events.clear()
        return removed


class InMemoryBaselineStore(_FaultInjection, BaselineStore):
    """Dict-backed baselines keyed by department."""

    def __init__(self, baselines: Optional[List[DepartmentBaseline]] = None):
        super().__init__()
        self._lock = threading.Lock()
        self._baselines: Dict[Department, DepartmentBaseline] = {
            b.department: b for b in baselines or []
        }

    async def read_all(self) -> Tuple[DepartmentBaseline, ...]:
        await self._before_call()
        with self._lock:
            return tuple(self._baselines.values())

    async def get(self, department: Department) -> Optional[DepartmentBaseline]:
        await self._before_call()
        with self._lock:
            return self._baselines.get(department)

    async def upsert(self, baseline: DepartmentBaseline) -> DepartmentBaseline:
        await self._before_call()
        with self._lock:
            self._baselines[baseline.department] = baseline
        return baseline

    async def delete(self, department: Department) -> bool:
        await self._before_call()
        with self._lock:
            return self._baselines.pop(department, None) is not None
