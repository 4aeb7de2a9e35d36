"""
Waste Analytics - Store Interfaces.

============================================================
PURPOSE
============================================================
Abstract interfaces for the two collaborators the engine
reads from: the Event Store and the Baseline Store.

Persisted layout is owned by the implementations
(storage.repositories, storage.memory).

============================================================
CONTRACT
============================================================
- read_all() returns an immutable tuple taken in ONE
  consistent read. Later writes never show up in it.
- Two separate read_all() calls are each consistent on
  their own. A StoreViewReader reads both stores in one
  transaction when they share a backend.
- I/O failures are raised as StoreUnavailableError. An
  implementation never answers a failed read with an empty
  result.

============================================================
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .types import Department, DepartmentBaseline, StoreView, WasteEvent


class EventStore(ABC):
    """Append-only log of waste events."""

    @abstractmethod
    async def read_all(self) -> Tuple[WasteEvent, ...]:
        """Every stored event, in write order."""
        pass

    @abstractmethod
    async def append(self, event: WasteEvent) -> WasteEvent:
        """Persist one event and return it as stored."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every event. Returns the number removed."""
        pass


class BaselineStore(ABC):
    """One baseline per department, last write wins."""

    @abstractmethod
    async def read_all(self) -> Tuple[DepartmentBaseline, ...]:
        pass

    @abstractmethod
    async def get(self, department: Department) -> Optional[DepartmentBaseline]:
        pass

    @abstractmethod
    async def upsert(self, baseline: DepartmentBaseline) -> DepartmentBaseline:
        """Insert or replace the baseline keyed by its department."""
        pass

    @abstractmethod
    async def delete(self, department: Department) -> bool:
        """
        Remove a department's baseline.

        Returns:
            False when no baseline existed
        """
        pass


class StoreViewReader(ABC):
    """Reads events and baselines together in one consistent read."""

    @abstractmethod
    async def read_view(self) -> StoreView:
        pass
