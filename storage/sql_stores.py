"""
Storage - SQL Stores.

============================================================
PURPOSE
============================================================
EventStore, BaselineStore and StoreViewReader backed by the SQL
repositories.

Each call opens ONE transaction scope, so a read_all() is a
single consistent query. Blocking SQLAlchemy work runs in a
worker thread via asyncio.to_thread.

============================================================
"""

import asyncio
from typing import Callable, Optional, Tuple, TypeVar

from sqlalchemy.orm import Session

from storage.database import Database
from storage.repositories.waste import DepartmentBaselineRepository, WasteEventRepository
from waste_analytics.stores import BaselineStore, EventStore, StoreViewReader
from waste_analytics.types import Department, DepartmentBaseline, StoreView, WasteEvent


R = TypeVar("R")


class _SqlStore:
    def __init__(self, database: Database):
        self._database = database

    def _run(self, work: Callable[[Session], R]) -> R:
        with self._database.transaction_scope() as session:
            return work(session)

    async def _run_async(self, work: Callable[[Session], R]) -> R:
        return await asyncio.to_thread(self._run, work)


class SqlEventStore(_SqlStore, EventStore):
    """waste_events table as an EventStore."""

    async def read_all(self) -> Tuple[WasteEvent, ...]:
        return tuple(
            await self._run_async(lambda s: WasteEventRepository(s).list_all())
        )

    async def append(self, event: WasteEvent) -> WasteEvent:
        return await self._run_async(lambda s: WasteEventRepository(s).append(event))

    async def clear(self) -> int:
        return await self._run_async(lambda s: WasteEventRepository(s).clear())


class SqlBaselineStore(_SqlStore, BaselineStore):
    """department_baselines table as a BaselineStore."""

    async def read_all(self) -> Tuple[DepartmentBaseline, ...]:
        return tuple(
            await self._run_async(lambda s: DepartmentBaselineRepository(s).list_all())
        )

    async def get(self, department: Department) -> Optional[DepartmentBaseline]:
        return await self._run_async(
            lambda s: DepartmentBaselineRepository(s).get(department)
        )

    async def upsert(self, baseline: DepartmentBaseline) -> DepartmentBaseline:
        return await self._run_async(
            lambda s: DepartmentBaselineRepository(s).upsert(baseline)
        )

    async def delete(self, department: Department) -> bool:
        return await self._run_async(
            lambda s: DepartmentBaselineRepository(s).delete(department)
        )


class SqlStoreViewReader(_SqlStore, StoreViewReader):
    """Events and baselines read in one transaction."""

    def _read_view(self, session: Session) -> StoreView:
        return StoreView(
            events=tuple(WasteEventRepository(session).list_all()),
            baselines=tuple(DepartmentBaselineRepository(session).list_all()),
        )

    async def read_view(self) -> StoreView:
        return await self._run_async(self._read_view)
