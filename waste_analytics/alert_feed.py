"""
Waste Analytics - Alert Feed.

============================================================
PURPOSE
============================================================
Client-side staleness guard for the alert-center query path.

When the status filter changes before a previous fetch has
finished, the earlier fetch is cancelled and, if it still
completes, its result is discarded. Only the result for the
CURRENT filter is ever published.

============================================================
USAGE
============================================================
    feed = AlertFeed(engine)
    alerts = await feed.select("active")
    if alerts is None:
        # superseded by a newer select()
        ...

============================================================
"""

import asyncio
import logging
from typing import Optional, Tuple, Union

from .types import AlertStatusFilter, ClassifiedAlert


logger = logging.getLogger(__name__)


class AlertFeed:
    """Filter-keyed, cancellable alert fetches."""

    def __init__(self, engine):
        self._engine = engine
        self._current_key: Optional[AlertStatusFilter] = None
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self._latest: Optional[Tuple[ClassifiedAlert, ...]] = None

    @property
    def current_key(self) -> Optional[AlertStatusFilter]:
        return self._current_key

    @property
    def latest(self) -> Optional[Tuple[ClassifiedAlert, ...]]:
        """Last result published for the current filter."""
        return self._latest

    async def select(
        self,
        status: Union[str, AlertStatusFilter],
    ) -> Optional[Tuple[ClassifiedAlert, ...]]:
        """
        Switch to a filter and fetch its alerts.

        Returns:
            The alerts, or None when a newer select() superseded this one
        """
        key = AlertStatusFilter.parse(status)

        if self._task is not None and not self._task.done():
            logger.debug(f"Cancelling alert fetch for {self._current_key}")
            self._task.cancel()

        self._generation += 1
        generation = self._generation
        self._current_key = key
        self._latest = None
        task = asyncio.ensure_future(self._engine.get_alerts(key))
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._generation:
                return None
            raise

        if generation != self._generation or key != self._current_key:
            logger.debug(f"Discarding stale alerts for {key.value}")
            return None

        self._latest = result
        return result

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
