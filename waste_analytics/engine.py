"""
Waste Analytics - Engine.

============================================================
PURPOSE
============================================================
Single entry point for the presentation layer. Implements:

    get_stats()              -> Snapshot
    get_alerts(status)       -> classified alerts, newest first
    log_waste(entry)         -> stored event + risk analysis
    list_waste(...)          -> stored events, newest first
    save_baseline(baseline)  -> stored baseline (upsert)
    list_baselines()         -> stored baselines
    delete_baseline(dept)    -> None, NotFoundError if absent
    reset_all_data(confirm)  -> number of events removed

============================================================
RISK ANALYSIS
============================================================
log_waste calls the configured RiskAnalyzer. Without one,
the event is stored with no risk analysis and can never
become an alert.

============================================================
STORE ACCESS
============================================================
- Every store call runs under asyncio.wait_for with the
  configured store timeout. A timeout is raised as
  StoreUnavailableError.
- get_stats takes one view of both stores and fails the
  WHOLE call if either read fails. There is no partial
  snapshot. With a StoreViewReader the view is a single
  transaction; otherwise the two stores are read
  concurrently, each in its own consistent read.
- The engine keeps no state between calls. Derivation runs
  on the immutable tuples returned by the stores.

============================================================
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Optional, Tuple, TypeVar, Union

from core.clock import ClockFactory, ClockProtocol, ensure_utc
from core.exceptions import (
    InvalidInputError,
    NotFoundError,
    RiskAnalysisUnavailableError,
    StoreUnavailableError,
    WasteIntelligenceException,
)

from .analyzer import RiskAnalyzer
from .config import EngineConfig
from .snapshot import SnapshotAssembler
from .stores import BaselineStore, EventStore, StoreViewReader
from .types import (
    AlertStatusFilter,
    ClassifiedAlert,
    Department,
    DepartmentBaseline,
    RiskAnalysis,
    Snapshot,
    StoreView,
    WasteEntry,
    WasteEvent,
    WasteType,
)
from .validation import parse_enum, validate_baseline, validate_entry


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LoggedWaste:
    """Result of LogWaste."""

    event: WasteEvent
    risk_analysis: Optional[RiskAnalysis]


class WasteIntelligenceEngine:
    """
    Derivation engine facade over the event and baseline stores.

    Usage:
        engine = WasteIntelligenceEngine(event_store, baseline_store)
        snapshot = await engine.get_stats()
    """

    def __init__(
        self,
        event_store: EventStore,
        baseline_store: BaselineStore,
        analyzer: Optional[RiskAnalyzer] = None,
        config: Optional[EngineConfig] = None,
        clock: Optional[ClockProtocol] = None,
        view_reader: Optional[StoreViewReader] = None,
    ):
        self._events = event_store
        self._baselines = baseline_store
        self._view_reader = view_reader
        self._analyzer = analyzer
        self._config = config or EngineConfig()
        self._clock = clock or ClockFactory.get_clock()
        self._assembler = SnapshotAssembler(self._config)

        logger.info(
            f"WasteIntelligenceEngine initialized: analyzer={self.analyzer_name} "
            f"store_timeout={self._config.store_timeout_seconds}s"
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def analyzer(self) -> Optional[RiskAnalyzer]:
        return self._analyzer

    @property
    def analyzer_name(self) -> str:
        return self._analyzer.name if self._analyzer else "none"

    # =========================================================
    # STORE ACCESS
    # =========================================================

    async def _with_timeout(self, store: str, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._config.store_timeout_seconds)
        except asyncio.TimeoutError as e:
            error = StoreUnavailableError(
                f"{store} store timed out after {self._config.store_timeout_seconds}s",
                store=store,
                operation=operation,
                cause=e,
            )
            logger.error(error.to_log_format())
            raise error from e
        except StoreUnavailableError as e:
            logger.error(e.to_log_format())
            raise

    async def read_view(self) -> StoreView:
        """
        Take one read of both stores.

        Raises:
            StoreUnavailableError: Either store failed or timed out
        """
        if self._view_reader is not None:
            return await self._with_timeout(
                "event+baseline", "read_view", self._view_reader.read_view()
            )

        events, baselines = await self._with_timeout(
            "event+baseline",
            "read_all",
            asyncio.gather(self._events.read_all(), self._baselines.read_all()),
        )
        return StoreView(events=tuple(events), baselines=tuple(baselines))

    # =========================================================
    # QUERIES
    # =========================================================

    async def get_stats(self, now: Optional[datetime] = None) -> Snapshot:
        """Dashboard snapshot for now (or the supplied instant)."""
        view = await self.read_view()
        return self._assembler.build_snapshot(
            view.events,
            view.baselines,
            ensure_utc(now) if now else self._clock.now(),
        )

    async def get_alerts(
        self,
        status: Union[str, AlertStatusFilter] = AlertStatusFilter.ACTIVE,
    ) -> Tuple[ClassifiedAlert, ...]:
        """
        Alerts matching a lifecycle status with their band attached.

        Raises:
            InvalidInputError: Unknown status, before any store read
        """
        selector = AlertStatusFilter.parse(status)
        events = await self._with_timeout("event", "read_all", self._events.read_all())
        return self._assembler.classifier.filter_classified(events, selector)

    async def list_waste(
        self,
        department: Optional[Union[str, Department]] = None,
        waste_type: Optional[Union[str, WasteType]] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Tuple[WasteEvent, ...]:
        """Stored events matching the filters, newest first."""
        dept = parse_enum(Department, department, "department") if department else None
        wtype = parse_enum(WasteType, waste_type, "waste_type") if waste_type else None
        if limit is not None and limit < 1:
            raise InvalidInputError("limit must be >= 1", field="limit", value=limit)

        events = await self._with_timeout("event", "read_all", self._events.read_all())

        matching = [
            e for e in events
            if (dept is None or e.department == dept)
            and (wtype is None or e.waste_type == wtype)
            and (since is None or ensure_utc(e.timestamp) >= ensure_utc(since))
            and (until is None or ensure_utc(e.timestamp) <= ensure_utc(until))
        ]
        matching.sort(key=lambda e: ensure_utc(e.timestamp), reverse=True)
        if limit is not None:
            matching = matching[:limit]
        return tuple(matching)

    async def list_baselines(self) -> Tuple[DepartmentBaseline, ...]:
        baselines = await self._with_timeout(
            "baseline", "read_all", self._baselines.read_all()
        )
        return tuple(sorted(baselines, key=lambda b: b.department.value))

    # =========================================================
    # COMMANDS
    # =========================================================

    async def _analyze(self, entry: WasteEntry) -> Optional[RiskAnalysis]:
        if self._analyzer is None:
            return None

        baseline = await self._with_timeout(
            "baseline", "get", self._baselines.get(entry.department)
        )
        try:
            return await asyncio.wait_for(
                self._analyzer.analyze(entry, baseline),
                timeout=self._config.analyzer_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            error = RiskAnalysisUnavailableError(
                f"Risk analyzer timed out after {self._config.analyzer_timeout_seconds}s",
                analyzer=self._analyzer.name,
                cause=e,
            )
            logger.error(error.to_log_format())
            raise error from e
        except RiskAnalysisUnavailableError as e:
            logger.error(e.to_log_format())
            raise

    async def log_waste(self, entry: WasteEntry) -> LoggedWaste:
        """
        Analyze and store one waste entry.

        Nothing is written when validation or analysis fails.

        Raises:
            InvalidInputError: Malformed entry
            RiskAnalysisUnavailableError: Analyzer failed or timed out
            StoreUnavailableError: Store failed or timed out
        """
        entry = validate_entry(entry)
        analysis = await self._analyze(entry)

        event = WasteEvent.from_entry(
            entry,
            event_id=str(uuid.uuid4()),
            timestamp=self._clock.now(),
            risk_analysis=analysis,
        )
        stored = await self._with_timeout("event", "append", self._events.append(event))

        logger.info(
            f"Logged {stored.quantity_kg:g}kg {stored.waste_type.value} "
            f"for {stored.department.value}: "
            + (
                f"risk={analysis.risk_score} anomaly={analysis.anomaly_detected}"
                if analysis else "no risk analysis"
            )
        )
        return LoggedWaste(event=stored, risk_analysis=analysis)

    async def save_baseline(self, baseline: DepartmentBaseline) -> DepartmentBaseline:
        """Upsert a baseline keyed by department."""
        validated = validate_baseline(baseline)
        stamped = DepartmentBaseline(
            department=validated.department,
            expected_daily_kg=validated.expected_daily_kg,
            risk_threshold=validated.risk_threshold,
            infectious_ratio=validated.infectious_ratio,
            sharps_ratio=validated.sharps_ratio,
            cost_per_kg=validated.cost_per_kg,
            updated_at=self._clock.now(),
        )
        stored = await self._with_timeout("baseline", "upsert", self._baselines.upsert(stamped))
        logger.info(
            f"Baseline saved for {stored.department.value}: "
            f"expected={stored.expected_daily_kg:g}kg"
        )
        return stored

    async def delete_baseline(self, department: Union[str, Department]) -> None:
        """
        Remove a department's baseline.

        Raises:
            InvalidInputError: Unknown department name
            NotFoundError: No baseline saved for the department
        """
        dept = parse_enum(Department, department, "department")
        deleted = await self._with_timeout(
            "baseline", "delete", self._baselines.delete(dept)
        )
        if not deleted:
            raise NotFoundError("Baseline", dept.value)
        logger.info(f"Baseline deleted for {dept.value}")

    async def reset_all_data(self, confirm: bool = False) -> int:
        """
        Clear the event store. Irreversible.

        Raises:
            InvalidInputError: confirm is not True
        """
        if confirm is not True:
            raise InvalidInputError(
                "Reset requires explicit confirmation", field="confirm", value=confirm
            )
        removed = await self._with_timeout("event", "clear", self._events.clear())
        logger.warning(f"All waste data reset: {removed} events removed")
        return removed

    async def close(self) -> None:
        if self._analyzer is not None:
            await self._analyzer.close()


def describe_error(error: WasteIntelligenceException) -> dict[str, Any]:
    """Boundary-safe description of an engine error."""
    return {
        "error": type(error).__name__,
        "message": error.message,
        "transient": error.is_transient,
    }
