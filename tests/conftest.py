"""
Shared fixtures for the waste intelligence tests.

NOW is Wednesday 2026-10-14 12:00 UTC.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional

import pytest

from core.clock import MockClock
from storage.memory import InMemoryBaselineStore, InMemoryEventStore
from waste_analytics.analyzer import RiskAnalyzer
from waste_analytics.config import EngineConfig
from waste_analytics.engine import WasteIntelligenceEngine
from waste_analytics.types import (
    Department,
    DepartmentBaseline,
    DisposalMethod,
    ProcedureCategory,
    RiskAnalysis,
    Shift,
    WasteEntry,
    WasteEvent,
    WasteType,
)


NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


class StaticRiskAnalyzer(RiskAnalyzer):
    """Returns a fixed analysis and records what it was asked."""

    def __init__(self, analysis: Optional[RiskAnalysis] = None):
        self.analysis = analysis or RiskAnalysis(
            risk_score=40,
            assessment="Within expected volume",
            recommended_action="Continue routine segregation",
            anomaly_detected=False,
        )
        self.calls = []

    @property
    def name(self) -> str:
        return "static"

    async def analyze(
        self,
        entry: WasteEntry,
        baseline: Optional[DepartmentBaseline],
    ) -> RiskAnalysis:
        self.calls.append((entry, baseline))
        return self.analysis


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_event():
    """Factory for waste events with sensible defaults."""
    counter = itertools.count(1)

    def _make(
        department: Department = Department.ICU,
        waste_type: WasteType = WasteType.INFECTIOUS,
        quantity_kg: float = 10.0,
        timestamp: Optional[datetime] = None,
        risk_score: Optional[int] = 40,
        anomaly: bool = False,
        **kwargs,
    ) -> WasteEvent:
        analysis = None
        if risk_score is not None:
            analysis = RiskAnalysis(
                risk_score=risk_score,
                assessment="assessment",
                recommended_action="action",
                anomaly_detected=anomaly,
                alert_message="Unusual volume" if anomaly else None,
            )
        return WasteEvent(
            id=kwargs.pop("id", f"evt-{next(counter)}"),
            department=department,
            waste_type=waste_type,
            quantity_kg=quantity_kg,
            procedure_category=kwargs.pop("procedure_category", ProcedureCategory.ROUTINE_CARE),
            disposal_method=kwargs.pop("disposal_method", DisposalMethod.INCINERATION),
            shift=kwargs.pop("shift", Shift.MORNING),
            timestamp=timestamp or NOW,
            risk_analysis=analysis,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_entry() -> WasteEntry:
    return WasteEntry(
        department=Department.SURGERY,
        waste_type=WasteType.SHARPS,
        quantity_kg=12.5,
        procedure_category=ProcedureCategory.MAJOR_SURGERY,
        disposal_method=DisposalMethod.AUTOCLAVE,
        shift=Shift.AFTERNOON,
        notes="Post-op tray",
    )


@pytest.fixture
def icu_baseline() -> DepartmentBaseline:
    return DepartmentBaseline(department=Department.ICU, expected_daily_kg=50.0)


@pytest.fixture
def mock_clock() -> MockClock:
    return MockClock(NOW)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def baseline_store() -> InMemoryBaselineStore:
    return InMemoryBaselineStore()


@pytest.fixture
def engine(event_store, baseline_store, mock_clock) -> WasteIntelligenceEngine:
    config = EngineConfig(store_timeout_seconds=0.5, analyzer_timeout_seconds=0.5)
    return WasteIntelligenceEngine(
        event_store=event_store,
        baseline_store=baseline_store,
        config=config,
        clock=mock_clock,
    )


@pytest.fixture
def risk_analyzer() -> StaticRiskAnalyzer:
    return StaticRiskAnalyzer()
