"""
Waste Analytics Package.

============================================================
PURPOSE
============================================================
Derivation engine for clinical waste monitoring.

Turns stored waste events and department baselines into:
- Trend series and composition totals (aggregator)
- Sustainability score, cost impact, day-over-day change (scorer)
- Department performance rows (departments)
- Risk-banded, status-filtered alerts (alerts)
- One immutable dashboard Snapshot (snapshot)

============================================================
PRINCIPLES
============================================================
- Pure derivation over one consistent store read
- Defaults stand in for absent configuration only
- Store failures fail the whole call

============================================================
"""

from .types import (
    AlertState,
    AlertStatusFilter,
    ClassifiedAlert,
    CostMode,
    Department,
    DepartmentBaseline,
    DepartmentPerformance,
    DisposalMethod,
    ProcedureCategory,
    RiskAnalysis,
    RiskBand,
    Shift,
    Snapshot,
    TrendBucket,
    TrendGrouping,
    WasteEntry,
    WasteEvent,
    WasteType,
)
from .config import BandThresholds, DerivationDefaults, EngineConfig, get_default_config
from .alerts import AlertClassifier
from .departments import DepartmentEvaluator
from .scorer import Scorer
from .snapshot import SnapshotAssembler
from .stores import BaselineStore, EventStore, StoreViewReader
from .analyzer import HttpRiskAnalyzer, RiskAnalyzer, create_analyzer
from .engine import LoggedWaste, WasteIntelligenceEngine
from .alert_feed import AlertFeed


__all__ = [
    # Types
    "AlertState",
    "AlertStatusFilter",
    "ClassifiedAlert",
    "CostMode",
    "Department",
    "DepartmentBaseline",
    "DepartmentPerformance",
    "DisposalMethod",
    "ProcedureCategory",
    "RiskAnalysis",
    "RiskBand",
    "Shift",
    "Snapshot",
    "TrendBucket",
    "TrendGrouping",
    "WasteEntry",
    "WasteEvent",
    "WasteType",
    # Config
    "BandThresholds",
    "DerivationDefaults",
    "EngineConfig",
    "get_default_config",
    # Components
    "AlertClassifier",
    "DepartmentEvaluator",
    "Scorer",
    "SnapshotAssembler",
    # Collaborators
    "BaselineStore",
    "EventStore",
    "StoreViewReader",
    "RiskAnalyzer",
    "HttpRiskAnalyzer",
    "create_analyzer",
    # Engine
    "LoggedWaste",
    "WasteIntelligenceEngine",
    "AlertFeed",
]
