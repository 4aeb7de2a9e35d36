"""
Waste Analytics - Type Definitions.

============================================================
PURPOSE
============================================================
Data contracts for the waste derivation engine.

This module defines all enums and dataclasses used by the
aggregator, scorer, department evaluator, alert classifier
and snapshot assembler.

============================================================
DESIGN PRINCIPLES
============================================================
- All records are frozen dataclasses
- Enums for every fixed category set
- Derived outputs are rebuilt on every call, never mutated
- Clear separation between input and output types

============================================================
ALERT LIFECYCLE
============================================================
An alert's lifecycle status is a tagged variant:

    ActiveStatus | AcknowledgedStatus(by, at) | ResolvedStatus(by, at)

Only ActiveStatus is ever constructed today. The other two
are typed so that a transition API can be added without
reshaping stored events.

============================================================
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from core.constants import (
    DEFAULT_BASELINE_INFECTIOUS_RATIO,
    DEFAULT_BASELINE_RISK_THRESHOLD,
    DEFAULT_BASELINE_SHARPS_RATIO,
    DEFAULT_COST_PER_KG,
)
from core.exceptions import InvalidInputError


# ============================================================
# CATEGORY ENUMS
# ============================================================


class Department(str, Enum):
    """Hospital departments that log waste."""

    EMERGENCY = "Emergency"
    SURGERY = "Surgery"
    ICU = "ICU"
    PEDIATRICS = "Pediatrics"
    ONCOLOGY = "Oncology"
    RADIOLOGY = "Radiology"
    LABORATORY = "Laboratory"
    PHARMACY = "Pharmacy"
    GENERAL_WARD = "General Ward"
    OUTPATIENT = "Outpatient"


class WasteType(str, Enum):
    """Clinical waste categories."""

    INFECTIOUS = "Infectious"
    PHARMACEUTICAL = "Pharmaceutical"
    SHARPS = "Sharps"
    CHEMICAL = "Chemical"
    RADIOACTIVE = "Radioactive"
    GENERAL = "General"
    RECYCLABLE = "Recyclable"

    @property
    def is_hazardous(self) -> bool:
        """Waste that needs special handling regardless of volume."""
        return self not in (WasteType.GENERAL, WasteType.RECYCLABLE)


class ProcedureCategory(str, Enum):
    ROUTINE_CARE = "Routine Care"
    MINOR_PROCEDURE = "Minor Procedure"
    MAJOR_SURGERY = "Major Surgery"
    DIAGNOSTIC = "Diagnostic"
    TREATMENT = "Treatment"
    EMERGENCY_RESPONSE = "Emergency Response"
    CHEMOTHERAPY = "Chemotherapy"
    DIALYSIS = "Dialysis"


class DisposalMethod(str, Enum):
    INCINERATION = "Incineration"
    AUTOCLAVE = "Autoclave"
    CHEMICAL_TREATMENT = "Chemical Treatment"
    SECURE_LANDFILL = "Secure Landfill"
    RECYCLING = "Recycling"
    SPECIAL_HANDLING = "Special Handling"


class Shift(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"


# ============================================================
# CLASSIFICATION ENUMS
# ============================================================


class RiskBand(str, Enum):
    """
    Risk severity band derived from a 0-100 risk score.

    - HIGH:   score >= 70
    - MEDIUM: 50 <= score < 70
    - LOW:    score < 50
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def color(self) -> str:
        """Presentation severity colour."""
        return {"high": "red", "medium": "orange", "low": "yellow"}[self.value]


class AlertState(str, Enum):
    """Lifecycle states an alert can be in."""

    ACTIVE = "active"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class AlertStatusFilter(str, Enum):
    """
    Query selector for the alert center.

    ALL is a selector, not a lifecycle state.
    """

    ACTIVE = "active"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union[str, "AlertStatusFilter"]) -> "AlertStatusFilter":
        """Parse a case-insensitive filter value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(
                f"Invalid alert status filter: {value}. "
                f"Valid values: {', '.join(f.value for f in cls)}",
                field="status",
                value=value,
            )

    @property
    def state(self) -> Optional[AlertState]:
        """Lifecycle state this filter selects, None for ALL."""
        if self == AlertStatusFilter.ALL:
            return None
        return AlertState(self.value)


class TrendGrouping(str, Enum):
    """
    Bucket key for the trend series.

    WEEKDAY_LABEL collapses the same weekday of different weeks
    into one bucket. CALENDAR_DATE keys by date and keeps the
    weekday name as a display projection only.
    """

    WEEKDAY_LABEL = "weekday_label"
    CALENDAR_DATE = "calendar_date"


class CostMode(str, Enum):
    """
    How disposal cost is estimated.

    FLAT applies one rate to the whole fleet. PER_DEPARTMENT
    honors each baseline's cost_per_kg and falls back to the
    flat rate for departments without a baseline.
    """

    FLAT = "flat"
    PER_DEPARTMENT = "per_department"


# ============================================================
# ALERT LIFECYCLE VARIANT
# ============================================================


@dataclass(frozen=True)
class ActiveStatus:
    """Alert raised and not yet handled."""

    @property
    def state(self) -> AlertState:
        return AlertState.ACTIVE


@dataclass(frozen=True)
class AcknowledgedStatus:
    """Alert seen by a named operator. Not reachable yet."""

    by: str
    at: datetime

    @property
    def state(self) -> AlertState:
        return AlertState.ACKNOWLEDGED


@dataclass(frozen=True)
class ResolvedStatus:
    """Alert closed by a named operator. Not reachable yet."""

    by: str
    at: datetime

    @property
    def state(self) -> AlertState:
        return AlertState.RESOLVED


AlertStatus = Union[ActiveStatus, AcknowledgedStatus, ResolvedStatus]

ACTIVE = ActiveStatus()


# ============================================================
# INPUT DATA CONTRACTS
# ============================================================


@dataclass(frozen=True)
class RiskAnalysis:
    """
    Risk analysis attached to an event by the upstream analyzer.

    Either the whole analysis is present on an event or none of it.
    """

    risk_score: int
    assessment: str
    recommended_action: str
    anomaly_detected: bool
    alert_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "riskScore": self.risk_score,
            "assessment": self.assessment,
            "recommendedAction": self.recommended_action,
            "alertMessage": self.alert_message,
            "anomalyDetected": self.anomaly_detected,
        }


@dataclass(frozen=True)
class WasteEntry:
    """A waste log submission before id, timestamp and analysis exist."""

    department: Department
    waste_type: WasteType
    quantity_kg: float
    procedure_category: ProcedureCategory
    disposal_method: DisposalMethod
    shift: Shift
    notes: Optional[str] = None


@dataclass(frozen=True)
class WasteEvent:
    """One stored disposal record. Immutable once written."""

    id: str
    department: Department
    waste_type: WasteType
    quantity_kg: float
    procedure_category: ProcedureCategory
    disposal_method: DisposalMethod
    shift: Shift
    timestamp: datetime
    risk_analysis: Optional[RiskAnalysis] = None
    status: AlertStatus = ACTIVE
    notes: Optional[str] = None

    @property
    def is_anomaly(self) -> bool:
        """True when the upstream analysis flagged this entry."""
        return self.risk_analysis is not None and self.risk_analysis.anomaly_detected

    @property
    def risk_score(self) -> Optional[int]:
        return self.risk_analysis.risk_score if self.risk_analysis else None

    @property
    def alert_state(self) -> AlertState:
        return self.status.state

    @classmethod
    def from_entry(
        cls,
        entry: WasteEntry,
        event_id: str,
        timestamp: datetime,
        risk_analysis: Optional[RiskAnalysis],
    ) -> "WasteEvent":
        return cls(
            id=event_id,
            department=entry.department,
            waste_type=entry.waste_type,
            quantity_kg=float(entry.quantity_kg),
            procedure_category=entry.procedure_category,
            disposal_method=entry.disposal_method,
            shift=entry.shift,
            timestamp=timestamp,
            risk_analysis=risk_analysis,
            status=ACTIVE,
            notes=entry.notes,
        )


@dataclass(frozen=True)
class DepartmentBaseline:
    """Per-department expected load and threshold configuration."""

    department: Department
    expected_daily_kg: float
    risk_threshold: float = DEFAULT_BASELINE_RISK_THRESHOLD
    infectious_ratio: float = DEFAULT_BASELINE_INFECTIOUS_RATIO
    sharps_ratio: float = DEFAULT_BASELINE_SHARPS_RATIO
    cost_per_kg: float = DEFAULT_COST_PER_KG
    updated_at: Optional[datetime] = None


# ============================================================
# OUTPUT DATA CONTRACTS
# ============================================================


@dataclass(frozen=True)
class TrendBucket:
    """
    One bucket of the trend series.

    quantity_by_waste_type only holds waste types seen in the
    bucket; absent types are not zero-filled.
    """

    day_label: str
    quantity_by_waste_type: Mapping[WasteType, float]
    day: Optional[date] = None  # set only for CALENDAR_DATE grouping

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "quantity_by_waste_type",
            MappingProxyType(dict(self.quantity_by_waste_type)),
        )

    @property
    def total_kg(self) -> float:
        return sum(self.quantity_by_waste_type.values())

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"day": self.day_label}
        if self.day is not None:
            data["date"] = self.day.isoformat()
        for waste_type, quantity in self.quantity_by_waste_type.items():
            data[waste_type.value] = quantity
        return data


@dataclass(frozen=True)
class CompositionEntry:
    """Summed quantity for one waste type."""

    waste_type: WasteType
    quantity: float


@dataclass(frozen=True)
class DepartmentPerformance:
    """Load of one department compared against its expected daily load."""

    department: Department
    total_kg: float
    expected_kg: float
    performance_pct: float
    over_performing: bool
    progress_ratio: float
    alert_count: int
    baseline_configured: bool


@dataclass(frozen=True)
class ClassifiedAlert:
    """A waste event with its risk band attached."""

    event: WasteEvent
    band: RiskBand


@dataclass(frozen=True)
class AlertStatusCounts:
    active: int = 0
    acknowledged: int = 0
    resolved: int = 0

    @property
    def total(self) -> int:
        return self.active + self.acknowledged + self.resolved


@dataclass(frozen=True)
class Snapshot:
    """
    Point-in-time bundle of dashboard metrics.

    Valid only for the instant it was computed. Never persisted.
    """

    total_waste_today: float
    percent_change: Optional[float]  # None means "no data"
    active_alerts: int
    seven_day_trend: Tuple[TrendBucket, ...]
    waste_composition: Tuple[CompositionEntry, ...]
    department_performance: Tuple[DepartmentPerformance, ...]
    sustainability_score: int
    cost_impact: float
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "totalWasteToday": self.total_waste_today,
            "percentChange": self.percent_change,
            "activeAlerts": self.active_alerts,
            "sevenDayTrend": [b.to_dict() for b in self.seven_day_trend],
            "wasteComposition": [
                {"type": c.waste_type.value, "quantity": c.quantity}
                for c in self.waste_composition
            ],
            "departmentPerformance": [
                {
                    "department": d.department.value,
                    "totalKg": d.total_kg,
                    "expectedKg": d.expected_kg,
                    "performancePct": d.performance_pct,
                    "overPerforming": d.over_performing,
                    "progressRatio": d.progress_ratio,
                    "alertCount": d.alert_count,
                }
                for d in self.department_performance
            ],
            "sustainabilityScore": self.sustainability_score,
            "costImpact": self.cost_impact,
            "generatedAt": self.generated_at.isoformat(),
        }


@dataclass(frozen=True)
class StoreView:
    """One consistent read of both stores, taken before any derivation."""

    events: Tuple[WasteEvent, ...] = ()
    baselines: Tuple[DepartmentBaseline, ...] = ()


# ============================================================
# EXPORTS
# ============================================================

__all__: List[str] = [
    "Department",
    "WasteType",
    "ProcedureCategory",
    "DisposalMethod",
    "Shift",
    "RiskBand",
    "AlertState",
    "AlertStatusFilter",
    "TrendGrouping",
    "CostMode",
    "ActiveStatus",
    "AcknowledgedStatus",
    "ResolvedStatus",
    "AlertStatus",
    "ACTIVE",
    "RiskAnalysis",
    "WasteEntry",
    "WasteEvent",
    "DepartmentBaseline",
    "TrendBucket",
    "CompositionEntry",
    "DepartmentPerformance",
    "ClassifiedAlert",
    "AlertStatusCounts",
    "Snapshot",
    "StoreView",
]
