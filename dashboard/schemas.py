"""
Pydantic schemas for Dashboard API requests and responses.

Wire names are camelCase; Python attributes stay snake_case.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.clock import now_utc
from core.constants import (
    DEFAULT_BASELINE_INFECTIOUS_RATIO,
    DEFAULT_BASELINE_RISK_THRESHOLD,
    DEFAULT_BASELINE_SHARPS_RATIO,
    DEFAULT_COST_PER_KG,
)
from waste_analytics.types import (
    ClassifiedAlert,
    Department,
    DepartmentBaseline,
    DisposalMethod,
    ProcedureCategory,
    RiskAnalysis,
    Shift,
    Snapshot,
    WasteEntry,
    WasteEvent,
    WasteType,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =======================
# COMMON
# =======================

class BaseResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=now_utc)


# =======================
# 1. REQUESTS
# =======================

class WasteEntryRequest(CamelModel):
    department: Department
    waste_type: WasteType
    quantity: float = Field(ge=0, allow_inf_nan=False)
    procedure_category: ProcedureCategory
    disposal_method: DisposalMethod
    shift: Shift
    notes: Optional[str] = None

    def to_entry(self) -> WasteEntry:
        return WasteEntry(
            department=self.department,
            waste_type=self.waste_type,
            quantity_kg=self.quantity,
            procedure_category=self.procedure_category,
            disposal_method=self.disposal_method,
            shift=self.shift,
            notes=self.notes or None,
        )


class BaselineRequest(CamelModel):
    department: Department
    expected_daily: float = Field(gt=0, allow_inf_nan=False)
    risk_threshold: float = Field(DEFAULT_BASELINE_RISK_THRESHOLD, ge=0, le=100)
    infectious_ratio: float = Field(DEFAULT_BASELINE_INFECTIOUS_RATIO, ge=0, le=100)
    sharps_ratio: float = Field(DEFAULT_BASELINE_SHARPS_RATIO, ge=0, le=100)
    cost_per_kg: float = Field(DEFAULT_COST_PER_KG, gt=0, allow_inf_nan=False)

    def to_baseline(self) -> DepartmentBaseline:
        return DepartmentBaseline(
            department=self.department,
            expected_daily_kg=self.expected_daily,
            risk_threshold=self.risk_threshold,
            infectious_ratio=self.infectious_ratio,
            sharps_ratio=self.sharps_ratio,
            cost_per_kg=self.cost_per_kg,
        )


# =======================
# 2. WASTE EVENTS
# =======================

class RiskAnalysisData(CamelModel):
    risk_score: int
    assessment: str
    recommended_action: str
    alert_message: Optional[str] = None
    anomaly_detected: bool

    @classmethod
    def from_analysis(cls, analysis: RiskAnalysis) -> "RiskAnalysisData":
        return cls(
            risk_score=analysis.risk_score,
            assessment=analysis.assessment,
            recommended_action=analysis.recommended_action,
            alert_message=analysis.alert_message,
            anomaly_detected=analysis.anomaly_detected,
        )


class WasteEventData(CamelModel):
    id: str
    department: str
    waste_type: str
    quantity: float
    procedure_category: str
    disposal_method: str
    shift: str
    notes: Optional[str] = None
    timestamp: datetime
    ai_analysis: Optional[RiskAnalysisData] = None
    status: str

    @classmethod
    def event_fields(cls, event: WasteEvent) -> Dict[str, Any]:
        return {
            "id": event.id,
            "department": event.department.value,
            "waste_type": event.waste_type.value,
            "quantity": event.quantity_kg,
            "procedure_category": event.procedure_category.value,
            "disposal_method": event.disposal_method.value,
            "shift": event.shift.value,
            "notes": event.notes,
            "timestamp": event.timestamp,
            "ai_analysis": (
                RiskAnalysisData.from_analysis(event.risk_analysis)
                if event.risk_analysis else None
            ),
            "status": event.alert_state.value,
        }

    @classmethod
    def from_event(cls, event: WasteEvent) -> "WasteEventData":
        return cls(**cls.event_fields(event))


class AlertData(WasteEventData):
    band: str
    severity_color: str

    @classmethod
    def from_alert(cls, alert: ClassifiedAlert) -> "AlertData":
        return cls(
            **cls.event_fields(alert.event),
            band=alert.band.value,
            severity_color=alert.band.color,
        )


class LogWasteData(CamelModel):
    entry: WasteEventData
    ai_analysis: Optional[RiskAnalysisData] = None


class WasteListResponse(BaseResponse):
    data: List[WasteEventData]
    count: int


class LogWasteResponse(BaseResponse):
    data: LogWasteData


class AlertsResponse(BaseResponse):
    data: List[AlertData]
    count: int
    status: str


class ResetResponse(BaseResponse):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(alias="deletedCount")


# =======================
# 3. BASELINES
# =======================

class BaselineData(CamelModel):
    department: str
    expected_daily: float
    risk_threshold: float
    infectious_ratio: float
    sharps_ratio: float
    cost_per_kg: float
    updated_at: Optional[datetime] = None

    @classmethod
    def from_baseline(cls, baseline: DepartmentBaseline) -> "BaselineData":
        return cls(
            department=baseline.department.value,
            expected_daily=baseline.expected_daily_kg,
            risk_threshold=baseline.risk_threshold,
            infectious_ratio=baseline.infectious_ratio,
            sharps_ratio=baseline.sharps_ratio,
            cost_per_kg=baseline.cost_per_kg,
            updated_at=baseline.updated_at,
        )


class BaselineResponse(BaseResponse):
    data: BaselineData


class BaselineListResponse(BaseResponse):
    data: List[BaselineData]


# =======================
# 4. DASHBOARD STATS
# =======================

class CompositionData(CamelModel):
    waste_type: str = Field(alias="type")
    quantity: float


class DepartmentPerformanceData(CamelModel):
    department: str
    total_kg: float
    expected_kg: float
    performance_pct: float
    over_performing: bool
    progress_ratio: float
    alert_count: int
    baseline_configured: bool


class SnapshotData(CamelModel):
    total_waste_today: float
    percent_change: Optional[float] = None
    active_alerts: int
    seven_day_trend: List[Dict[str, Any]]
    waste_composition: List[CompositionData]
    department_performance: List[DepartmentPerformanceData]
    sustainability_score: int
    cost_impact: float
    generated_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotData":
        return cls(
            total_waste_today=snapshot.total_waste_today,
            percent_change=snapshot.percent_change,
            active_alerts=snapshot.active_alerts,
            seven_day_trend=[b.to_dict() for b in snapshot.seven_day_trend],
            waste_composition=[
                CompositionData(waste_type=c.waste_type.value, quantity=c.quantity)
                for c in snapshot.waste_composition
            ],
            department_performance=[
                DepartmentPerformanceData(
                    department=d.department.value,
                    total_kg=d.total_kg,
                    expected_kg=d.expected_kg,
                    performance_pct=d.performance_pct,
                    over_performing=d.over_performing,
                    progress_ratio=d.progress_ratio,
                    alert_count=d.alert_count,
                    baseline_configured=d.baseline_configured,
                )
                for d in snapshot.department_performance
            ],
            sustainability_score=snapshot.sustainability_score,
            cost_impact=snapshot.cost_impact,
            generated_at=snapshot.generated_at,
        )


class StatsResponse(BaseResponse):
    data: SnapshotData
