"""
Waste Repositories.

============================================================
PURPOSE
============================================================
Data access for waste events and department baselines, and
the mapping between ORM records and waste_analytics types.

============================================================
DATA LIFECYCLE
============================================================
- WasteEventRepository: APPEND-ONLY, cleared only by reset
- DepartmentBaselineRepository: upsert / delete by department

============================================================
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.clock import ensure_utc
from storage.models.waste import DepartmentBaselineRecord, WasteEventRecord
from storage.repositories.base import BaseRepository
from waste_analytics.types import (
    ACTIVE,
    AcknowledgedStatus,
    AlertState,
    AlertStatus,
    Department,
    DepartmentBaseline,
    DisposalMethod,
    ProcedureCategory,
    ResolvedStatus,
    RiskAnalysis,
    Shift,
    WasteEvent,
    WasteType,
)


# =========================================================
# RECORD MAPPING
# =========================================================


def _status_from_record(record: WasteEventRecord) -> AlertStatus:
    state = AlertState(record.status)
    if state == AlertState.ACKNOWLEDGED:
        return AcknowledgedStatus(by=record.status_by, at=ensure_utc(record.status_at))
    if state == AlertState.RESOLVED:
        return ResolvedStatus(by=record.status_by, at=ensure_utc(record.status_at))
    return ACTIVE


def event_to_record(event: WasteEvent) -> WasteEventRecord:
    analysis = event.risk_analysis
    status = event.status
    return WasteEventRecord(
        event_id=event.id,
        department=event.department.value,
        waste_type=event.waste_type.value,
        procedure_category=event.procedure_category.value,
        disposal_method=event.disposal_method.value,
        shift=event.shift.value,
        quantity_kg=event.quantity_kg,
        notes=event.notes,
        timestamp=ensure_utc(event.timestamp),
        risk_score=analysis.risk_score if analysis else None,
        assessment=analysis.assessment if analysis else None,
        recommended_action=analysis.recommended_action if analysis else None,
        alert_message=analysis.alert_message if analysis else None,
        anomaly_detected=analysis.anomaly_detected if analysis else None,
        status=status.state.value,
        status_by=getattr(status, "by", None),
        status_at=getattr(status, "at", None),
    )


def event_from_record(record: WasteEventRecord) -> WasteEvent:
    analysis = None
    if record.risk_score is not None:
        analysis = RiskAnalysis(
            risk_score=record.risk_score,
            assessment=record.assessment,
            recommended_action=record.recommended_action,
            anomaly_detected=bool(record.anomaly_detected),
            alert_message=record.alert_message,
        )
    return WasteEvent(
        id=record.event_id,
        department=Department(record.department),
        waste_type=WasteType(record.waste_type),
        quantity_kg=record.quantity_kg,
        procedure_category=ProcedureCategory(record.procedure_category),
        disposal_method=DisposalMethod(record.disposal_method),
        shift=Shift(record.shift),
        timestamp=ensure_utc(record.timestamp),
        risk_analysis=analysis,
        status=_status_from_record(record),
        notes=record.notes,
    )


def baseline_from_record(record: DepartmentBaselineRecord) -> DepartmentBaseline:
    return DepartmentBaseline(
        department=Department(record.department),
        expected_daily_kg=record.expected_daily_kg,
        risk_threshold=record.risk_threshold,
        infectious_ratio=record.infectious_ratio,
        sharps_ratio=record.sharps_ratio,
        cost_per_kg=record.cost_per_kg,
        updated_at=ensure_utc(record.updated_at) if record.updated_at else None,
    )


# =========================================================
# REPOSITORIES
# =========================================================


class WasteEventRepository(BaseRepository[WasteEventRecord]):
    """Append-only access to waste_events."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, WasteEventRecord, "WasteEventRepository")

    def append(self, event: WasteEvent) -> WasteEvent:
        record = self._add(event_to_record(event))
        return event_from_record(record)

    def list_all(self) -> List[WasteEvent]:
        """Every event in write order."""
        stmt = select(WasteEventRecord).order_by(WasteEventRecord.record_id)
        return [event_from_record(r) for r in self._execute_query(stmt)]

    def clear(self) -> int:
        removed = self._execute(delete(WasteEventRecord), "clear")
        self._logger.warning(f"Cleared {removed} waste events")
        return removed


class DepartmentBaselineRepository(BaseRepository[DepartmentBaselineRecord]):
    """Upsert/delete access to department_baselines."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, DepartmentBaselineRecord, "DepartmentBaselineRepository")

    def list_all(self) -> List[DepartmentBaseline]:
        stmt = select(DepartmentBaselineRecord).order_by(DepartmentBaselineRecord.department)
        return [baseline_from_record(r) for r in self._execute_query(stmt)]

    def get(self, department: Department) -> Optional[DepartmentBaseline]:
        record = self._get(department.value)
        return baseline_from_record(record) if record else None

    def upsert(self, baseline: DepartmentBaseline) -> DepartmentBaseline:
        record = self._get(baseline.department.value)
        if record is None:
            record = DepartmentBaselineRecord(department=baseline.department.value)
            self._session.add(record)

        record.expected_daily_kg = baseline.expected_daily_kg
        record.risk_threshold = baseline.risk_threshold
        record.infectious_ratio = baseline.infectious_ratio
        record.sharps_ratio = baseline.sharps_ratio
        record.cost_per_kg = baseline.cost_per_kg
        record.updated_at = baseline.updated_at

        self._add(record)
        return baseline_from_record(record)

    def delete(self, department: Department) -> bool:
        stmt = delete(DepartmentBaselineRecord).where(
            DepartmentBaselineRecord.department == department.value
        )
        return self._execute(stmt, "delete") > 0
