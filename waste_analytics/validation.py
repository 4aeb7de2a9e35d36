"""
Waste Analytics - Input Validation.

============================================================
PURPOSE
============================================================
Rejects malformed waste entries, baselines and risk analyses
BEFORE anything is written or derived.

Every failure raises InvalidInputError naming the offending
field.

============================================================
RULES
============================================================
WasteEntry:
- quantity_kg finite and >= 0
- every category a member of its fixed set

DepartmentBaseline:
- expected_daily_kg > 0, cost_per_kg > 0
- risk_threshold, infectious_ratio, sharps_ratio in 0-100
  (the ratios need not sum to 100)

RiskAnalysis:
- risk_score a finite integer in 0-100
- assessment and recommended_action present
- anomaly_detected a boolean

============================================================
"""

import math
from typing import Any, Mapping, Optional, Type, TypeVar

from core.constants import MAX_RISK_SCORE, MIN_RISK_SCORE
from core.exceptions import InvalidInputError

from .types import (
    Department,
    DepartmentBaseline,
    DisposalMethod,
    ProcedureCategory,
    RiskAnalysis,
    Shift,
    WasteEntry,
    WasteType,
)


E = TypeVar("E")


def parse_enum(enum_class: Type[E], value: Any, field: str) -> E:
    """Coerce a raw value into a member of enum_class."""
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(m.value for m in enum_class)
        raise InvalidInputError(
            f"Invalid {field}: {value!r}. Valid values: {valid}",
            field=field,
            value=value,
        )


def _require_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field} must be a number", field=field, value=value)
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(f"{field} must be finite", field=field, value=value)
    return number


def _require_positive(value: Any, field: str) -> float:
    number = _require_number(value, field)
    if number <= 0:
        raise InvalidInputError(f"{field} must be > 0", field=field, value=value)
    return number


def _require_percentage(value: Any, field: str) -> float:
    number = _require_number(value, field)
    if not 0 <= number <= 100:
        raise InvalidInputError(f"{field} must be 0-100", field=field, value=value)
    return number


# ============================================================
# WASTE ENTRIES
# ============================================================


def validate_entry(entry: WasteEntry) -> WasteEntry:
    """
    Validate a waste entry and return it with categories coerced.

    Raises:
        InvalidInputError: Negative or non-finite quantity, unknown category
    """
    quantity = _require_number(entry.quantity_kg, "quantity_kg")
    if quantity < 0:
        raise InvalidInputError(
            "quantity_kg must be >= 0", field="quantity_kg", value=entry.quantity_kg
        )

    notes = entry.notes
    if notes is not None and not isinstance(notes, str):
        raise InvalidInputError("notes must be text", field="notes", value=notes)

    return WasteEntry(
        department=parse_enum(Department, entry.department, "department"),
        waste_type=parse_enum(WasteType, entry.waste_type, "waste_type"),
        quantity_kg=quantity,
        procedure_category=parse_enum(
            ProcedureCategory, entry.procedure_category, "procedure_category"
        ),
        disposal_method=parse_enum(DisposalMethod, entry.disposal_method, "disposal_method"),
        shift=parse_enum(Shift, entry.shift, "shift"),
        notes=notes or None,
    )


# ============================================================
# BASELINES
# ============================================================


def validate_baseline(baseline: DepartmentBaseline) -> DepartmentBaseline:
    """
    Validate a department baseline.

    Raises:
        InvalidInputError: Non-positive load or cost, out-of-range percentage
    """
    return DepartmentBaseline(
        department=parse_enum(Department, baseline.department, "department"),
        expected_daily_kg=_require_positive(baseline.expected_daily_kg, "expected_daily_kg"),
        risk_threshold=_require_percentage(baseline.risk_threshold, "risk_threshold"),
        infectious_ratio=_require_percentage(baseline.infectious_ratio, "infectious_ratio"),
        sharps_ratio=_require_percentage(baseline.sharps_ratio, "sharps_ratio"),
        cost_per_kg=_require_positive(baseline.cost_per_kg, "cost_per_kg"),
        updated_at=baseline.updated_at,
    )


# ============================================================
# RISK ANALYSIS
# ============================================================


def risk_analysis_from_dict(data: Optional[Mapping[str, Any]]) -> RiskAnalysis:
    """
    Build a RiskAnalysis from an analyzer payload.

    A partial analysis is rejected as a whole.
    """
    if not isinstance(data, Mapping):
        raise InvalidInputError("risk analysis must be an object", field="riskAnalysis")

    score = data.get("riskScore", data.get("risk_score"))
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InvalidInputError("riskScore must be an integer", field="riskScore", value=score)
    if not math.isfinite(score):
        raise InvalidInputError("riskScore must be finite", field="riskScore", value=score)
    if float(score) != int(score) or not MIN_RISK_SCORE <= score <= MAX_RISK_SCORE:
        raise InvalidInputError("riskScore must be an integer 0-100", field="riskScore", value=score)

    assessment = data.get("assessment")
    action = data.get("recommendedAction", data.get("recommended_action"))
    anomaly = data.get("anomalyDetected", data.get("anomaly_detected"))
    alert_message = data.get("alertMessage", data.get("alert_message"))

    if not isinstance(assessment, str) or not isinstance(action, str):
        raise InvalidInputError(
            "assessment and recommendedAction are required", field="riskAnalysis"
        )
    if not isinstance(anomaly, bool):
        raise InvalidInputError(
            "anomalyDetected must be a boolean", field="anomalyDetected", value=anomaly
        )

    return RiskAnalysis(
        risk_score=int(score),
        assessment=assessment,
        recommended_action=action,
        anomaly_detected=anomaly,
        alert_message=alert_message or None,
    )
