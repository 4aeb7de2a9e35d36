"""
Waste Domain ORM Models.

============================================================
PURPOSE
============================================================
Persisted layout of waste events and department baselines.

============================================================
DATA LIFECYCLE ROLE
============================================================
WasteEventRecord
- Mutability: IMMUTABLE (append-only; cleared only by reset)
- Source: LogWaste
- Consumers: dashboard snapshot, alert center

DepartmentBaselineRecord
- Mutability: MUTABLE (last write wins per department)
- Source: SaveBaseline / DeleteBaseline

============================================================
RISK ANALYSIS COLUMNS
============================================================
risk_score, assessment, recommended_action and
anomaly_detected are NULL together or set together. The
check constraint rejects a partial analysis.

============================================================
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base


class WasteEventRecord(Base):
    """One logged disposal record."""

    __tablename__ = "waste_events"

    # Write order
    record_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    event_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        comment="UUID assigned at write time"
    )

    # Categories
    department: Mapped[str] = mapped_column(String(50), nullable=False)
    waste_type: Mapped[str] = mapped_column(String(30), nullable=False)
    procedure_category: Mapped[str] = mapped_column(String(50), nullable=False)
    disposal_method: Mapped[str] = mapped_column(String(50), nullable=False)
    shift: Mapped[str] = mapped_column(String(20), nullable=False)

    quantity_kg: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="UTC write time"
    )

    # Risk analysis (all or nothing)
    risk_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    assessment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recommended_action: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    alert_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    anomaly_detected: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Alert lifecycle
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        comment="active, acknowledged, resolved"
    )
    status_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("quantity_kg >= 0", name="ck_waste_events_quantity"),
        CheckConstraint(
            "(risk_score IS NULL AND assessment IS NULL "
            "AND recommended_action IS NULL AND anomaly_detected IS NULL) OR "
            "(risk_score IS NOT NULL AND assessment IS NOT NULL "
            "AND recommended_action IS NOT NULL AND anomaly_detected IS NOT NULL)",
            name="ck_waste_events_risk_analysis",
        ),
        Index("ix_waste_events_timestamp", "timestamp"),
        Index("ix_waste_events_department", "department"),
    )

    def __repr__(self) -> str:
        return (
            f"<WasteEventRecord {self.event_id} {self.department} "
            f"{self.waste_type} {self.quantity_kg}kg>"
        )


class DepartmentBaselineRecord(Base):
    """Expected load and thresholds for one department."""

    __tablename__ = "department_baselines"

    department: Mapped[str] = mapped_column(String(50), primary_key=True)

    expected_daily_kg: Mapped[float] = mapped_column(Float, nullable=False)
    risk_threshold: Mapped[float] = mapped_column(Float, nullable=False)
    infectious_ratio: Mapped[float] = mapped_column(Float, nullable=False)
    sharps_ratio: Mapped[float] = mapped_column(Float, nullable=False)
    cost_per_kg: Mapped[float] = mapped_column(Float, nullable=False)

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("expected_daily_kg > 0", name="ck_baselines_expected"),
        CheckConstraint("cost_per_kg > 0", name="ck_baselines_cost"),
    )

    def __repr__(self) -> str:
        return f"<DepartmentBaselineRecord {self.department} {self.expected_daily_kg}kg>"
