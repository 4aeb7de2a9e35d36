"""
Waste Analytics - Department Evaluator.

============================================================
PURPOSE
============================================================
Compares each department's waste load against its expected
daily load.

    performance_pct = (expected - total) / expected * 100

A department that produces LESS waste than expected is
over-performing (performance_pct > 0).

============================================================
EXPECTED LOAD
============================================================
The baseline's expected_daily_kg is used when a baseline
exists for the department. Otherwise the configured default
(50 kg) is used. Missing configuration never fails the
evaluation.

============================================================
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

from .config import DerivationDefaults
from .scorer import round_half_up
from .types import Department, DepartmentBaseline, DepartmentPerformance


logger = logging.getLogger(__name__)


class DepartmentEvaluator:
    """Builds per-department performance rows."""

    def __init__(self, defaults: Optional[DerivationDefaults] = None):
        self._defaults = defaults or DerivationDefaults()

    def expected_load(
        self,
        department: Department,
        baselines: Mapping[Department, DepartmentBaseline],
    ) -> Tuple[float, bool]:
        """
        Expected daily kilograms for a department.

        Returns:
            (expected_kg, baseline_configured)
        """
        baseline = baselines.get(department)
        if baseline is not None:
            return baseline.expected_daily_kg, True
        return self._defaults.expected_daily_kg, False

    def evaluate_one(
        self,
        department: Department,
        total_kg: float,
        baselines: Mapping[Department, DepartmentBaseline],
        alert_count: int = 0,
    ) -> DepartmentPerformance:
        expected, configured = self.expected_load(department, baselines)
        performance_pct = round_half_up((expected - total_kg) / expected * 100, 1)

        return DepartmentPerformance(
            department=department,
            total_kg=total_kg,
            expected_kg=expected,
            performance_pct=performance_pct,
            over_performing=performance_pct > 0,
            progress_ratio=min(total_kg / expected, 1.0),
            alert_count=alert_count,
            baseline_configured=configured,
        )

    def evaluate(
        self,
        department_totals: Mapping[Department, float],
        baselines: Mapping[Department, DepartmentBaseline],
        alert_counts: Optional[Mapping[Department, int]] = None,
    ) -> Tuple[DepartmentPerformance, ...]:
        """
        Evaluate every department that has a total.

        Args:
            department_totals: Summed kilograms per department
            baselines: Saved baselines keyed by department
            alert_counts: Anomaly-flagged events per department

        Returns:
            Rows ordered by total_kg descending, then department name
        """
        alert_counts = alert_counts or {}
        rows = [
            self.evaluate_one(
                department,
                total_kg,
                baselines,
                alert_count=alert_counts.get(department, 0),
            )
            for department, total_kg in department_totals.items()
        ]
        rows.sort(key=lambda r: (-r.total_kg, r.department.value))

        unconfigured = [r.department.value for r in rows if not r.baseline_configured]
        if unconfigured:
            logger.debug(f"Default expected load used for: {', '.join(unconfigured)}")

        return tuple(rows)


def evaluate_departments(
    department_totals: Dict[Department, float],
    baselines: Dict[Department, DepartmentBaseline],
    alert_counts: Optional[Dict[Department, int]] = None,
) -> Tuple[DepartmentPerformance, ...]:
    """Evaluate with the documented defaults."""
    return DepartmentEvaluator().evaluate(department_totals, baselines, alert_counts)
