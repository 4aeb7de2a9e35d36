"""
Waste Analytics - Scorer.

============================================================
PURPOSE
============================================================
Derives the headline dashboard figures from aggregated
totals:

1. Sustainability score (0-100)
2. Disposal cost impact
3. Day-over-day percentage change

============================================================
SUSTAINABILITY SCORE
============================================================
    rate = (Recyclable + General) / total * 100

General waste counts toward the rate together with
Recyclable. With no tracked waste the score is the fixed
default (82), not a computed zero.

============================================================
COST IMPACT
============================================================
CostMode.FLAT multiplies total kilograms by one rate for the
whole fleet; per-baseline cost_per_kg values are ignored.
CostMode.PER_DEPARTMENT applies each department's baseline
rate and the flat rate where no baseline exists.

The returned cost is unrounded. Presentation rounds it.

============================================================
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional

from .config import DerivationDefaults
from .types import CostMode, Department, DepartmentBaseline, WasteType


SUSTAINABLE_WASTE_TYPES = (WasteType.RECYCLABLE, WasteType.GENERAL)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, unlike the built-in round()."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class Scorer:
    """
    Computes sustainability, cost and change figures.

    Stateless: every method is a pure function of its arguments
    and the configured defaults.
    """

    def __init__(
        self,
        defaults: Optional[DerivationDefaults] = None,
        cost_mode: CostMode = CostMode.FLAT,
    ):
        self._defaults = defaults or DerivationDefaults()
        self._cost_mode = cost_mode

    @property
    def cost_mode(self) -> CostMode:
        return self._cost_mode

    def sustainability_score(self, composition: Mapping[WasteType, float]) -> int:
        """
        Percentage of tracked waste that is recyclable or general.

        Args:
            composition: Summed quantity per waste type

        Returns:
            Integer 0-100; the configured default when total is zero
        """
        total = sum(composition.values())
        if total == 0:
            return self._defaults.sustainability_score

        sustainable = sum(composition.get(t, 0.0) for t in SUSTAINABLE_WASTE_TYPES)
        recycling_rate = sustainable / total * 100
        return int(round_half_up(recycling_rate))

    def cost_impact(
        self,
        department_totals: Mapping[Department, float],
        default_cost_per_kg: Optional[float] = None,
        baselines: Optional[Mapping[Department, DepartmentBaseline]] = None,
    ) -> float:
        """
        Estimated disposal cost of the given department totals.

        Args:
            department_totals: Summed kilograms per department
            default_cost_per_kg: Flat rate; configured default when None
            baselines: Only consulted in PER_DEPARTMENT mode

        Returns:
            Unrounded cost in currency units
        """
        rate = default_cost_per_kg if default_cost_per_kg is not None else self._defaults.cost_per_kg

        if self._cost_mode == CostMode.FLAT or not baselines:
            return sum(department_totals.values()) * rate

        cost = 0.0
        for department, total_kg in department_totals.items():
            baseline = baselines.get(department)
            cost += total_kg * (baseline.cost_per_kg if baseline else rate)
        return cost

    @staticmethod
    def percent_change_vs_previous_day(
        today_total: float,
        yesterday_total: float,
    ) -> Optional[float]:
        """
        Signed percentage change of today's total against yesterday's.

        Returns:
            None ("no data") when yesterday's total is zero,
            otherwise (today - yesterday) / yesterday * 100
        """
        if yesterday_total == 0:
            return None
        return (today_total - yesterday_total) / yesterday_total * 100


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def sustainability_score(
    composition: Mapping[WasteType, float],
    defaults: Optional[DerivationDefaults] = None,
) -> int:
    return Scorer(defaults).sustainability_score(composition)


def cost_impact(
    department_totals: Dict[Department, float],
    default_cost_per_kg: float,
) -> float:
    """Flat-rate cost of the given department totals."""
    return Scorer().cost_impact(department_totals, default_cost_per_kg)


def percent_change_vs_previous_day(
    today_total: float,
    yesterday_total: float,
) -> Optional[float]:
    return Scorer.percent_change_vs_previous_day(today_total, yesterday_total)
