"""
Tests for the Scorer.
"""

import pytest

from waste_analytics.config import DerivationDefaults
from waste_analytics.scorer import (
    Scorer,
    cost_impact,
    percent_change_vs_previous_day,
    round_half_up,
    sustainability_score,
)
from waste_analytics.types import CostMode, Department, DepartmentBaseline, WasteType


class TestSustainabilityScore:
    """Tests for sustainability_score."""

    def test_recyclable_and_general_count_as_sustainable(self):
        composition = {
            WasteType.RECYCLABLE: 30,
            WasteType.GENERAL: 20,
            WasteType.SHARPS: 50,
        }
        assert sustainability_score(composition) == 50

    @pytest.mark.parametrize("composition", [
        {},
        {WasteType.SHARPS: 0},
        {WasteType.RECYCLABLE: 0, WasteType.GENERAL: 0, WasteType.CHEMICAL: 0},
    ])
    def test_default_when_total_is_zero(self, composition):
        assert sustainability_score(composition) == 82

    def test_configured_default(self):
        defaults = DerivationDefaults(sustainability_score=60)
        assert Scorer(defaults).sustainability_score({}) == 60

    def test_rounds_half_up(self):
        # 1 / 8 = 12.5%
        composition = {WasteType.RECYCLABLE: 1, WasteType.SHARPS: 7}
        assert sustainability_score(composition) == 13

    def test_all_hazardous_scores_zero(self):
        assert sustainability_score({WasteType.INFECTIOUS: 12.0}) == 0

    def test_all_sustainable_scores_hundred(self):
        assert sustainability_score({WasteType.GENERAL: 3.0}) == 100


class TestCostImpact:
    """Tests for cost_impact."""

    def test_flat_rate(self):
        totals = {Department.ICU: 40.0, Department.SURGERY: 60.0}
        assert cost_impact(totals, 2.5) == 250.0

    def test_linear_in_quantity(self):
        totals = {Department.ICU: 13.3, Department.ONCOLOGY: 7.1}
        doubled = {k: v * 2 for k, v in totals.items()}
        assert cost_impact(doubled, 2.5) == pytest.approx(2 * cost_impact(totals, 2.5))

    def test_unrounded(self):
        assert cost_impact({Department.ICU: 1.1}, 2.5) == pytest.approx(2.75)

    def test_flat_mode_ignores_baseline_rates(self):
        baselines = {
            Department.ICU: DepartmentBaseline(
                department=Department.ICU, expected_daily_kg=50, cost_per_kg=10.0
            ),
        }
        scorer = Scorer(cost_mode=CostMode.FLAT)
        assert scorer.cost_impact({Department.ICU: 10.0}, baselines=baselines) == 25.0

    def test_per_department_mode_uses_baseline_rates(self):
        baselines = {
            Department.ICU: DepartmentBaseline(
                department=Department.ICU, expected_daily_kg=50, cost_per_kg=10.0
            ),
        }
        scorer = Scorer(cost_mode=CostMode.PER_DEPARTMENT)
        totals = {Department.ICU: 10.0, Department.SURGERY: 4.0}

        assert scorer.cost_impact(totals, baselines=baselines) == 100.0 + 10.0

    def test_empty_totals(self):
        assert cost_impact({}, 2.5) == 0


class TestPercentChange:
    """Tests for percent_change_vs_previous_day."""

    def test_no_data_when_yesterday_zero(self):
        assert percent_change_vs_previous_day(10.0, 0) is None
        assert percent_change_vs_previous_day(0, 0) is None

    def test_increase_is_positive(self):
        assert percent_change_vs_previous_day(150.0, 100.0) == 50.0

    def test_decrease_is_negative(self):
        assert percent_change_vs_previous_day(25.0, 100.0) == -75.0


class TestRoundHalfUp:

    def test_rounds_away_from_zero_on_half(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-40.05, 1) == -40.1
        assert round_half_up(12.25, 1) == 12.3
