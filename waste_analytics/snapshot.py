"""
Waste Analytics - Snapshot Assembler.

============================================================
PURPOSE
============================================================
Composes the aggregator, scorer, department evaluator and
alert classifier outputs into one immutable Snapshot.

============================================================
WINDOWS
============================================================
- total_waste_today, department_performance and cost_impact
  cover now's UTC calendar day.
- active_alerts counts every active alert regardless of
  age, the same set the alert center lists.
- percent_change compares today against the previous day.
- seven_day_trend, waste_composition and the sustainability
  score cover the trailing trend window.

============================================================
FAILURE MODE
============================================================
Assembly is pure. It receives an already-completed store
read and performs no I/O, so it either returns a complete
snapshot or raises. Store failures are raised by the caller
before assembly starts.

============================================================
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from core.clock import ensure_utc

from . import aggregator
from .alerts import AlertClassifier
from .config import EngineConfig
from .departments import DepartmentEvaluator
from .scorer import Scorer
from .types import DepartmentBaseline, Snapshot, WasteEvent


logger = logging.getLogger(__name__)


class SnapshotAssembler:
    """Builds dashboard snapshots from one consistent store read."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._scorer = Scorer(self._config.defaults, self._config.cost_mode)
        self._evaluator = DepartmentEvaluator(self._config.defaults)
        self._classifier = AlertClassifier(self._config.bands)

    @property
    def classifier(self) -> AlertClassifier:
        return self._classifier

    def build_snapshot(
        self,
        events: Iterable[WasteEvent],
        baselines: Iterable[DepartmentBaseline],
        now: datetime,
    ) -> Snapshot:
        """
        Build a snapshot for the given instant.

        Args:
            events: Every stored waste event
            baselines: Every saved department baseline
            now: Caller-supplied clock reading

        Returns:
            Snapshot valid for `now` only
        """
        now = ensure_utc(now)
        events = tuple(events)
        baseline_map = {b.department: b for b in baselines}

        today = now.date()
        yesterday = today - timedelta(days=1)
        today_events = aggregator.events_on_day(events, today)
        yesterday_events = aggregator.events_on_day(events, yesterday)

        total_today = aggregator.total_quantity(today_events)
        total_yesterday = aggregator.total_quantity(yesterday_events)

        window_events = aggregator.events_in_window(
            events, now, self._config.trend_window_days
        )
        trend = aggregator.build_trend(
            events,
            now,
            window_days=self._config.trend_window_days,
            grouping=self._config.trend_grouping,
        )
        composition = aggregator.composition_totals(window_events)

        department_totals = aggregator.totals_by_department(today_events)
        performance = self._evaluator.evaluate(
            department_totals,
            baseline_map,
            self._classifier.anomaly_counts_by_department(today_events),
        )

        snapshot = Snapshot(
            total_waste_today=total_today,
            percent_change=self._scorer.percent_change_vs_previous_day(
                total_today, total_yesterday
            ),
            active_alerts=self._classifier.count_active(events),
            seven_day_trend=trend,
            waste_composition=aggregator.composition_entries(composition),
            department_performance=performance,
            sustainability_score=self._scorer.sustainability_score(composition),
            cost_impact=self._scorer.cost_impact(
                department_totals,
                self._config.defaults.cost_per_kg,
                baseline_map,
            ),
            generated_at=now,
        )

        logger.debug(
            f"Snapshot built: today={total_today:.2f}kg "
            f"alerts={snapshot.active_alerts} buckets={len(trend)}"
        )
        return snapshot


def build_snapshot(
    events: Iterable[WasteEvent],
    baselines: Iterable[DepartmentBaseline],
    now: datetime,
    config: Optional[EngineConfig] = None,
) -> Snapshot:
    return SnapshotAssembler(config).build_snapshot(events, baselines, now)
