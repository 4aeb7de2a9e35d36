"""
Waste Analytics - Alert Classifier.

============================================================
PURPOSE
============================================================
Buckets waste events into risk bands and filters them by
alert lifecycle status.

============================================================
BANDS
============================================================
    HIGH:   risk_score >= 70   (red)
    MEDIUM: 50 <= score < 70   (orange)
    LOW:    score < 50         (yellow)

Lower bounds are inclusive. The band is a pure function of
the risk score and is independent of lifecycle status.

============================================================
ALERT DEFINITION
============================================================
An event is an alert when its risk analysis has
anomaly_detected set. This single rule drives the alert
center, the snapshot's active-alert count and the
per-department alert counts.

    active        -> alert with ActiveStatus
    acknowledged  -> alert with AcknowledgedStatus
    resolved      -> alert with ResolvedStatus
    all           -> every alert

No transition out of ActiveStatus exists yet, so the
acknowledged and resolved results are always empty.

============================================================
"""

from typing import Dict, Iterable, List, Optional, Tuple, Union

from core.clock import ensure_utc

from .config import BandThresholds
from .types import (
    AlertState,
    AlertStatusCounts,
    AlertStatusFilter,
    ClassifiedAlert,
    Department,
    RiskBand,
    WasteEvent,
)


class AlertClassifier:
    """Risk banding and lifecycle filtering of waste events."""

    def __init__(self, thresholds: Optional[BandThresholds] = None):
        self._thresholds = thresholds or BandThresholds()

    @property
    def thresholds(self) -> BandThresholds:
        return self._thresholds

    def classify(self, risk_score: int) -> RiskBand:
        if risk_score >= self._thresholds.high:
            return RiskBand.HIGH
        if risk_score >= self._thresholds.medium:
            return RiskBand.MEDIUM
        return RiskBand.LOW

    def classify_event(self, event: WasteEvent) -> ClassifiedAlert:
        """Attach a band; an event without analysis is LOW."""
        score = event.risk_score
        band = self.classify(score) if score is not None else RiskBand.LOW
        return ClassifiedAlert(event=event, band=band)

    # ========================================================
    # FILTERING
    # ========================================================

    def filter(
        self,
        events: Iterable[WasteEvent],
        status: Union[str, AlertStatusFilter] = AlertStatusFilter.ACTIVE,
    ) -> List[WasteEvent]:
        """
        Alerts matching a lifecycle status, newest first.

        Raises:
            InvalidInputError: Unknown status value
        """
        selector = AlertStatusFilter.parse(status)
        wanted = selector.state

        matching = [
            e for e in events
            if e.is_anomaly and (wanted is None or e.alert_state == wanted)
        ]
        matching.sort(key=lambda e: ensure_utc(e.timestamp), reverse=True)
        return matching

    def filter_classified(
        self,
        events: Iterable[WasteEvent],
        status: Union[str, AlertStatusFilter] = AlertStatusFilter.ACTIVE,
    ) -> Tuple[ClassifiedAlert, ...]:
        return tuple(self.classify_event(e) for e in self.filter(events, status))

    # ========================================================
    # COUNTS
    # ========================================================

    def count_active(self, events: Iterable[WasteEvent]) -> int:
        return sum(
            1 for e in events
            if e.is_anomaly and e.alert_state == AlertState.ACTIVE
        )

    def status_counts(self, events: Iterable[WasteEvent]) -> AlertStatusCounts:
        counts = {state: 0 for state in AlertState}
        for event in events:
            if event.is_anomaly:
                counts[event.alert_state] += 1
        return AlertStatusCounts(
            active=counts[AlertState.ACTIVE],
            acknowledged=counts[AlertState.ACKNOWLEDGED],
            resolved=counts[AlertState.RESOLVED],
        )

    def anomaly_counts_by_department(
        self,
        events: Iterable[WasteEvent],
    ) -> Dict[Department, int]:
        counts: Dict[Department, int] = {}
        for event in events:
            if event.is_anomaly:
                counts[event.department] = counts.get(event.department, 0) + 1
        return counts


def classify(risk_score: int, thresholds: Optional[BandThresholds] = None) -> RiskBand:
    """Band a risk score with the default 70 / 50 thresholds."""
    return AlertClassifier(thresholds).classify(risk_score)
