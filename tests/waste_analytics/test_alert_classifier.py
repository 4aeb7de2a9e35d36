"""
Tests for the Alert Classifier.

============================================================
PURPOSE
============================================================
- Bands are exclusive and exhaustive over 0..100
- Boundaries 50 and 70 belong to the higher band
- Lifecycle filtering (acknowledged/resolved always empty
  for newly logged events)

============================================================
"""

from datetime import timedelta

import pytest

from core.exceptions import InvalidInputError
from waste_analytics.alerts import AlertClassifier, classify
from waste_analytics.config import BandThresholds
from waste_analytics.types import (
    AcknowledgedStatus,
    AlertStatusFilter,
    Department,
    ResolvedStatus,
    RiskBand,
)


class TestClassify:
    """Tests for risk banding."""

    def test_bands_exhaustive_and_exclusive(self):
        for score in range(0, 101):
            band = classify(score)
            expected = (
                RiskBand.HIGH if score >= 70
                else RiskBand.MEDIUM if score >= 50
                else RiskBand.LOW
            )
            assert band == expected

    @pytest.mark.parametrize("score,band", [
        (0, RiskBand.LOW),
        (49, RiskBand.LOW),
        (50, RiskBand.MEDIUM),
        (69, RiskBand.MEDIUM),
        (70, RiskBand.HIGH),
        (100, RiskBand.HIGH),
    ])
    def test_boundaries(self, score, band):
        assert classify(score) == band

    def test_band_colors(self):
        assert RiskBand.HIGH.color == "red"
        assert RiskBand.MEDIUM.color == "orange"
        assert RiskBand.LOW.color == "yellow"

    def test_custom_thresholds(self):
        classifier = AlertClassifier(BandThresholds(high=90, medium=60))
        assert classifier.classify(70) == RiskBand.MEDIUM
        assert classifier.classify(90) == RiskBand.HIGH

    def test_invalid_thresholds_rejected(self):
        with pytest.raises(ValueError):
            BandThresholds(high=50, medium=70)

    def test_event_without_analysis_is_low(self, make_event):
        alert = AlertClassifier().classify_event(make_event(risk_score=None))
        assert alert.band == RiskBand.LOW


class TestFilter:
    """Tests for lifecycle filtering."""

    @pytest.fixture
    def events(self, make_event, now):
        return [
            make_event(risk_score=85, anomaly=True, timestamp=now - timedelta(hours=3)),
            make_event(risk_score=55, anomaly=True, timestamp=now - timedelta(hours=1)),
            make_event(risk_score=90, anomaly=False),
            make_event(risk_score=None),
        ]

    def test_active_returns_anomalies_newest_first(self, events):
        result = AlertClassifier().filter(events, "active")

        assert [e.risk_score for e in result] == [55, 85]

    def test_band_independent_of_anomaly_flag(self, events):
        # score 90 without anomaly is not an alert
        result = AlertClassifier().filter(events, AlertStatusFilter.ALL)
        assert 90 not in [e.risk_score for e in result]

    @pytest.mark.parametrize("status", ["acknowledged", "resolved"])
    def test_unreached_states_are_empty(self, events, status):
        assert AlertClassifier().filter(events, status) == []

    def test_all_returns_every_alert(self, events):
        assert len(AlertClassifier().filter(events, "all")) == 2

    def test_status_is_case_insensitive(self, events):
        assert len(AlertClassifier().filter(events, "ACTIVE")) == 2

    def test_invalid_status_rejected(self, events):
        with pytest.raises(InvalidInputError):
            AlertClassifier().filter(events, "pending")

    def test_lifecycle_variants_filter_by_state(self, make_event, now):
        acked = make_event(
            risk_score=75, anomaly=True,
            status=AcknowledgedStatus(by="nurse.lee", at=now),
        )
        resolved = make_event(
            risk_score=75, anomaly=True,
            status=ResolvedStatus(by="ops", at=now),
        )
        classifier = AlertClassifier()

        assert classifier.filter([acked, resolved], "active") == []
        assert classifier.filter([acked, resolved], "acknowledged") == [acked]
        assert classifier.filter([acked, resolved], "resolved") == [resolved]

    def test_filter_classified_attaches_band(self, events):
        alerts = AlertClassifier().filter_classified(events, "active")
        assert [a.band for a in alerts] == [RiskBand.MEDIUM, RiskBand.HIGH]


class TestCounts:
    """Tests for alert counts."""

    def test_status_counts(self, make_event):
        events = [
            make_event(anomaly=True),
            make_event(anomaly=True),
            make_event(anomaly=False),
        ]

        counts = AlertClassifier().status_counts(events)

        assert counts.active == 2
        assert counts.acknowledged == 0
        assert counts.resolved == 0
        assert counts.total == 2

    def test_anomaly_counts_by_department(self, make_event):
        events = [
            make_event(department=Department.ICU, anomaly=True),
            make_event(department=Department.ICU, anomaly=True),
            make_event(department=Department.SURGERY, anomaly=False),
        ]

        assert AlertClassifier().anomaly_counts_by_department(events) == {Department.ICU: 2}
