"""
Tests for the waste aggregator.

============================================================
PURPOSE
============================================================
- Trailing-window filtering
- Weekday-label bucketing (same weekday of different weeks
  collapses) and the calendar-date alternative
- First-seen bucket order, no zero-filling
- Composition and department totals

============================================================
"""

from datetime import date, datetime, timedelta

import pytest

from waste_analytics.aggregator import (
    build_trend,
    composition_entries,
    composition_totals,
    events_in_window,
    events_on_day,
    total_quantity,
    totals_by_department,
    weekday_label,
)
from waste_analytics.types import Department, TrendGrouping, WasteType


# ============================================================
# WINDOW TESTS
# ============================================================

class TestEventsInWindow:
    """Tests for the trailing window filter."""

    def test_cutoff_is_inclusive(self, make_event, now):
        on_cutoff = make_event(timestamp=now - timedelta(days=7))
        before_cutoff = make_event(timestamp=now - timedelta(days=7, seconds=1))

        result = events_in_window([on_cutoff, before_cutoff], now)

        assert result == [on_cutoff]

    def test_future_events_excluded(self, make_event, now):
        future = make_event(timestamp=now + timedelta(minutes=1))
        assert events_in_window([future], now) == []

    def test_naive_timestamps_treated_as_utc(self, make_event, now):
        naive = make_event(timestamp=datetime(2026, 10, 14, 9, 0))
        assert events_in_window([naive], now) == [naive]

    def test_events_on_day(self, make_event, now):
        today = make_event(timestamp=now.replace(hour=0, minute=0))
        yesterday = make_event(timestamp=now - timedelta(days=1))

        assert events_on_day([today, yesterday], now.date()) == [today]


# ============================================================
# TREND TESTS
# ============================================================

class TestBuildTrend:
    """Tests for build_trend."""

    def test_empty_when_nothing_in_window(self, make_event, now):
        old = make_event(timestamp=now - timedelta(days=30))
        assert build_trend([old], now) == ()
        assert build_trend([], now) == ()

    def test_weekday_label(self, now):
        assert weekday_label(now) == "Wed"
        assert weekday_label(now - timedelta(days=2)) == "Mon"

    def test_sums_per_waste_type_within_bucket(self, make_event, now):
        events = [
            make_event(waste_type=WasteType.SHARPS, quantity_kg=2.0),
            make_event(waste_type=WasteType.SHARPS, quantity_kg=3.0),
            make_event(waste_type=WasteType.GENERAL, quantity_kg=4.0),
        ]

        (bucket,) = build_trend(events, now)

        assert bucket.day_label == "Wed"
        assert bucket.quantity_by_waste_type == {
            WasteType.SHARPS: 5.0,
            WasteType.GENERAL: 4.0,
        }

    def test_absent_types_not_zero_filled(self, make_event, now):
        (bucket,) = build_trend([make_event(waste_type=WasteType.CHEMICAL)], now)

        assert WasteType.RECYCLABLE not in bucket.quantity_by_waste_type
        assert bucket.to_dict() == {"day": "Wed", "Chemical": 10.0}

    def test_same_weekday_of_different_weeks_collapses(self, make_event, now):
        events = [
            make_event(quantity_kg=5.0, timestamp=now - timedelta(days=7)),
            make_event(quantity_kg=6.0, timestamp=now),
        ]

        trend = build_trend(events, now)

        assert len(trend) == 1
        assert trend[0].day_label == "Wed"
        assert trend[0].total_kg == 11.0

    def test_buckets_in_first_seen_order(self, make_event, now):
        events = [
            make_event(timestamp=now - timedelta(days=1)),  # Tue
            make_event(timestamp=now - timedelta(days=3)),  # Sun
            make_event(timestamp=now - timedelta(days=1, hours=2)),  # Tue
            make_event(timestamp=now - timedelta(days=2)),  # Mon
        ]

        labels = [b.day_label for b in build_trend(events, now)]

        assert labels == ["Tue", "Sun", "Mon"]

    def test_calendar_date_grouping_keeps_weeks_apart(self, make_event, now):
        events = [
            make_event(quantity_kg=5.0, timestamp=now - timedelta(days=7)),
            make_event(quantity_kg=6.0, timestamp=now),
        ]

        trend = build_trend(events, now, grouping=TrendGrouping.CALENDAR_DATE)

        assert [b.day_label for b in trend] == ["Wed", "Wed"]
        assert [b.day for b in trend] == [date(2026, 10, 7), date(2026, 10, 14)]
        assert [b.total_kg for b in trend] == [5.0, 6.0]
        assert trend[1].to_dict()["date"] == "2026-10-14"

    def test_custom_window(self, make_event, now):
        events = [
            make_event(timestamp=now - timedelta(days=1)),
            make_event(timestamp=now - timedelta(days=3)),
        ]
        assert len(build_trend(events, now, window_days=2)) == 1

    def test_idempotent(self, make_event, now):
        events = [
            make_event(waste_type=t, quantity_kg=q, timestamp=now - timedelta(days=d))
            for t, q, d in [
                (WasteType.SHARPS, 1.5, 0),
                (WasteType.GENERAL, 2.5, 1),
                (WasteType.RECYCLABLE, 3.5, 4),
                (WasteType.SHARPS, 4.5, 4),
            ]
        ]

        first = build_trend(events, now)
        second = build_trend(events, now)

        assert first == second
        assert [b.to_dict() for b in first] == [b.to_dict() for b in second]

    def test_bucket_mapping_is_read_only(self, make_event, now):
        (bucket,) = build_trend([make_event()], now)
        with pytest.raises(TypeError):
            bucket.quantity_by_waste_type[WasteType.GENERAL] = 1.0


# ============================================================
# TOTALS TESTS
# ============================================================

class TestTotals:
    """Tests for composition and department totals."""

    def test_composition_totals(self, make_event):
        events = [
            make_event(waste_type=WasteType.RECYCLABLE, quantity_kg=30),
            make_event(waste_type=WasteType.GENERAL, quantity_kg=20),
            make_event(waste_type=WasteType.RECYCLABLE, quantity_kg=5),
        ]

        totals = composition_totals(events)

        assert totals == {WasteType.RECYCLABLE: 35, WasteType.GENERAL: 20}
        assert list(totals) == [WasteType.RECYCLABLE, WasteType.GENERAL]

    def test_composition_entries(self, make_event):
        entries = composition_entries({WasteType.SHARPS: 4.0})

        assert len(entries) == 1
        assert entries[0].waste_type == WasteType.SHARPS
        assert entries[0].quantity == 4.0

    def test_totals_by_department(self, make_event):
        events = [
            make_event(department=Department.ICU, quantity_kg=10),
            make_event(department=Department.SURGERY, quantity_kg=7),
            make_event(department=Department.ICU, quantity_kg=5),
        ]

        assert totals_by_department(events) == {
            Department.ICU: 15,
            Department.SURGERY: 7,
        }
        assert total_quantity(events) == 22

    def test_empty_totals(self):
        assert composition_totals([]) == {}
        assert total_quantity([]) == 0
