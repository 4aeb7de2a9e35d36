"""
Waste Analytics - Aggregator.

============================================================
PURPOSE
============================================================
Groups waste events into the trend series and composition
totals consumed by the scorer and the snapshot assembler.

============================================================
TREND BUCKETING
============================================================
With the default WEEKDAY_LABEL grouping, buckets are keyed
by the short weekday name ("Mon".."Sun"). Events from the
same weekday of different weeks fall into the SAME bucket
and their quantities are summed. With a 7-day window this
happens for the weekday that opens and closes the window.

CALENDAR_DATE grouping keys buckets by date instead and
keeps the weekday name only as the display label.

Buckets come out in first-seen order of the scanned events,
not in calendar order.

============================================================
"""

from datetime import date, datetime, timedelta
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from core.clock import ensure_utc
from core.constants import DEFAULT_TREND_WINDOW_DAYS

from .types import (
    CompositionEntry,
    Department,
    TrendBucket,
    TrendGrouping,
    WasteEvent,
    WasteType,
)


WEEKDAY_LABELS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def weekday_label(timestamp: datetime) -> str:
    """Short English weekday name, independent of process locale."""
    return WEEKDAY_LABELS[ensure_utc(timestamp).weekday()]


# ============================================================
# WINDOWING
# ============================================================


def events_in_window(
    events: Iterable[WasteEvent],
    now: datetime,
    window_days: int = DEFAULT_TREND_WINDOW_DAYS,
) -> List[WasteEvent]:
    """Events with now - window_days <= timestamp <= now, input order kept."""
    now = ensure_utc(now)
    cutoff = now - timedelta(days=window_days)
    return [e for e in events if cutoff <= ensure_utc(e.timestamp) <= now]


def events_on_day(events: Iterable[WasteEvent], day: date) -> List[WasteEvent]:
    """Events whose UTC timestamp falls on the given calendar day."""
    return [e for e in events if ensure_utc(e.timestamp).date() == day]


# ============================================================
# TREND SERIES
# ============================================================


def build_trend(
    events: Iterable[WasteEvent],
    now: datetime,
    window_days: int = DEFAULT_TREND_WINDOW_DAYS,
    grouping: TrendGrouping = TrendGrouping.WEEKDAY_LABEL,
) -> Tuple[TrendBucket, ...]:
    """
    Build the trend series for the trailing window.

    Args:
        events: Waste events in store order
        now: Caller-supplied clock reading
        window_days: Length of the trailing window in days
        grouping: Bucket key policy

    Returns:
        Buckets in first-seen order; empty when nothing is in the window
    """
    quantities: Dict[Hashable, Dict[WasteType, float]] = {}
    labels: Dict[Hashable, Tuple[str, Optional[date]]] = {}

    for event in events_in_window(events, now, window_days):
        timestamp = ensure_utc(event.timestamp)
        label = weekday_label(timestamp)

        if grouping == TrendGrouping.CALENDAR_DATE:
            key: Hashable = timestamp.date()
            labels.setdefault(key, (label, timestamp.date()))
        else:
            key = label
            labels.setdefault(key, (label, None))

        bucket = quantities.setdefault(key, {})
        bucket[event.waste_type] = bucket.get(event.waste_type, 0.0) + event.quantity_kg

    return tuple(
        TrendBucket(
            day_label=labels[key][0],
            quantity_by_waste_type=bucket,
            day=labels[key][1],
        )
        for key, bucket in quantities.items()
    )


# ============================================================
# TOTALS
# ============================================================


def composition_totals(events: Iterable[WasteEvent]) -> Dict[WasteType, float]:
    """Summed quantity per waste type, in first-seen order."""
    totals: Dict[WasteType, float] = {}
    for event in events:
        totals[event.waste_type] = totals.get(event.waste_type, 0.0) + event.quantity_kg
    return totals


def composition_entries(totals: Dict[WasteType, float]) -> Tuple[CompositionEntry, ...]:
    """Composition totals as a sequence of {type, quantity}."""
    return tuple(
        CompositionEntry(waste_type=waste_type, quantity=quantity)
        for waste_type, quantity in totals.items()
    )


def totals_by_department(events: Iterable[WasteEvent]) -> Dict[Department, float]:
    """Summed quantity per department, in first-seen order."""
    totals: Dict[Department, float] = {}
    for event in events:
        totals[event.department] = totals.get(event.department, 0.0) + event.quantity_kg
    return totals


def total_quantity(events: Iterable[WasteEvent]) -> float:
    return sum(e.quantity_kg for e in events)
