"""
Tests for the SQLAlchemy-backed stores.

Uses an in-memory SQLite database per test.
"""

from datetime import timedelta

import pytest

from core.exceptions import StoreUnavailableError
from storage.database import Database
from storage.models import WasteEventRecord
from storage.sql_stores import SqlBaselineStore, SqlEventStore, SqlStoreViewReader
from waste_analytics.types import (
    AcknowledgedStatus,
    Department,
    DepartmentBaseline,
)


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all_tables()
    yield db
    db.dispose()


@pytest.fixture
def sql_event_store(database):
    return SqlEventStore(database)


@pytest.fixture
def sql_baseline_store(database):
    return SqlBaselineStore(database)


# ============================================================
# EVENT STORE
# ============================================================

class TestSqlEventStore:

    @pytest.mark.asyncio
    async def test_round_trip_preserves_event(self, sql_event_store, make_event):
        event = make_event(risk_score=81, anomaly=True, notes="Spill kit used")

        await sql_event_store.append(event)
        (stored,) = await sql_event_store.read_all()

        assert stored == event
        assert stored.timestamp.tzinfo is not None
        assert stored.risk_analysis.alert_message == "Unusual volume"

    @pytest.mark.asyncio
    async def test_event_without_analysis(self, sql_event_store, make_event):
        await sql_event_store.append(make_event(risk_score=None))

        (stored,) = await sql_event_store.read_all()

        assert stored.risk_analysis is None
        assert stored.is_anomaly is False

    @pytest.mark.asyncio
    async def test_read_all_in_write_order(self, sql_event_store, make_event, now):
        later = make_event(timestamp=now)
        earlier = make_event(timestamp=now - timedelta(days=1))
        await sql_event_store.append(later)
        await sql_event_store.append(earlier)

        assert [e.id for e in await sql_event_store.read_all()] == [later.id, earlier.id]

    @pytest.mark.asyncio
    async def test_acknowledged_status_persisted(self, sql_event_store, make_event, now):
        event = make_event(anomaly=True, status=AcknowledgedStatus(by="nurse.lee", at=now))

        await sql_event_store.append(event)
        (stored,) = await sql_event_store.read_all()

        assert stored.status == AcknowledgedStatus(by="nurse.lee", at=now)

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, sql_event_store, make_event):
        await sql_event_store.append(make_event(id="evt-dup"))

        with pytest.raises(StoreUnavailableError):
            await sql_event_store.append(make_event(id="evt-dup"))

        assert len(await sql_event_store.read_all()) == 1

    @pytest.mark.asyncio
    async def test_clear_returns_count(self, sql_event_store, make_event):
        for _ in range(3):
            await sql_event_store.append(make_event())

        assert await sql_event_store.clear() == 3
        assert await sql_event_store.read_all() == ()

    def test_partial_analysis_rejected_by_schema(self, database, now):
        record = WasteEventRecord(
            event_id="evt-partial",
            department="ICU",
            waste_type="Sharps",
            procedure_category="Routine Care",
            disposal_method="Incineration",
            shift="Morning",
            quantity_kg=1.0,
            timestamp=now,
            risk_score=55,
        )

        with pytest.raises(StoreUnavailableError):
            with database.transaction_scope() as session:
                session.add(record)


# ============================================================
# BASELINE STORE
# ============================================================

class TestSqlBaselineStore:

    @pytest.mark.asyncio
    async def test_upsert_last_write_wins(self, sql_baseline_store, now):
        await sql_baseline_store.upsert(
            DepartmentBaseline(department=Department.ICU, expected_daily_kg=40)
        )
        await sql_baseline_store.upsert(
            DepartmentBaseline(department=Department.ICU, expected_daily_kg=65,
                               cost_per_kg=4.0, updated_at=now)
        )

        (stored,) = await sql_baseline_store.read_all()

        assert stored.expected_daily_kg == 65
        assert stored.cost_per_kg == 4.0
        assert stored.updated_at == now

    @pytest.mark.asyncio
    async def test_get_missing_is_none(self, sql_baseline_store):
        assert await sql_baseline_store.get(Department.PEDIATRICS) is None

    @pytest.mark.asyncio
    async def test_delete_reports_whether_removed(self, sql_baseline_store, icu_baseline):
        await sql_baseline_store.upsert(icu_baseline)

        assert await sql_baseline_store.delete(Department.ICU) is True
        assert await sql_baseline_store.delete(Department.ICU) is False
        assert await sql_baseline_store.get(Department.ICU) is None


# ============================================================
# STORE VIEW
# ============================================================

class TestSqlStoreViewReader:

    @pytest.mark.asyncio
    async def test_reads_events_and_baselines_together(
        self, database, sql_event_store, sql_baseline_store, make_event, icu_baseline
    ):
        event = make_event(risk_score=72, anomaly=True)
        await sql_event_store.append(event)
        await sql_baseline_store.upsert(icu_baseline)

        view = await SqlStoreViewReader(database).read_view()

        assert view.events == (event,)
        assert view.baselines == (icu_baseline,)

    @pytest.mark.asyncio
    async def test_empty_database(self, database):
        view = await SqlStoreViewReader(database).read_view()

        assert view.events == ()
        assert view.baselines == ()

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_store_unavailable(self):
        database = Database("sqlite:////nonexistent-directory/waste.db")
        try:
            with pytest.raises(StoreUnavailableError):
                await SqlStoreViewReader(database).read_view()
        finally:
            database.dispose()


# ============================================================
# FAILURES
# ============================================================

class TestUnavailableDatabase:

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_store_unavailable(self):
        database = Database("sqlite:////nonexistent-directory/waste.db")
        try:
            with pytest.raises(StoreUnavailableError) as exc_info:
                await SqlEventStore(database).read_all()
        finally:
            database.dispose()

        assert exc_info.value.is_transient

    def test_verify_connection(self, database):
        assert database.verify_connection() is True
