"""
Tests for the dashboard REST API.

The app is built around an engine over the in-memory stores
with a fixed-answer risk analyzer.
"""

import pytest
from fastapi.testclient import TestClient

from core.exceptions import StoreUnavailableError
from dashboard.api import create_app
from waste_analytics.config import EngineConfig
from waste_analytics.engine import WasteIntelligenceEngine
from waste_analytics.types import RiskAnalysis


ENTRY_BODY = {
    "department": "Surgery",
    "wasteType": "Sharps",
    "quantity": 12.5,
    "procedureCategory": "Major Surgery",
    "disposalMethod": "Autoclave",
    "shift": "Afternoon",
    "notes": "Post-op tray",
}


@pytest.fixture
def analyzed_engine(event_store, baseline_store, risk_analyzer, mock_clock):
    return WasteIntelligenceEngine(
        event_store=event_store,
        baseline_store=baseline_store,
        analyzer=risk_analyzer,
        config=EngineConfig(store_timeout_seconds=0.5, analyzer_timeout_seconds=0.5),
        clock=mock_clock,
    )


@pytest.fixture
def client(analyzed_engine):
    with TestClient(create_app(analyzed_engine)) as test_client:
        yield test_client


# ============================================================
# WASTE ENTRIES
# ============================================================

class TestWasteRoutes:

    def test_log_waste_returns_entry_and_analysis(self, client):
        response = client.post("/api/waste", json=ENTRY_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["entry"]["wasteType"] == "Sharps"
        assert body["data"]["entry"]["procedureCategory"] == "Major Surgery"
        assert body["data"]["entry"]["aiAnalysis"]["riskScore"] == 40
        assert body["data"]["aiAnalysis"]["anomalyDetected"] is False

    def test_log_waste_without_analyzer_has_no_analysis(self, engine, event_store):
        with TestClient(create_app(engine)) as unanalyzed:
            response = unanalyzed.post("/api/waste", json=ENTRY_BODY)
            alerts = unanalyzed.get("/api/waste/alerts").json()

        assert response.status_code == 201
        assert response.json()["data"]["aiAnalysis"] is None
        assert response.json()["data"]["entry"]["aiAnalysis"] is None
        assert alerts["count"] == 0
        assert event_store.calls == 2

    def test_negative_quantity_is_422(self, client, event_store):
        response = client.post("/api/waste", json={**ENTRY_BODY, "quantity": -2})

        assert response.status_code == 422
        assert event_store.calls == 0

    def test_unknown_department_is_422(self, client):
        response = client.post("/api/waste", json={**ENTRY_BODY, "department": "Cafeteria"})
        assert response.status_code == 422

    def test_list_waste_filters(self, client):
        client.post("/api/waste", json=ENTRY_BODY)
        client.post("/api/waste", json={**ENTRY_BODY, "department": "ICU"})

        response = client.get("/api/waste", params={"department": "ICU"})

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["data"][0]["department"] == "ICU"

    def test_stats_envelope(self, client):
        client.post("/api/waste", json=ENTRY_BODY)

        response = client.get("/api/waste/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalWasteToday"] == 12.5
        assert data["percentChange"] is None
        assert data["wasteComposition"] == [{"type": "Sharps", "quantity": 12.5}]
        assert data["departmentPerformance"][0]["baselineConfigured"] is False
        assert data["costImpact"] == 31.25

    def test_store_failure_is_503(self, client, event_store):
        event_store.fail_with(StoreUnavailableError("event store down", store="event"))

        response = client.get("/api/waste/stats")

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "StoreUnavailableError"
        assert response.json()["detail"]["transient"] is True


# ============================================================
# ALERTS
# ============================================================

class TestAlertRoutes:

    def test_alerts_carry_band_and_colour(self, client, risk_analyzer):
        risk_analyzer.analysis = RiskAnalysis(
            risk_score=85,
            assessment="Well above expected volume",
            recommended_action="Audit sharps segregation",
            anomaly_detected=True,
            alert_message="Sharps spike in Surgery",
        )
        client.post("/api/waste", json=ENTRY_BODY)

        response = client.get("/api/waste/alerts", params={"status": "Active"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "active"
        assert body["count"] == 1
        assert body["data"][0]["band"] == "high"
        assert body["data"][0]["severityColor"] == "red"

    def test_resolved_is_empty(self, client):
        response = client.get("/api/waste/alerts", params={"status": "resolved"})
        assert response.json()["data"] == []

    def test_unknown_status_is_400(self, client):
        response = client.get("/api/waste/alerts", params={"status": "open"})
        assert response.status_code == 400


# ============================================================
# RESET
# ============================================================

class TestResetRoute:

    def test_reset_without_confirm_is_400(self, client):
        client.post("/api/waste", json=ENTRY_BODY)

        response = client.delete("/api/waste/reset")

        assert response.status_code == 400
        assert client.get("/api/waste").json()["count"] == 1

    def test_reset_with_confirm(self, client):
        client.post("/api/waste", json=ENTRY_BODY)
        client.post("/api/waste", json=ENTRY_BODY)

        response = client.delete("/api/waste/reset", params={"confirm": "true"})

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2
        assert client.get("/api/waste").json()["count"] == 0


# ============================================================
# BASELINES
# ============================================================

class TestBaselineRoutes:

    def test_save_and_list(self, client):
        response = client.post("/api/baselines", json={
            "department": "ICU", "expectedDaily": 45, "costPerKg": 3.0,
        })

        assert response.status_code == 200
        assert response.json()["data"]["expectedDaily"] == 45
        assert response.json()["data"]["riskThreshold"] == 70

        listed = client.get("/api/baselines").json()["data"]
        assert [b["department"] for b in listed] == ["ICU"]

    def test_out_of_range_threshold_is_422(self, client):
        response = client.post("/api/baselines", json={
            "department": "ICU", "expectedDaily": 45, "riskThreshold": 140,
        })
        assert response.status_code == 422

    def test_delete_missing_is_404(self, client):
        response = client.delete("/api/baselines/Oncology")
        assert response.status_code == 404

    def test_delete_existing(self, client):
        client.post("/api/baselines", json={"department": "ICU", "expectedDaily": 45})

        assert client.delete("/api/baselines/ICU").status_code == 200
        assert client.get("/api/baselines").json()["data"] == []


class TestHealthRoute:

    def test_health_reports_analyzer(self, client):
        body = client.get("/api/health").json()

        assert body["status"] == "ok"
        assert body["analyzer"] == "static"
