from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.exceptions import WasteIntelligenceException
from dashboard.dependencies import get_engine, to_http_exception
from dashboard.schemas import (
    AlertData,
    AlertsResponse,
    LogWasteData,
    LogWasteResponse,
    ResetResponse,
    RiskAnalysisData,
    SnapshotData,
    StatsResponse,
    WasteEntryRequest,
    WasteEventData,
    WasteListResponse,
)
from waste_analytics.engine import WasteIntelligenceEngine

router = APIRouter(prefix="/api/waste", tags=["Waste"])


@router.post("", response_model=LogWasteResponse, status_code=201)
async def log_waste(
    request: WasteEntryRequest,
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Log a waste entry and return it with its risk analysis.
    """
    try:
        logged = await engine.log_waste(request.to_entry())
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return LogWasteResponse(
        message="Waste entry logged",
        data=LogWasteData(
            entry=WasteEventData.from_event(logged.event),
            ai_analysis=(
                RiskAnalysisData.from_analysis(logged.risk_analysis)
                if logged.risk_analysis else None
            ),
        ),
    )


@router.get("", response_model=WasteListResponse)
async def list_waste(
    department: Optional[str] = None,
    waste_type: Optional[str] = Query(None, alias="wasteType"),
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: Optional[int] = Query(None, ge=1),
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Stored waste entries, newest first.
    """
    try:
        events = await engine.list_waste(
            department=department,
            waste_type=waste_type,
            since=since,
            until=until,
            limit=limit,
        )
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return WasteListResponse(
        data=[WasteEventData.from_event(e) for e in events],
        count=len(events),
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(engine: WasteIntelligenceEngine = Depends(get_engine)):
    """
    Dashboard snapshot: today's totals, trend, composition,
    department performance, sustainability and cost.
    """
    try:
        snapshot = await engine.get_stats()
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return StatsResponse(data=SnapshotData.from_snapshot(snapshot))


@router.get("/alerts", response_model=AlertsResponse)
async def get_alerts(
    status: str = "active",
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Alerts for a lifecycle status (active, acknowledged, resolved, all).
    """
    try:
        alerts = await engine.get_alerts(status)
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return AlertsResponse(
        data=[AlertData.from_alert(a) for a in alerts],
        count=len(alerts),
        status=status.strip().lower(),
    )


@router.delete("/reset", response_model=ResetResponse)
async def reset_all_data(
    confirm: bool = False,
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Delete every waste entry. Requires ?confirm=true.
    """
    try:
        removed = await engine.reset_all_data(confirm=confirm)
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return ResetResponse(message="All waste data reset", deleted_count=removed)
