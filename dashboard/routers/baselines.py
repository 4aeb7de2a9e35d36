from fastapi import APIRouter, Depends

from core.exceptions import WasteIntelligenceException
from dashboard.dependencies import get_engine, to_http_exception
from dashboard.schemas import (
    BaseResponse,
    BaselineData,
    BaselineListResponse,
    BaselineRequest,
    BaselineResponse,
)
from waste_analytics.engine import WasteIntelligenceEngine

router = APIRouter(prefix="/api/baselines", tags=["Baselines"])


@router.post("", response_model=BaselineResponse)
async def save_baseline(
    request: BaselineRequest,
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Create or replace the baseline for a department.
    """
    try:
        stored = await engine.save_baseline(request.to_baseline())
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return BaselineResponse(message="Baseline saved", data=BaselineData.from_baseline(stored))


@router.get("", response_model=BaselineListResponse)
async def list_baselines(engine: WasteIntelligenceEngine = Depends(get_engine)):
    try:
        baselines = await engine.list_baselines()
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return BaselineListResponse(data=[BaselineData.from_baseline(b) for b in baselines])


@router.delete("/{department}", response_model=BaseResponse)
async def delete_baseline(
    department: str,
    engine: WasteIntelligenceEngine = Depends(get_engine),
):
    """
    Remove a department's baseline. 404 when none is saved.
    """
    try:
        await engine.delete_baseline(department)
    except WasteIntelligenceException as e:
        raise to_http_exception(e)
    return BaseResponse(message=f"Baseline for {department} deleted")
