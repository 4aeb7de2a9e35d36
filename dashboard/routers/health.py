from fastapi import APIRouter, Depends

from core.clock import now_utc
from core.constants import SYSTEM_VERSION
from dashboard.dependencies import get_engine
from waste_analytics.engine import WasteIntelligenceEngine

router = APIRouter(prefix="/api/health", tags=["System Health"])


@router.get("")
async def health(engine: WasteIntelligenceEngine = Depends(get_engine)):
    """
    Liveness and active configuration. Does not touch the stores.
    """
    return {
        "status": "ok",
        "version": SYSTEM_VERSION,
        "analyzer": engine.analyzer_name,
        "config": engine.config.to_dict(),
        "timestamp": now_utc().isoformat(),
    }
