"""
Dashboard - Dependencies.

Engine lookup and engine-error to HTTP mapping shared by the
routers.
"""

import logging

from fastapi import HTTPException, Request

from core.exceptions import (
    InvalidInputError,
    NotFoundError,
    RiskAnalysisUnavailableError,
    StoreUnavailableError,
    WasteIntelligenceException,
)
from waste_analytics.engine import WasteIntelligenceEngine, describe_error


logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidInputError: 400,
    NotFoundError: 404,
    RiskAnalysisUnavailableError: 502,
    StoreUnavailableError: 503,
}


def get_engine(request: Request) -> WasteIntelligenceEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


def to_http_exception(error: WasteIntelligenceException) -> HTTPException:
    """Classify an engine error into an HTTP status."""
    status_code = 500
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(error.to_log_format())
    return HTTPException(status_code=status_code, detail=describe_error(error))
