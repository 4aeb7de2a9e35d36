"""
Dashboard - API.

============================================================
RESPONSIBILITY
============================================================
REST boundary for the waste intelligence engine.

    POST   /api/waste                     log a waste entry
    GET    /api/waste                     list waste entries
    GET    /api/waste/stats               dashboard snapshot
    GET    /api/waste/alerts?status=      alert center
    DELETE /api/waste/reset?confirm=true  clear all events
    POST   /api/baselines                 save a baseline
    GET    /api/baselines                 list baselines
    DELETE /api/baselines/{department}    delete a baseline

Responses use the {"success": true, "data": ...} envelope.

============================================================
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.constants import SYSTEM_NAME, SYSTEM_VERSION
from dashboard.routers import baselines, health, waste
from storage.database import initialize_database
from storage.sql_stores import SqlBaselineStore, SqlEventStore, SqlStoreViewReader
from waste_analytics.analyzer import create_analyzer
from waste_analytics.config import EngineConfig
from waste_analytics.engine import WasteIntelligenceEngine

logger = logging.getLogger(__name__)


def build_engine_from_env() -> WasteIntelligenceEngine:
    """Engine over the SQL stores, configured from the environment."""
    config = EngineConfig.from_env()
    database = initialize_database()
    return WasteIntelligenceEngine(
        event_store=SqlEventStore(database),
        baseline_store=SqlBaselineStore(database),
        analyzer=create_analyzer(config.analyzer_url, config.analyzer_timeout_seconds),
        config=config,
        view_reader=SqlStoreViewReader(database),
    )


def create_app(engine: Optional[WasteIntelligenceEngine] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        engine: Pre-built engine; built from the environment at
            startup when None
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "engine", None) is None:
            app.state.engine = build_engine_from_env()
        logger.info(f"{SYSTEM_NAME} API started")
        yield
        await app.state.engine.close()
        logger.info(f"{SYSTEM_NAME} API stopped")

    app = FastAPI(
        title=f"{SYSTEM_NAME} API",
        description="Clinical waste monitoring, risk alerts and department baselines",
        version=SYSTEM_VERSION,
        lifespan=lifespan,
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(waste.router)
    app.include_router(baselines.router)
    app.include_router(health.router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "service": f"{SYSTEM_NAME} API",
            "version": SYSTEM_VERSION,
            "docs": "/docs",
        }

    return app
