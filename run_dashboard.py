#!/usr/bin/env python
"""
Dashboard API Server Runner.

Usage:
    python run_dashboard.py

Environment:
    DASHBOARD_HOST, DASHBOARD_PORT, DATABASE_URL, RISK_ANALYZER_URL
"""

import logging
import os
import sys

import uvicorn
from dotenv import load_dotenv

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


def main():
    load_dotenv()
    host = os.getenv("DASHBOARD_HOST", "0.0.0.0")
    port = int(os.getenv("DASHBOARD_PORT", "8000"))

    logger.info(f"Serving waste dashboard on {host}:{port}")
    try:
        uvicorn.run("dashboard.api:create_app", factory=True, host=host, port=port)
    except OSError as e:
        logger.error(f"Dashboard server could not bind {host}:{port}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
