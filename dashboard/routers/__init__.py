"""
Dashboard API Routers.
"""
from . import baselines, health, waste

__all__ = ["baselines", "health", "waste"]
