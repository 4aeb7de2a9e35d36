"""
Core Module Package.

This package contains the core infrastructure components
that all other modules depend on.

Components:
- clock: Unified time abstraction
- exceptions: Custom exception hierarchy
- constants: Documented default values
"""

from .clock import ClockProtocol, SystemClock, MockClock, ClockFactory
from .exceptions import (
    WasteIntelligenceException,
    StoreUnavailableError,
    InvalidInputError,
    NotFoundError,
    RiskAnalysisUnavailableError,
)

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "WasteIntelligenceException",
    "StoreUnavailableError",
    "InvalidInputError",
    "NotFoundError",
    "RiskAnalysisUnavailableError",
]
