"""
Waste Analytics - Configuration.

============================================================
PURPOSE
============================================================
Configuration dataclasses and documented defaults for the
derivation engine.

Configuration can be loaded from:
- Default values (core.constants)
- Environment variables (a .env file is honored)

============================================================
DEFAULT-VALUE POLICY
============================================================
Defaults only stand in for ABSENT configuration on an
otherwise successful read. They never stand in for a failed
store read.

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from core.constants import (
    DEFAULT_ANALYZER_TIMEOUT_SECONDS,
    DEFAULT_COST_PER_KG,
    DEFAULT_EXPECTED_DAILY_KG,
    DEFAULT_STORE_TIMEOUT_SECONDS,
    DEFAULT_SUSTAINABILITY_SCORE,
    DEFAULT_TREND_WINDOW_DAYS,
    HIGH_RISK_THRESHOLD,
    MAX_RISK_SCORE,
    MEDIUM_RISK_THRESHOLD,
    MIN_RISK_SCORE,
)
from .types import CostMode, TrendGrouping


logger = logging.getLogger(__name__)


# ============================================================
# RISK BAND THRESHOLDS
# ============================================================


@dataclass(frozen=True)
class BandThresholds:
    """
    Lower bounds (inclusive) of the risk bands.

    - HIGH:   score >= high
    - MEDIUM: medium <= score < high
    - LOW:    score < medium
    """

    high: int = HIGH_RISK_THRESHOLD
    medium: int = MEDIUM_RISK_THRESHOLD

    def __post_init__(self) -> None:
        if not MIN_RISK_SCORE <= self.medium <= MAX_RISK_SCORE:
            raise ValueError("medium threshold must be 0-100")
        if not MIN_RISK_SCORE <= self.high <= MAX_RISK_SCORE:
            raise ValueError("high threshold must be 0-100")
        if self.medium >= self.high:
            raise ValueError("medium threshold must be < high threshold")

    def to_dict(self) -> Dict[str, int]:
        return {"high": self.high, "medium": self.medium}


# ============================================================
# DERIVATION DEFAULTS
# ============================================================


@dataclass(frozen=True)
class DerivationDefaults:
    """
    Fallback values applied when configuration is absent.

    ============================================================
    VALUES
    ============================================================
    expected_daily_kg:
        Used by the department evaluator for a department with
        no saved baseline.
    cost_per_kg:
        Flat disposal rate for the whole fleet.
    sustainability_score:
        Reported when no waste has been tracked at all. This is
        a fixed fallback, not a computed zero.

    ============================================================
    """

    expected_daily_kg: float = DEFAULT_EXPECTED_DAILY_KG
    cost_per_kg: float = DEFAULT_COST_PER_KG
    sustainability_score: int = DEFAULT_SUSTAINABILITY_SCORE

    def __post_init__(self) -> None:
        if self.expected_daily_kg <= 0:
            raise ValueError("expected_daily_kg must be > 0")
        if self.cost_per_kg <= 0:
            raise ValueError("cost_per_kg must be > 0")
        if not 0 <= self.sustainability_score <= 100:
            raise ValueError("sustainability_score must be 0-100")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expected_daily_kg": self.expected_daily_kg,
            "cost_per_kg": self.cost_per_kg,
            "sustainability_score": self.sustainability_score,
        }


# ============================================================
# ENGINE CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class EngineConfig:
    """
    Complete configuration of the waste intelligence engine.

    trend_grouping and cost_mode default to the established
    dashboard behaviour (weekday-label buckets, flat rate).
    """

    defaults: DerivationDefaults = field(default_factory=DerivationDefaults)
    bands: BandThresholds = field(default_factory=BandThresholds)

    trend_window_days: int = DEFAULT_TREND_WINDOW_DAYS
    trend_grouping: TrendGrouping = TrendGrouping.WEEKDAY_LABEL
    cost_mode: CostMode = CostMode.FLAT

    store_timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS
    analyzer_timeout_seconds: float = DEFAULT_ANALYZER_TIMEOUT_SECONDS
    analyzer_url: Optional[str] = None

    engine_version: str = "1.0.0"

    def __post_init__(self) -> None:
        if self.trend_window_days < 1:
            raise ValueError("trend_window_days must be >= 1")
        if self.store_timeout_seconds <= 0:
            raise ValueError("store_timeout_seconds must be > 0")
        if self.analyzer_timeout_seconds <= 0:
            raise ValueError("analyzer_timeout_seconds must be > 0")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Load configuration from environment variables.

        Unset variables keep their documented defaults.
        """
        load_dotenv()

        defaults = DerivationDefaults(
            expected_daily_kg=_env_float(
                "WASTE_DEFAULT_EXPECTED_DAILY_KG", DEFAULT_EXPECTED_DAILY_KG
            ),
            cost_per_kg=_env_float("WASTE_DEFAULT_COST_PER_KG", DEFAULT_COST_PER_KG),
            sustainability_score=int(
                _env_float("WASTE_DEFAULT_SUSTAINABILITY_SCORE", DEFAULT_SUSTAINABILITY_SCORE)
            ),
        )

        config = cls(
            defaults=defaults,
            trend_window_days=int(
                _env_float("WASTE_TREND_WINDOW_DAYS", DEFAULT_TREND_WINDOW_DAYS)
            ),
            trend_grouping=TrendGrouping(
                os.getenv("WASTE_TREND_GROUPING", TrendGrouping.WEEKDAY_LABEL.value)
            ),
            cost_mode=CostMode(os.getenv("WASTE_COST_MODE", CostMode.FLAT.value)),
            store_timeout_seconds=_env_float(
                "WASTE_STORE_TIMEOUT_SECONDS", DEFAULT_STORE_TIMEOUT_SECONDS
            ),
            analyzer_timeout_seconds=_env_float(
                "WASTE_ANALYZER_TIMEOUT_SECONDS", DEFAULT_ANALYZER_TIMEOUT_SECONDS
            ),
            analyzer_url=os.getenv("RISK_ANALYZER_URL") or None,
        )

        logger.info(
            f"Engine configured: window={config.trend_window_days}d "
            f"grouping={config.trend_grouping.value} cost_mode={config.cost_mode.value}"
        )
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "defaults": self.defaults.to_dict(),
            "bands": self.bands.to_dict(),
            "trend_window_days": self.trend_window_days,
            "trend_grouping": self.trend_grouping.value,
            "cost_mode": self.cost_mode.value,
            "store_timeout_seconds": self.store_timeout_seconds,
            "analyzer_timeout_seconds": self.analyzer_timeout_seconds,
            "analyzer_url": self.analyzer_url,
            "engine_version": self.engine_version,
        }


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return float(default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be numeric, got {raw!r}")


def get_default_config() -> EngineConfig:
    """Return configuration with all documented defaults."""
    return EngineConfig()
