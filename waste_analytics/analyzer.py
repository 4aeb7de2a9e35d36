"""
Waste Analytics - Risk Analyzer Clients.

============================================================
PURPOSE
============================================================
The engine calls an upstream analyzer for every new waste
entry and stores the returned RiskAnalysis with the event.
Risk scoring itself happens elsewhere. This module only
provides the clients.

============================================================
IMPLEMENTATIONS
============================================================
- HttpRiskAnalyzer: POSTs the entry and the department's
  baseline to RISK_ANALYZER_URL and validates the reply.

With no RISK_ANALYZER_URL there is no analyzer, and new
entries are stored without a risk analysis.

============================================================
FAILURE POLICY
============================================================
Transport errors, non-2xx replies and malformed payloads
raise RiskAnalysisUnavailableError. No retries here.

============================================================
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from core.constants import DEFAULT_ANALYZER_TIMEOUT_SECONDS
from core.exceptions import InvalidInputError, RiskAnalysisUnavailableError

from .types import DepartmentBaseline, RiskAnalysis, WasteEntry
from .validation import risk_analysis_from_dict


logger = logging.getLogger(__name__)


def entry_payload(entry: WasteEntry) -> Dict[str, Any]:
    return {
        "department": entry.department.value,
        "wasteType": entry.waste_type.value,
        "quantity": entry.quantity_kg,
        "procedureCategory": entry.procedure_category.value,
        "disposalMethod": entry.disposal_method.value,
        "shift": entry.shift.value,
        "notes": entry.notes,
    }


def baseline_payload(baseline: Optional[DepartmentBaseline]) -> Optional[Dict[str, Any]]:
    if baseline is None:
        return None
    return {
        "department": baseline.department.value,
        "expectedDailyKg": baseline.expected_daily_kg,
        "riskThreshold": baseline.risk_threshold,
        "infectiousRatio": baseline.infectious_ratio,
        "sharpsRatio": baseline.sharps_ratio,
        "costPerKg": baseline.cost_per_kg,
    }


class RiskAnalyzer(ABC):
    """Produces the risk analysis for a new waste entry."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def analyze(
        self,
        entry: WasteEntry,
        baseline: Optional[DepartmentBaseline],
    ) -> RiskAnalysis:
        """
        Analyze one entry against its department baseline.

        Raises:
            RiskAnalysisUnavailableError: Analysis could not be produced
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None


# ============================================================
# HTTP CLIENT
# ============================================================


class HttpRiskAnalyzer(RiskAnalyzer):
    """aiohttp client for the upstream risk analysis service."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_ANALYZER_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def name(self) -> str:
        return "http"

    @property
    def url(self) -> str:
        return self._url

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def analyze(
        self,
        entry: WasteEntry,
        baseline: Optional[DepartmentBaseline],
    ) -> RiskAnalysis:
        session = await self._get_session()
        body = {"entry": entry_payload(entry), "baseline": baseline_payload(baseline)}

        try:
            async with session.post(self._url, json=body) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise RiskAnalysisUnavailableError(
                        f"Risk analyzer returned HTTP {response.status}",
                        analyzer=self.name,
                        status_code=response.status,
                        context={"response_body": text[:500]},
                    )
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RiskAnalysisUnavailableError(
                f"Risk analyzer connection error: {e!r}",
                analyzer=self.name,
                cause=e,
            ) from e
        except ValueError as e:
            raise RiskAnalysisUnavailableError(
                "Risk analyzer returned invalid JSON",
                analyzer=self.name,
                cause=e,
            ) from e

        # Accept a bare analysis or one wrapped in the response envelope
        if isinstance(payload, dict):
            for key in ("riskAnalysis", "aiAnalysis", "data"):
                if isinstance(payload.get(key), dict):
                    payload = payload[key]
                    break

        try:
            return risk_analysis_from_dict(payload)
        except InvalidInputError as e:
            raise RiskAnalysisUnavailableError(
                f"Malformed risk analysis: {e.message}",
                analyzer=self.name,
                cause=e,
            ) from e

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None


def create_analyzer(
    url: Optional[str],
    timeout: float = DEFAULT_ANALYZER_TIMEOUT_SECONDS,
) -> Optional[RiskAnalyzer]:
    """HTTP analyzer when a URL is configured, None otherwise."""
    if url:
        logger.info(f"Using HTTP risk analyzer at {url}")
        return HttpRiskAnalyzer(url, timeout=timeout)
    logger.warning("RISK_ANALYZER_URL not set, waste entries are stored without risk analysis")
    return None
