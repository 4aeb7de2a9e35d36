"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Errors raised by the waste intelligence engine and its
stores. The engine never retries and never substitutes
defaults for a failed read; it raises one of these and the
boundary maps it to a response.

============================================================
EXCEPTION HIERARCHY
============================================================
WasteIntelligenceException (base)
├── StoreUnavailableError          transient
├── InvalidInputError              caller must fix the request
├── NotFoundError                  caller must fix the request
└── RiskAnalysisUnavailableError   transient

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class Severity(Enum):
    """Log severity of an engine error."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorClassification(Enum):
    """Whether repeating the same request may succeed."""

    TRANSIENT = "transient"
    NON_RECOVERABLE = "non_recoverable"


# ============================================================
# BASE EXCEPTION
# ============================================================

class WasteIntelligenceException(Exception):
    """
    Base exception for all waste intelligence errors.

    Carries a log severity, a transient/non-recoverable
    classification and a context dict that ends up in the
    structured log line.
    """

    default_severity: Severity = Severity.MEDIUM
    default_classification: ErrorClassification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        classification: Optional[ErrorClassification] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.classification = classification or self.default_classification
        self.cause = cause
        self.raised_at = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    @property
    def is_transient(self) -> bool:
        return self.classification == ErrorClassification.TRANSIENT

    def to_log_format(self) -> str:
        """Single-line form for logger.error()."""
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        if self.context:
            line += " | " + ", ".join(f"{k}={v}" for k, v in self.context.items())
        return line


# ============================================================
# STORE ERRORS
# ============================================================

class StoreUnavailableError(WasteIntelligenceException):
    """
    The Event Store or Baseline Store could not be read or written.

    Surfaced to the caller, never retried internally and never
    replaced by default values.
    """

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.TRANSIENT

    def __init__(
        self,
        message: str,
        store: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if store:
            context["store"] = store
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)
        self.store = store
        self.operation = operation


# ============================================================
# INPUT ERRORS
# ============================================================

class InvalidInputError(WasteIntelligenceException):
    """Malformed waste entry, baseline or query parameter."""

    default_severity = Severity.LOW

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]

        super().__init__(message, context=context, **kwargs)
        self.field = field


class NotFoundError(WasteIntelligenceException):
    """A baseline or department referenced by a request does not exist."""

    default_severity = Severity.LOW

    def __init__(self, resource: str, key: Any, **kwargs):
        context = kwargs.pop("context", {})
        context["resource"] = resource
        context["key"] = str(key)

        super().__init__(f"{resource} '{key}' not found", context=context, **kwargs)
        self.resource = resource
        self.key = key


# ============================================================
# COLLABORATOR ERRORS
# ============================================================

class RiskAnalysisUnavailableError(WasteIntelligenceException):
    """The upstream risk analyzer failed or returned a malformed analysis."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.TRANSIENT

    def __init__(
        self,
        message: str,
        analyzer: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if analyzer:
            context["analyzer"] = analyzer
        if status_code is not None:
            context["status_code"] = status_code

        super().__init__(message, context=context, **kwargs)
        self.status_code = status_code


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "Severity",
    "ErrorClassification",
    "WasteIntelligenceException",
    "StoreUnavailableError",
    "InvalidInputError",
    "NotFoundError",
    "RiskAnalysisUnavailableError",
]
