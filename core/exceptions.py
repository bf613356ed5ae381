"""
Custom exceptions for PrintCostLedger.

Exception Hierarchy:
    PrintCostLedgerError (base)
    ├── PreconditionViolation  - Raw job record is malformed (rejected before policies)
    ├── QueryRangeError        - Statistics window ends before it starts
    ├── StoreUnavailableError  - Record store failed or timed out (surfaced unchanged)
    └── ConfigurationError     - Policy/pricing configuration is invalid

Usage:
    Request errors (PreconditionViolation, QueryRangeError) map to HTTP 400.
    StoreUnavailableError maps to HTTP 503; nothing in this package retries it.
    A policy whose trigger condition is unmet is NOT an error - it is skipped.
"""

from typing import Optional, Dict, Any


class PrintCostLedgerError(Exception):
    """
    Base exception for all PrintCostLedger errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe error body."""
        return {
            "error": self.message,
            "type": self.__class__.__name__,
            "details": {k: str(v) for k, v in self.details.items()},
        }


# =============================================================================
# REQUEST ERRORS - the caller sent something we refuse to compute on
# =============================================================================

class PreconditionViolation(PrintCostLedgerError):
    """
    A raw job record violates a precondition of the pipeline.

    Raised for negative page counts, a total page count of zero or less,
    a color/black-white split larger than the total, or a missing
    identifier. The record is never coerced into shape.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Any = None,
        job_id: Optional[str] = None
    ):
        details: Dict[str, Any] = {}
        if field_name:
            details["field"] = field_name
            details["value"] = value
        if job_id:
            details["job_id"] = job_id
        super().__init__(message, details)
        self.field_name = field_name
        self.value = value
        self.job_id = job_id


class QueryRangeError(PrintCostLedgerError):
    """
    A statistics query window ends before it starts.

    Windows are half-open [start, end); start == end is a valid empty window.
    """

    def __init__(self, period_start, period_end):
        message = f"Query window ends before it starts: {period_start} > {period_end}"
        details = {
            "period_start": period_start,
            "period_end": period_end,
        }
        super().__init__(message, details)
        self.period_start = period_start
        self.period_end = period_end


class ConfigurationError(PrintCostLedgerError):
    """Policy or pricing configuration is out of range."""

    def __init__(self, option: str, value: Any, reason: str):
        message = f"Invalid configuration for {option}: {reason}"
        details = {
            "option": option,
            "value": value,
        }
        super().__init__(message, details)
        self.option = option
        self.value = value


# =============================================================================
# BACKEND ERRORS - the record store could not answer
# =============================================================================

class StoreUnavailableError(PrintCostLedgerError):
    """
    The record store failed or timed out.

    Propagated to the caller as-is. The statistics cache is never
    populated from a failed query, and no retry happens here - retry
    policy belongs to the store client.
    """

    def __init__(
        self,
        operation: str,
        reason: str = "record store is not available",
        timeout_seconds: Optional[float] = None
    ):
        message = f"Record store {operation} failed: {reason}"
        details: Dict[str, Any] = {
            "operation": operation,
            "resolution": "Check record store connectivity and retry the request",
        }
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details)
        self.operation = operation
        self.reason = reason
        self.timeout_seconds = timeout_seconds
