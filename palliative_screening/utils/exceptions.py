"""
Custom Exception Hierarchy

Provides specific exception types for the screening core with
structured error information that the API layer serialises as-is.
"""
from typing import Optional, Dict, Any


class ScreeningError(Exception):
    """Base exception for all ESAS screening errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class ScoreRangeError(ScreeningError):
    """A submitted score is outside 0-10, not an integer, or for an unknown symptom."""

    def __init__(
        self,
        message: str,
        symptom_index: Any = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="SCORE_RANGE_ERROR",
            details={"symptom_index": symptom_index, "value": value, **(details or {})}
        )
        self.symptom_index = symptom_index
        self.value = value


class ConfigurationError(ScreeningError):
    """The intervention catalog is missing, malformed, or incomplete."""

    def __init__(
        self,
        message: str,
        source: str = "catalog",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"source": source, **(details or {})}
        )
        self.source = source


class MalformedTimestampError(ScreeningError):
    """A history record carries a timestamp that cannot be parsed."""

    def __init__(
        self,
        message: str,
        raw_value: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="MALFORMED_TIMESTAMP",
            details={"raw_value": repr(raw_value), **(details or {})}
        )
        self.raw_value = raw_value


class HistoryAnalysisError(ScreeningError):
    """History analysis was requested without any usable screening record."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="HISTORY_ANALYSIS_ERROR",
            details=details
        )
