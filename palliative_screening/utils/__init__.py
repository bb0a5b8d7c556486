"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ScreeningError,
    ScoreRangeError,
    ConfigurationError,
    MalformedTimestampError,
    HistoryAnalysisError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ScreeningError",
    "ScoreRangeError",
    "ConfigurationError",
    "MalformedTimestampError",
    "HistoryAnalysisError",
]
