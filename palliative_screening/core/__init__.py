"""
ESAS Screening Core

Scoring, recommendation and history analytics. All components are pure
functions over immutable inputs.
"""
from .engine import ScreeningEngine, classify, utc_now

__all__ = ["ScreeningEngine", "classify", "utc_now"]
