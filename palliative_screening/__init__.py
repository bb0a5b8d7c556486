"""
ESAS palliative screening core.

Exposed operations:
    classify(scores)                                  -> (RiskClassification, Recommendation)
    analyze_trend(series)                             -> TrendResult
    aggregate_statistics(records, now)                -> HistoryStatistics
    plan_follow_up(classification, last_ts, now)      -> FollowUpPlan
"""
from palliative_screening.core.engine import ScreeningEngine, classify
from palliative_screening.core.history import aggregate_statistics, analyze_trend, plan_follow_up

__version__ = "1.0.0"

__all__ = [
    "ScreeningEngine",
    "classify",
    "analyze_trend",
    "aggregate_statistics",
    "plan_follow_up",
]
