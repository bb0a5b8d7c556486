"""
History Analytics Layer

Trend, statistics and follow-up analytics over a patient's screening history.

Usage:
    from palliative_screening.core.history import analyze_trend, aggregate_statistics, plan_follow_up

    trend = analyze_trend([8, 6, 4, 2])                  # improving, confidence 20
    stats = aggregate_statistics(records, now=now)
    plan = plan_follow_up(latest.classification, latest.timestamp, now=now)
"""
from .base import (
    Effectiveness,
    FollowUpPlan,
    HistoryReport,
    HistoryStatistics,
    InterventionOutcome,
    PatientTrends,
    ScreeningFrequency,
    ScreeningRecord,
    ScreeningStatus,
    SymptomSummary,
    TrendDirection,
    TrendMethod,
    TrendPoint,
    TrendResult,
)
from .records import parse_timestamp, prepare_history
from .trends import analyze_patient_trends, analyze_trend, regression_slope
from .statistics import aggregate_statistics, intervention_outcomes
from .followup import plan_follow_up, screening_status

__all__ = [
    "Effectiveness",
    "FollowUpPlan",
    "HistoryReport",
    "HistoryStatistics",
    "InterventionOutcome",
    "PatientTrends",
    "ScreeningFrequency",
    "ScreeningRecord",
    "ScreeningStatus",
    "SymptomSummary",
    "TrendDirection",
    "TrendMethod",
    "TrendPoint",
    "TrendResult",
    "parse_timestamp",
    "prepare_history",
    "analyze_patient_trends",
    "analyze_trend",
    "regression_slope",
    "aggregate_statistics",
    "intervention_outcomes",
    "plan_follow_up",
    "screening_status",
]
