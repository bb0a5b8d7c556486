"""
Statistics Aggregator

Distributional and cadence statistics over one patient's screening history.
Pure reductions: the same records and the same ``now`` always give the same
result. Records with malformed timestamps are skipped, never fatal.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

import numpy as np

from palliative_screening import config
from palliative_screening.core.scoring.base import RiskTier, Symptom
from palliative_screening.utils import get_logger
from .base import (
    Effectiveness,
    HistoryStatistics,
    InterventionOutcome,
    ScreeningFrequency,
    ScreeningRecord,
    SymptomSummary,
    TrendMethod,
)
from .records import PreparedHistory, TimedRecord, days_between, parse_timestamp, prepare_history
from .trends import analyze_trend, highest_score_series, symptom_series

logger = get_logger(__name__)

DAYS_PER_MONTH = 30
HIGH_EFFECT_DROP = 3
MEDIUM_EFFECT_DROP = 1


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def improvement_rate(values: Sequence[float]) -> float:
    """(first − last) / first × 100; 0 with fewer than two values or a zero first value."""
    if len(values) < 2 or values[0] == 0:
        return 0.0
    return (values[0] - values[-1]) / values[0] * 100


def population_std(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def _month_key(ts: datetime) -> Tuple[int, int]:
    return ts.year, ts.month


def _previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _frequency(timed: Sequence[TimedRecord], now: datetime, span_days: int) -> ScreeningFrequency:
    this_month = _month_key(now)
    last_month = _previous_month(*this_month)
    months = [_month_key(t.timestamp) for t in timed]

    average = 0
    if span_days > 0:
        average = int(_round_half_up(len(timed) / span_days * DAYS_PER_MONTH))

    return ScreeningFrequency(
        this_period=months.count(this_month),
        last_period=months.count(last_month),
        average_per_month=average,
    )


def _gaps(timed: Sequence[TimedRecord]) -> List[int]:
    return [days_between(a.timestamp, b.timestamp) for a, b in zip(timed, timed[1:])]


def _streak(gaps: Sequence[int], total: int, window_days: int) -> int:
    """Consecutive screenings, counted back from the latest, each within ``window_days`` of the previous."""
    if total < 2:
        return total
    streak = 1
    for gap in reversed(gaps):
        if gap > window_days:
            break
        streak += 1
    return streak


def _symptom_summary(timed: Sequence[TimedRecord], symptom: Symptom, method: TrendMethod) -> SymptomSummary:
    points = symptom_series(timed, symptom)
    values = [p.value for p in points]
    if not values:
        return SymptomSummary(symptom=int(symptom))

    return SymptomSummary(
        symptom=int(symptom),
        average_score=_round_half_up(float(np.mean(values)), 1),
        max_score=int(max(values)),
        min_score=int(min(values)),
        improvement_rate_pct=_round_half_up(improvement_rate(values), 1),
        variability=_round_half_up(population_std(values), 1),
        direction=analyze_trend(points, method).direction,
    )


def aggregate_statistics(
    records: Sequence[ScreeningRecord],
    now: Optional[datetime] = None,
    symptom: Optional[int] = None,
    max_samples: Optional[int] = None,
    trend_method: TrendMethod = TrendMethod.REGRESSION,
    prepared: Optional[PreparedHistory] = None,
) -> HistoryStatistics:
    """
    Compute HistoryStatistics for a patient's screening records.

    Args:
        records: The patient's ScreeningRecords (any order; sorted by time here).
        now: Reference time for the this/last calendar month counts.
             Defaults to the current UTC time.
        symptom: Series used for ``variability`` and ``improvement_rate_pct``;
                 None means the highest-score series.
        max_samples: Cap on analysed records (most recent kept).
        trend_method: Method used for the per-symptom directions.
        prepared: Already prepared history; skips re-parsing ``records``.
    """
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    history = prepared if prepared is not None else prepare_history(records, max_samples)
    timed = history.records

    stats = HistoryStatistics(
        total_screenings=len(timed),
        risk_distribution={tier.value: 0 for tier in RiskTier},
        skipped_records=history.skipped,
        truncated=history.truncated,
    )
    if not timed:
        stats.frequency = _frequency(timed, now, 0)
        return stats

    for t in timed:
        stats.risk_distribution[t.record.classification.risk_tier.value] += 1

    first, last = timed[0].timestamp, timed[-1].timestamp
    stats.first_screening = first
    stats.last_screening = last
    stats.span_days = days_between(first, last) if len(timed) > 1 else 0
    stats.frequency = _frequency(timed, now, stats.span_days)

    if symptom is None:
        series = [p.value for p in highest_score_series(timed)]
    else:
        series = [p.value for p in symptom_series(timed, symptom)]
    stats.variability = population_std(series)
    stats.improvement_rate_pct = improvement_rate(series)

    gaps = _gaps(timed)
    stats.screening_streak = _streak(gaps, len(timed), config.STREAK_WINDOW_DAYS)
    stats.longest_gap_days = max(gaps) if gaps else 0
    stats.average_days_between_screenings = int(_round_half_up(float(np.mean(gaps)))) if gaps else 0

    highest = [t.record.classification.highest_score for t in timed]
    drops = [a - b for a, b in zip(highest, highest[1:])]
    stats.average_improvement_per_screening = _round_half_up(float(np.mean(drops)), 1) if drops else 0.0

    stats.symptom_summaries = {int(s): _symptom_summary(timed, s, trend_method) for s in Symptom}

    logger.debug(
        f"aggregate_statistics: n={stats.total_screenings} span={stats.span_days}d "
        f"skipped={stats.skipped_records} truncated={stats.truncated}"
    )
    return stats


def _effectiveness(improvement: int) -> Effectiveness:
    if improvement >= HIGH_EFFECT_DROP:
        return Effectiveness.HIGH
    if improvement >= MEDIUM_EFFECT_DROP:
        return Effectiveness.MEDIUM
    return Effectiveness.LOW


def intervention_outcomes(
    records: Sequence[ScreeningRecord],
    max_samples: Optional[int] = None,
    prepared: Optional[PreparedHistory] = None,
) -> List[InterventionOutcome]:
    """
    Per-screening change of the highest score, tagged with the therapy
    recommended at that screening.

    The first screening has no baseline: before_score is None and improvement 0.
    """
    history = prepared if prepared is not None else prepare_history(records, max_samples)
    timed = history.records
    outcomes: List[InterventionOutcome] = []
    previous: Optional[int] = None

    for t in timed:
        after = t.record.classification.highest_score
        improvement = previous - after if previous is not None else 0
        recommendation = t.record.recommendation
        outcomes.append(InterventionOutcome(
            timestamp=t.timestamp,
            therapy_type=recommendation.protocol.therapy_type if recommendation else "",
            before_score=previous,
            after_score=after,
            improvement=improvement,
            effectiveness=_effectiveness(improvement),
        ))
        previous = after
    return outcomes
