"""
Trend Analyzer

Direction and confidence of change over a time-ordered series.

Canonical method (REGRESSION): ordinary least-squares slope of value
against sample index 0..n-1

    slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)

    slope < −0.1 → improving     (scores falling)
    slope >  0.1 → declining
    otherwise    → stable
    confidence   = min(|slope| × 10, 100)

WINDOWED is available on request only: mean of the most recent ≤3 samples
against the mean of the older ones, with a ±1 point margin.

Fewer than two points is not an error: the result is stable with 0 confidence.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from palliative_screening.core.scoring.base import Symptom
from palliative_screening.utils import get_logger
from .base import (
    PatientTrends,
    ScreeningRecord,
    TrendDirection,
    TrendMethod,
    TrendPoint,
    TrendResult,
)
from .records import PreparedHistory, TimedRecord, prepare_history

logger = get_logger(__name__)

SLOPE_THRESHOLD   = 0.1
CONFIDENCE_SCALE  = 10.0
MAX_CONFIDENCE    = 100.0
RECENT_WINDOW     = 3
WINDOW_MARGIN     = 1.0

SeriesInput = Sequence[Union[TrendPoint, int, float]]


def _coerce_points(series: SeriesInput) -> List[TrendPoint]:
    return [
        p if isinstance(p, TrendPoint) else TrendPoint(timestamp=None, value=float(p))
        for p in series
    ]


def regression_slope(values: Sequence[float]) -> float:
    """Least-squares slope of ``values`` against their index. Needs ≥2 values."""
    y = np.asarray(values, dtype=float)
    n = y.size
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()

    return float((n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x))


def _direction(delta: float, threshold: float) -> TrendDirection:
    if delta < -threshold:
        return TrendDirection.IMPROVING
    if delta > threshold:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def _confidence(magnitude: float) -> float:
    return min(abs(magnitude) * CONFIDENCE_SCALE, MAX_CONFIDENCE)


def _windowed(values: Sequence[float]) -> float:
    """Recent-window mean minus older mean; 0 when there is no older sample."""
    recent = values[-RECENT_WINDOW:]
    older = values[:-RECENT_WINDOW]
    if not older:
        return 0.0
    return float(np.mean(recent) - np.mean(older))


def analyze_trend(
    series: SeriesInput,
    method: TrendMethod = TrendMethod.REGRESSION,
) -> TrendResult:
    """
    Classify the trend of a time-ordered series.

    Args:
        series: TrendPoints in ascending time order, or bare numbers.
        method: REGRESSION (default) or WINDOWED.

    Returns:
        TrendResult. With fewer than two points: stable, confidence 0.
    """
    points = tuple(_coerce_points(series))
    if len(points) < 2:
        return TrendResult(points=points, method=method)

    values = [p.value for p in points]

    if method is TrendMethod.WINDOWED:
        delta = _windowed(values)
        return TrendResult(
            direction=_direction(delta, WINDOW_MARGIN),
            confidence=_confidence(delta),
            points=points,
            slope=delta,
            method=method,
        )

    slope = regression_slope(values)
    return TrendResult(
        direction=_direction(slope, SLOPE_THRESHOLD),
        confidence=_confidence(slope),
        points=points,
        slope=slope,
        method=method,
    )


# ── Series extraction ────────────────────────────────────────────────────────

def _series(timed: Sequence[TimedRecord], value_of: Callable[[ScreeningRecord], float]) -> List[TrendPoint]:
    return [TrendPoint(timestamp=t.timestamp, value=float(value_of(t.record))) for t in timed]


def highest_score_series(timed: Sequence[TimedRecord]) -> List[TrendPoint]:
    return _series(timed, lambda r: r.classification.highest_score)


def symptom_series(timed: Sequence[TimedRecord], symptom: int) -> List[TrendPoint]:
    symptom = Symptom(symptom)
    return _series(timed, lambda r: r.scores[symptom])


def risk_series(timed: Sequence[TimedRecord]) -> List[TrendPoint]:
    """Risk tier as an ordinal: none=0, low=1, medium=2, high=3, critical=4."""
    return _series(timed, lambda r: r.classification.risk_tier.rank)


def analyze_patient_trends(
    records: Sequence[ScreeningRecord],
    method: TrendMethod = TrendMethod.REGRESSION,
    max_samples: Optional[int] = None,
    prepared: Optional[PreparedHistory] = None,
) -> PatientTrends:
    """
    Overall, per-symptom and risk trends for one patient's history.

    Records with malformed timestamps are skipped; the most recent
    ``max_samples`` records are analysed. Pass ``prepared`` to reuse an
    already prepared history.
    """
    history = prepared if prepared is not None else prepare_history(records, max_samples)
    timed = history.records

    trends = PatientTrends(
        overall=analyze_trend(highest_score_series(timed), method),
        symptoms={int(s): analyze_trend(symptom_series(timed, s), method) for s in Symptom},
        risk=analyze_trend(risk_series(timed), method),
        truncated=history.truncated,
    )
    logger.debug(
        f"analyze_patient_trends: n={len(timed)} overall={trends.overall.direction.value} "
        f"risk={trends.risk.direction.value}"
    )
    return trends
