"""
ESAS Screening Engine

Composes the pure components:

    raw submission → normalize_scores → classify_scores → recommend        (one screening)
    records        → analyze_patient_trends + aggregate_statistics
                     + plan_follow_up + intervention_outcomes              (one history)

The catalog and the clock are injected so results never depend on hidden
global state or the wall clock.

Usage:
    from palliative_screening.core.engine import ScreeningEngine

    engine = ScreeningEngine(clock=lambda: fixed_now)
    classification, recommendation = engine.classify({"1": 9, "2": 3})
    report = engine.analyze_history(records)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from palliative_screening.utils import get_logger
from palliative_screening.utils.exceptions import HistoryAnalysisError
from .history import (
    FollowUpPlan,
    HistoryReport,
    HistoryStatistics,
    ScreeningRecord,
    TrendDirection,
    TrendMethod,
    TrendResult,
    aggregate_statistics,
    analyze_patient_trends,
    analyze_trend,
    intervention_outcomes,
    plan_follow_up,
    prepare_history,
    screening_status,
)
from .recommendation import InterventionCatalog, Recommendation, default_catalog, recommend
from .scoring import RiskClassification, ScoreVector, classify_scores, normalize_scores

logger = get_logger(__name__)

Clock = Callable[[], datetime]
ScoreInput = Union[ScoreVector, Mapping[Any, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_vector(scores: ScoreInput) -> ScoreVector:
    return scores if isinstance(scores, ScoreVector) else normalize_scores(scores)


def classify(
    scores: ScoreInput,
    catalog: Optional[InterventionCatalog] = None,
) -> Tuple[RiskClassification, Recommendation]:
    """
    Classify one screening and map it to its recommendation.

    Args:
        scores: A ScoreVector, or a raw symptom -> score mapping to normalize.
        catalog: Protocol table; defaults to the packaged catalog.

    Raises:
        ScoreRangeError: a raw score is invalid.
        ConfigurationError: the catalog lacks the primary symptom's protocol.
    """
    classification = classify_scores(_as_vector(scores))
    return classification, recommend(classification, catalog)


class ScreeningEngine:
    """
    Screening pipeline with an injected catalog and clock.

    Holds no mutable state after construction.
    """

    def __init__(
        self,
        catalog: Optional[InterventionCatalog] = None,
        clock: Clock = utc_now,
        max_samples: Optional[int] = None,
        trend_method: TrendMethod = TrendMethod.REGRESSION,
    ):
        self.catalog = catalog or default_catalog()
        self.clock = clock
        self.max_samples = max_samples
        self.trend_method = trend_method

    # ── Single screening ──────────────────────────────────────────────────
    def classify(self, scores: ScoreInput) -> Tuple[RiskClassification, Recommendation]:
        return classify(scores, self.catalog)

    def screen(
        self,
        raw_scores: ScoreInput,
        timestamp: Optional[datetime] = None,
        record_id: Optional[str] = None,
    ) -> ScreeningRecord:
        """Run one submission through the pipeline and return a record ready to persist."""
        vector = _as_vector(raw_scores)
        classification, recommendation = classify(vector, self.catalog)
        return ScreeningRecord(
            timestamp=timestamp or self.clock(),
            scores=vector,
            classification=classification,
            recommendation=recommendation,
            record_id=record_id,
        )

    # ── History ───────────────────────────────────────────────────────────
    def analyze_trend(self, series: Sequence) -> TrendResult:
        return analyze_trend(series, self.trend_method)

    def aggregate_statistics(
        self,
        records: Sequence[ScreeningRecord],
        symptom: Optional[int] = None,
    ) -> HistoryStatistics:
        return aggregate_statistics(
            records,
            now=self.clock(),
            symptom=symptom,
            max_samples=self.max_samples,
            trend_method=self.trend_method,
        )

    def plan_follow_up(
        self,
        classification: RiskClassification,
        last_timestamp: Union[datetime, str],
        trend: Optional[Union[TrendResult, TrendDirection, str]] = None,
    ) -> FollowUpPlan:
        return plan_follow_up(classification, last_timestamp, now=self.clock(), trend=trend)

    def analyze_history(self, records: Sequence[ScreeningRecord]) -> HistoryReport:
        """
        Full analytics for one patient's history.

        Raises:
            HistoryAnalysisError: no record with a usable timestamp.
        """
        now = self.clock()
        history = prepare_history(records, self.max_samples)
        if not history.records:
            raise HistoryAnalysisError(
                "No screening record with a usable timestamp",
                details={"supplied": len(records), "skipped": history.skipped},
            )

        latest = history.records[-1]
        trends = analyze_patient_trends(records, self.trend_method, prepared=history)
        statistics = aggregate_statistics(
            records,
            now=now,
            max_samples=self.max_samples,
            trend_method=self.trend_method,
            prepared=history,
        )
        follow_up = plan_follow_up(
            latest.record.classification, latest.timestamp, now=now, trend=trends.overall
        )

        logger.info(
            f"analyze_history: {statistics.total_screenings} screening(s), "
            f"overall={trends.overall.direction.value}, follow_up_needed={follow_up.follow_up_needed}"
        )
        return HistoryReport(
            trends=trends,
            statistics=statistics,
            follow_up=follow_up,
            status=screening_status(latest.record.classification, latest.timestamp, now=now),
            interventions=intervention_outcomes(records, prepared=history),
        )
