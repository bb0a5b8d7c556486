"""
Unit Tests for the Statistics Aggregator

Tests for distribution, frequency, variability, improvement and cadence
statistics, plus intervention outcomes.
"""
import logging
import math
import pytest
from datetime import datetime, timezone

from palliative_screening.core.history import (
    Effectiveness,
    TrendDirection,
    aggregate_statistics,
    intervention_outcomes,
)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestAggregateStatistics:
    """Tests for aggregate_statistics over the improving pain history."""

    def test_risk_distribution(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)

        assert stats.total_screenings == 4
        assert stats.risk_distribution == {
            "none": 0, "low": 1, "medium": 2, "high": 1, "critical": 0,
        }

    def test_frequency(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)

        assert stats.frequency.this_period == 1      # March
        assert stats.frequency.last_period == 2      # February
        assert stats.span_days == 59                 # Jan 10 → Mar 10
        assert stats.frequency.average_per_month == round(4 / 59 * 30)

    def test_variability_is_population_std(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)
        assert stats.variability == pytest.approx(math.sqrt(5))

    def test_improvement_rate(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)
        assert stats.improvement_rate_pct == pytest.approx(75.0)

    def test_cadence(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)

        assert stats.longest_gap_days == 26
        assert stats.screening_streak == 4
        assert stats.average_days_between_screenings == 20
        assert stats.average_improvement_per_screening == 2.0
        assert stats.first_screening == _utc(2025, 1, 10, 12)
        assert stats.last_screening == _utc(2025, 3, 10, 12)

    def test_symptom_summaries(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now)
        pain = stats.symptom_summaries[1]
        tiredness = stats.symptom_summaries[2]

        assert pain.average_score == 5.0
        assert (pain.max_score, pain.min_score) == (8, 2)
        assert pain.improvement_rate_pct == 75.0
        assert pain.variability == 2.2
        assert pain.direction == TrendDirection.IMPROVING
        assert tiredness.average_score == 0.0
        assert tiredness.improvement_rate_pct == 0.0
        assert tiredness.direction == TrendDirection.STABLE

    def test_chosen_symptom_series(self, make_record, now):
        records = [
            make_record(_utc(2025, 3, 1), {1: 9, 8: 4}),
            make_record(_utc(2025, 3, 8), {1: 9, 8: 2}),
        ]
        stats = aggregate_statistics(records, now=now, symptom=8)

        assert stats.improvement_rate_pct == pytest.approx(50.0)
        assert stats.variability == pytest.approx(1.0)

    def test_idempotent(self, improving_history, now):
        first = aggregate_statistics(improving_history, now=now)
        second = aggregate_statistics(improving_history, now=now)

        assert first.to_dict() == second.to_dict()

    def test_empty_history(self, now):
        stats = aggregate_statistics([], now=now)

        assert stats.total_screenings == 0
        assert stats.span_days == 0
        assert stats.frequency.average_per_month == 0
        assert stats.variability == 0.0
        assert stats.improvement_rate_pct == 0.0
        assert stats.screening_streak == 0
        assert sum(stats.risk_distribution.values()) == 0

    def test_single_record(self, make_record, now):
        stats = aggregate_statistics([make_record(_utc(2025, 3, 1), {4: 5})], now=now)

        assert stats.total_screenings == 1
        assert stats.span_days == 0
        assert stats.frequency.average_per_month == 0
        assert stats.improvement_rate_pct == 0.0
        assert stats.screening_streak == 1
        assert stats.longest_gap_days == 0

    def test_zero_first_score_gives_zero_rate(self, make_record, now):
        records = [
            make_record(_utc(2025, 3, 1), {}),
            make_record(_utc(2025, 3, 5), {2: 4}),
        ]
        assert aggregate_statistics(records, now=now).improvement_rate_pct == 0.0

    def test_worsening_gives_negative_rate(self, make_record, now):
        records = [
            make_record(_utc(2025, 3, 1), {2: 4}),
            make_record(_utc(2025, 3, 5), {2: 8}),
        ]
        assert aggregate_statistics(records, now=now).improvement_rate_pct == pytest.approx(-100.0)

    def test_streak_breaks_on_long_gap(self, make_record, now):
        records = [
            make_record(_utc(2025, 1, 1), {1: 3}),
            make_record(_utc(2025, 3, 15), {1: 3}),
            make_record(_utc(2025, 3, 17), {1: 3}),
            make_record(_utc(2025, 3, 19), {1: 3}),
        ]
        stats = aggregate_statistics(records, now=now)

        assert stats.screening_streak == 3
        assert stats.longest_gap_days == 73

    def test_month_boundary_across_year(self, make_record):
        records = [
            make_record(_utc(2024, 12, 20), {1: 3}),
            make_record(_utc(2025, 1, 5), {1: 3}),
        ]
        stats = aggregate_statistics(records, now=_utc(2025, 1, 15))

        assert stats.frequency.this_period == 1
        assert stats.frequency.last_period == 1

    def test_malformed_timestamp_skipped(self, improving_history, make_record, now, caplog):
        records = improving_history + [make_record("31/02/2025", {1: 10})]

        with caplog.at_level(logging.WARNING):
            stats = aggregate_statistics(records, now=now)

        assert stats.total_screenings == 4
        assert stats.skipped_records == 1
        assert stats.risk_distribution["critical"] == 0
        assert "MALFORMED_TIMESTAMP" in caplog.text

    def test_iso_string_timestamps(self, make_record, now):
        records = [
            make_record("2025-03-01T08:00:00Z", {1: 6}),
            make_record("2025-03-11T08:00:00+00:00", {1: 3}),
        ]
        stats = aggregate_statistics(records, now=now)

        assert stats.total_screenings == 2
        assert stats.span_days == 10
        assert stats.improvement_rate_pct == pytest.approx(50.0)

    def test_truncation(self, improving_history, now):
        stats = aggregate_statistics(improving_history, now=now, max_samples=3)

        assert stats.truncated
        assert stats.total_screenings == 3
        assert stats.first_screening == _utc(2025, 2, 5, 12)

    def test_to_dict(self, improving_history, now):
        body = aggregate_statistics(improving_history, now=now).to_dict()

        assert body["frequency"] == {"this_period": 1, "last_period": 2, "average_per_month": 2}
        assert body["variability"] == 2.236
        assert body["first_screening"] == "2025-01-10T12:00:00+00:00"
        assert body["symptom_summaries"]["1"]["max_score"] == 8


class TestInterventionOutcomes:
    """Tests for intervention_outcomes."""

    def test_outcomes(self, improving_history, make_record):
        records = improving_history + [make_record(_utc(2025, 3, 18), {1: 6})]
        outcomes = intervention_outcomes(records)

        assert [o.before_score for o in outcomes] == [None, 8, 6, 4, 2]
        assert [o.improvement for o in outcomes] == [0, 2, 2, 2, -4]
        assert outcomes[1].effectiveness == Effectiveness.MEDIUM
        assert outcomes[-1].effectiveness == Effectiveness.LOW
        assert outcomes[0].therapy_type == "Acupressure"

    def test_large_drop_is_highly_effective(self, make_record):
        records = [
            make_record(_utc(2025, 3, 1), {6: 9}),
            make_record(_utc(2025, 3, 8), {6: 5}),
        ]
        outcomes = intervention_outcomes(records)

        assert outcomes[1].improvement == 4
        assert outcomes[1].effectiveness == Effectiveness.HIGH

    def test_therapy_is_the_one_recommended_at_that_screening(self, make_record):
        records = [
            make_record(_utc(2025, 3, 1), {1: 8}),
            make_record(_utc(2025, 3, 8), {6: 5}),
        ]
        outcomes = intervention_outcomes(records)

        assert outcomes[0].therapy_type == "Acupressure"
        assert outcomes[1].therapy_type == "Deep breathing exercise and gentle massage"
        assert outcomes[1].improvement == 3
