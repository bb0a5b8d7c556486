"""
Unit Tests for the Follow-up Scheduler

Tests for next-date offsets, the follow-up flag, priority escalation and
the worklist status.
"""
import pytest
from datetime import date, datetime, timedelta, timezone

from palliative_screening.core.history import (
    ScreeningStatus,
    TrendDirection,
    analyze_trend,
    plan_follow_up,
    screening_status,
)
from palliative_screening.core.recommendation import UrgencyLevel
from palliative_screening.core.scoring import classify_scores, normalize_scores


def _classification(score: int):
    return classify_scores(normalize_scores({1: score}))


class TestPlanFollowUp:
    """Tests for plan_follow_up."""

    def test_critical_same_day(self, now):
        plan = plan_follow_up(_classification(9), now, now=now)

        assert plan.follow_up_needed is True
        assert plan.next_recommended_date == (now + timedelta(days=7)).date()
        assert plan.priority_level == UrgencyLevel.HIGH
        assert plan.days_since_last_screening == 0

    def test_high_tier_always_needs_follow_up(self, now):
        plan = plan_follow_up(_classification(7), now - timedelta(days=1), now=now)

        assert plan.follow_up_needed is True
        assert plan.next_recommended_date == date(2025, 3, 26)
        assert "Refer to a care facility immediately" in plan.recommended_actions

    @pytest.mark.parametrize("score,offset", [(0, 30), (2, 30), (5, 14), (8, 7), (10, 7)])
    def test_offset_by_tier(self, now, score, offset):
        last = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)
        plan = plan_follow_up(_classification(score), last, now=now)

        assert plan.next_recommended_date == (last + timedelta(days=offset)).date()

    def test_low_recent_no_follow_up(self, now):
        plan = plan_follow_up(_classification(2), now - timedelta(days=10), now=now)

        assert plan.follow_up_needed is False
        assert plan.priority_level == UrgencyLevel.LOW
        assert plan.recommended_actions == ("Continue routine monitoring",)

    def test_low_overdue(self, now):
        plan = plan_follow_up(_classification(2), now - timedelta(days=31), now=now)

        assert plan.follow_up_needed is True
        assert plan.overdue is True
        assert "Reschedule the screening as soon as possible" in plan.recommended_actions

    def test_low_at_thirty_days_not_overdue(self, now):
        plan = plan_follow_up(_classification(2), now - timedelta(days=30), now=now)

        assert plan.overdue is False
        assert plan.follow_up_needed is False

    def test_medium_after_two_weeks(self, now):
        plan = plan_follow_up(_classification(5), now - timedelta(days=15), now=now)

        assert plan.follow_up_needed is True
        assert plan.priority_level == UrgencyLevel.MEDIUM

    def test_medium_within_two_weeks(self, now):
        plan = plan_follow_up(_classification(5), now - timedelta(days=14), now=now)
        assert plan.follow_up_needed is False

    def test_declining_trend_escalates_elevated_tier(self, now):
        trend = analyze_trend([2, 4, 5])
        plan = plan_follow_up(_classification(5), now, now=now, trend=trend)

        assert trend.direction == TrendDirection.DECLINING
        assert plan.priority_level == UrgencyLevel.HIGH
        assert "Re-evaluate the care plan" in plan.recommended_actions

    def test_declining_trend_does_not_escalate_low_tier(self, now):
        plan = plan_follow_up(_classification(3), now, now=now, trend=TrendDirection.DECLINING)
        assert plan.priority_level == UrgencyLevel.LOW

    def test_improving_trend_keeps_urgency(self, now):
        plan = plan_follow_up(_classification(5), now, now=now, trend="improving")
        assert plan.priority_level == UrgencyLevel.MEDIUM

    def test_string_and_naive_timestamps(self, now):
        plan = plan_follow_up(_classification(5), "2025-03-01T12:00:00", now=now.replace(tzinfo=None))

        assert plan.days_since_last_screening == 19
        assert plan.next_recommended_date == date(2025, 3, 15)

    def test_future_timestamp_clamped(self, now):
        plan = plan_follow_up(_classification(2), now + timedelta(days=2), now=now)
        assert plan.days_since_last_screening == 0

    def test_to_dict(self, now):
        body = plan_follow_up(_classification(9), now, now=now).to_dict()

        assert body["next_recommended_date"] == "2025-03-27"
        assert body["follow_up_needed"] is True
        assert body["priority_level"] == "high"


class TestScreeningStatus:
    """Tests for screening_status."""

    @pytest.mark.parametrize("score,days,status", [
        (2, 31, ScreeningStatus.OVERDUE),
        (9, 31, ScreeningStatus.OVERDUE),
        (9, 0, ScreeningStatus.HIGH_RISK),
        (7, 5, ScreeningStatus.HIGH_RISK),
        (5, 5, ScreeningStatus.MEDIUM_RISK),
        (2, 5, ScreeningStatus.STABLE),
        (0, 0, ScreeningStatus.STABLE),
    ])
    def test_status(self, now, score, days, status):
        assert screening_status(_classification(score), now - timedelta(days=days), now=now) == status
