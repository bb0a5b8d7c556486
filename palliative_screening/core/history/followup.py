"""
Follow-up Scheduler

Next re-screening date and follow-up flag from the latest classification.

    offset              high/critical → 7 days, medium → 14 days, otherwise 30 days
    next date           last screening + offset
    follow-up needed    days since > 30
                        or days since > 14 with tier medium or above
                        or tier high/critical
    priority            urgency of the tier, raised to high when the
                        overall trend is declining at medium tier or above
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

from palliative_screening import config
from palliative_screening.core.recommendation.base import UrgencyLevel
from palliative_screening.core.recommendation.mapper import urgency_for_tier
from palliative_screening.core.scoring.base import RiskClassification, RiskTier
from palliative_screening.utils import get_logger
from .base import FollowUpPlan, ScreeningStatus, TrendDirection, TrendResult
from .records import days_between, parse_timestamp

logger = get_logger(__name__)

_RESCREEN_OFFSET_DAYS = {
    RiskTier.CRITICAL: 7,
    RiskTier.HIGH:     7,
    RiskTier.MEDIUM:   14,
    RiskTier.LOW:      30,
    RiskTier.NONE:     30,
}

_URGENT_TIERS = (RiskTier.HIGH, RiskTier.CRITICAL)


def _direction(trend: Optional[Union[TrendResult, TrendDirection, str]]) -> Optional[TrendDirection]:
    if trend is None:
        return None
    if isinstance(trend, TrendResult):
        return trend.direction
    return TrendDirection(trend)


def _actions(tier: RiskTier, declining: bool, overdue: bool) -> List[str]:
    actions = []
    if tier in _URGENT_TIERS:
        actions.append("Refer to a care facility immediately")
        actions.append("Monitor the patient's condition daily")
    elif tier is RiskTier.MEDIUM:
        actions.append("Schedule a follow-up within 1-2 weeks")
        actions.append("Implement non-pharmacological interventions")
    if declining:
        actions.append("Re-evaluate the care plan")
        actions.append("Consider a specialist consultation")
    if overdue:
        actions.append("Reschedule the screening as soon as possible")
    if not actions:
        actions.append("Continue routine monitoring")
    return actions


def plan_follow_up(
    classification: RiskClassification,
    last_timestamp: Union[datetime, str],
    now: Optional[datetime] = None,
    trend: Optional[Union[TrendResult, TrendDirection, str]] = None,
) -> FollowUpPlan:
    """
    Build the FollowUpPlan for a patient's latest screening.

    Args:
        classification: Classification of the latest screening.
        last_timestamp: When that screening happened.
        now: Reference time; defaults to the current UTC time.
        trend: Overall trend (result or direction) used for priority escalation.

    Raises:
        MalformedTimestampError: ``last_timestamp`` or ``now`` cannot be parsed.
    """
    last = parse_timestamp(last_timestamp)
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    tier = classification.risk_tier

    days_since = max(0, days_between(last, now))
    overdue = days_since > config.FOLLOW_UP_OVERDUE_DAYS

    follow_up_needed = (
        overdue
        or (days_since > config.FOLLOW_UP_ELEVATED_DAYS and tier.is_elevated)
        or tier in _URGENT_TIERS
    )

    declining = _direction(trend) is TrendDirection.DECLINING
    priority = urgency_for_tier(tier)
    if declining and tier.is_elevated:
        priority = UrgencyLevel.HIGH

    plan = FollowUpPlan(
        next_recommended_date=(last + timedelta(days=_RESCREEN_OFFSET_DAYS[tier])).date(),
        follow_up_needed=follow_up_needed,
        priority_level=priority,
        days_since_last_screening=days_since,
        overdue=overdue,
        recommended_actions=tuple(_actions(tier, declining, overdue)),
    )
    logger.debug(
        f"plan_follow_up: tier={tier.value} days_since={days_since} "
        f"needed={plan.follow_up_needed} priority={plan.priority_level.value}"
    )
    return plan


def screening_status(
    classification: RiskClassification,
    last_timestamp: Union[datetime, str],
    now: Optional[datetime] = None,
) -> ScreeningStatus:
    """Worklist status: overdue beats risk, risk beats stable."""
    last = parse_timestamp(last_timestamp)
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)

    if days_between(last, now) > config.FOLLOW_UP_OVERDUE_DAYS:
        return ScreeningStatus.OVERDUE
    if classification.risk_tier in _URGENT_TIERS:
        return ScreeningStatus.HIGH_RISK
    if classification.risk_tier is RiskTier.MEDIUM:
        return ScreeningStatus.MEDIUM_RISK
    return ScreeningStatus.STABLE
