"""
History Layer — Base Types

Screening records as supplied by the persistence collaborator and the
derived, read-only analytics computed over a patient's history.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from palliative_screening.core.recommendation.base import Recommendation, UrgencyLevel
from palliative_screening.core.scoring.base import RiskClassification, ScoreVector


class TrendDirection(str, Enum):
    """Direction of change. IMPROVING means scores are falling (less burden)."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE    = "stable"


class TrendMethod(str, Enum):
    """
    REGRESSION – least-squares slope over the whole series (default)
    WINDOWED   – mean of the last ≤3 samples against the mean of the rest
    """
    REGRESSION = "regression"
    WINDOWED   = "windowed"


class ScreeningStatus(str, Enum):
    OVERDUE     = "overdue"
    HIGH_RISK   = "high_risk"
    MEDIUM_RISK = "medium_risk"
    STABLE      = "stable"


class Effectiveness(str, Enum):
    HIGH   = "high"
    MEDIUM = "medium"
    LOW    = "low"


@dataclass(frozen=True)
class ScreeningRecord:
    """
    One stored assessment event.

    ``timestamp`` is kept as supplied (datetime or ISO-8601 string) and only
    parsed by the analytics, which skip records it cannot parse.
    """
    timestamp: Union[datetime, str]
    scores: ScoreVector
    classification: RiskClassification
    recommendation: Optional[Recommendation] = None
    record_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        ts = self.timestamp.isoformat() if isinstance(self.timestamp, datetime) else self.timestamp
        return {
            "record_id": self.record_id,
            "timestamp": ts,
            "scores": self.scores.to_dict(),
            "classification": self.classification.to_dict(),
            "recommendation": self.recommendation.to_dict() if self.recommendation else None,
        }


@dataclass(frozen=True)
class TrendPoint:
    """One (timestamp, value) sample of a series. Timestamp is None for bare values."""
    timestamp: Optional[datetime]
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "value": self.value,
        }


@dataclass(frozen=True)
class TrendResult:
    """Direction and confidence (0–100) of change across a series."""
    direction: TrendDirection = TrendDirection.STABLE
    confidence: float = 0.0
    points: Tuple[TrendPoint, ...] = ()
    slope: float = 0.0
    method: TrendMethod = TrendMethod.REGRESSION

    @property
    def has_sufficient_data(self) -> bool:
        return len(self.points) >= 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "confidence": round(self.confidence, 2),
            "slope": round(self.slope, 4),
            "method": self.method.value,
            "sufficient_data": self.has_sufficient_data,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass
class PatientTrends:
    """Overall (highest score), per-symptom and risk-tier trends."""
    overall: TrendResult = field(default_factory=TrendResult)
    symptoms: Dict[int, TrendResult] = field(default_factory=dict)
    risk: TrendResult = field(default_factory=TrendResult)
    truncated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.to_dict(),
            "symptoms": {str(k): v.to_dict() for k, v in sorted(self.symptoms.items())},
            "risk": self.risk.to_dict(),
            "truncated": self.truncated,
        }


@dataclass
class ScreeningFrequency:
    this_period: int = 0
    last_period: int = 0
    average_per_month: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "this_period": self.this_period,
            "last_period": self.last_period,
            "average_per_month": self.average_per_month,
        }


@dataclass
class SymptomSummary:
    """Distribution of one symptom's scores over the history."""
    symptom: int
    average_score: float = 0.0
    max_score: int = 0
    min_score: int = 0
    improvement_rate_pct: float = 0.0
    variability: float = 0.0
    direction: TrendDirection = TrendDirection.STABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symptom": self.symptom,
            "average_score": self.average_score,
            "max_score": self.max_score,
            "min_score": self.min_score,
            "improvement_rate_pct": self.improvement_rate_pct,
            "variability": self.variability,
            "direction": self.direction.value,
        }


@dataclass
class HistoryStatistics:
    """Distributional and cadence statistics over a patient's screenings."""
    total_screenings: int = 0
    risk_distribution: Dict[str, int] = field(default_factory=dict)
    frequency: ScreeningFrequency = field(default_factory=ScreeningFrequency)
    variability: float = 0.0
    improvement_rate_pct: float = 0.0
    span_days: int = 0
    screening_streak: int = 0
    longest_gap_days: int = 0
    average_days_between_screenings: int = 0
    average_improvement_per_screening: float = 0.0
    first_screening: Optional[datetime] = None
    last_screening: Optional[datetime] = None
    symptom_summaries: Dict[int, SymptomSummary] = field(default_factory=dict)
    skipped_records: int = 0
    truncated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_screenings": self.total_screenings,
            "risk_distribution": dict(self.risk_distribution),
            "frequency": self.frequency.to_dict(),
            "variability": round(self.variability, 3),
            "improvement_rate_pct": round(self.improvement_rate_pct, 1),
            "span_days": self.span_days,
            "screening_streak": self.screening_streak,
            "longest_gap_days": self.longest_gap_days,
            "average_days_between_screenings": self.average_days_between_screenings,
            "average_improvement_per_screening": self.average_improvement_per_screening,
            "first_screening": self.first_screening.isoformat() if self.first_screening else None,
            "last_screening": self.last_screening.isoformat() if self.last_screening else None,
            "symptom_summaries": {
                str(k): v.to_dict() for k, v in sorted(self.symptom_summaries.items())
            },
            "skipped_records": self.skipped_records,
            "truncated": self.truncated,
        }


@dataclass(frozen=True)
class InterventionOutcome:
    """Change in highest score from the previous screening to this one."""
    timestamp: datetime
    therapy_type: str
    before_score: Optional[int]
    after_score: int
    improvement: int
    effectiveness: Effectiveness

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "therapy_type": self.therapy_type,
            "before_score": self.before_score,
            "after_score": self.after_score,
            "improvement": self.improvement,
            "effectiveness": self.effectiveness.value,
        }


@dataclass(frozen=True)
class FollowUpPlan:
    """When to re-screen, and whether follow-up is needed now."""
    next_recommended_date: date
    follow_up_needed: bool
    priority_level: UrgencyLevel
    days_since_last_screening: int = 0
    overdue: bool = False
    recommended_actions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "next_recommended_date": self.next_recommended_date.isoformat(),
            "follow_up_needed": self.follow_up_needed,
            "priority_level": self.priority_level.value,
            "days_since_last_screening": self.days_since_last_screening,
            "overdue": self.overdue,
            "recommended_actions": list(self.recommended_actions),
        }


@dataclass
class HistoryReport:
    trends: PatientTrends
    statistics: HistoryStatistics
    follow_up: FollowUpPlan
    status: ScreeningStatus
    interventions: List[InterventionOutcome] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trends": self.trends.to_dict(),
            "statistics": self.statistics.to_dict(),
            "follow_up": self.follow_up.to_dict(),
            "status": self.status.value,
            "interventions": [i.to_dict() for i in self.interventions],
        }
