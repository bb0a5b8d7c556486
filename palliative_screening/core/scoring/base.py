"""
Scoring Layer — Base Types

The closed ESAS symptom domain and the immutable value objects produced by
the normalizer and the classifier. Downstream layers (recommendation,
history analytics) consume only these types.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Iterator, Tuple

from palliative_screening.utils.exceptions import ScoreRangeError

MIN_SCORE = 0
MAX_SCORE = 10


class Symptom(IntEnum):
    """The nine ESAS questionnaire items, in questionnaire order."""
    PAIN               = 1
    TIREDNESS          = 2
    DROWSINESS         = 3
    NAUSEA             = 4
    APPETITE           = 5
    SHORTNESS_OF_BREATH = 6
    DEPRESSION         = 7
    ANXIETY            = 8
    WELLBEING          = 9

    @property
    def label(self) -> str:
        return _SYMPTOM_TEXT[self][0]

    @property
    def description(self) -> str:
        return _SYMPTOM_TEXT[self][1]


_SYMPTOM_TEXT: Dict[Symptom, Tuple[str, str]] = {
    Symptom.PAIN:                ("Pain", "Pain currently experienced"),
    Symptom.TIREDNESS:           ("Tiredness / lack of energy", "Fatigue or lack of energy"),
    Symptom.DROWSINESS:          ("Drowsiness / sleep disturbance", "Sleepiness or difficulty staying awake"),
    Symptom.NAUSEA:              ("Nausea", "Nausea or urge to vomit"),
    Symptom.APPETITE:            ("Lack of appetite", "Reduced appetite"),
    Symptom.SHORTNESS_OF_BREATH: ("Shortness of breath", "Breathlessness or laboured breathing"),
    Symptom.DEPRESSION:          ("Depression / hopelessness", "Sadness, low mood or loss of motivation"),
    Symptom.ANXIETY:             ("Anxiety", "Worry or nervousness"),
    Symptom.WELLBEING:           ("Overall wellbeing", "How the patient feels overall"),
}


class RiskTier(str, Enum):
    """
    Clinical severity bucket derived from the highest single symptom score.

    NONE     – 0, no symptom burden reported
    LOW      – 1–3, mild
    MEDIUM   – 4–6, moderate
    HIGH     – 7–8, severe
    CRITICAL – 9–10, most severe
    """
    NONE     = "none"
    LOW      = "low"
    MEDIUM   = "medium"
    HIGH     = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal used for monotonicity checks and the risk trend series."""
        return _TIER_RANK[self]

    @property
    def is_elevated(self) -> bool:
        return self.rank >= _TIER_RANK[RiskTier.MEDIUM]


_TIER_RANK = {
    RiskTier.NONE:     0,
    RiskTier.LOW:      1,
    RiskTier.MEDIUM:   2,
    RiskTier.HIGH:     3,
    RiskTier.CRITICAL: 4,
}


@dataclass(frozen=True)
class ScoreVector:
    """
    Complete, validated set of nine ESAS scores.

    Indexed by symptom number (1–9), never by position. Build one with
    ``normalize_scores`` rather than directly when the input is untrusted.
    """
    scores: Tuple[int, ...]

    def __post_init__(self):
        if len(self.scores) != len(Symptom):
            raise ScoreRangeError(
                f"ScoreVector needs exactly {len(Symptom)} scores, got {len(self.scores)}",
                value=len(self.scores),
            )
        for symptom, score in zip(Symptom, self.scores):
            if isinstance(score, bool) or not isinstance(score, int) \
                    or not MIN_SCORE <= score <= MAX_SCORE:
                raise ScoreRangeError(
                    f"Score for symptom {int(symptom)} must be an integer in "
                    f"[{MIN_SCORE}, {MAX_SCORE}], got {score!r}",
                    symptom_index=int(symptom),
                    value=score,
                )

    def __getitem__(self, symptom: int) -> int:
        return self.scores[Symptom(symptom) - 1]

    def __iter__(self) -> Iterator[int]:
        return iter(self.scores)

    def items(self) -> Iterator[Tuple[Symptom, int]]:
        return zip(Symptom, self.scores)

    def to_dict(self) -> Dict[str, int]:
        return {str(int(symptom)): score for symptom, score in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[Any, Any]) -> "ScoreVector":
        """Rebuild from a persisted ``to_dict`` mapping (or any raw submission)."""
        from .normalizer import normalize_scores
        return normalize_scores(data)


@dataclass(frozen=True)
class RiskClassification:
    """Highest score, the symptom that produced it, and the resulting tier."""
    highest_score: int
    primary_symptom: Symptom
    risk_tier: RiskTier
    action_required: str = ""

    def to_dict(self) -> dict:
        return {
            "highest_score": self.highest_score,
            "primary_symptom": int(self.primary_symptom),
            "primary_symptom_label": self.primary_symptom.label,
            "risk_tier": self.risk_tier.value,
            "action_required": self.action_required,
        }
