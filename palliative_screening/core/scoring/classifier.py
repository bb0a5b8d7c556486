"""
Risk Classifier

Derives the highest score, the primary symptom and the risk tier from a
ScoreVector.

Tier thresholds on the highest score (monotonic):
    0      → none
    1–3    → low
    4–6    → medium
    7–8    → high
    9–10   → critical

Ties on the highest score go to the lowest symptom index, so a screening
with pain and nausea both at 7 is attributed to pain.
"""
from __future__ import annotations

from typing import Tuple

from palliative_screening.utils import get_logger
from .base import RiskClassification, RiskTier, ScoreVector, Symptom

logger = get_logger(__name__)

# ── Thresholds (inclusive lower bounds) ───────────────────────────────────────
LOW_MIN      = 1
MEDIUM_MIN   = 4
HIGH_MIN     = 7
CRITICAL_MIN = 9

_ACTION_REQUIRED = {
    RiskTier.NONE:     "Continue routine monitoring",
    RiskTier.LOW:      "Provide complementary therapy according to the nursing diagnosis",
    RiskTier.MEDIUM:   "Contact the nearest care facility for further evaluation",
    RiskTier.HIGH:     "Refer to a care facility or professional for immediate treatment",
    RiskTier.CRITICAL: "Refer to a care facility or professional for immediate treatment",
}

_SEVERITY_LABELS = (
    (HIGH_MIN, "severe"),
    (MEDIUM_MIN, "moderate"),
    (LOW_MIN, "mild"),
)


def tier_for_score(highest_score: int) -> RiskTier:
    if highest_score >= CRITICAL_MIN:
        return RiskTier.CRITICAL
    if highest_score >= HIGH_MIN:
        return RiskTier.HIGH
    if highest_score >= MEDIUM_MIN:
        return RiskTier.MEDIUM
    if highest_score >= LOW_MIN:
        return RiskTier.LOW
    return RiskTier.NONE


def severity_label(score: int) -> str:
    """Per-item wording used on the questionnaire: none / mild / moderate / severe."""
    for lower_bound, label in _SEVERITY_LABELS:
        if score >= lower_bound:
            return label
    return "none"


def _highest(vector: ScoreVector) -> Tuple[int, Symptom]:
    # Strict '>' keeps the first (lowest-index) symptom on ties
    best_symptom, best_score = Symptom.PAIN, vector[Symptom.PAIN]
    for symptom, score in vector.items():
        if score > best_score:
            best_symptom, best_score = symptom, score
    return best_score, best_symptom


def classify_scores(vector: ScoreVector) -> RiskClassification:
    """
    Classify a normalized ScoreVector.

    Args:
        vector: Complete ScoreVector from ``normalize_scores``.

    Returns:
        RiskClassification with highest_score in [0, 10] and
        primary_symptom in 1..9.
    """
    highest_score, primary_symptom = _highest(vector)
    tier = tier_for_score(highest_score)

    logger.debug(
        f"classify_scores: highest={highest_score} primary={int(primary_symptom)} tier={tier.value}"
    )
    return RiskClassification(
        highest_score=highest_score,
        primary_symptom=primary_symptom,
        risk_tier=tier,
        action_required=_ACTION_REQUIRED[tier],
    )
