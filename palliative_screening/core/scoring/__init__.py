"""
Scoring Layer

Normalizes a raw ESAS submission and classifies it into a risk tier.

Usage:
    from palliative_screening.core.scoring import normalize_scores, classify_scores

    vector = normalize_scores({"1": 9, "6": 4})
    classification = classify_scores(vector)   # highest=9, primary=PAIN, tier=critical
"""
from .base import (
    MAX_SCORE,
    MIN_SCORE,
    RiskClassification,
    RiskTier,
    ScoreVector,
    Symptom,
)
from .normalizer import normalize_scores
from .classifier import classify_scores, severity_label, tier_for_score

__all__ = [
    "MAX_SCORE",
    "MIN_SCORE",
    "RiskClassification",
    "RiskTier",
    "ScoreVector",
    "Symptom",
    "normalize_scores",
    "classify_scores",
    "severity_label",
    "tier_for_score",
]
