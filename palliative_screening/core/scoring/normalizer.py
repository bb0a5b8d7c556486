"""
Score Normalizer

Turns a raw questionnaire submission into a complete ScoreVector.
Missing items default to 0. Out-of-range values are rejected, never clamped:
a clamped 12 would silently read as a 10 on the clinical record.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from palliative_screening.utils import get_logger
from palliative_screening.utils.exceptions import ScoreRangeError
from .base import MAX_SCORE, MIN_SCORE, ScoreVector, Symptom

logger = get_logger(__name__)


def _symptom_index(key: Any) -> Symptom:
    """Accept int keys and digit-string keys ("1".."9")."""
    try:
        if isinstance(key, bool):
            raise ValueError(key)
        return Symptom(int(key))
    except (TypeError, ValueError):
        raise ScoreRangeError(
            f"Unknown ESAS symptom index {key!r}; expected 1-{len(Symptom)}",
            symptom_index=key,
        ) from None


def _score_value(symptom: Symptom, value: Any) -> int:
    if isinstance(value, bool):
        raise ScoreRangeError(
            f"Score for symptom {int(symptom)} must be a number, got {value!r}",
            symptom_index=int(symptom),
            value=value,
        )
    if isinstance(value, float):
        if not value.is_integer():
            raise ScoreRangeError(
                f"Score for symptom {int(symptom)} must be a whole number, got {value!r}",
                symptom_index=int(symptom),
                value=value,
            )
        value = int(value)
    if not isinstance(value, int):
        raise ScoreRangeError(
            f"Score for symptom {int(symptom)} must be a number, got {value!r}",
            symptom_index=int(symptom),
            value=value,
        )
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise ScoreRangeError(
            f"Score for symptom {int(symptom)} must be between "
            f"{MIN_SCORE} and {MAX_SCORE}, got {value}",
            symptom_index=int(symptom),
            value=value,
        )
    return value


def normalize_scores(raw: Optional[Mapping[Any, Any]]) -> ScoreVector:
    """
    Build a ScoreVector from a raw symptom -> score mapping.

    Args:
        raw: Mapping keyed by symptom index (int or digit string). Entries
             may be missing or None; both count as 0.

    Returns:
        ScoreVector with all nine symptoms present.

    Raises:
        ScoreRangeError: a value is outside [0, 10], not a whole number,
                         keyed by an unknown symptom index,
                         or given twice (e.g. under 1 and "1").
    """
    scores = {symptom: 0 for symptom in Symptom}
    missing = set(Symptom)
    seen = set()

    for key, value in (raw or {}).items():
        symptom = _symptom_index(key)
        if symptom in seen:
            raise ScoreRangeError(
                f"Symptom {int(symptom)} submitted more than once",
                symptom_index=int(symptom),
                value=value,
                details={"duplicate": True},
            )
        seen.add(symptom)
        if value is None:
            continue
        scores[symptom] = _score_value(symptom, value)
        missing.discard(symptom)

    if missing:
        logger.debug(
            f"normalize_scores: {len(missing)} item(s) missing, defaulted to 0 "
            f"({sorted(int(s) for s in missing)})"
        )

    return ScoreVector(tuple(scores[symptom] for symptom in Symptom))
