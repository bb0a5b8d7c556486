"""
Recommendation Mapper

Maps a RiskClassification to the intervention protocol of its primary
symptom and sets urgency from the risk tier.

Urgency modulation:
    critical / high → HIGH    implement immediately, evaluate within 24h
    medium          → MEDIUM  implement routinely, evaluate within 1 week
    low / none      → LOW     supportive care, evaluate monthly

Referral notes depend on the highest score, not the tier:
    ≥ 7 → refer to a care facility immediately
    ≥ 4 → contact a care facility for further evaluation
"""
from __future__ import annotations

from typing import List, Optional

from palliative_screening.core.scoring.base import RiskClassification, RiskTier
from palliative_screening.utils import get_logger
from .base import Recommendation, UrgencyLevel
from .catalog import InterventionCatalog, default_catalog

logger = get_logger(__name__)

REFER_IMMEDIATELY_SCORE = 7
CONTACT_FACILITY_SCORE  = 4

_TIER_URGENCY = {
    RiskTier.CRITICAL: UrgencyLevel.HIGH,
    RiskTier.HIGH:     UrgencyLevel.HIGH,
    RiskTier.MEDIUM:   UrgencyLevel.MEDIUM,
    RiskTier.LOW:      UrgencyLevel.LOW,
    RiskTier.NONE:     UrgencyLevel.LOW,
}

_FREQUENCY_ADVICE = {
    UrgencyLevel.HIGH:   "implement immediately, evaluate within 24h",
    UrgencyLevel.MEDIUM: "implement routinely, evaluate within 1 week",
    UrgencyLevel.LOW:    "implement as supportive care, evaluate monthly",
}

_ESCALATION_NOTES = (
    "Escalate to the attending physician or palliative care team today",
    "Monitor the patient's condition daily until the score falls below 7",
)


def urgency_for_tier(tier: RiskTier) -> UrgencyLevel:
    return _TIER_URGENCY[tier]


def _notes(classification: RiskClassification, urgency: UrgencyLevel) -> List[str]:
    notes = []
    if urgency is UrgencyLevel.HIGH:
        notes.extend(_ESCALATION_NOTES)

    if classification.highest_score >= REFER_IMMEDIATELY_SCORE:
        notes.append("Refer to a care facility immediately")
    elif classification.highest_score >= CONTACT_FACILITY_SCORE:
        notes.append("Contact a care facility for further evaluation")
    return notes


def recommend(
    classification: RiskClassification,
    catalog: Optional[InterventionCatalog] = None,
) -> Recommendation:
    """
    Build the Recommendation for a classified screening.

    Args:
        classification: Output of ``classify_scores``.
        catalog: Protocol table; defaults to the packaged catalog.

    Raises:
        ConfigurationError: the catalog has no protocol for the primary symptom.
    """
    catalog = catalog or default_catalog()
    protocol = catalog.get(classification.primary_symptom)
    urgency = urgency_for_tier(classification.risk_tier)

    recommendation = Recommendation(
        protocol=protocol,
        urgency_level=urgency,
        frequency_advice=_FREQUENCY_ADVICE[urgency],
        therapy_frequency=protocol.frequency_for(urgency),
        additional_notes=tuple(_notes(classification, urgency)),
    )
    logger.debug(
        f"recommend: symptom={int(classification.primary_symptom)} "
        f"therapy='{protocol.therapy_type}' urgency={urgency.value}"
    )
    return recommendation
