"""
Recommendation Layer — Base Types

Read-only intervention protocols and the per-screening Recommendation
derived from them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from palliative_screening.core.scoring.base import Symptom


class UrgencyLevel(str, Enum):
    """
    How quickly the recommended intervention should start.

    HIGH   – implement immediately, evaluate within 24 h
    MEDIUM – implement routinely, evaluate within 1 week
    LOW    – supportive care, evaluate monthly
    """
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


@dataclass(frozen=True)
class InterventionProtocol:
    """One catalog entry: the nursing protocol for a primary symptom."""
    symptom: Symptom
    diagnosis_label: str
    therapy_type: str
    ordered_steps: Tuple[str, ...]
    frequency: str
    duration: str
    evaluation_criteria: Tuple[str, ...] = ()
    precautions: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    clinical_priority: int = 0               # 1 = triaged first
    tier_frequency: Tuple[Tuple[str, str], ...] = ()

    def frequency_for(self, urgency: UrgencyLevel) -> str:
        """Therapy-specific frequency for an urgency level, falling back to ``frequency``."""
        return dict(self.tier_frequency).get(urgency.value, self.frequency)

    def to_dict(self) -> dict:
        return {
            "symptom": int(self.symptom),
            "diagnosis_label": self.diagnosis_label,
            "therapy_type": self.therapy_type,
            "ordered_steps": list(self.ordered_steps),
            "frequency": self.frequency,
            "duration": self.duration,
            "evaluation_criteria": list(self.evaluation_criteria),
            "precautions": list(self.precautions),
            "references": list(self.references),
            "clinical_priority": self.clinical_priority,
            "tier_frequency": dict(self.tier_frequency),
        }


@dataclass(frozen=True)
class Recommendation:
    """Protocol for the primary symptom, with urgency set by the risk tier."""
    protocol: InterventionProtocol
    urgency_level: UrgencyLevel
    frequency_advice: str
    therapy_frequency: str = ""
    additional_notes: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        return {
            "protocol": self.protocol.to_dict(),
            "urgency_level": self.urgency_level.value,
            "frequency_advice": self.frequency_advice,
            "therapy_frequency": self.therapy_frequency,
            "additional_notes": list(self.additional_notes),
        }
