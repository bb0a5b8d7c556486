"""
API request/response models for the screening service.

Scores are accepted loosely typed and validated by the core normalizer so
that range errors come back in the core's own error format.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from palliative_screening.core.history import TrendDirection, TrendMethod


class ClassifyRequest(BaseModel):
    """One ESAS submission. Keys are symptom numbers "1".."9"; missing items count as 0."""
    scores: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None
    record_id: Optional[str] = None


class RecordInput(BaseModel):
    """A stored screening as supplied by the persistence layer."""
    timestamp: Any = None          # parsed by the core; unparseable records are skipped
    scores: Dict[str, Any] = Field(default_factory=dict)
    record_id: Optional[str] = None


class HistoryRequest(BaseModel):
    records: List[RecordInput]
    now: Optional[datetime] = None
    max_samples: Optional[int] = Field(None, ge=1)
    trend_method: TrendMethod = TrendMethod.REGRESSION


class FollowUpRequest(BaseModel):
    scores: Dict[str, Any] = Field(default_factory=dict)
    last_timestamp: datetime
    trend: Optional[TrendDirection] = None
    now: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_version: str
    timestamp: str


class SymptomResponse(BaseModel):
    number: int
    label: str
    description: str
