from .screening import (
    ClassifyRequest,
    FollowUpRequest,
    HealthResponse,
    HistoryRequest,
    RecordInput,
    SymptomResponse,
)

__all__ = [
    "ClassifyRequest",
    "FollowUpRequest",
    "HealthResponse",
    "HistoryRequest",
    "RecordInput",
    "SymptomResponse",
]
