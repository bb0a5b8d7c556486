"""
Recommendation Layer

Maps a classified screening to its nursing intervention protocol.

Usage:
    from palliative_screening.core.recommendation import recommend, load_catalog

    catalog = load_catalog()                   # packaged, versioned JSON table
    recommendation = recommend(classification, catalog)
    print(recommendation.protocol.therapy_type, recommendation.urgency_level)
"""
from .base import InterventionProtocol, Recommendation, UrgencyLevel
from .catalog import InterventionCatalog, default_catalog, load_catalog
from .mapper import recommend, urgency_for_tier

__all__ = [
    "InterventionProtocol",
    "Recommendation",
    "UrgencyLevel",
    "InterventionCatalog",
    "default_catalog",
    "load_catalog",
    "recommend",
    "urgency_for_tier",
]
