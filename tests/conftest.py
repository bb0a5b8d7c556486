"""
Pytest Configuration and Fixtures

Shared fixtures for ESAS screening core tests. The clock is always fixed.
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List
import sys

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from palliative_screening.core.engine import ScreeningEngine
from palliative_screening.core.history import ScreeningRecord
from palliative_screening.core.recommendation import InterventionCatalog, load_catalog


FIXED_NOW = datetime(2025, 3, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Reference 'current time' for all history tests."""
    return FIXED_NOW


@pytest.fixture
def catalog() -> InterventionCatalog:
    """The packaged intervention catalog."""
    return load_catalog()


@pytest.fixture
def engine(catalog) -> ScreeningEngine:
    """Engine with the packaged catalog and a frozen clock."""
    return ScreeningEngine(catalog=catalog, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_record(engine) -> Callable[..., ScreeningRecord]:
    """Factory: (timestamp, {symptom: score}) -> classified ScreeningRecord."""
    def _make(timestamp, scores: Dict[int, int]) -> ScreeningRecord:
        return engine.screen(scores, timestamp=timestamp)
    return _make


@pytest.fixture
def improving_history(make_record) -> List[ScreeningRecord]:
    """Four screenings with pain falling 8 → 6 → 4 → 2."""
    return [
        make_record(datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc), {1: 8}),
        make_record(datetime(2025, 2, 5, 12, 0, tzinfo=timezone.utc), {1: 6}),
        make_record(datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc), {1: 4}),
        make_record(datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc), {1: 2}),
    ]


@pytest.fixture
def end_to_end_scores() -> Dict[int, int]:
    """Reference submission: pain 9 dominates."""
    return {1: 9, 2: 3, 3: 2, 4: 1, 5: 0, 6: 0, 7: 2, 8: 1, 9: 3}
