"""
History record preparation shared by the trend and statistics engines.

Parses timestamps, drops records that cannot be placed in time, orders the
remainder and applies the sample cap.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional, Sequence, Tuple

from palliative_screening import config
from palliative_screening.utils import get_logger
from palliative_screening.utils.exceptions import MalformedTimestampError
from .base import ScreeningRecord

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def parse_timestamp(value: Any) -> datetime:
    """
    Coerce a stored timestamp into an aware UTC datetime.

    Naive datetimes and strings without an offset are taken as UTC.

    Raises:
        MalformedTimestampError: value is empty or not ISO-8601.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedTimestampError(
                f"Unparseable timestamp {value!r}", raw_value=value
            ) from None
    else:
        raise MalformedTimestampError(f"Missing or invalid timestamp {value!r}", raw_value=value)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days from ``earlier`` to ``later`` (floored)."""
    return int((later - earlier).total_seconds() // SECONDS_PER_DAY)


@dataclass(frozen=True)
class TimedRecord:
    timestamp: datetime
    record: ScreeningRecord


@dataclass(frozen=True)
class PreparedHistory:
    records: Tuple[TimedRecord, ...]
    skipped: int = 0
    truncated: bool = False


def prepare_history(
    records: Sequence[ScreeningRecord],
    max_samples: Optional[int] = None,
) -> PreparedHistory:
    """
    Parse, filter, order and cap a patient's screening records.

    Records with malformed timestamps are logged and skipped. When more than
    ``max_samples`` usable records remain, only the most recent ones are kept
    and ``truncated`` is set.
    """
    cap = config.MAX_HISTORY_SAMPLES if max_samples is None else max_samples
    timed: List[TimedRecord] = []
    skipped = 0

    for position, record in enumerate(records):
        try:
            timed.append(TimedRecord(parse_timestamp(record.timestamp), record))
        except MalformedTimestampError as exc:
            skipped += 1
            logger.warning(f"prepare_history: skipping record #{position}: {exc.code} ({exc.message})")

    timed.sort(key=lambda t: t.timestamp)

    truncated = False
    if cap and cap > 0 and len(timed) > cap:
        logger.warning(f"prepare_history: {len(timed)} records exceed cap {cap}, keeping most recent")
        timed = timed[-cap:]
        truncated = True

    return PreparedHistory(records=tuple(timed), skipped=skipped, truncated=truncated)
