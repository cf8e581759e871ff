"""
Timestamp helpers.

Source timestamps come in several ISO-like shapes ("2020-08-21 22:45:14",
"2024-03-01T10:00:00Z", ...). Naive values are read as UTC.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

import config.settings as settings

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO-like string into an aware UTC datetime.

    Returns None for missing, non-string or unparseable input.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        parsed = pd.to_datetime(value.strip(), utc=True, errors="coerce", format="ISO8601")
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Unparseable timestamp {value!r}: {e}")
        return None

    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def to_iso(moment: Optional[datetime]) -> Optional[str]:
    """Format as 2024-03-01T10:00:00.000Z (millisecond precision, UTC)."""
    if moment is None:
        return None
    utc = moment.astimezone(timezone.utc)
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}T"
        f"{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}.{utc.microsecond // 1000:03d}Z"
    )


def canonical_timestamp(value) -> str:
    """ISO instant for value, epoch zero when it cannot be parsed."""
    parsed = parse_timestamp(value)
    return to_iso(parsed) if parsed is not None else settings.EPOCH_ISO


def period_key(moment: datetime) -> str:
    """UTC calendar month bucket, e.g. 2024-03."""
    utc = moment.astimezone(timezone.utc)
    return f"{utc.year:04d}-{utc.month:02d}"
