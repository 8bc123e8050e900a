"""Bucket granularity selection for range queries.

Queries should return at most about a thousand rows. Sensors report roughly
every five minutes, so raw samples cover about 3.5 days before the cap is
reached. Wider spans are averaged per hour, day, month, and finally year.
"""

from __future__ import annotations

from enum import Enum

from services.errors import ValidationError

DAY = 24 * 60 * 60
YEAR = 365 * DAY

UNGROUPED_LIMIT = int(DAY * 3.5)
HOUR_LIMIT = DAY * 40
DAY_LIMIT = int(YEAR * 2.7)
MONTH_LIMIT = YEAR * 83

# SQLite's strftime only formats years 0000 through 9999.
MIN_TIMESTAMP = -62_167_219_200  # 0000-01-01T00:00:00Z
MAX_TIMESTAMP = 253_402_300_799  # 9999-12-31T23:59:59Z


class BucketFormat(Enum):
    """Truncation granularity, carrying its ``strftime`` pattern."""

    SECOND = "%Y-%m-%dT%H:%M:%SZ"
    HOUR = "%Y-%m-%dT%H:00:00Z"
    DAY = "%Y-%m-%dT00:00:00Z"
    MONTH = "%Y-%m-01T00:00:00Z"
    YEAR = "%Y-01-01T00:00:00Z"

    @property
    def pattern(self) -> str:
        return self.value


# Ordered by exclusive upper bound; spans at or above the last bound use YEAR.
_TIERS: tuple[tuple[int, BucketFormat], ...] = (
    (UNGROUPED_LIMIT, BucketFormat.SECOND),
    (HOUR_LIMIT, BucketFormat.HOUR),
    (DAY_LIMIT, BucketFormat.DAY),
    (MONTH_LIMIT, BucketFormat.MONTH),
)


def check_timestamp(timestamp: int, label: str = "timestamp") -> int:
    """Reject timestamps that the store cannot bucket."""
    if not MIN_TIMESTAMP <= timestamp <= MAX_TIMESTAMP:
        raise ValidationError(
            f"{label} {timestamp} is outside [{MIN_TIMESTAMP}, {MAX_TIMESTAMP}]."
        )
    return timestamp


def select_bucket_format(span_seconds: int) -> BucketFormat:
    """Pick the bucket granularity for a query spanning ``span_seconds``."""
    if span_seconds < 1:
        raise ValidationError(
            f"Query interval must span at least one second, got {span_seconds}."
        )
    for upper_bound, bucket_format in _TIERS:
        if span_seconds < upper_bound:
            return bucket_format
    return BucketFormat.YEAR
