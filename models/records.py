"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Reading:
    """A single sample as submitted by a sensor node."""

    timestamp: int
    location: str
    sensor: str
    value: float


@dataclass(slots=True)
class Bucket:
    """Average of all readings that fall in one truncated time slot."""

    bucket_timestamp: str
    average: float
