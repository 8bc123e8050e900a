"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from services.resolution import MAX_TIMESTAMP, MIN_TIMESTAMP


class LocationInput(BaseModel):
    """Body of a location registration request."""

    name: str = Field(..., validation_alias=AliasChoices("name", "location"))


class SensorInput(BaseModel):
    """Body of a sensor registration request."""

    name: str = Field(..., validation_alias=AliasChoices("name", "sensor"))


class DataInput(BaseModel):
    """A single reading submitted by a sensor node."""

    timestamp: int = Field(
        ...,
        validation_alias=AliasChoices("timestamp", "unix_timestamp"),
        ge=MIN_TIMESTAMP,
        le=MAX_TIMESTAMP,
        description="Unix timestamp in seconds, within years 0000-9999.",
    )
    location: str
    sensor: str
    value: float = Field(..., allow_inf_nan=False)


class QueryInput(BaseModel):
    """Range query over one location and sensor."""

    from_ts: int = Field(
        ...,
        validation_alias=AliasChoices("from", "unix_timestamp_from"),
        ge=MIN_TIMESTAMP,
        le=MAX_TIMESTAMP,
        description="Interval start, unix seconds, inclusive.",
    )
    to_ts: int = Field(
        ...,
        validation_alias=AliasChoices("to", "unix_timestamp_to"),
        ge=MIN_TIMESTAMP,
        le=MAX_TIMESTAMP,
        description="Interval end, unix seconds, inclusive.",
    )
    location: str
    sensor: str


class Acknowledgement(BaseModel):
    """Success marker returned by write endpoints."""

    status: str = "ok"
    id: Optional[int] = Field(
        default=None, description="Identifier of the registered name, when applicable."
    )


class Measurement(BaseModel):
    """Average of the readings in one time bucket."""

    bucket_timestamp: str
    average: float
