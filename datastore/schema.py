"""Table definitions and seed vocabulary for the readings store."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

metadata = MetaData()

locations = Table(
    "locations",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False, unique=True),
)

sensors = Table(
    "sensors",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False, unique=True),
)

readings = Table(
    "readings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("timestamp", Integer, nullable=False),
    Column("location_id", Integer, ForeignKey("locations.id"), nullable=False),
    Column("sensor_id", Integer, ForeignKey("sensors.id"), nullable=False),
    Column("value", Float, nullable=False),
    UniqueConstraint(
        "timestamp", "sensor_id", "location_id", name="uq_readings_sample"
    ),
)

SEED_LOCATIONS = (
    "bathroom-social",
    "bedroom",
    "living-room",
    "kitchen",
    "outside",
)

SEED_SENSORS = (
    "temperature",
    "humidity",
)
