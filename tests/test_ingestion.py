"""Tests for the ingestion writer."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import func, select

from datastore.database import Database
from datastore.schema import readings
from models.records import Reading
from services.errors import ConflictError, NotFoundError, ValidationError
from services.readings import ReadingsService
from services.resolution import MAX_TIMESTAMP, MIN_TIMESTAMP

TS = 1_700_000_000


async def _open_service(tmp_path: Path) -> ReadingsService:
    service = ReadingsService(Database(url=f"sqlite+aiosqlite:///{tmp_path / 'ingest.db'}"))
    await service.bootstrap(seed=False)
    await service.register_location("kitchen")
    await service.register_sensor("temperature")
    return service


async def _reading_count(service: ReadingsService) -> int:
    async with service.database.connect() as conn:
        result = await conn.execute(select(func.count()).select_from(readings))
        return result.scalar_one()


def test_write_reading_appends_row(tmp_path: Path) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            await service.write_reading(Reading(TS, "kitchen", "temperature", 21.5))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 1


@pytest.mark.parametrize(
    ("location", "sensor"),
    [("attic", "temperature"), ("kitchen", "radon"), ("attic", "radon")],
)
def test_unknown_names_fail_without_writing(tmp_path: Path, location: str, sensor: str) -> None:
    async def scenario() -> tuple[int, list[str], list[str]]:
        service = await _open_service(tmp_path)
        try:
            with pytest.raises(NotFoundError):
                await service.write_reading(Reading(TS, location, sensor, 1.0))
            return (
                await _reading_count(service),
                await service.list_locations(),
                await service.list_sensors(),
            )
        finally:
            await service.shutdown()

    count, location_names, sensor_names = asyncio.run(scenario())

    assert count == 0
    assert location_names == ["kitchen"]
    assert sensor_names == ["temperature"]


def test_duplicate_reading_reports_conflict(tmp_path: Path) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            await service.write_reading(Reading(TS, "kitchen", "temperature", 21.5))
            with pytest.raises(ConflictError):
                await service.write_reading(Reading(TS, "kitchen", "temperature", 22.0))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 1


def test_concurrent_duplicates_keep_exactly_one(tmp_path: Path) -> None:
    async def scenario() -> tuple[list[object], int]:
        service = await _open_service(tmp_path)
        try:
            outcomes = await asyncio.gather(
                service.write_reading(Reading(TS, "kitchen", "temperature", 1.0)),
                service.write_reading(Reading(TS, "kitchen", "temperature", 2.0)),
                return_exceptions=True,
            )
            return list(outcomes), await _reading_count(service)
        finally:
            await service.shutdown()

    outcomes, count = asyncio.run(scenario())

    assert count == 1
    assert sum(outcome is None for outcome in outcomes) == 1
    assert sum(isinstance(outcome, ConflictError) for outcome in outcomes) == 1


def test_same_timestamp_for_other_sensor_is_independent(tmp_path: Path) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            await service.register_sensor("humidity")
            await service.write_reading(Reading(TS, "kitchen", "temperature", 21.5))
            await service.write_reading(Reading(TS, "kitchen", "humidity", 48.0))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 2


@pytest.mark.parametrize(
    "timestamp", [MAX_TIMESTAMP + 1, MIN_TIMESTAMP - 1, 2**63, -(2**63) - 1]
)
def test_unformattable_timestamp_is_rejected_without_writing(
    tmp_path: Path, timestamp: int
) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            with pytest.raises(ValidationError):
                await service.write_reading(Reading(timestamp, "kitchen", "temperature", 1.0))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 0


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_value_is_rejected_without_writing(tmp_path: Path, value: float) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            with pytest.raises(ValidationError):
                await service.write_reading(Reading(TS, "kitchen", "temperature", value))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 0


def test_edge_of_formattable_range_is_stored(tmp_path: Path) -> None:
    async def scenario() -> int:
        service = await _open_service(tmp_path)
        try:
            await service.write_reading(Reading(MIN_TIMESTAMP, "kitchen", "temperature", 1.0))
            await service.write_reading(Reading(MAX_TIMESTAMP, "kitchen", "temperature", 2.0))
            return await _reading_count(service)
        finally:
            await service.shutdown()

    assert asyncio.run(scenario()) == 2
