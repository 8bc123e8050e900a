"""Service facade wiring the dictionary, writer and query executor."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional

from datastore.database import Database, build_default_database
from datastore.schema import SEED_LOCATIONS, SEED_SENSORS
from models.records import Bucket, Reading
from services.aggregator import AggregationQueryExecutor
from services.dictionary import DictionaryResolver
from services.ingestion import IngestionWriter

logger = logging.getLogger(__name__)


class ReadingsService:
    """Single entry point used by the HTTP layer."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.resolver = DictionaryResolver(database)
        self.writer = IngestionWriter(database, self.resolver)
        self.executor = AggregationQueryExecutor(database, self.resolver)

    async def bootstrap(
        self,
        seed: bool = True,
        locations: Iterable[str] = SEED_LOCATIONS,
        sensors: Iterable[str] = SEED_SENSORS,
    ) -> None:
        """Create missing tables and register the initial vocabulary."""
        await self.database.create_schema()
        if not seed:
            return
        seeded = 0
        for name in locations:
            await self.resolver.register_location(name)
            seeded += 1
        for name in sensors:
            await self.resolver.register_sensor(name)
            seeded += 1
        logger.info("Seed vocabulary registered.", extra={"row_count": seeded})

    async def register_location(self, name: str) -> int:
        return await self.writer.register_location(name)

    async def register_sensor(self, name: str) -> int:
        return await self.writer.register_sensor(name)

    async def list_locations(self) -> list[str]:
        return await self.resolver.list_locations()

    async def list_sensors(self) -> list[str]:
        return await self.resolver.list_sensors()

    async def write_reading(self, reading: Reading) -> None:
        await self.writer.write_reading(
            reading.location, reading.sensor, reading.timestamp, reading.value
        )

    async def query(
        self, location: str, sensor: str, from_ts: int, to_ts: int
    ) -> list[Bucket]:
        return await self.executor.query(location, sensor, from_ts, to_ts)

    async def shutdown(self) -> None:
        await self.database.dispose()


@lru_cache
def build_default_service(database_url: Optional[str] = None) -> ReadingsService:
    """Factory that wires the service with the configured database."""
    if database_url is None:
        return ReadingsService(database=build_default_database())
    return ReadingsService(database=build_default_database(database_url))
