"""Append-only writes of sensor readings."""

from __future__ import annotations

import logging
import math

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from datastore.database import Database, is_unique_violation
from datastore.schema import readings
from services.dictionary import DictionaryResolver
from services.errors import ConflictError, NotFoundError, StoreError, ValidationError
from services.resolution import check_timestamp

logger = logging.getLogger(__name__)


class IngestionWriter:
    """Stores readings against names that are already registered."""

    def __init__(self, database: Database, resolver: DictionaryResolver) -> None:
        self.database = database
        self.resolver = resolver

    async def register_location(self, name: str) -> int:
        return await self.resolver.register_location(name)

    async def register_sensor(self, name: str) -> int:
        return await self.resolver.register_sensor(name)

    async def write_reading(
        self,
        location_name: str,
        sensor_name: str,
        timestamp: int,
        value: float,
    ) -> None:
        """Insert one reading.

        Unknown names raise ``NotFoundError`` and are never registered here.
        A second reading for the same timestamp, location and sensor raises
        ``ConflictError``. Timestamps outside the formattable years and
        non-finite values raise ``ValidationError`` before any store access.
        """
        context = {"location": location_name, "sensor": sensor_name, "timestamp": timestamp}
        try:
            check_timestamp(timestamp)
            if not math.isfinite(value):
                raise ValidationError(f"Reading value must be finite, got {value}.")
            location_id = await self.resolver.resolve_location(location_name)
            sensor_id = await self.resolver.resolve_sensor(sensor_name)
        except (ValidationError, NotFoundError) as exc:
            logger.warning("Rejected reading.", extra={**context, "reason": str(exc)})
            raise

        statement = insert(readings).values(
            timestamp=timestamp,
            location_id=location_id,
            sensor_id=sensor_id,
            value=value,
        )
        try:
            async with self.database.begin() as conn:
                await conn.execute(statement)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.warning("Duplicate reading.", extra=context)
                raise ConflictError(
                    f"A {sensor_name!r} reading for {location_name!r} at {timestamp} already exists."
                ) from exc
            logger.exception("Failed to store reading.", extra=context)
            raise StoreError("Could not store reading.") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to store reading.", extra=context)
            raise StoreError("Could not store reading.") from exc

        logger.info("Stored reading.", extra=context)
