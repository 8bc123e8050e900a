"""Name-to-id resolution for locations and sensors."""

from __future__ import annotations

import logging

from sqlalchemy import Table, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from datastore.database import Database, is_unique_violation
from datastore.schema import locations, sensors
from services.errors import NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)


class DictionaryResolver:
    """Maps location and sensor names to their integer ids.

    Resolution never creates rows. Registration inserts first and treats a
    uniqueness conflict as success, so concurrent first use of a name ends
    with one row and no error for any caller.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def resolve_location(self, name: str) -> int:
        return await self._resolve(locations, "location", name)

    async def resolve_sensor(self, name: str) -> int:
        return await self._resolve(sensors, "sensor", name)

    async def register_location(self, name: str) -> int:
        return await self._register(locations, "location", name)

    async def register_sensor(self, name: str) -> int:
        return await self._register(sensors, "sensor", name)

    async def list_locations(self) -> list[str]:
        return await self._list_names(locations, "location")

    async def list_sensors(self) -> list[str]:
        return await self._list_names(sensors, "sensor")

    async def _resolve(self, table: Table, kind: str, name: str) -> int:
        statement = select(table.c.id).where(table.c.name == name)
        try:
            async with self.database.connect() as conn:
                result = await conn.execute(statement)
                entity_id = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Failed to resolve %s.", kind, extra={"entity_name": name})
            raise StoreError(f"Could not resolve {kind} {name!r}.") from exc

        if entity_id is None:
            raise NotFoundError(f"Unknown {kind} {name!r}.")
        return entity_id

    async def _register(self, table: Table, kind: str, name: str) -> int:
        if not name or not name.strip():
            raise ValidationError(f"A {kind} name must not be blank.")

        try:
            async with self.database.begin() as conn:
                result = await conn.execute(insert(table).values(name=name))
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                logger.exception("Failed to register %s.", kind, extra={"entity_name": name})
                raise StoreError(f"Could not register {kind} {name!r}.") from exc
            logger.debug("%s already registered.", kind.capitalize(), extra={"entity_name": name})
            return await self._resolve(table, kind, name)
        except SQLAlchemyError as exc:
            logger.exception("Failed to register %s.", kind, extra={"entity_name": name})
            raise StoreError(f"Could not register {kind} {name!r}.") from exc

        entity_id = result.inserted_primary_key[0]
        logger.info("Registered %s.", kind, extra={"entity_name": name})
        return entity_id

    async def _list_names(self, table: Table, kind: str) -> list[str]:
        statement = select(table.c.name).order_by(table.c.id)
        try:
            async with self.database.connect() as conn:
                result = await conn.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.exception("Failed to list %s names.", kind)
            raise StoreError(f"Could not list {kind} names.") from exc
