"""Async engine wiring for the relational readings store."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, AsyncContextManager, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from datastore.schema import metadata
from settings import get_settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


_UNIQUE_ERROR_NAMES = {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell uniqueness conflicts apart from other integrity failures."""
    error_name = getattr(exc.orig, "sqlite_errorname", None)
    if error_name is not None:
        return error_name in _UNIQUE_ERROR_NAMES
    # Drivers without error names only expose the message.
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


def redact_url(url: str) -> str:
    return make_url(url).render_as_string(hide_password=True)


class Database:
    """Owns the connection pool shared by every request in the process."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        parsed = make_url(url)
        self.is_sqlite = parsed.get_backend_name() == "sqlite"
        if self.is_sqlite and parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    def connect(self) -> AsyncConnection:
        """Connection for read-only statements."""
        return self.engine.connect()

    def begin(self) -> AsyncContextManager[AsyncConnection]:
        """Connection wrapped in a transaction that commits on exit."""
        return self.engine.begin()

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Database schema ready at %s.", redact_url(self.url))

    async def dispose(self) -> None:
        await self.engine.dispose()


@lru_cache
def build_default_database(url: Optional[str] = None) -> Database:
    settings = get_settings()
    database_url = settings.database_url if url is None else url
    return Database(url=database_url, echo=settings.database_echo)
