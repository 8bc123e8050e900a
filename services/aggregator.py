"""Bucketed average queries over stored readings."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from datastore.database import Database
from models.records import Bucket
from services.dictionary import DictionaryResolver
from services.errors import StoreError
from services.resolution import check_timestamp, select_bucket_format

logger = logging.getLogger(__name__)

# Both interval ends are inclusive. SQLite lets GROUP BY and ORDER BY refer to
# the ``ts`` alias; the bucket strings sort in time order.
_SELECT_BUCKETS_SQL = text(
    """
    SELECT strftime(:pattern, timestamp, 'unixepoch') AS ts, AVG(value) AS average
    FROM readings
    WHERE timestamp BETWEEN :from_ts AND :to_ts
      AND sensor_id = :sensor_id
      AND location_id = :location_id
    GROUP BY ts
    ORDER BY ts
    """
)


class AggregationQueryExecutor:
    """Runs range queries at a resolution chosen from the span width."""

    def __init__(self, database: Database, resolver: DictionaryResolver) -> None:
        self.database = database
        self.resolver = resolver

    async def query(
        self,
        location_name: str,
        sensor_name: str,
        from_ts: int,
        to_ts: int,
    ) -> list[Bucket]:
        """Return per-bucket averages in ascending time order.

        Empty buckets are omitted. Raises ``ValidationError`` for an empty or
        inverted interval, or one outside the formattable years, before any
        store access, ``NotFoundError`` when a
        name is unknown and ``StoreError`` if the query itself fails.
        """
        span_seconds = to_ts - from_ts
        bucket_format = select_bucket_format(span_seconds)
        check_timestamp(from_ts, "from")
        check_timestamp(to_ts, "to")

        location_id = await self.resolver.resolve_location(location_name)
        sensor_id = await self.resolver.resolve_sensor(sensor_name)

        logger.debug(
            "Running bucketed query.",
            extra={
                "location": location_name,
                "sensor": sensor_name,
                "span_seconds": span_seconds,
                "bucket_format": bucket_format.name,
            },
        )

        params = {
            "pattern": bucket_format.pattern,
            "from_ts": from_ts,
            "to_ts": to_ts,
            "sensor_id": sensor_id,
            "location_id": location_id,
        }
        try:
            async with self.database.connect() as conn:
                result = await conn.execute(_SELECT_BUCKETS_SQL, params)
                rows = result.all()
        except SQLAlchemyError as exc:
            logger.exception(
                "Bucketed query failed.",
                extra={"location": location_name, "sensor": sensor_name},
            )
            raise StoreError("Could not query readings.") from exc

        return [Bucket(bucket_timestamp=row.ts, average=float(row.average)) for row in rows]
