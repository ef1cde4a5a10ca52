"""Read and write paths for weather readings."""

from __future__ import annotations

import logging
import time
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Callable, List, Optional, Union

from datastore.reading_store import ReadingStore, build_default_store
from models.records import AggregateBucket, Reading
from services.aggregator import Aggregator
from services.range_resolver import RangeRequest, resolve_range
from services.validator import validate_reading

logger = logging.getLogger(__name__)

QueryResult = Union[List[Reading], List[AggregateBucket]]


class WeatherService:
    """Coordinates validation, range resolution, storage and aggregation."""

    def __init__(
        self,
        store: ReadingStore,
        aggregator: Aggregator,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.clock = clock

    def ingest(self, payload: Any) -> int:
        """Validate one reading and append it to the store."""
        reading = validate_reading(payload, now=self.clock)
        reading_id = self.store.append(reading)
        logger.debug("Stored reading", extra={"reading_id": reading_id})
        return reading_id

    def query(self, request: RangeRequest) -> QueryResult:
        """Return raw readings or bucketed aggregates for the requested window."""
        resolved = resolve_range(request, today=self.today())

        start_time = time.perf_counter()
        readings = self.store.fetch_range(resolved.start, resolved.end)
        if resolved.bucketed:
            result: QueryResult = self.aggregator.aggregate(readings, resolved.every_sec)
        else:
            result = readings

        logger.debug(
            "Resolved weather query",
            extra={
                "start": resolved.start.isoformat(),
                "end": resolved.end.isoformat(),
                "every_sec": resolved.every_sec,
                "row_count": len(result),
                "duration_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return result

    def latest(self) -> Optional[Reading]:
        """Most recent reading by timestamp, or ``None`` when the store is empty."""
        return self.store.latest()

    def healthy(self) -> bool:
        return self.store.ping()

    def today(self) -> date:
        return self.clock().date()

    def shutdown(self) -> None:
        self.store.close()


@lru_cache
def build_default_service() -> WeatherService:
    """Factory that wires the service with the configured store."""
    store = build_default_store()
    store.ensure_schema()
    return WeatherService(store=store, aggregator=Aggregator())
