from __future__ import annotations

from datetime import datetime
from typing import Iterator

import pytest

from datastore.reading_store import ReadingStore, create_store_engine
from services.aggregator import Aggregator
from services.weather_service import WeatherService

FIXED_NOW = datetime(2024, 3, 15, 12, 30, 45)


@pytest.fixture
def store(tmp_path) -> Iterator[ReadingStore]:
    engine = create_store_engine(f"sqlite:///{tmp_path / 'weather.db'}")
    reading_store = ReadingStore(engine)
    reading_store.ensure_schema()
    yield reading_store
    reading_store.close()


@pytest.fixture
def service(store: ReadingStore) -> WeatherService:
    return WeatherService(store=store, aggregator=Aggregator(), clock=lambda: FIXED_NOW)
