from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import Column, DateTime, Float, Index, Integer, create_engine, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from models.records import NewReading, Reading
from services.errors import StoreFailure
from settings import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class ReadingModel(Base):
    __tablename__ = "weather"

    id = Column(Integer, primary_key=True, autoincrement=True)
    temperature = Column(Float, nullable=False)
    humidity = Column(Integer, nullable=False)
    wind_speed = Column(Float, nullable=False)
    wind_direction = Column(Integer, nullable=False)
    precipitation = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_timestamp", "timestamp"),
        {"sqlite_autoincrement": True},
    )


def _to_reading(row: ReadingModel) -> Reading:
    return Reading(
        id=row.id,
        temperature=row.temperature,
        humidity=row.humidity,
        wind_speed=row.wind_speed,
        wind_direction=row.wind_direction,
        precipitation=row.precipitation,
        timestamp=row.timestamp,
    )


class ReadingStore:
    """Append-only table of weather readings.

    Every call opens its own short-lived session; nothing is held between
    calls. Driver errors are re-raised as ``StoreFailure``.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def ensure_schema(self) -> None:
        """Create the readings table and its timestamp index if missing."""
        with self._guard("ensure_schema"):
            Base.metadata.create_all(self.engine)

    def append(self, reading: NewReading) -> int:
        row = ReadingModel(
            temperature=reading.temperature,
            humidity=reading.humidity,
            wind_speed=reading.wind_speed,
            wind_direction=reading.wind_direction,
            precipitation=reading.precipitation,
            timestamp=reading.timestamp,
        )
        with self._guard("append"), self._sessions() as session:
            with session.begin():
                session.add(row)
            return row.id

    def fetch_range(self, start: datetime, end: datetime) -> list[Reading]:
        """Return readings with ``start <= timestamp < end``, oldest first."""
        query = (
            select(ReadingModel)
            .where(ReadingModel.timestamp >= start, ReadingModel.timestamp < end)
            .order_by(ReadingModel.timestamp.asc(), ReadingModel.id.asc())
        )
        with self._guard("fetch_range"), self._sessions() as session:
            return [_to_reading(row) for row in session.scalars(query)]

    def latest(self) -> Optional[Reading]:
        query = (
            select(ReadingModel)
            .order_by(ReadingModel.timestamp.desc(), ReadingModel.id.desc())
            .limit(1)
        )
        with self._guard("latest"), self._sessions() as session:
            row = session.scalars(query).first()
            return _to_reading(row) if row is not None else None

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("Reading store ping failed", extra={"reason": type(exc).__name__})
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise StoreFailure(f"Reading store operation {operation!r} failed.") from exc


def create_store_engine(url: str, echo: bool = False, pool_pre_ping: bool = True) -> Engine:
    parsed = make_url(url)
    connect_args: dict = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        database = parsed.database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        parsed,
        echo=echo,
        pool_pre_ping=pool_pre_ping,
        connect_args=connect_args,
    )


@lru_cache
def build_default_store(url: Optional[str] = None) -> ReadingStore:
    settings = get_settings()
    database_url = settings.database_url if url is None else url
    engine = create_store_engine(
        database_url,
        echo=settings.echo_sql,
        pool_pre_ping=settings.pool_pre_ping,
    )
    return ReadingStore(engine)

