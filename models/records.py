"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class NewReading:
    """A validated sensor sample that has not been stored yet."""

    temperature: float
    humidity: int
    wind_speed: float
    wind_direction: int
    precipitation: float
    timestamp: datetime


@dataclass(slots=True, frozen=True)
class Reading:
    """A stored sensor sample, identified by the store-assigned ``id``."""

    id: int
    temperature: float
    humidity: int
    wind_speed: float
    wind_direction: int
    precipitation: float
    timestamp: datetime


@dataclass(slots=True, frozen=True)
class AggregateBucket:
    """One fixed-width time bucket of a downsampled series.

    ``id`` is the smallest reading id folded into the bucket. It only serves as
    a stable representative, not as a reference to a specific row.
    """

    id: int
    temperature: float
    humidity: int
    wind_speed: float
    wind_direction: int
    precipitation: float
    bucket_start: datetime

    @property
    def timestamp(self) -> datetime:
        return self.bucket_start


@dataclass(slots=True, frozen=True)
class ResolvedRange:
    """A half-open ``[start, end)`` window with an optional bucket width."""

    start: datetime
    end: datetime
    every_sec: Optional[int] = None

    @property
    def bucketed(self) -> bool:
        return self.every_sec is not None
