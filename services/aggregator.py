"""Downsampling of weather readings into fixed-width time buckets."""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence

from models.records import AggregateBucket, Reading

# Below this resultant length the mean direction is undefined (e.g. 0 and 180).
_DEGENERATE_RESULTANT = 1e-9


def round_half_away(value: float, places: int = 0) -> float:
    """Round on the decimal representation, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def circular_mean(directions: Sequence[float]) -> int:
    """Mean of compass directions in whole degrees within ``[0, 360)``.

    Opposite directions that cancel out have no defined mean; ``0`` is
    returned for them.
    """
    if not directions:
        raise ValueError("circular_mean() requires at least one direction.")

    radians = [math.radians(direction) for direction in directions]
    mean_sin = math.fsum(math.sin(angle) for angle in radians) / len(radians)
    mean_cos = math.fsum(math.cos(angle) for angle in radians) / len(radians)

    if math.hypot(mean_sin, mean_cos) < _DEGENERATE_RESULTANT:
        return 0

    degrees = math.degrees(math.atan2(mean_sin, mean_cos))
    if degrees < 0:
        degrees += 360
    return int(round_half_away(degrees)) % 360


def bucket_index(timestamp: datetime, every_sec: int) -> int:
    return math.floor(timestamp.timestamp()) // every_sec


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(self, readings: Iterable[Reading], every_sec: int) -> List[AggregateBucket]:
        if every_sec <= 0:
            raise ValueError("Bucket width must be a positive number of seconds.")

        groups: Dict[int, List[Reading]] = defaultdict(list)
        for reading in readings:
            groups[bucket_index(reading.timestamp, every_sec)].append(reading)

        return [
            self._summarize(index, every_sec, groups[index])
            for index in sorted(groups)
        ]

    def _summarize(self, index: int, every_sec: int, group: Sequence[Reading]) -> AggregateBucket:
        return AggregateBucket(
            id=min(reading.id for reading in group),
            temperature=round_half_away(_mean([r.temperature for r in group]), 1),
            humidity=int(round_half_away(_mean([r.humidity for r in group]))),
            wind_speed=round_half_away(_mean([r.wind_speed for r in group]), 2),
            wind_direction=circular_mean([r.wind_direction for r in group]),
            precipitation=round_half_away(math.fsum(r.precipitation for r in group), 2),
            bucket_start=datetime.fromtimestamp(index * every_sec),
        )
