"""Unit tests for the aggregation logic."""

from __future__ import annotations

import random
from datetime import datetime

import pytest

from models.records import Reading
from services.aggregator import Aggregator, circular_mean, round_half_away


def _reading(
    reading_id: int,
    timestamp: datetime,
    *,
    temperature: float = 20.0,
    humidity: int = 50,
    wind_speed: float = 3.0,
    wind_direction: int = 180,
    precipitation: float = 0.0,
) -> Reading:
    """Helper to build deterministic readings."""

    return Reading(
        id=reading_id,
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
        wind_direction=wind_direction,
        precipitation=precipitation,
        timestamp=timestamp,
    )


@pytest.mark.parametrize(
    ("directions", "expected"),
    [
        ([90], 90),
        ([350, 10], 0),
        ([10, 350], 0),
        ([350, 20], 5),
        ([270, 300], 285),
        ([0, 0, 90], 27),
        ([359], 359),
    ],
)
def test_circular_mean_wraps_around_north(directions, expected) -> None:
    assert circular_mean(directions) == expected


def test_circular_mean_of_opposite_directions_is_zero() -> None:
    assert circular_mean([0, 180]) == 0
    assert circular_mean([90, 270]) == 0


def test_circular_mean_requires_directions() -> None:
    with pytest.raises(ValueError):
        circular_mean([])


def test_round_half_away_rounds_halves_up() -> None:
    assert round_half_away(20.05, 1) == 20.1
    assert round_half_away(50.5) == 51.0
    assert round_half_away(2.5) == 3.0
    assert round_half_away(-2.5) == -3.0
    assert round_half_away(3.6665, 2) == 3.67


def test_aggregate_empty_iterable_returns_no_buckets() -> None:
    assert Aggregator().aggregate([], 60) == []


def test_aggregate_rejects_non_positive_width() -> None:
    with pytest.raises(ValueError):
        Aggregator().aggregate([], 0)


def test_aggregate_folds_minute_into_single_bucket() -> None:
    readings = [
        _reading(7, datetime(2024, 1, 1, 10, 0, 0), wind_direction=350, precipitation=0.2),
        _reading(8, datetime(2024, 1, 1, 10, 0, 30), wind_direction=10, precipitation=0.3),
    ]

    buckets = Aggregator().aggregate(readings, 60)

    assert len(buckets) == 1
    bucket = buckets[0]
    assert bucket.bucket_start == datetime(2024, 1, 1, 10, 0, 0)
    assert bucket.timestamp == bucket.bucket_start
    assert bucket.wind_direction == 0
    assert bucket.precipitation == 0.5
    assert bucket.id == 7


def test_aggregate_applies_field_specific_rounding() -> None:
    readings = [
        _reading(1, datetime(2024, 1, 1, 10, 0, 5), temperature=20.0, humidity=50, wind_speed=3.0),
        _reading(2, datetime(2024, 1, 1, 10, 0, 15), temperature=20.5, humidity=51, wind_speed=4.25),
    ]

    bucket = Aggregator().aggregate(readings, 60)[0]

    assert bucket.temperature == 20.3
    assert bucket.humidity == 51
    assert isinstance(bucket.humidity, int)
    assert bucket.wind_speed == 3.63


def test_aggregate_omits_empty_buckets_and_orders_by_time() -> None:
    readings = [
        _reading(3, datetime(2024, 1, 1, 10, 5, 10), temperature=15.0),
        _reading(1, datetime(2024, 1, 1, 10, 0, 10), temperature=10.0),
        _reading(2, datetime(2024, 1, 1, 10, 0, 50), temperature=12.0),
    ]

    buckets = Aggregator().aggregate(readings, 60)

    assert [bucket.bucket_start for bucket in buckets] == [
        datetime(2024, 1, 1, 10, 0),
        datetime(2024, 1, 1, 10, 5),
    ]
    assert [bucket.temperature for bucket in buckets] == [11.0, 15.0]
    assert [bucket.id for bucket in buckets] == [1, 3]


def test_aggregate_does_not_anchor_buckets_to_first_reading() -> None:
    readings = [
        _reading(1, datetime(2024, 1, 1, 10, 4, 59)),
        _reading(2, datetime(2024, 1, 1, 10, 5, 0)),
    ]

    buckets = Aggregator().aggregate(readings, 300)

    assert [bucket.bucket_start for bucket in buckets] == [
        datetime(2024, 1, 1, 10, 0),
        datetime(2024, 1, 1, 10, 5),
    ]


def test_aggregate_is_independent_of_input_order() -> None:
    readings = [
        _reading(
            index,
            datetime(2024, 1, 1, 10, index % 7, (index * 13) % 60),
            temperature=10 + index * 0.37,
            humidity=40 + index,
            wind_speed=index * 0.11,
            wind_direction=(index * 47) % 360,
            precipitation=index * 0.01,
        )
        for index in range(1, 40)
    ]
    shuffled = list(readings)
    random.Random(42).shuffle(shuffled)

    aggregator = Aggregator()

    assert aggregator.aggregate(readings, 120) == aggregator.aggregate(shuffled, 120)
