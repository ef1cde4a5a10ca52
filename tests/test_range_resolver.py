from __future__ import annotations

from datetime import date, datetime

import pytest

from services.errors import BadRequest
from services.range_resolver import RangeRequest, parse_bucket_width, resolve_range

TODAY = date(2024, 3, 15)


def test_explicit_range_includes_whole_end_day() -> None:
    resolved = resolve_range(RangeRequest(start="2024-03-01", end="2024-03-07"), today=TODAY)

    assert resolved.start == datetime(2024, 3, 1)
    assert resolved.end == datetime(2024, 3, 8)
    assert resolved.every_sec is None
    assert resolved.bucketed is False


def test_explicit_range_with_valid_bucket_width() -> None:
    resolved = resolve_range(
        RangeRequest(start="2024-03-01", end="2024-03-01", every_sec="300"),
        today=TODAY,
    )

    assert resolved.every_sec == 300
    assert resolved.bucketed is True


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("10", 10),
        ("86400", 86400),
        ("60.9", 60),
        (900, 900),
        ("9", None),
        ("86401", None),
        ("-60", None),
        ("abc", None),
        ("", None),
        ("nan", None),
        ("inf", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_bucket_width(raw, expected) -> None:
    assert parse_bucket_width(raw) == expected


def test_out_of_range_bucket_width_falls_back_to_raw_output() -> None:
    resolved = resolve_range(
        RangeRequest(start="2024-03-01", end="2024-03-02", every_sec="5"),
        today=TODAY,
    )

    assert resolved.every_sec is None


@pytest.mark.parametrize(
    "request_",
    [
        RangeRequest(start="2024-03-01"),
        RangeRequest(end="2024-03-01"),
        RangeRequest(start="2024-03-01", mode="daily"),
        RangeRequest(end="2024-03-01", mode="hourly"),
        RangeRequest(end="2024-03-01", mode="weekly"),
    ],
)
def test_explicit_range_requires_both_bounds(request_: RangeRequest) -> None:
    with pytest.raises(BadRequest, match="start and end required"):
        resolve_range(request_, today=TODAY)


@pytest.mark.parametrize(
    ("start", "end", "bad"),
    [
        ("2024-3-01", "2024-03-02", "start"),
        ("2024-03-01", "03/02/2024", "end"),
        ("2024-02-30", "2024-03-02", "start"),
        ("2024-03-01", "2024-03-02T00:00", "end"),
    ],
)
def test_explicit_range_rejects_malformed_dates(start: str, end: str, bad: str) -> None:
    with pytest.raises(BadRequest, match=f"{bad} must be YYYY-MM-DD"):
        resolve_range(RangeRequest(start=start, end=end), today=TODAY)


def test_explicit_range_takes_precedence_over_mode() -> None:
    resolved = resolve_range(
        RangeRequest(start="2024-01-01", end="2024-01-02", mode="hourly", day="2024-02-02"),
        today=TODAY,
    )

    assert resolved.start == datetime(2024, 1, 1)
    assert resolved.end == datetime(2024, 1, 3)


def test_hourly_mode_defaults_to_today() -> None:
    resolved = resolve_range(RangeRequest(mode="hourly"), today=TODAY)

    assert resolved.start == datetime(2024, 3, 15)
    assert resolved.end == datetime(2024, 3, 16)
    assert resolved.every_sec is None


def test_hourly_mode_with_day_ignores_bucket_width() -> None:
    resolved = resolve_range(
        RangeRequest(mode="hourly", day="2024-02-29", every_sec="60"),
        today=TODAY,
    )

    assert resolved.start == datetime(2024, 2, 29)
    assert resolved.end == datetime(2024, 3, 1)
    assert resolved.every_sec is None


def test_hourly_mode_rejects_malformed_day() -> None:
    with pytest.raises(BadRequest, match="day must be YYYY-MM-DD"):
        resolve_range(RangeRequest(mode="hourly", day="yesterday"), today=TODAY)


def test_daily_mode_covers_trailing_week() -> None:
    resolved = resolve_range(RangeRequest(mode="daily"), today=TODAY)

    assert resolved.start == datetime(2024, 3, 9)
    assert resolved.end == datetime(2024, 3, 16)


def test_daily_mode_with_end_day() -> None:
    resolved = resolve_range(RangeRequest(mode="daily", end="2024-01-03"), today=TODAY)

    assert resolved.start == datetime(2023, 12, 28)
    assert resolved.end == datetime(2024, 1, 4)


def test_daily_mode_rejects_malformed_end() -> None:
    with pytest.raises(BadRequest, match="end must be YYYY-MM-DD"):
        resolve_range(RangeRequest(mode="daily", end="20240103"), today=TODAY)


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(BadRequest, match="mode must be hourly\\|daily"):
        resolve_range(RangeRequest(mode="weekly"), today=TODAY)


def test_missing_parameters_are_rejected() -> None:
    with pytest.raises(BadRequest, match="use start/end or mode"):
        resolve_range(RangeRequest(), today=TODAY)


def test_blank_parameters_count_as_absent() -> None:
    with pytest.raises(BadRequest, match="use start/end or mode"):
        resolve_range(RangeRequest(start="", end="  ", mode=""), today=TODAY)
