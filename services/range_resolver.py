"""Turn raw query parameters into a concrete time window."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional, Sequence

from models.records import ResolvedRange
from services.errors import BadRequest

MIN_BUCKET_SECONDS = 10
MAX_BUCKET_SECONDS = 86400
DAILY_WINDOW_DAYS = 7

_YMD_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class RangeRequest:
    """Raw, unvalidated query parameters as received from the caller."""

    start: Optional[str] = None
    end: Optional[str] = None
    mode: Optional[str] = None
    day: Optional[str] = None
    every_sec: Any = None

    def __post_init__(self) -> None:
        # Blank strings are treated exactly like absent parameters.
        for name in ("start", "end", "mode", "day"):
            value = getattr(self, name)
            if value is not None and not str(value).strip():
                object.__setattr__(self, name, None)


def parse_day(value: str, name: str) -> date:
    if not _YMD_PATTERN.fullmatch(value):
        raise BadRequest(f"{name} must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise BadRequest(f"{name} must be YYYY-MM-DD") from exc


def parse_bucket_width(value: Any) -> Optional[int]:
    """Return a bucket width in seconds, or ``None`` for full resolution.

    Out-of-range or non-numeric values are not an error; they simply disable
    bucketing.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    if number < MIN_BUCKET_SECONDS or number > MAX_BUCKET_SECONDS:
        return None
    return int(math.floor(number))


def _day_bounds(first: date, last: date) -> tuple[datetime, datetime]:
    start = datetime.combine(first, time.min)
    end = datetime.combine(last + timedelta(days=1), time.min)
    return start, end


def _explicit_range(request: RangeRequest, today: date) -> Optional[ResolvedRange]:
    # A lone end anchors the daily window; with any other mode it is a half range.
    if request.start is None and (request.end is None or request.mode == "daily"):
        return None
    if request.start is None or request.end is None:
        raise BadRequest("start and end required (YYYY-MM-DD)")
    first = parse_day(request.start, "start")
    last = parse_day(request.end, "end")
    start, end = _day_bounds(first, last)
    return ResolvedRange(start=start, end=end, every_sec=parse_bucket_width(request.every_sec))


def _hourly_mode(request: RangeRequest, today: date) -> Optional[ResolvedRange]:
    if request.mode != "hourly":
        return None
    day = parse_day(request.day, "day") if request.day is not None else today
    start, end = _day_bounds(day, day)
    return ResolvedRange(start=start, end=end)


def _daily_mode(request: RangeRequest, today: date) -> Optional[ResolvedRange]:
    if request.mode != "daily":
        return None
    last = parse_day(request.end, "end") if request.end is not None else today
    start, end = _day_bounds(last - timedelta(days=DAILY_WINDOW_DAYS - 1), last)
    return ResolvedRange(start=start, end=end)


def _unknown_mode(request: RangeRequest, today: date) -> Optional[ResolvedRange]:
    if request.mode is None:
        return None
    raise BadRequest("mode must be hourly|daily")


# Evaluated in order; the first rule that returns a range wins.
RULES: Sequence[Callable[[RangeRequest, date], Optional[ResolvedRange]]] = (
    _explicit_range,
    _hourly_mode,
    _daily_mode,
    _unknown_mode,
)


def resolve_range(request: RangeRequest, today: Optional[date] = None) -> ResolvedRange:
    current_day = today if today is not None else date.today()
    for rule in RULES:
        resolved = rule(request, current_day)
        if resolved is not None:
            return resolved
    raise BadRequest("use start/end or mode")
