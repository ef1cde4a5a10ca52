"""Validation of inbound readings before they reach the store."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from models.records import NewReading
from services.errors import InvalidTimestamp, InvalidType, MissingField

REQUIRED_FIELDS = (
    "temperature",
    "humidity",
    "wind_speed",
    "wind_direction",
    "precipitation",
)


def coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str) and value.strip():
        # Digit separators are Python syntax, not a numeric reading.
        if "_" in value:
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 string into a naive server-local datetime."""
    if not isinstance(value, str):
        raise InvalidTimestamp("timestamp must be ISO string")

    candidate = value.strip()
    if not candidate:
        raise InvalidTimestamp()

    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise InvalidTimestamp() from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)

    return parsed.replace(microsecond=0)


def validate_reading(
    payload: Any,
    now: Callable[[], datetime] = datetime.now,
) -> NewReading:
    """Normalize one inbound reading.

    Missing fields are reported before type problems, and all offending field
    names are collected so the caller can fix the request in one go.
    """
    body: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    missing = [name for name in REQUIRED_FIELDS if body.get(name) is None]
    if missing:
        raise MissingField(missing)

    values: dict[str, float] = {}
    invalid: list[str] = []
    for name in REQUIRED_FIELDS:
        number = coerce_number(body[name])
        if number is None:
            invalid.append(name)
        else:
            values[name] = number
    if invalid:
        raise InvalidType(invalid)

    raw_timestamp = body.get("timestamp")
    if raw_timestamp is None:
        timestamp = now().replace(microsecond=0)
    else:
        timestamp = parse_timestamp(raw_timestamp)

    return NewReading(
        temperature=values["temperature"],
        humidity=round_half_up(values["humidity"]),
        wind_speed=values["wind_speed"],
        wind_direction=round_half_up(values["wind_direction"]) % 360,
        precipitation=values["precipitation"],
        timestamp=timestamp,
    )
