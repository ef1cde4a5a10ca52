"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class ReadingOut(BaseModel):
    """A stored reading or an aggregate bucket, as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    temperature: float
    humidity: int
    wind_speed: float
    wind_direction: int
    precipitation: float
    timestamp: datetime = Field(..., description="Server-local time, no offset.")

    @field_serializer("timestamp")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class NoDataResponse(BaseModel):
    """Returned by the latest-reading endpoint when nothing is stored yet."""

    model_config = ConfigDict(extra="forbid")

    message: str = "no data"


class ReadingPayload(BaseModel):
    """Documented shape of an inbound reading.

    The endpoint validates the raw body itself so that numeric strings are
    accepted and errors can name every offending field.
    """

    temperature: Union[float, str]
    humidity: Union[float, str]
    wind_speed: Union[float, str]
    wind_direction: Union[float, str]
    precipitation: Union[float, str]
    timestamp: Optional[str] = Field(default=None, description="ISO 8601 instant.")


class PushDataResponse(BaseModel):
    ok: bool = True


class ErrorDetail(BaseModel):
    message: str
    fields: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    database: str


def error_detail(message: str, fields: Optional[List[str]] = None) -> dict[str, Any]:
    return ErrorDetail(message=message, fields=fields or []).model_dump()
