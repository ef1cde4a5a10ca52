"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.schemas import (
    HealthResponse,
    NoDataResponse,
    PushDataResponse,
    ReadingOut,
    ReadingPayload,
    error_detail,
)
from services.errors import BadRequest, StoreFailure, ValidationFailed
from services.range_resolver import RangeRequest
from services.weather_service import WeatherService, build_default_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service() -> WeatherService:
    return build_default_service()


def _server_error(exc: StoreFailure) -> HTTPException:
    logger.exception("Reading store failure", exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="server error",
    )


@router.get(
    "/api/weather/latest",
    response_model=Union[ReadingOut, NoDataResponse],
    summary="Fetch the most recent reading.",
)
def get_latest_reading(
    service: WeatherService = Depends(get_service),
) -> Union[ReadingOut, NoDataResponse]:
    try:
        reading = service.latest()
    except StoreFailure as exc:
        raise _server_error(exc) from exc
    if reading is None:
        return NoDataResponse()
    return ReadingOut.model_validate(reading)


@router.get(
    "/api/weather",
    response_model=List[ReadingOut],
    summary="Fetch readings for a date range, optionally downsampled.",
)
def get_readings(
    start: Optional[str] = Query(None, description="First day, YYYY-MM-DD."),
    end: Optional[str] = Query(None, description="Last day (inclusive), YYYY-MM-DD."),
    mode: Optional[str] = Query(None, description="Legacy window: hourly or daily."),
    day: Optional[str] = Query(None, description="Day for mode=hourly, YYYY-MM-DD."),
    every_sec: Optional[str] = Query(
        None,
        alias="everySec",
        description="Bucket width in seconds (10-86400); other values return raw readings.",
    ),
    service: WeatherService = Depends(get_service),
) -> List[ReadingOut]:
    request = RangeRequest(start=start, end=end, mode=mode, day=day, every_sec=every_sec)
    try:
        result = service.query(request)
    except BadRequest as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(str(exc)),
        ) from exc
    except StoreFailure as exc:
        raise _server_error(exc) from exc
    return [ReadingOut.model_validate(item) for item in result]


@router.post(
    "/api/pushData",
    status_code=status.HTTP_201_CREATED,
    response_model=PushDataResponse,
    summary="Store one reading.",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ReadingPayload.model_json_schema()}},
            "required": True,
        }
    },
)
def push_data(
    payload: Any = Body(None),
    service: WeatherService = Depends(get_service),
) -> PushDataResponse:
    try:
        reading_id = service.ingest(payload)
    except ValidationFailed as exc:
        logger.info(
            "Rejected reading",
            extra={"reason": exc.message, "field": ",".join(exc.fields)},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(exc.message, exc.fields),
        ) from exc
    except StoreFailure as exc:
        raise _server_error(exc) from exc
    logger.info("Accepted reading", extra={"reading_id": reading_id})
    return PushDataResponse(ok=True)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
def healthcheck(service: WeatherService = Depends(get_service)) -> HealthResponse:
    database = "ok" if service.healthy() else "unavailable"
    return HealthResponse(status="ok", database=database)


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
