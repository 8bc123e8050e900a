"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import (
    Acknowledgement,
    DataInput,
    LocationInput,
    Measurement,
    QueryInput,
    SensorInput,
)
from models.records import Reading
from services.errors import (
    ConflictError,
    EnvServerError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from services.readings import ReadingsService, build_default_service

router = APIRouter(prefix="/api/v0")
status_router = APIRouter()

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def get_service() -> ReadingsService:
    return build_default_service()


def _http_error(exc: EnvServerError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
    )


@router.put(
    "/location",
    response_model=Acknowledgement,
    summary="Register a location name; repeating a known name is a no-op.",
)
async def put_location(
    payload: LocationInput,
    service: ReadingsService = Depends(get_service),
) -> Acknowledgement:
    try:
        location_id = await service.register_location(payload.name)
    except EnvServerError as exc:
        raise _http_error(exc) from exc
    return Acknowledgement(id=location_id)


@router.get(
    "/location",
    response_model=list[str],
    summary="List registered location names.",
)
async def list_locations(
    service: ReadingsService = Depends(get_service),
) -> list[str]:
    try:
        return await service.list_locations()
    except EnvServerError as exc:
        raise _http_error(exc) from exc


@router.put(
    "/sensor",
    response_model=Acknowledgement,
    summary="Register a sensor name; repeating a known name is a no-op.",
)
async def put_sensor(
    payload: SensorInput,
    service: ReadingsService = Depends(get_service),
) -> Acknowledgement:
    try:
        sensor_id = await service.register_sensor(payload.name)
    except EnvServerError as exc:
        raise _http_error(exc) from exc
    return Acknowledgement(id=sensor_id)


@router.get(
    "/sensor",
    response_model=list[str],
    summary="List registered sensor names.",
)
async def list_sensors(
    service: ReadingsService = Depends(get_service),
) -> list[str]:
    try:
        return await service.list_sensors()
    except EnvServerError as exc:
        raise _http_error(exc) from exc


@router.put(
    "/data",
    response_model=Acknowledgement,
    response_model_exclude_none=True,
    summary="Store one reading for a registered location and sensor.",
)
async def put_data(
    payload: DataInput,
    service: ReadingsService = Depends(get_service),
) -> Acknowledgement:
    reading = Reading(
        timestamp=payload.timestamp,
        location=payload.location,
        sensor=payload.sensor,
        value=payload.value,
    )
    try:
        await service.write_reading(reading)
    except EnvServerError as exc:
        raise _http_error(exc) from exc
    return Acknowledgement()


@router.post(
    "/query",
    response_model=list[Measurement],
    summary="Average readings per time bucket; bucket size follows the span.",
)
async def query_data(
    payload: QueryInput,
    service: ReadingsService = Depends(get_service),
) -> list[Measurement]:
    try:
        buckets = await service.query(
            payload.location, payload.sensor, payload.from_ts, payload.to_ts
        )
    except EnvServerError as exc:
        raise _http_error(exc) from exc
    return [
        Measurement(bucket_timestamp=bucket.bucket_timestamp, average=bucket.average)
        for bucket in buckets
    ]


router.add_api_route(
    "/get_data",
    query_data,
    methods=["POST"],
    response_model=list[Measurement],
    include_in_schema=False,
)


@status_router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@status_router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
