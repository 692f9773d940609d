"""
Measurements API Router
=======================

ALL ENDPOINTS:
-------------
GET    /api/sensors/measurements         - List measurements (filters below)
POST   /api/sensors/measurements         - Create one measurement
POST   /api/sensors/measurements/batch   - Create many at once
GET    /api/sensors/measurements/stats   - count/avg/min/max for one sensor
PUT    /api/sensors/measurements/{id}    - Update by storage _id
DELETE /api/sensors/measurements/{id}    - Delete by storage _id

LIST FILTERS:
------------
    sensor_id   - only this sensor
    start_date  - timestamp >= start_date (inclusive)
    end_date    - timestamp <= end_date (inclusive)
    limit       - at most this many, default 1000

Results are always newest first.

This router must be included BEFORE the sensors router, otherwise
``/api/sensors/measurements`` would be read as "the sensor whose id is
'measurements'".
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from iot_platform.models import (
    ERROR_RESPONSES,
    CreateMeasurementRequest,
    list_envelope,
    measurement_fields,
    success_envelope,
)
from iot_platform.services import MeasurementService, MongoStore, get_store
from iot_platform.utils import (
    DEFAULT_MEASUREMENT_LIMIT,
    build_measurement_filter,
    parse_limit,
)


router = APIRouter(prefix="/api/sensors/measurements", tags=["measurements"], responses=ERROR_RESPONSES)


def get_measurement_service(store: MongoStore = Depends(get_store)) -> MeasurementService:
    return MeasurementService(store)


@router.get("")
def list_measurements(
    sensor_id: Optional[str] = Query(None, description="Only this sensor"),
    start_date: Optional[str] = Query(None, description="Inclusive lower bound (ISO-8601)"),
    end_date: Optional[str] = Query(None, description="Inclusive upper bound (ISO-8601)"),
    limit: Optional[str] = Query(None, description=f"Max results, default {DEFAULT_MEASUREMENT_LIMIT}"),
    service: MeasurementService = Depends(get_measurement_service),
):
    """List measurements, most recent first."""
    query = build_measurement_filter(sensor_id, start_date, end_date)
    measurements = service.find(query, parse_limit(limit, DEFAULT_MEASUREMENT_LIMIT))
    return list_envelope(measurements)


@router.get("/stats")
def get_measurement_stats(
    sensor_id: Optional[str] = Query(None, description="Sensor to summarise (required)"),
    service: MeasurementService = Depends(get_measurement_service),
):
    """
    Statistics over every measurement of one sensor.

    Returns count, avgValue, minValue, maxValue, firstTimestamp and
    lastTimestamp. A sensor with no measurements gives ``data: {}``.
    """
    return success_envelope(service.stats(sensor_id))


@router.post("", status_code=201)
def create_measurement(
    request: CreateMeasurementRequest,
    service: MeasurementService = Depends(get_measurement_service),
):
    """
    Create a measurement.

    Needs ``sensor_id`` and ``value`` (0 counts!). ``timestamp`` defaults to
    now.
    """
    measurement = service.create(measurement_fields(request))
    return success_envelope(measurement, message="Measurement created successfully")


@router.post("/batch", status_code=201)
def create_measurements_batch(
    requests: list[CreateMeasurementRequest],
    service: MeasurementService = Depends(get_measurement_service),
):
    """
    Create several measurements in one call.

    All or nothing: if any item is invalid, none are stored.
    """
    created = service.create_many([measurement_fields(item) for item in requests])
    return success_envelope(
        created,
        count=len(created),
        message=f"{len(created)} measurements created successfully",
    )


@router.put("/{measurement_id}")
def update_measurement(
    measurement_id: str,
    changes: dict[str, Any] = Body(...),
    service: MeasurementService = Depends(get_measurement_service),
):
    """Update a measurement by its storage ``_id``."""
    measurement = service.update(measurement_id, changes)
    return success_envelope(measurement, message="Measurement updated successfully")


@router.delete("/{measurement_id}")
def delete_measurement(
    measurement_id: str,
    service: MeasurementService = Depends(get_measurement_service),
):
    """Delete a measurement by its storage ``_id``."""
    service.delete(measurement_id)
    return success_envelope(message="Measurement deleted successfully", include_data=False)
