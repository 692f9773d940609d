"""
Sensors API Router
==================

ALL ENDPOINTS:
-------------
GET    /api/sensors                    - List sensors (filters below)
POST   /api/sensors                    - Register a sensor
GET    /api/sensors/devices            - Same as GET /api/sensors
GET    /api/sensors/types              - Sensor-type catalog
GET    /api/sensors/{id}               - Get one sensor
PUT    /api/sensors/{id}               - Update a sensor (partial)
DELETE /api/sensors/{id}               - Delete a sensor
GET    /api/sensors/{id}/measurements  - Its measurements, newest first

LIST FILTERS (all optional, all exact match):
--------------------------------------------
    experiment_id, type, sensor_type_id, status

    GET /api/sensors?experiment_id=exp-001&status=online

Empty values are ignored: ``?status=`` is the same as no status filter.

The fixed paths (/devices, /types) are declared before /{sensor_id} so they
are not mistaken for sensor ids.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from iot_platform.models import (
    ERROR_RESPONSES,
    SENSOR_REQUIRED_FIELDS,
    CreateSensorRequest,
    list_envelope,
    sensor_document,
    success_envelope,
)
from iot_platform.reference import sensor_type_catalog
from iot_platform.routers.measurements import get_measurement_service
from iot_platform.services import DocumentService, MeasurementService, MongoStore, get_store
from iot_platform.utils import (
    DEFAULT_SENSOR_MEASUREMENT_LIMIT,
    build_equality_filter,
    build_measurement_filter,
    parse_limit,
)


router = APIRouter(prefix="/api/sensors", tags=["sensors"], responses=ERROR_RESPONSES)


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

def get_sensor_service(store: MongoStore = Depends(get_store)) -> DocumentService:
    return DocumentService(store, MongoStore.SENSORS, "Sensor", SENSOR_REQUIRED_FIELDS)


def sensor_filters(
    experiment_id: Optional[str] = Query(None, description="Owning experiment"),
    sensor_type: Optional[str] = Query(None, alias="type", description="Sensor type"),
    sensor_type_id: Optional[str] = Query(None, description="Sensor-type catalog key"),
    status: Optional[str] = Query(None, description="online | offline | maintenance"),
) -> dict:
    """The list filters shared by GET /api/sensors and its /devices alias."""
    return build_equality_filter(
        experiment_id=experiment_id,
        type=sensor_type,
        sensor_type_id=sensor_type_id,
        status=status,
    )


# =============================================================================
# LISTING
# =============================================================================

@router.get("")
def list_sensors(
    query: dict = Depends(sensor_filters),
    service: DocumentService = Depends(get_sensor_service),
):
    """Get all sensors matching the filters."""
    return list_envelope(service.find(query))


@router.get("/devices")
def list_sensor_devices(
    query: dict = Depends(sensor_filters),
    service: DocumentService = Depends(get_sensor_service),
):
    """Alias of ``GET /api/sensors``."""
    return list_envelope(service.find(query))


@router.get("/types")
def list_sensor_types(store: MongoStore = Depends(get_store)):
    """
    The sensor-type catalog.

    Read from the ``sensor_types`` collection (filled at startup); the
    built-in catalog is served if that collection is still empty.
    """
    types = store.find(MongoStore.SENSOR_TYPES, projection={"_id": 0})
    if not types:
        types = sensor_type_catalog()
    return list_envelope(types)


# =============================================================================
# SINGLE SENSOR
# =============================================================================

@router.post("", status_code=201)
def create_sensor(
    request: CreateSensorRequest,
    service: DocumentService = Depends(get_sensor_service),
):
    """
    Register a sensor.

    Needs ``id``, ``experiment_id`` and ``type``. The experiment is not
    checked for existence.
    """
    sensor = service.create(sensor_document(request))
    return success_envelope(sensor, message="Sensor created successfully")


@router.get("/{sensor_id}")
def get_sensor(sensor_id: str, service: DocumentService = Depends(get_sensor_service)):
    """Get one sensor by its ``id``."""
    return success_envelope(service.get(sensor_id))


@router.put("/{sensor_id}")
def update_sensor(
    sensor_id: str,
    changes: dict[str, Any] = Body(...),
    service: DocumentService = Depends(get_sensor_service),
):
    """Update a sensor. ``id`` and ``_id`` can't be changed."""
    sensor = service.update(sensor_id, changes)
    return success_envelope(sensor, message="Sensor updated successfully")


@router.delete("/{sensor_id}")
def delete_sensor(sensor_id: str, service: DocumentService = Depends(get_sensor_service)):
    """Delete a sensor. Its measurements are kept."""
    service.delete(sensor_id)
    return success_envelope(message="Sensor deleted successfully", include_data=False)


@router.get("/{sensor_id}/measurements")
def get_sensor_measurements(
    sensor_id: str,
    start_date: Optional[str] = Query(None, description="Inclusive lower bound (ISO-8601)"),
    end_date: Optional[str] = Query(None, description="Inclusive upper bound (ISO-8601)"),
    limit: Optional[str] = Query(None, description=f"Max results, default {DEFAULT_SENSOR_MEASUREMENT_LIMIT}"),
    measurements: MeasurementService = Depends(get_measurement_service),
):
    """
    Measurements of one sensor, newest first.

    An unknown sensor gives an empty list, not a 404.
    """
    query = build_measurement_filter(sensor_id, start_date, end_date)
    limit_value = parse_limit(limit, DEFAULT_SENSOR_MEASUREMENT_LIMIT)
    return list_envelope(measurements.find(query, limit_value))
