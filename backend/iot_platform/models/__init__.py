"""
Models Package
==============

Request bodies, enums and the response envelope.
Import from here instead of the individual files.

Example:
    from iot_platform.models import CreateSensorRequest, success_envelope
"""

from .envelope import (
    SuccessResponse,
    ErrorResponse,
    ERROR_RESPONSES,
    success_envelope,
    list_envelope,
    error_envelope,
)
from .experiment import (
    ExperimentStatus,
    CreateExperimentRequest,
    EXPERIMENT_REQUIRED_FIELDS,
    experiment_document,
)
from .sensor import (
    SensorStatus,
    CreateSensorRequest,
    SENSOR_REQUIRED_FIELDS,
    sensor_document,
)
from .measurement import (
    CreateMeasurementRequest,
    MeasurementStats,
    measurement_fields,
)

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "ERROR_RESPONSES",
    "success_envelope",
    "list_envelope",
    "error_envelope",
    "ExperimentStatus",
    "CreateExperimentRequest",
    "EXPERIMENT_REQUIRED_FIELDS",
    "experiment_document",
    "SensorStatus",
    "CreateSensorRequest",
    "SENSOR_REQUIRED_FIELDS",
    "sensor_document",
    "CreateMeasurementRequest",
    "MeasurementStats",
    "measurement_fields",
]
