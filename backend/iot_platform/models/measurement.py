"""
Measurement Models
==================

A measurement is one reading from one sensor at one moment.

``sensor_type_id`` and ``experiment_id`` are copied from the owning sensor
so dashboards can filter measurements without a join. The API does not
fill them in; whoever ingests the data does.

``value`` is usually a number but boolean sensors (motion, door) send
true/false. A value of 0 or false is a real reading - only a missing
``value`` key is rejected.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateMeasurementRequest(BaseModel):
    """
    Request body for creating a measurement.

    Example Request:
        POST /api/sensors/measurements
        {
            "sensor_id": "sensor-exp-001-1",
            "value": 412.5,
            "timestamp": "2024-05-01T10:00:00Z"
        }

    ``timestamp`` may be an ISO-8601 string or milliseconds since the epoch;
    when it is left out the server's current time is used.
    """
    model_config = ConfigDict(extra="allow")

    sensor_id: Optional[str] = Field(None, description="Sensor that produced the reading (required)")
    value: Any = Field(None, description="The reading (required, 0 is valid)")
    timestamp: Optional[Any] = Field(None, description="When it was measured")
    sensor_type_id: Optional[str] = None
    experiment_id: Optional[str] = None
    quality: Any = Field(None, description="Quality annotation, e.g. score and status")


class MeasurementStats(BaseModel):
    """Aggregate over all measurements of one sensor."""
    count: int
    avgValue: Optional[float] = None
    minValue: Optional[Any] = None
    maxValue: Optional[Any] = None
    firstTimestamp: Optional[Any] = None
    lastTimestamp: Optional[Any] = None


def measurement_fields(request: CreateMeasurementRequest) -> dict[str, Any]:
    """The fields the client actually sent (``value`` only if it was sent)."""
    return request.model_dump(exclude_unset=True)
