"""
Sensor Models
=============
Pydantic models for sensor devices.

A sensor device belongs to one experiment (``experiment_id``) and measures
one kind of thing (``sensor_type_id``, one of the keys of
``reference.SENSOR_TYPES``). Neither reference is enforced: a sensor can
point at an experiment that doesn't exist.

Author: IoT Platform Team
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SensorStatus(str, Enum):
    """
    Operational status of a sensor device.

    - ONLINE: reporting normally
    - OFFLINE: not reporting
    - MAINTENANCE: taken out of service on purpose
    """
    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "maintenance"


class CreateSensorRequest(BaseModel):
    """
    Request body for registering a sensor device.

    Required: id, experiment_id, type.

    Example Request:
        POST /api/sensors
        {
            "id": "sensor-exp-001-1",
            "experiment_id": "exp-001",
            "type": "co2",
            "sensor_type_id": "co2",
            "status": "online",
            "location": {"building": "Bâtiment A", "room": "Salle 110", "indoor": true}
        }
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Business identifier (required, unique)")
    experiment_id: Optional[str] = Field(None, description="Owning experiment (required)")
    type: Optional[str] = Field(None, description="Sensor type (required)")
    sensor_type_id: Optional[str] = Field(None, description="Key into the sensor-type catalog")
    name: Optional[str] = Field(None, description="Display name")
    status: Optional[str] = Field(None, description="online | offline | maintenance")
    location: Any = Field(None, description="Free-form: a room name, a dict, coordinates...")
    metadata: Any = Field(None, description="Hardware details, stored as sent")


SENSOR_REQUIRED_FIELDS = ("id", "experiment_id", "type")


def sensor_document(request: CreateSensorRequest) -> dict[str, Any]:
    """The fields the client actually sent, ready to be stored."""
    return request.model_dump(exclude_unset=True)
