"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.

Include order matters: measurements first, so its fixed paths under
/api/sensors/measurements win over /api/sensors/{sensor_id}.
"""

from .measurements import router as measurements_router, get_measurement_service
from .sensors import router as sensors_router, get_sensor_service
from .experiments import router as experiments_router, get_experiment_service

__all__ = [
    "measurements_router",
    "sensors_router",
    "experiments_router",
    "get_measurement_service",
    "get_sensor_service",
    "get_experiment_service",
]
