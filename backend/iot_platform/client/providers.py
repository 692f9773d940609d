"""
Data Providers
==============

Where a dashboard gets its experiments, sensors and measurements from.

    ApiDataProvider      -> the live API (through IoTPlatformClient)
    StaticDataProvider   -> built-in demo data, no server needed
    FallbackDataProvider -> tries the first, switches to the second on error

Example:
    client = IoTPlatformClient("http://localhost:3000/api")
    provider = FallbackDataProvider(ApiDataProvider(client), StaticDataProvider())

    experiments = await provider.get_experiments()
    if provider.using_fallback:
        print("API unreachable - showing demo data")
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from .api import ApiError, IoTPlatformClient, clean_params

logger = logging.getLogger(__name__)


class DataProvider(ABC):
    """Read-only source of platform data, as plain lists of dicts."""

    @abstractmethod
    async def get_experiments(self) -> list[dict]:
        pass

    @abstractmethod
    async def get_sensors(
        self,
        experiment_id: Optional[str] = None,
        sensor_type: Optional[str] = None,
        sensor_type_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[dict]:
        """Sensors, filtered on equality. Same filters as ``IoTPlatformClient.list_sensors``."""
        pass

    @abstractmethod
    async def get_measurements(self, sensor_id: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        """Newest first."""
        pass


class ApiDataProvider(DataProvider):
    """Data straight from the API. Errors surface as ``ApiError``."""

    def __init__(self, client: IoTPlatformClient):
        self.client = client

    async def get_experiments(self) -> list[dict]:
        response = await self.client.list_experiments()
        return response.get("data") or []

    async def get_sensors(self, experiment_id=None, sensor_type=None, sensor_type_id=None, status=None) -> list[dict]:
        response = await self.client.list_sensors(
            experiment_id=experiment_id,
            sensor_type=sensor_type,
            sensor_type_id=sensor_type_id,
            status=status,
        )
        return response.get("data") or []

    async def get_measurements(self, sensor_id: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        response = await self.client.list_measurements(sensor_id=sensor_id, limit=limit)
        return response.get("data") or []


# =============================================================================
# DEMO DATA
# =============================================================================

DEMO_EXPERIMENTS = [
    {
        "id": "exp-001",
        "title": "Mesure de la qualité de l'air",
        "city": "Paris",
        "school": "Lycée Victor Hugo",
        "cluster_id": 2,
        "protocol_id": "air-quality-monitoring",
        "protocol_name": "Air Quality Monitoring",
        "status": "active",
        "description": "Suivi du CO2 et des particules fines dans les salles de classe.",
        "location": {"type": "Point", "coordinates": [2.3522, 48.8566]},
    },
    {
        "id": "exp-002",
        "title": "Niveau sonore campus",
        "city": "Lyon",
        "school": "Collège Jean Moulin",
        "cluster_id": 2,
        "protocol_id": "noise-pollution",
        "protocol_name": "Noise Pollution Investigation",
        "status": "completed",
        "description": "Cartographie du bruit dans la cour et la cantine.",
        "location": {"type": "Point", "coordinates": [4.8357, 45.764]},
    },
    {
        "id": "exp-003",
        "title": "Îlot de chaleur urbain",
        "city": "Marseille",
        "school": "Lycée Marcel Pagnol",
        "cluster_id": 2,
        "protocol_id": "urban-heat-island",
        "protocol_name": "Urban Heat Island Effect",
        "status": "pending",
        "description": "Comparaison des températures entre la cour bitumée et le parc voisin.",
        "location": {"type": "Point", "coordinates": [5.3698, 43.2965]},
    },
]

DEMO_SENSORS = [
    {"id": "sensor-exp-001-1", "experiment_id": "exp-001", "type": "co2", "sensor_type_id": "co2",
     "name": "CO2 salle 12", "status": "online"},
    {"id": "sensor-exp-001-2", "experiment_id": "exp-001", "type": "pm25", "sensor_type_id": "pm25",
     "name": "PM2.5 salle 12", "status": "online"},
    {"id": "sensor-exp-002-1", "experiment_id": "exp-002", "type": "noise", "sensor_type_id": "noise",
     "name": "Sonomètre cour", "status": "offline"},
    {"id": "sensor-exp-003-1", "experiment_id": "exp-003", "type": "temperature", "sensor_type_id": "temperature",
     "name": "Thermomètre parc", "status": "maintenance"},
]

# Typical reading per sensor type, used to generate the demo series
DEMO_BASELINES = {"co2": 650.0, "pm25": 12.0, "noise": 55.0, "temperature": 21.0}

DEMO_POINTS_PER_SENSOR = 24


class StaticDataProvider(DataProvider):
    """
    Built-in demo data for when no API is available.

    Measurements are an hourly series ending at ``now`` with a small
    repeating variation around a per-type baseline, so charts have
    something to draw.
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime.now(timezone.utc)

    async def get_experiments(self) -> list[dict]:
        return [dict(experiment) for experiment in DEMO_EXPERIMENTS]

    async def get_sensors(self, experiment_id=None, sensor_type=None, sensor_type_id=None, status=None) -> list[dict]:
        # Same keys as the API query string, where sensor_type is "type"
        filters = clean_params({
            "experiment_id": experiment_id,
            "type": sensor_type,
            "sensor_type_id": sensor_type_id,
            "status": status,
        })
        return [
            dict(sensor) for sensor in DEMO_SENSORS
            if all(sensor.get(key) == value for key, value in filters.items())
        ]

    async def get_measurements(self, sensor_id: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        sensors = [s for s in DEMO_SENSORS if sensor_id in (None, "", s["id"])]
        measurements = []
        for sensor in sensors:
            baseline = DEMO_BASELINES.get(sensor["type"], 0.0)
            for hour in range(DEMO_POINTS_PER_SENSOR):
                measurements.append({
                    "sensor_id": sensor["id"],
                    "experiment_id": sensor["experiment_id"],
                    "sensor_type_id": sensor["sensor_type_id"],
                    "value": round(baseline * (1 + ((hour % 5) - 2) / 20), 2),
                    "timestamp": (self.now - timedelta(hours=hour)).isoformat(),
                    "quality": {"score": 1, "status": "good"},
                })
        measurements.sort(key=lambda m: m["timestamp"], reverse=True)
        return measurements[:limit] if limit else measurements


class FallbackDataProvider(DataProvider):
    """
    Use ``primary`` and fall back to ``fallback`` when it raises ``ApiError``.

    The switch is per call: once the API answers again, its data is used
    again. ``using_fallback`` tells whether the last call was served by the
    fallback (a dashboard shows a "demo data" badge from it).
    """

    def __init__(self, primary: DataProvider, fallback: DataProvider):
        self.primary = primary
        self.fallback = fallback
        self.using_fallback = False

    async def _call(self, name: str, *args, **kwargs) -> list[dict]:
        try:
            result = await getattr(self.primary, name)(*args, **kwargs)
        except ApiError as e:
            logger.warning(f"{name} failed ({e.message}), using fallback data")
            self.using_fallback = True
            return await getattr(self.fallback, name)(*args, **kwargs)
        self.using_fallback = False
        return result

    async def get_experiments(self) -> list[dict]:
        return await self._call("get_experiments")

    async def get_sensors(self, experiment_id=None, sensor_type=None, sensor_type_id=None, status=None) -> list[dict]:
        return await self._call(
            "get_sensors",
            experiment_id=experiment_id,
            sensor_type=sensor_type,
            sensor_type_id=sensor_type_id,
            status=status,
        )

    async def get_measurements(self, sensor_id: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        return await self._call("get_measurements", sensor_id=sensor_id, limit=limit)
