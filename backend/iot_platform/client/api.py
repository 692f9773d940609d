"""
IoT Platform API Client
=======================

Async client for the platform API, for dashboards, notebooks and scripts.

HOW TO USE:
----------
    async with IoTPlatformClient("http://localhost:3000/api") as client:
        experiments = await client.list_experiments()
        print(experiments["count"], "experiments")

        sensors = await client.list_sensors(experiment_id="exp-001", status="online")
        stats = await client.get_measurement_stats("sensor-exp-001-1")

Every method returns the API envelope as a dict (``success``, ``data``,
``count``...). Anything that isn't a success - an HTTP error status or a
server that can't be reached - raises ``ApiError``.

QUERY PARAMETERS:
----------------
Parameters that are None or "" are not sent at all, so an empty filter
never restricts results.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from iot_platform.models import ExperimentStatus, SensorStatus

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    A failed API call.

    Attributes:
        status: HTTP status code, 0 when the server couldn't be reached
        data: Decoded response body, if there was one
    """

    def __init__(self, message: str, status: int = 0, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


def clean_params(params: Optional[dict]) -> dict:
    """Drop parameters whose value is None or an empty string."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None and value != ""}


class IoTPlatformClient:
    """Thin async wrapper around the platform's REST endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000/api",
        request_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, including the ``/api`` prefix
            request_timeout: Seconds to wait for each response
            transport: Custom httpx transport (tests route it to the app)
        """
        self.base_url = base_url.rstrip("/")
        self.http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=request_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "IoTPlatformClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # =========================================================================
    # REQUEST HELPER
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        """Send one request and return the decoded envelope."""
        try:
            response = await self.http_client.request(method, path, params=clean_params(params), json=json)
        except httpx.HTTPError as e:
            raise ApiError(f"Cannot connect to API: {e}", 0, None) from e

        data: Any
        if "application/json" in response.headers.get("content-type", ""):
            try:
                data = response.json()
            except ValueError:
                data = response.text
        else:
            data = response.text

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            logger.debug(f"{method} {path} -> {response.status_code}")
            raise ApiError(message or f"HTTP error {response.status_code}", response.status_code, data)

        return data

    # =========================================================================
    # HEALTH & CONFIG
    # =========================================================================

    async def check_health(self) -> dict:
        return await self._request("GET", "/health")

    async def get_config(self) -> dict:
        """Clusters, protocols, sensor types and statuses."""
        return await self._request("GET", "/config")

    # =========================================================================
    # EXPERIMENTS
    # =========================================================================

    async def list_experiments(self) -> dict:
        return await self._request("GET", "/experiments")

    async def get_experiment(self, experiment_id: str) -> dict:
        return await self._request("GET", f"/experiments/{experiment_id}")

    async def get_experiment_sensors(self, experiment_id: str) -> dict:
        return await self._request("GET", f"/experiments/{experiment_id}/sensors")

    async def create_experiment(self, experiment: dict) -> dict:
        return await self._request("POST", "/experiments", json=experiment)

    async def update_experiment(self, experiment_id: str, changes: dict) -> dict:
        return await self._request("PUT", f"/experiments/{experiment_id}", json=changes)

    async def delete_experiment(self, experiment_id: str) -> dict:
        return await self._request("DELETE", f"/experiments/{experiment_id}")

    # =========================================================================
    # SENSORS
    # =========================================================================

    async def list_sensors(
        self,
        experiment_id: Optional[str] = None,
        sensor_type: Optional[str] = None,
        sensor_type_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        params = {
            "experiment_id": experiment_id,
            "type": sensor_type,
            "sensor_type_id": sensor_type_id,
            "status": status,
        }
        return await self._request("GET", "/sensors", params=params)

    async def list_sensor_types(self) -> dict:
        return await self._request("GET", "/sensors/types")

    async def get_sensor(self, sensor_id: str) -> dict:
        return await self._request("GET", f"/sensors/{sensor_id}")

    async def get_sensor_measurements(
        self,
        sensor_id: str,
        limit: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        params = {"limit": limit, "start_date": start_date, "end_date": end_date}
        return await self._request("GET", f"/sensors/{sensor_id}/measurements", params=params)

    async def create_sensor(self, sensor: dict) -> dict:
        return await self._request("POST", "/sensors", json=sensor)

    async def update_sensor(self, sensor_id: str, changes: dict) -> dict:
        return await self._request("PUT", f"/sensors/{sensor_id}", json=changes)

    async def delete_sensor(self, sensor_id: str) -> dict:
        return await self._request("DELETE", f"/sensors/{sensor_id}")

    # =========================================================================
    # MEASUREMENTS
    # =========================================================================

    async def list_measurements(
        self,
        sensor_id: Optional[str] = None,
        limit: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        params = {"sensor_id": sensor_id, "limit": limit, "start_date": start_date, "end_date": end_date}
        return await self._request("GET", "/sensors/measurements", params=params)

    async def get_measurement_stats(self, sensor_id: str) -> dict:
        return await self._request("GET", "/sensors/measurements/stats", params={"sensor_id": sensor_id})

    async def create_measurement(self, measurement: dict) -> dict:
        return await self._request("POST", "/sensors/measurements", json=measurement)

    async def create_measurements_batch(self, measurements: list[dict]) -> dict:
        return await self._request("POST", "/sensors/measurements/batch", json=measurements)

    async def update_measurement(self, measurement_id: str, changes: dict) -> dict:
        return await self._request("PUT", f"/sensors/measurements/{measurement_id}", json=changes)

    async def delete_measurement(self, measurement_id: str) -> dict:
        return await self._request("DELETE", f"/sensors/measurements/{measurement_id}")

    # =========================================================================
    # COMBINED QUERIES
    # =========================================================================

    async def get_experiment_measurements(self, experiment_id: str, **params) -> dict:
        """
        Measurements of every sensor of an experiment, grouped by sensor.

        Returns:
            {
                "success": True,
                "experimentId": "exp-001",
                "sensors": 2,
                "data": {
                    "sensor-1": {"sensor": {...}, "measurements": [...]},
                    ...
                }
            }
        """
        sensors_response = await self.get_experiment_sensors(experiment_id)
        sensors = sensors_response.get("data") or []

        responses = await asyncio.gather(
            *(self.get_sensor_measurements(sensor["id"], **params) for sensor in sensors)
        )

        grouped = {
            sensor["id"]: {"sensor": sensor, "measurements": response.get("data") or []}
            for sensor, response in zip(sensors, responses)
        }
        return {
            "success": True,
            "experimentId": experiment_id,
            "sensors": len(sensors),
            "data": grouped,
        }

    async def get_global_stats(self) -> dict:
        """
        Platform-wide totals for the dashboard header.

        A sensor counts as active when it is ``online``; offline and
        maintenance sensors both count as inactive.
        """
        experiments_response, sensors_response = await asyncio.gather(
            self.list_experiments(),
            self.list_sensors(),
        )
        experiments = experiments_response.get("data") or []
        sensors = sensors_response.get("data") or []

        active_sensors = sum(1 for s in sensors if s.get("status") == SensorStatus.ONLINE.value)
        active_experiments = sum(1 for e in experiments if e.get("status") == ExperimentStatus.ACTIVE.value)

        return {
            "success": True,
            "data": {
                "totalExperiments": len(experiments),
                "activeExperiments": active_experiments,
                "totalSensors": len(sensors),
                "activeSensors": active_sensors,
                "inactiveSensors": len(sensors) - active_sensors,
            },
        }

    async def search_experiments(
        self,
        title: Optional[str] = None,
        location: Optional[str] = None,
        cluster_id: Optional[int] = None,
        protocol: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        """
        Search experiments on the client side.

        - title: case-insensitive match in title or description
        - location: case-insensitive match in city or school
        - cluster_id, protocol (protocol_id), status: exact match

        Criteria left empty don't filter anything.
        """
        response = await self.list_experiments()
        experiments = response.get("data") or []

        if title:
            term = title.lower()
            experiments = [
                e for e in experiments
                if term in (e.get("title") or "").lower() or term in (e.get("description") or "").lower()
            ]
        if location:
            term = location.lower()
            experiments = [
                e for e in experiments
                if term in (e.get("city") or "").lower() or term in (e.get("school") or "").lower()
            ]
        if cluster_id not in (None, ""):
            experiments = [e for e in experiments if e.get("cluster_id") == int(cluster_id)]
        if protocol:
            experiments = [e for e in experiments if e.get("protocol_id") == protocol]
        if status:
            experiments = [e for e in experiments if e.get("status") == status]

        return {"success": True, "count": len(experiments), "data": experiments}
