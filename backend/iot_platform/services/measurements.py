"""
Measurement Service
===================

Reading, writing and summarising sensor measurements.

Unlike experiments and sensors, measurements have no business id: they are
addressed by the storage ``_id`` (a 24-character ObjectId string) for
updates and deletes.

LISTING:
    Most recent first. The limit is applied AFTER sorting, so ``limit=10``
    means "the 10 newest readings that match", which is what a dashboard
    chart wants.

STATS:
    One ``$group`` aggregation per sensor: count, mean, min and max of
    ``value`` plus the first and last timestamp.
"""

import logging
from typing import Any, Optional

from pymongo import DESCENDING

from iot_platform.exceptions import NotFoundError, ValidationError
from iot_platform.models.measurement import MeasurementStats
from iot_platform.services.store import MongoStore, parse_object_id
from iot_platform.utils.validation import (
    is_present,
    parse_timestamp,
    strip_identifiers,
    utcnow,
)

logger = logging.getLogger(__name__)


class MeasurementService:
    """Measurement operations on top of the store."""

    RESOURCE = "Measurement"

    def __init__(self, store: MongoStore):
        self.store = store
        self.collection = MongoStore.MEASUREMENTS

    def find(self, query: dict, limit: int) -> list[dict]:
        """Matching measurements, newest first, at most ``limit`` of them."""
        return self.store.find(
            self.collection,
            query,
            sort=[("timestamp", DESCENDING)],
            limit=limit,
        )

    def stats(self, sensor_id: Optional[str]) -> dict:
        """
        Aggregate statistics for one sensor.

        Returns an empty dict when the sensor has no measurements.

        Raises:
            ValidationError: if sensor_id is missing
        """
        if not is_present(sensor_id):
            raise ValidationError("sensor_id is required")

        pipeline = [
            {"$match": {"sensor_id": sensor_id}},
            {
                "$group": {
                    "_id": None,
                    "count": {"$sum": 1},
                    "avgValue": {"$avg": "$value"},
                    "minValue": {"$min": "$value"},
                    "maxValue": {"$max": "$value"},
                    "firstTimestamp": {"$min": "$timestamp"},
                    "lastTimestamp": {"$max": "$timestamp"},
                }
            },
        ]
        rows = self.store.aggregate(self.collection, pipeline)
        # Some backends answer an empty $match with a count-0 group row
        if not rows or not rows[0].get("count"):
            return {}
        row = rows[0]
        row.pop("_id", None)
        return MeasurementStats(**row).model_dump()

    def prepare(self, fields: dict) -> dict:
        """
        Validate a measurement body and return the document to store.

        ``value`` only has to be present: 0, false and null are all accepted.
        """
        missing = [name for name in ("sensor_id",) if not is_present(fields.get(name))]
        if "value" not in fields:
            missing.append("value")
        if missing:
            raise ValidationError("Missing required fields: sensor_id, value")

        document = {key: value for key, value in fields.items() if key != "_id"}
        if is_present(fields.get("timestamp")):
            document["timestamp"] = parse_timestamp(fields["timestamp"])
        else:
            document["timestamp"] = utcnow()
        return document

    def create(self, fields: dict) -> dict:
        document = self.prepare(fields)
        created = self.store.insert(self.collection, document)
        logger.debug(f"Measurement stored for sensor {document['sensor_id']}")
        return created

    def create_many(self, items: list[dict]) -> list[dict]:
        """
        Validate every item first, then insert them all.

        One bad item rejects the whole batch, nothing is written.
        """
        if not items:
            raise ValidationError("Batch must contain at least one measurement")
        documents = []
        for index, fields in enumerate(items):
            try:
                documents.append(self.prepare(fields))
            except ValidationError as exc:
                raise ValidationError(f"Item {index}: {exc.message}") from exc
        return self.store.insert_many(self.collection, documents)

    def _object_id(self, measurement_id: str):
        object_id = parse_object_id(measurement_id)
        if object_id is None:
            # A malformed id can't match anything
            raise NotFoundError(self.RESOURCE, measurement_id)
        return object_id

    def update(self, measurement_id: str, changes: dict[str, Any]) -> dict:
        object_id = self._object_id(measurement_id)
        changes = strip_identifiers(changes, fields=("_id",))
        if is_present(changes.get("timestamp")):
            changes["timestamp"] = parse_timestamp(changes["timestamp"])
        updated = self.store.update(self.collection, {"_id": object_id}, changes)
        if not updated:
            raise NotFoundError(self.RESOURCE, measurement_id)
        return updated

    def delete(self, measurement_id: str) -> None:
        object_id = self._object_id(measurement_id)
        if not self.store.delete(self.collection, {"_id": object_id}):
            raise NotFoundError(self.RESOURCE, measurement_id)
