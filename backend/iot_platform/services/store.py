"""
MongoDB Document Store
======================

The only place that talks to the database.

WHAT IT DOES:
------------
1. Holds the four collections (experiments, sensor_devices, measurements,
   sensor_types)
2. Offers small generic operations: find, insert, update, delete, aggregate
3. Turns pymongo errors into our own exceptions so the API can answer with
   the standard envelope
4. Converts documents into JSON-friendly dicts (ObjectId -> str, dates ->
   UTC-aware datetimes)

HOW IT GETS CREATED:
-------------------
The store is built once, explicitly, and handed to the app:

    store = MongoStore.connect("mongodb://localhost:27017", "iot_platform")
    app = create_app(store=store)

Tests hand it an in-memory database instead:

    store = MongoStore(mongomock.MongoClient()["test"])

There is no global "call connect first" handle anywhere.
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from bson import ObjectId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from iot_platform.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def handle_db_errors(func):
    """Decorator translating pymongo failures into platform exceptions."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DuplicateKeyError as exc:
            raise ConflictError("Document with this ID already exists") from exc
        except PyMongoError as exc:
            logger.error(f"Database error in {func.__name__}: {exc}")
            raise DatabaseError(str(exc)) from exc

    return wrapper


def to_public(value: Any) -> Any:
    """
    Make a stored value JSON-friendly.

    ObjectIds become strings and naive datetimes (BSON dates are UTC) get
    their UTC tzinfo back, recursively through dicts and lists.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, dict):
        return {key: to_public(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_public(item) for item in value]
    return value


def parse_object_id(value: str) -> Optional[ObjectId]:
    """ObjectId for a 24-hex string, or None when it can't be one."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class MongoStore:
    """
    Collection-scoped access to the platform database.

    Every public method returns plain dicts already passed through
    ``to_public``.
    """

    EXPERIMENTS = "experiments"
    SENSORS = "sensor_devices"
    MEASUREMENTS = "measurements"
    SENSOR_TYPES = "sensor_types"

    def __init__(self, database: Database, client: Optional[MongoClient] = None):
        """
        Args:
            database: The database to use (pymongo or mongomock)
            client: The owning client, closed by ``close()`` when given
        """
        self.db = database
        self.client = client

    @classmethod
    def connect(cls, uri: str, db_name: str, **client_options) -> "MongoStore":
        """Open a client for ``uri`` and use its ``db_name`` database."""
        client = MongoClient(uri, serverSelectionTimeoutMS=5000, **client_options)
        logger.info(f"MongoDB client created for database '{db_name}'")
        return cls(client[db_name], client=client)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB client closed")

    def collection(self, name: str):
        return self.db[name]

    # =========================================================================
    # HOUSEKEEPING
    # =========================================================================

    def ping(self) -> bool:
        """True when the server answers a ping."""
        try:
            self.db.command("ping")
            return True
        except Exception as exc:
            logger.warning(f"Database ping failed: {exc}")
            return False

    def ensure_indexes(self) -> None:
        """
        Create the indexes the API relies on.

        The unique indexes on ``id`` back up the exists-then-insert check done
        on create: two concurrent creates with the same id end in one
        document and one 409 instead of two documents.
        """
        try:
            experiments = self.collection(self.EXPERIMENTS)
            experiments.create_index("id", unique=True)
            experiments.create_index("cluster_id")

            sensors = self.collection(self.SENSORS)
            sensors.create_index("id", unique=True)
            sensors.create_index([("experiment_id", ASCENDING), ("status", ASCENDING)])

            measurements = self.collection(self.MEASUREMENTS)
            measurements.create_index([("sensor_id", ASCENDING), ("timestamp", DESCENDING)])
            measurements.create_index([("experiment_id", ASCENDING), ("timestamp", DESCENDING)])

            self.collection(self.SENSOR_TYPES).create_index("id", unique=True)
        except PyMongoError as exc:
            # Existing duplicate ids make the unique index fail; the API
            # still works, just without the race protection
            logger.warning(f"Could not create indexes: {exc}")
            return
        logger.info("Database indexes ensured")

    @handle_db_errors
    def sync_sensor_types(self, catalog: Iterable[dict]) -> int:
        """Upsert the static sensor-type catalog into ``sensor_types``."""
        count = 0
        for sensor_type in catalog:
            self.collection(self.SENSOR_TYPES).update_one(
                {"id": sensor_type["id"]},
                {"$set": dict(sensor_type)},
                upsert=True,
            )
            count += 1
        logger.info(f"Synced {count} sensor types")
        return count

    # =========================================================================
    # GENERIC DOCUMENT OPERATIONS
    # =========================================================================

    @handle_db_errors
    def find(
        self,
        collection: str,
        query: Optional[dict] = None,
        sort: Optional[list[tuple[str, int]]] = None,
        limit: Optional[int] = None,
        projection: Optional[dict] = None,
    ) -> list[dict]:
        """All documents matching ``query``, optionally sorted then limited."""
        cursor = self.collection(collection).find(query or {}, projection)
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        documents = [to_public(doc) for doc in cursor]
        logger.debug(f"find {collection} {query} -> {len(documents)} documents")
        return documents

    @handle_db_errors
    def find_one(self, collection: str, query: dict) -> Optional[dict]:
        doc = self.collection(collection).find_one(query)
        return to_public(doc) if doc else None

    @handle_db_errors
    def exists(self, collection: str, query: dict) -> bool:
        return self.collection(collection).find_one(query, {"_id": 1}) is not None

    @handle_db_errors
    def insert(self, collection: str, document: dict) -> dict:
        """Insert one document and return it with its generated ``_id``."""
        document = dict(document)
        self.collection(collection).insert_one(document)
        logger.info(f"Inserted into {collection}: {document.get('id', document['_id'])}")
        return to_public(document)

    @handle_db_errors
    def insert_many(self, collection: str, documents: list[dict]) -> list[dict]:
        documents = [dict(doc) for doc in documents]
        if documents:
            self.collection(collection).insert_many(documents)
        logger.info(f"Inserted {len(documents)} documents into {collection}")
        return [to_public(doc) for doc in documents]

    @handle_db_errors
    def update(self, collection: str, query: dict, changes: dict) -> Optional[dict]:
        """
        ``$set`` the changes on the first match and return the updated document.

        Never upserts: returns None when nothing matched.
        """
        if not changes:
            return self.find_one(collection, query)
        doc = self.collection(collection).find_one_and_update(
            query,
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            logger.info(f"Updated {collection} {query}: {sorted(changes)}")
        return to_public(doc) if doc else None

    @handle_db_errors
    def delete(self, collection: str, query: dict) -> bool:
        """Delete the first match. True when something was removed."""
        result = self.collection(collection).delete_one(query)
        if result.deleted_count:
            logger.info(f"Deleted from {collection}: {query}")
        return result.deleted_count > 0

    @handle_db_errors
    def aggregate(self, collection: str, pipeline: list[dict]) -> list[dict]:
        return [to_public(doc) for doc in self.collection(collection).aggregate(pipeline)]


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

def get_store(request: Request) -> MongoStore:
    """FastAPI dependency: the store the app was created with."""
    return request.app.state.store
