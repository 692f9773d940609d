"""
Document Service
================

The CRUD rules shared by experiments and sensor devices.

Both kinds of entity behave the same way:

    create  - required fields must be there (400), the business id must be
              new (409), timestamps are stamped by the server (201)
    update  - partial merge, ``id``/``_id`` can't be changed, ``updated_at``
              refreshed, 404 if the document doesn't exist
    delete  - by business id, 404 if nothing was removed
    get     - by business id (``id``), never by the storage ``_id``

So instead of writing everything twice, each router builds one of these
with its own collection name and required fields.
"""

import logging
from typing import Iterable, Optional

from iot_platform.exceptions import ConflictError, NotFoundError
from iot_platform.services.store import MongoStore
from iot_platform.utils.validation import require_fields, strip_identifiers, utcnow

logger = logging.getLogger(__name__)


class DocumentService:
    """CRUD for one collection keyed by a string business ``id``."""

    def __init__(
        self,
        store: MongoStore,
        collection: str,
        resource: str,
        required_fields: Iterable[str],
    ):
        """
        Args:
            store: Data access
            collection: Collection name, e.g. "experiments"
            resource: Name used in error messages, e.g. "Experiment"
            required_fields: Fields a create must carry
        """
        self.store = store
        self.collection = collection
        self.resource = resource
        self.required_fields = tuple(required_fields)

    def find(self, query: Optional[dict] = None) -> list[dict]:
        return self.store.find(self.collection, query)

    def get(self, doc_id: str) -> dict:
        doc = self.store.find_one(self.collection, {"id": doc_id})
        if not doc:
            raise NotFoundError(self.resource, doc_id)
        return doc

    def create(self, fields: dict) -> dict:
        """
        Store a new document.

        Raises:
            ValidationError: a required field is missing or empty
            ConflictError: a document with the same id already exists
        """
        require_fields(fields, self.required_fields)

        if self.store.exists(self.collection, {"id": fields["id"]}):
            raise ConflictError(f"{self.resource} with this ID already exists")

        now = utcnow()
        document = {**fields, "created_at": now, "updated_at": now}
        # A storage id from the client would bypass the generated one
        document.pop("_id", None)
        created = self.store.insert(self.collection, document)
        logger.info(f"{self.resource} created: {fields['id']}")
        return created

    def update(self, doc_id: str, changes: dict) -> dict:
        """Merge ``changes`` into the document and return the result."""
        changes = strip_identifiers(changes)
        changes["updated_at"] = utcnow()
        updated = self.store.update(self.collection, {"id": doc_id}, changes)
        if not updated:
            raise NotFoundError(self.resource, doc_id)
        return updated

    def delete(self, doc_id: str) -> None:
        if not self.store.delete(self.collection, {"id": doc_id}):
            raise NotFoundError(self.resource, doc_id)
        logger.info(f"{self.resource} deleted: {doc_id}")
