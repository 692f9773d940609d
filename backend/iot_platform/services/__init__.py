"""
Services Package
================

These are the "workers" that do the actual work.

- MongoStore: Talks to the database (the only thing that does)
- DocumentService: CRUD rules for experiments and sensor devices
- MeasurementService: Listing, stats and writes for measurements
"""

from .store import MongoStore, get_store, to_public, parse_object_id
from .documents import DocumentService
from .measurements import MeasurementService

__all__ = [
    "MongoStore",
    "get_store",
    "to_public",
    "parse_object_id",
    "DocumentService",
    "MeasurementService",
]
