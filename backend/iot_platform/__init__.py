"""
IoT Platform Backend
====================

The Python package for the sensor-data platform API and its client.

HOW IT'S ORGANIZED:
------------------
- models/    = Request bodies, enums and the response envelope
- services/  = Workers (the MongoDB store and the CRUD rules on top of it)
- routers/   = API endpoints (the doors into our app)
- utils/     = Validation and query-filter helpers
- client/    = Async HTTP client, data providers with demo fallback, export
- reference.py = Fixed catalogs (clusters, protocols, sensor types)
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
