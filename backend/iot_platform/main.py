"""
IoT Platform - Backend API
==========================
FastAPI application serving experiments, sensor devices and measurements
stored in MongoDB.

ARCHITECTURE:
    [Dashboard / scripts] --HTTP/JSON--> [This API] ---> [MongoDB]

    Every response is an envelope:
        {"success": true, "data": ..., "count": n}
        {"success": false, "error": "..."}

HOW TO RUN:
    # Install
    pip install -e .

    # Configure (or put these in a .env file)
    export MONGODB_URI="mongodb://localhost:27017"
    export DB_NAME="iot_platform"

    # Run the server
    uvicorn iot_platform.main:app --reload --port 3000
    # or
    python -m iot_platform.main

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:3000/docs
    - ReDoc: http://localhost:3000/redoc
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from iot_platform.exceptions import DatabaseError, PlatformError
from iot_platform.models import error_envelope, success_envelope
from iot_platform.reference import config_payload, sensor_type_catalog
from iot_platform.routers import experiments_router, measurements_router, sensors_router
from iot_platform.services import MongoStore


# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

class Config:
    """
    Application configuration loaded from environment variables.

    Environment Variables:
        MONGODB_URI: MongoDB connection string
        DB_NAME: Database name (default: iot_platform)
        API_HOST / API_PORT: Where uvicorn listens (default: 0.0.0.0:3000)
        CORS_ORIGINS: Comma-separated allowed origins, "*" for any
        FRONTEND_URL: Dashboard URL, always allowed by CORS
        LOG_LEVEL: DEBUG, INFO, WARNING... (default: INFO)
    """

    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    DB_NAME = os.getenv("DB_NAME", "iot_platform")

    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "3000"))

    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Any origin is accepted during development
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def cors_origins(cls) -> list[str]:
        if "*" in cls.CORS_ORIGINS:
            return ["*"]
        return sorted(set(cls.CORS_ORIGINS + [cls.FRONTEND_URL]))


def setup_logging(level: str = Config.LOG_LEVEL) -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================
# Nothing leaves the API without being wrapped in the failure envelope.

def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn pydantic's error list into one readable line."""
    parts = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        where = ".".join(location)
        parts.append(f"{where}: {error.get('msg')}" if where else str(error.get("msg")))
    return "Invalid request: " + "; ".join(parts)


async def platform_error_handler(request: Request, exc: PlatformError):
    if isinstance(exc, DatabaseError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=error_envelope(describe_validation_error(exc)))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_envelope(str(exc)))


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(store: Optional[MongoStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: Data access to use. When None, the lifespan handler connects
               to ``Config.MONGODB_URI`` on startup and closes the client on
               shutdown. Tests pass an in-memory store instead.
    """
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        STARTUP:
            1. Connect to MongoDB (unless a store was injected)
            2. Ensure indexes
            3. Sync the sensor-type catalog

        SHUTDOWN:
            1. Close the MongoDB client we opened
        """
        # ========== STARTUP ==========
        print("=" * 60)
        print("🚀 IOT PLATFORM API - Starting Backend")
        print("=" * 60)

        owns_store = store is None
        active_store = store or MongoStore.connect(Config.MONGODB_URI, Config.DB_NAME)
        app.state.store = active_store

        active_store.ensure_indexes()
        try:
            active_store.sync_sensor_types(sensor_type_catalog())
        except DatabaseError as e:
            logger.error(f"Sensor-type catalog not synced: {e}")

        print(f"✅ Database: {Config.DB_NAME if owns_store else 'injected store'}")
        print(f"   CORS origins: {', '.join(Config.cors_origins())}")
        print(f"📖 API Documentation: http://localhost:{Config.API_PORT}/docs")
        print("=" * 60)

        yield  # Application runs here

        # ========== SHUTDOWN ==========
        print("🛑 Shutting down...")
        if owns_store:
            active_store.close()
        print("✅ Shutdown complete")

    app = FastAPI(
        title="IoT Platform API",
        description="""
## Overview

CRUD API for an IoT sensor-data platform: **experiments** run by schools,
the **sensor devices** deployed for them and the **measurements** those
sensors produce.

## Response format

Every endpoint answers with the same envelope:

| Case | Body |
|------|------|
| Success | `{"success": true, "data": ..., "count": n}` |
| Failure | `{"success": false, "error": "..."}` |

`count` is only present on list endpoints.

## Status codes

| Code | Meaning |
|------|---------|
| 400 | Missing or invalid input |
| 404 | No document with that identifier |
| 409 | Identifier already in use |
| 500 | Database or unexpected error |
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Usable before startup too (e.g. ASGI transports that skip lifespan)
    if store is not None:
        app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PlatformError, platform_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Measurements first: its fixed paths live under /api/sensors
    app.include_router(measurements_router)
    app.include_router(sensors_router)
    app.include_router(experiments_router)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", summary="API Information")
    async def root():
        """Root endpoint with an overview of the API."""
        return {
            "name": "IoT Platform API",
            "version": "1.0.0",
            "documentation": {
                "swagger": "/docs",
                "redoc": "/redoc",
                "openapi": "/openapi.json",
            },
            "endpoints": {
                "health": "GET /api/health",
                "config": "GET /api/config",
                "experiments": {
                    "list": "GET /api/experiments",
                    "create": "POST /api/experiments",
                    "get": "GET /api/experiments/{id}",
                    "update": "PUT /api/experiments/{id}",
                    "delete": "DELETE /api/experiments/{id}",
                    "sensors": "GET /api/experiments/{id}/sensors",
                },
                "sensors": {
                    "list": "GET /api/sensors",
                    "devices": "GET /api/sensors/devices",
                    "types": "GET /api/sensors/types",
                    "create": "POST /api/sensors",
                    "get": "GET /api/sensors/{id}",
                    "update": "PUT /api/sensors/{id}",
                    "delete": "DELETE /api/sensors/{id}",
                    "measurements": "GET /api/sensors/{id}/measurements",
                },
                "measurements": {
                    "list": "GET /api/sensors/measurements",
                    "create": "POST /api/sensors/measurements",
                    "batch": "POST /api/sensors/measurements/batch",
                    "stats": "GET /api/sensors/measurements/stats?sensor_id=...",
                    "update": "PUT /api/sensors/measurements/{_id}",
                    "delete": "DELETE /api/sensors/measurements/{_id}",
                },
            },
        }

    @app.get("/api/health", summary="Health Check")
    def health(request: Request):
        """
        Liveness/readiness probe.

        Always 200 while the process is up; ``database`` tells whether
        MongoDB answered a ping.
        """
        active_store: Optional[MongoStore] = getattr(request.app.state, "store", None)
        connected = active_store is not None and active_store.ping()
        return {
            "success": True,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if connected else "disconnected",
        }

    @app.get("/api/config", summary="Reference Data")
    async def get_config():
        """Clusters, protocols, sensor types and sensor statuses in one payload."""
        return success_envelope(config_payload())

    return app


# Create the application instance at import time so uvicorn can find it
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("iot_platform.main:app", host=Config.API_HOST, port=Config.API_PORT)
