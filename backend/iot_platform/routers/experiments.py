"""
Experiments API Router
======================

ALL ENDPOINTS:
-------------
GET    /api/experiments                - List all experiments
POST   /api/experiments                - Create an experiment
GET    /api/experiments/{id}           - Get one experiment
PUT    /api/experiments/{id}           - Update an experiment (partial)
DELETE /api/experiments/{id}           - Delete an experiment
GET    /api/experiments/{id}/sensors   - Sensors that belong to it

Every response uses the envelope from ``models.envelope``. Errors are
raised as platform exceptions and turned into envelopes by the handlers
registered in ``main.py``.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from iot_platform.models import (
    ERROR_RESPONSES,
    EXPERIMENT_REQUIRED_FIELDS,
    CreateExperimentRequest,
    experiment_document,
    list_envelope,
    success_envelope,
)
from iot_platform.routers.sensors import get_sensor_service
from iot_platform.services import DocumentService, MongoStore, get_store


router = APIRouter(prefix="/api/experiments", tags=["experiments"], responses=ERROR_RESPONSES)


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

def get_experiment_service(store: MongoStore = Depends(get_store)) -> DocumentService:
    return DocumentService(store, MongoStore.EXPERIMENTS, "Experiment", EXPERIMENT_REQUIRED_FIELDS)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("")
def list_experiments(service: DocumentService = Depends(get_experiment_service)):
    """Get every experiment. No filters, no pagination."""
    return list_envelope(service.find())


@router.post("", status_code=201)
def create_experiment(
    request: CreateExperimentRequest,
    service: DocumentService = Depends(get_experiment_service),
):
    """
    Create an experiment.

    Needs at least ``id`` and ``title``. Answers 409 if the id is taken.
    """
    experiment = service.create(experiment_document(request))
    return success_envelope(experiment, message="Experiment created successfully")


@router.get("/{experiment_id}")
def get_experiment(experiment_id: str, service: DocumentService = Depends(get_experiment_service)):
    """Get one experiment by its ``id``."""
    return success_envelope(service.get(experiment_id))


@router.put("/{experiment_id}")
def update_experiment(
    experiment_id: str,
    changes: dict[str, Any] = Body(...),
    service: DocumentService = Depends(get_experiment_service),
):
    """
    Update an experiment.

    Only the fields you send are changed. ``id`` and ``_id`` are ignored.
    """
    experiment = service.update(experiment_id, changes)
    return success_envelope(experiment, message="Experiment updated successfully")


@router.delete("/{experiment_id}")
def delete_experiment(experiment_id: str, service: DocumentService = Depends(get_experiment_service)):
    """
    Delete an experiment.

    Its sensors and measurements are left alone.
    """
    service.delete(experiment_id)
    return success_envelope(message="Experiment deleted successfully", include_data=False)


@router.get("/{experiment_id}/sensors")
def get_experiment_sensors(experiment_id: str, sensors: DocumentService = Depends(get_sensor_service)):
    """
    Sensors whose ``experiment_id`` is this experiment.

    An unknown experiment just has no sensors: the answer is an empty list,
    not a 404.
    """
    return list_envelope(sensors.find({"experiment_id": experiment_id}))
