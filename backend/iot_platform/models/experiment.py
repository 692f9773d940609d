"""
Experiment Models
=================

An experiment is a school project that deploys sensors somewhere in a city,
e.g. "Air Quality Monitoring - Lycée Victor Hugo" in Marseille.

Documents are loosely typed: besides the fields listed here a client may
send anything it likes and it is stored as-is. Only ``id`` and ``title``
are required, and that is checked by the router so a missing field answers
400 with the standard envelope.

Example Request:
    POST /api/experiments
    {
        "id": "exp-001",
        "title": "Air Quality Monitoring - Victor Hugo",
        "city": "Marseille",
        "cluster_id": 2,
        "protocol_id": "air-quality-monitoring",
        "location": {"type": "Point", "coordinates": [5.369780, 43.296482]},
        "status": "active"
    }
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExperimentStatus(str, Enum):
    """
    Where an experiment is in its life.

    Not enforced: the API stores whatever status it is given.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    PENDING = "pending"


class CreateExperimentRequest(BaseModel):
    """Request body for creating an experiment."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Business identifier (required, unique)", examples=["exp-001"])
    title: Optional[str] = Field(None, description="Experiment title (required)")
    city: Optional[str] = Field(None, description="City where the experiment runs")
    school: Optional[str] = Field(None, description="School running the experiment")
    cluster_id: Any = Field(None, description="Thematic cluster (1-5), stored as sent")
    protocol_id: Optional[str] = Field(None, description="Protocol key, e.g. 'noise-pollution'")
    protocol_name: Optional[str] = Field(None, description="Protocol display name")
    location: Any = Field(None, description="Usually a GeoJSON Point, stored as sent")
    status: Optional[str] = Field(None, description="active | completed | pending")
    description: Optional[str] = None
    methodology: Optional[str] = None
    hypotheses: Optional[str] = None
    conclusions: Optional[str] = None


# Fields that must be present and non-empty on create
EXPERIMENT_REQUIRED_FIELDS = ("id", "title")


def experiment_document(request: CreateExperimentRequest) -> dict[str, Any]:
    """The fields the client actually sent, ready to be stored."""
    return request.model_dump(exclude_unset=True)
