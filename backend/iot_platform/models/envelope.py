"""
Response Envelope
=================

Every endpoint answers with the same shape, so the dashboard can handle all
responses with one code path:

    Success:  {"success": true,  "data": ..., "count": 3}
    Failure:  {"success": false, "error": "Experiment not found"}

``count`` only appears on list endpoints and always equals ``len(data)``.
Writes also include a short ``message``.

The pydantic models below describe the envelope for the OpenAPI docs; the
routers build plain dicts with ``success_envelope`` / ``error_envelope``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """A successful API response."""
    success: bool = Field(True, description="Always true")
    data: Optional[Any] = Field(None, description="Payload (document, list or stats)")
    count: Optional[int] = Field(None, description="Number of items in data (list endpoints only)")
    message: Optional[str] = Field(None, description="Human-readable result of a write")


class ErrorResponse(BaseModel):
    """A failed API response."""
    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="What went wrong")


# Documented on every route that can fail
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "Not found"},
    409: {"model": ErrorResponse, "description": "Duplicate identifier"},
    500: {"model": ErrorResponse, "description": "Backend error"},
}


def success_envelope(
    data: Any = None,
    *,
    count: Optional[int] = None,
    message: Optional[str] = None,
    include_data: bool = True,
) -> dict:
    """Build a success envelope. Pass ``include_data=False`` for deletes."""
    envelope: dict = {"success": True}
    if message is not None:
        envelope["message"] = message
    if count is not None:
        envelope["count"] = count
    if include_data:
        envelope["data"] = data
    return envelope


def list_envelope(items: list) -> dict:
    """Success envelope for a list endpoint; ``count`` is derived from the list."""
    return success_envelope(items, count=len(items))


def error_envelope(message: str) -> dict:
    """Build a failure envelope."""
    return {"success": False, "error": message}
