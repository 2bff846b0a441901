"""
zapShift Backend — Shared Response Schemas
============================================

What:  Response envelopes shared by every resource router.
Why:   Clients rely on one fixed JSON shape: `success` plus either `data`,
       `insertedId`, or `message`.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Returned by successful updates and deletes."""
    success: bool = True
    message: str


class CreatedResponse(BaseModel):
    """Returned with HTTP 201 after an insert."""
    success: bool = True
    message: str
    insertedId: str = Field(description="String form of the generated ObjectId")


class DataResponse(BaseModel):
    success: bool = True
    data: Any


class ListResponse(BaseModel):
    success: bool = True
    data: List[Any] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "success": false,
            "error": "validation_error",
            "message": "Missing required fields: parcelId",
            "request_id": "1a2b3c4d"
        }
    """
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
