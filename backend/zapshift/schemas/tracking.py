"""zapShift Backend — Tracking Event Schema (append-only log entries)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TrackingCreate(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    parcelId: str = Field(min_length=1)
    status: str = Field(min_length=1)
    location: str = Field(min_length=1)
    timestamp: str = Field(min_length=1, description="ISO-8601 time of the event")
    note: Optional[str] = None
