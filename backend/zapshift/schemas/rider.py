"""
zapShift Backend — Rider Schemas
==================================

Rider applications move through an admin-driven status enum. Any status may
follow any other; approving a rider also promotes the matching user.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

RIDER_STATUSES = ("pending", "approved", "rejected", "inactive")


class RiderCreate(BaseModel):
    """Body of POST /riders. Status is always forced to 'pending'."""
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    email: str = Field(min_length=1)
    bikeRegNumber: str = Field(min_length=1)
    nationalId: str = Field(min_length=1)
    name: Optional[str] = None
    district: Optional[str] = None


class RiderStatusUpdate(BaseModel):
    """Body of PATCH /riders/{id}."""
    status: str
    email: Optional[str] = Field(
        default=None,
        description="When present and status is 'approved', the user with this email becomes a rider",
    )
