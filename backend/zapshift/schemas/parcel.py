"""
zapShift Backend — Parcel Schemas
===================================

What:  Request model for parcel submission.
Why:   The booking form sends many optional fields (weights, addresses,
       cost breakdown); only the three identifying fields are required.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

PAID_STATUS = "Paid"


class ParcelCreate(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    parcelId: str = Field(min_length=1, description="Human-readable tracking ID")
    senderName: str = Field(min_length=1)
    receiverName: str = Field(min_length=1)
    userEmail: Optional[str] = Field(default=None, description="Email of the booking user")
    creation_date: Optional[str] = Field(
        default=None,
        description="ISO-8601 creation time; server fills in the current UTC time when absent",
    )
    status: Optional[str] = Field(
        default=None, description="Booking status; 'Paid' is only ever set by mark-paid"
    )
