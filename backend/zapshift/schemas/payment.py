"""
zapShift Backend — Payment Schemas
====================================

Payments are append-only records written after Stripe confirms a card
payment on the client. Amounts are in major currency units.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentCreate(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    parcelId: str = Field(description="ObjectId of the parcel being paid for")
    amount: float = Field(allow_inf_nan=False)
    userEmail: str = Field(min_length=1)
    transactionId: Optional[str] = Field(
        default=None,
        description="Processor transaction ID; generated from the current time when absent",
    )
    paymentMethod: Optional[str] = None


class PaymentIntentRequest(BaseModel):
    """Body of POST /create-payment-intent."""
    amount: float = Field(allow_inf_nan=False, description="Amount in major currency units")


class PaymentIntentResponse(BaseModel):
    clientSecret: str
