"""
zapShift Backend — Payment Route Handlers
===========================================

What:  GET /payments (own history), POST /payments (record a completed
       payment), POST /create-payment-intent (Stripe bridge).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from zapshift.database import DocumentStore, get_store
from zapshift.dependencies import get_payment_gateway
from zapshift.guards import identity_required
from zapshift.schemas.common import CreatedResponse, ErrorResponse, ListResponse
from zapshift.schemas.payment import PaymentCreate, PaymentIntentRequest, PaymentIntentResponse
from zapshift.services.identity_base import Identity
from zapshift.services.payment_gateway_base import PaymentGateway
from zapshift.services.payment_service import payment_intent_service, payment_service

router = APIRouter(tags=["Payments"])


@router.get(
    "/payments",
    response_model=ListResponse,
    responses={
        400: {"description": "Missing email", "model": ErrorResponse},
        401: {"description": "Missing bearer token", "model": ErrorResponse},
        403: {"description": "Token rejected or another user's email", "model": ErrorResponse},
    },
    summary="Payment history of the signed-in user, newest first",
)
async def list_payments(
    email: Optional[str] = Query(default=None),
    identity: Identity = Depends(identity_required),
    store: DocumentStore = Depends(get_store),
) -> ListResponse:
    return ListResponse(data=await payment_service.list_payments(store, identity, email))


@router.post(
    "/payments",
    status_code=201,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Bad parcel ID or amount", "model": ErrorResponse},
        404: {"description": "Parcel not found or already paid", "model": ErrorResponse},
    },
    summary="Record a payment and mark its parcel paid",
)
async def create_payment(
    payload: PaymentCreate,
    store: DocumentStore = Depends(get_store),
) -> CreatedResponse:
    inserted_id = await payment_service.create_payment(store, payload)
    return CreatedResponse(message="Payment recorded and parcel marked as paid", insertedId=inserted_id)


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"description": "Amount missing or not positive", "model": ErrorResponse},
        500: {"description": "Payment processor failure", "model": ErrorResponse},
    },
    summary="Create a Stripe payment intent",
)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentIntentResponse:
    client_secret = await payment_intent_service.create_intent(gateway, payload.amount)
    return PaymentIntentResponse(clientSecret=client_secret)
