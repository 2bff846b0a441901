"""
zapShift Backend — Rider Route Handlers
=========================================

What:  Rider applications (public), review queues (admin), district lookup
       (public, used when assigning a rider to a parcel) and status changes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from zapshift.database import DocumentStore, get_store
from zapshift.guards import admin_required
from zapshift.schemas.common import CreatedResponse, ErrorResponse, ListResponse, MessageResponse
from zapshift.schemas.rider import RiderCreate, RiderStatusUpdate
from zapshift.services.rider_service import rider_service

router = APIRouter(prefix="/riders", tags=["Riders"])

ADMIN_ERRORS = {
    401: {"description": "Missing bearer token", "model": ErrorResponse},
    403: {"description": "Not an admin", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses={400: {"description": "Missing required fields", "model": ErrorResponse}},
    summary="Submit a rider application",
)
async def create_rider(
    payload: RiderCreate,
    store: DocumentStore = Depends(get_store),
) -> CreatedResponse:
    inserted_id = await rider_service.create_rider(store, payload)
    return CreatedResponse(message="Rider application submitted", insertedId=inserted_id)


@router.get(
    "/pending",
    response_model=ListResponse,
    responses=ADMIN_ERRORS,
    summary="Rider applications awaiting review (admin only)",
    dependencies=[Depends(admin_required)],
)
async def list_pending_riders(store: DocumentStore = Depends(get_store)) -> ListResponse:
    return ListResponse(data=await rider_service.list_pending(store))


@router.get(
    "/active",
    response_model=ListResponse,
    responses=ADMIN_ERRORS,
    summary="Approved riders (admin only)",
    dependencies=[Depends(admin_required)],
)
async def list_active_riders(store: DocumentStore = Depends(get_store)) -> ListResponse:
    return ListResponse(data=await rider_service.list_active(store))


@router.get(
    "/by-district",
    response_model=ListResponse,
    responses={400: {"description": "Missing district", "model": ErrorResponse}},
    summary="Approved riders in a district",
)
async def list_riders_by_district(
    district: Optional[str] = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> ListResponse:
    return ListResponse(data=await rider_service.list_by_district(store, district))


@router.patch(
    "/{rider_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Bad ID or status", "model": ErrorResponse},
        404: {"description": "Rider not found", "model": ErrorResponse},
    },
    summary="Change a rider's status",
    description=(
        "Approving a rider with an email in the body also promotes that user to "
        "the 'rider' role. The promotion is best-effort and never fails the request."
    ),
)
async def update_rider_status(
    rider_id: str,
    payload: RiderStatusUpdate,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    await rider_service.update_status(store, rider_id, payload)
    return MessageResponse(message=f"Rider status updated to {payload.status}")
