"""
zapShift Backend — Parcel Route Handlers
==========================================

What:  Parcel booking, listing, detail, deletion and mark-paid.

Paths:
    GET    /parcels                  all parcels as a bare JSON array
    GET    /api/parcels?email=       signed-in user's parcels, newest first
    GET    /api/parcels/{id}
    POST   /parcels
    DELETE /parcels/{id}
    PATCH  /parcels/{id}/mark-paid
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from zapshift.database import DocumentStore, get_store
from zapshift.guards import identity_required
from zapshift.schemas.common import (
    CreatedResponse,
    DataResponse,
    ErrorResponse,
    ListResponse,
    MessageResponse,
)
from zapshift.schemas.parcel import ParcelCreate
from zapshift.services.parcel_service import parcel_service

router = APIRouter(tags=["Parcels"])

ID_ERRORS = {
    400: {"description": "Malformed parcel ID", "model": ErrorResponse},
    404: {"description": "Parcel not found", "model": ErrorResponse},
}


@router.get("/parcels", summary="List every parcel")
async def list_parcels(store: DocumentStore = Depends(get_store)):
    return await parcel_service.list_parcels(store)


@router.get(
    "/api/parcels",
    response_model=ListResponse,
    responses={
        401: {"description": "Missing bearer token", "model": ErrorResponse},
        403: {"description": "Token rejected", "model": ErrorResponse},
    },
    summary="List parcels by booking email, newest first",
    dependencies=[Depends(identity_required)],
)
async def list_parcels_by_email(
    email: Optional[str] = Query(default=None, description="Omit to list all parcels"),
    store: DocumentStore = Depends(get_store),
) -> ListResponse:
    return ListResponse(data=await parcel_service.list_parcels_by_email(store, email))


@router.get(
    "/api/parcels/{parcel_id}",
    response_model=DataResponse,
    responses=ID_ERRORS,
    summary="Get one parcel",
)
async def get_parcel(parcel_id: str, store: DocumentStore = Depends(get_store)) -> DataResponse:
    return DataResponse(data=await parcel_service.get_parcel(store, parcel_id))


@router.post(
    "/parcels",
    status_code=201,
    response_model=CreatedResponse,
    responses={400: {"description": "Missing required fields", "model": ErrorResponse}},
    summary="Book a parcel",
)
async def create_parcel(
    payload: ParcelCreate,
    store: DocumentStore = Depends(get_store),
) -> CreatedResponse:
    inserted_id = await parcel_service.create_parcel(store, payload)
    return CreatedResponse(message="Parcel created successfully", insertedId=inserted_id)


@router.delete(
    "/parcels/{parcel_id}",
    response_model=MessageResponse,
    responses=ID_ERRORS,
    summary="Delete a parcel",
)
async def delete_parcel(parcel_id: str, store: DocumentStore = Depends(get_store)) -> MessageResponse:
    await parcel_service.delete_parcel(store, parcel_id)
    return MessageResponse(message="Parcel deleted successfully")


@router.patch(
    "/parcels/{parcel_id}/mark-paid",
    response_model=MessageResponse,
    responses=ID_ERRORS,
    summary="Mark a parcel as paid",
)
async def mark_parcel_paid(parcel_id: str, store: DocumentStore = Depends(get_store)) -> MessageResponse:
    await parcel_service.mark_paid(store, parcel_id)
    return MessageResponse(message="Parcel marked as paid")
