"""zapShift Backend — Tracking Route Handler (POST /trackings)."""

from fastapi import APIRouter, Depends

from zapshift.database import DocumentStore, get_store
from zapshift.schemas.common import CreatedResponse, ErrorResponse
from zapshift.schemas.tracking import TrackingCreate
from zapshift.services.tracking_service import tracking_service

router = APIRouter(prefix="/trackings", tags=["Trackings"])


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses={400: {"description": "Missing required fields", "model": ErrorResponse}},
    summary="Append a tracking event for a parcel",
)
async def create_tracking_event(
    payload: TrackingCreate,
    store: DocumentStore = Depends(get_store),
) -> CreatedResponse:
    inserted_id = await tracking_service.create_event(store, payload)
    return CreatedResponse(message="Tracking event logged", insertedId=inserted_id)
