"""zapShift Backend — Tracking Service (append-only parcel event log)."""

import logging

from pymongo.errors import PyMongoError

from zapshift.database import DocumentStore
from zapshift.exceptions import DatabaseError
from zapshift.schemas.tracking import TrackingCreate

logger = logging.getLogger(__name__)


class TrackingService:

    async def create_event(self, store: DocumentStore, payload: TrackingCreate) -> str:
        try:
            result = await store.trackings.insert_one(payload.model_dump(exclude_none=True))
        except PyMongoError as e:
            logger.error("Database error logging tracking event for %s: %s", payload.parcelId, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "trackings"})

        logger.info("Tracking event '%s' logged for parcel %s", payload.status, payload.parcelId)
        return str(result.inserted_id)


tracking_service = TrackingService()
