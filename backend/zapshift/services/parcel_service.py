"""
zapShift Backend — Parcel Service
===================================

What:  Parcel booking, listing, lookup, deletion and payment marking.
Who:   Called by the parcels router; `mark_paid` is also step one of
       PaymentService.create_payment.

Payment flag:
    `isPaid` only ever moves false → true. The mark-paid filter excludes
    documents that are already paid, so a second call modifies nothing and
    surfaces as 404 rather than silently succeeding.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from zapshift.database import (
    DocumentStore,
    parse_object_id,
    serialize_document,
    serialize_documents,
)
from zapshift.exceptions import DatabaseError, NotFoundError
from zapshift.schemas.parcel import PAID_STATUS, ParcelCreate

logger = logging.getLogger(__name__)


class ParcelService:
    """
    Error Handling Strategy:
        Same as every service: 400 before the store call, driver errors
        wrapped in DatabaseError, zero matched/deleted/modified → NotFoundError.
    """

    async def create_parcel(self, store: DocumentStore, payload: ParcelCreate) -> str:
        document = payload.model_dump(exclude_none=True)
        # Payment state only changes through mark_paid
        document["isPaid"] = False
        if document.get("status") == PAID_STATUS:
            del document["status"]
        if not document.get("creation_date"):
            document["creation_date"] = datetime.now(timezone.utc).isoformat()

        try:
            result = await store.parcels.insert_one(document)
        except PyMongoError as e:
            logger.error("Database error creating parcel %s: %s", payload.parcelId, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})

        logger.info("Parcel %s created: %s", payload.parcelId, result.inserted_id)
        return str(result.inserted_id)

    async def list_parcels(self, store: DocumentStore) -> List[Dict[str, Any]]:
        """Every parcel, unfiltered and unsorted."""
        try:
            parcels = await store.parcels.find().to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error listing parcels: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})
        return serialize_documents(parcels)

    async def list_parcels_by_email(
        self, store: DocumentStore, email: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Parcels booked by `email`, newest first. No email → all parcels.
        """
        query = {"userEmail": email} if email else {}
        try:
            cursor = store.parcels.find(query).sort("creation_date", DESCENDING)
            parcels = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error fetching parcels for %s: %s", email or "<all>", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})
        return serialize_documents(parcels)

    async def get_parcel(self, store: DocumentStore, parcel_id: str) -> Dict[str, Any]:
        object_id = parse_object_id(parcel_id, "parcel")
        try:
            parcel = await store.parcels.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error fetching parcel %s: %s", parcel_id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})

        if parcel is None:
            raise NotFoundError(resource="parcel", message="Parcel not found")
        return serialize_document(parcel)

    async def delete_parcel(self, store: DocumentStore, parcel_id: str) -> None:
        object_id = parse_object_id(parcel_id, "parcel")
        try:
            result = await store.parcels.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error deleting parcel %s: %s", parcel_id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})

        if result.deleted_count != 1:
            raise NotFoundError(resource="parcel", message="Parcel not found")
        logger.info("Parcel %s deleted", parcel_id)

    async def mark_paid(self, store: DocumentStore, parcel_id: str) -> None:
        """
        Set isPaid=true and status='Paid'.

        Raises:
            NotFoundError: parcel missing or already paid (nothing modified)
        """
        object_id = parse_object_id(parcel_id, "parcel")
        try:
            result = await store.parcels.update_one(
                {"_id": object_id, "isPaid": {"$ne": True}},
                {"$set": {"isPaid": True, "status": PAID_STATUS}},
            )
        except PyMongoError as e:
            logger.error("Database error marking parcel %s paid: %s", parcel_id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "parcels"})

        if result.modified_count == 0:
            raise NotFoundError(resource="parcel", message="Parcel not found or already paid")
        logger.info("Parcel %s marked paid", parcel_id)


parcel_service = ParcelService()
