"""
zapShift Backend — Rider Service
==================================

What:  Rider applications, admin review queues, district lookup and status changes.
Who:   Called by the riders router.

Approval side effect:
    Moving a rider to "approved" with an email also sets that user's role to
    "rider". The two writes are independent: if the role update fails, the
    failure is logged and the status change still reports success. There is
    no rollback and no retry.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from zapshift.database import (
    DocumentStore,
    exact_match_ci,
    parse_object_id,
    serialize_documents,
)
from zapshift.exceptions import DatabaseError, InvalidRequestError, NotFoundError
from zapshift.schemas.rider import RIDER_STATUSES, RiderCreate, RiderStatusUpdate

logger = logging.getLogger(__name__)

APPROVED = "approved"
PENDING = "pending"
RIDER_ROLE = "rider"


class RiderService:

    async def create_rider(self, store: DocumentStore, payload: RiderCreate) -> str:
        document = payload.model_dump(exclude_none=True)
        document["status"] = PENDING
        document.setdefault("created_at", datetime.now(timezone.utc))

        try:
            result = await store.riders.insert_one(document)
        except PyMongoError as e:
            logger.error("Database error creating rider %s: %s", payload.email, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "riders"})

        logger.info("Rider application %s received from %s", result.inserted_id, payload.email)
        return str(result.inserted_id)

    async def _list(self, store: DocumentStore, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            riders = await store.riders.find(query).to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error listing riders %s: %s", query, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "riders"})
        return serialize_documents(riders)

    async def list_pending(self, store: DocumentStore) -> List[Dict[str, Any]]:
        return await self._list(store, {"status": PENDING})

    async def list_active(self, store: DocumentStore) -> List[Dict[str, Any]]:
        return await self._list(store, {"status": APPROVED})

    async def list_by_district(
        self, store: DocumentStore, district: Optional[str]
    ) -> List[Dict[str, Any]]:
        """Approved riders in `district` (case-insensitive exact match)."""
        district = (district or "").strip()
        if not district:
            raise InvalidRequestError(message="District is required", field="district")
        return await self._list(store, {"district": exact_match_ci(district), "status": APPROVED})

    async def update_status(
        self, store: DocumentStore, rider_id: str, update: RiderStatusUpdate
    ) -> None:
        """
        Set a rider's status; any status may follow any other.

        Raises:
            InvalidRequestError: malformed ID or unknown status
            NotFoundError: no rider with that ID
        """
        object_id = parse_object_id(rider_id, "rider")
        if update.status not in RIDER_STATUSES:
            raise InvalidRequestError(
                message=f"Invalid status. Must be one of: {', '.join(RIDER_STATUSES)}",
                field="status",
            )

        try:
            result = await store.riders.update_one(
                {"_id": object_id}, {"$set": {"status": update.status}}
            )
        except PyMongoError as e:
            logger.error("Database error updating rider %s: %s", rider_id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "riders"})

        if result.matched_count == 0:
            raise NotFoundError(resource="rider", message="Rider not found")
        logger.info("Rider %s status set to %s", rider_id, update.status)

        if update.status == APPROVED and update.email:
            await self._promote_user(store, update.email)

    async def _promote_user(self, store: DocumentStore, email: str) -> None:
        # Best-effort: never raises.
        try:
            result = await store.users.update_one(
                {"email": exact_match_ci(email)}, {"$set": {"role": RIDER_ROLE}}
            )
        except PyMongoError as e:
            logger.error(
                "Rider approved but role sync failed for %s: %s", email, str(e), exc_info=True
            )
            return

        if result.matched_count == 0:
            logger.warning("Rider approved but no user found with email %s", email)
        else:
            logger.info("User %s promoted to rider", email)


rider_service = RiderService()
