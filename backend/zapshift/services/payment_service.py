"""
zapShift Backend — Payment Service
====================================

What:  Payment history for the signed-in user, payment recording, and the
       payment-intent bridge to the processor.
Who:   Called by the payments router.

Recording Flow (POST /payments):
    ┌──────────────────┐    ┌──────────────────┐
    │  Mark parcel     │───▶│  Insert payment  │
    │  paid (parcels)  │    │  (payments)      │
    └──────────────────┘    └──────────────────┘

    The steps are not atomic. If the insert fails after the parcel was
    marked, the parcel stays paid without a payment record; the failure is
    logged with both IDs so it can be reconciled by hand.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from zapshift.database import DocumentStore, parse_object_id, serialize_documents
from zapshift.exceptions import DatabaseError, ForbiddenError, InvalidRequestError
from zapshift.schemas.payment import PaymentCreate
from zapshift.services.identity_base import Identity
from zapshift.services.parcel_service import parcel_service
from zapshift.services.payment_gateway_base import PaymentGateway

logger = logging.getLogger(__name__)


def generate_transaction_id(now: datetime) -> str:
    return f"TXN-{int(now.timestamp() * 1000)}"


def _require_positive_amount(amount: Any) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        raise InvalidRequestError(message="Amount must be a positive number", field="amount")
    return float(amount)


class PaymentService:

    async def list_payments(
        self, store: DocumentStore, identity: Identity, email: Optional[str]
    ) -> List[Dict[str, Any]]:
        """
        Payment history for `email`, newest first.

        Authorization is by equality: the caller may only read their own
        payments. The check runs before the store is touched, so a mismatch
        is 403 whether or not the other user has payments.
        """
        email = (email or "").strip()
        if not email:
            raise InvalidRequestError(message="Email is required", field="email")
        if not identity.email or identity.email.lower() != email.lower():
            logger.warning("User %s denied access to payments of %s", identity.uid, email)
            raise ForbiddenError()

        try:
            cursor = store.payments.find({"userEmail": email}).sort("paidAt", DESCENDING)
            payments = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error fetching payments for %s: %s", email, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "payments"})
        return serialize_documents(payments)

    async def create_payment(self, store: DocumentStore, payload: PaymentCreate) -> str:
        """
        Mark the parcel paid, then append the payment record.

        Raises:
            InvalidRequestError: bad parcel ID or non-positive amount
            NotFoundError: parcel missing or already paid (no payment written)
        """
        amount = _require_positive_amount(payload.amount)
        parse_object_id(payload.parcelId, "parcel")

        await parcel_service.mark_paid(store, payload.parcelId)

        now = datetime.now(timezone.utc)
        document = payload.model_dump(exclude_none=True)
        document.update(
            amount=amount,
            transactionId=payload.transactionId or generate_transaction_id(now),
            paid_at_string=now.isoformat(),
            paidAt=now,
        )

        try:
            result = await store.payments.insert_one(document)
        except PyMongoError as e:
            logger.error(
                "Parcel %s marked paid but payment insert failed (transaction %s): %s",
                payload.parcelId,
                document["transactionId"],
                str(e),
            )
            raise DatabaseError(
                context={
                    "error_type": type(e).__name__,
                    "collection": "payments",
                    "parcel_id": payload.parcelId,
                }
            )

        logger.info(
            "Payment %s recorded for parcel %s (%s)",
            result.inserted_id,
            payload.parcelId,
            document["transactionId"],
        )
        return str(result.inserted_id)


class PaymentIntentService:
    """The payment-intent bridge. Stateless: nothing is persisted."""

    async def create_intent(self, gateway: PaymentGateway, amount: Any) -> str:
        amount = _require_positive_amount(amount)
        amount_minor = int(round(amount * 100))
        if amount_minor < 1:
            raise InvalidRequestError(message="Amount is too small", field="amount")
        return await gateway.create_payment_intent(amount_minor)


payment_service = PaymentService()
payment_intent_service = PaymentIntentService()
