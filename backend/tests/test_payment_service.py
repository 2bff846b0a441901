"""
zapShift Backend — Payment Service Unit Tests
===============================================

What we test:
    ✅ History is self-only and checked before the store is queried
    ✅ Recording marks the parcel paid, then appends the payment
    ✅ transactionId is generated when absent
    ✅ A failed mark-paid writes no payment
    ✅ The intent bridge converts to minor units
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo import DESCENDING

from conftest import FakePaymentGateway, make_cursor, update_result
from zapshift.exceptions import ForbiddenError, InvalidRequestError, NotFoundError
from zapshift.schemas.payment import PaymentCreate
from zapshift.services.identity_base import Identity
from zapshift.services.payment_service import (
    PaymentIntentService,
    PaymentService,
    generate_transaction_id,
)


class TestListPayments:

    def setup_method(self):
        self.service = PaymentService()
        self.identity = Identity(uid="u1", email="karim@zapshift.io")

    @pytest.mark.asyncio
    async def test_other_users_email_is_forbidden(self, mock_store):
        mock_store.payments.find.return_value = make_cursor([{"_id": ObjectId()}])

        with pytest.raises(ForbiddenError):
            await self.service.list_payments(mock_store, self.identity, "nadia@zapshift.io")
        mock_store.payments.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_is_required(self, mock_store):
        with pytest.raises(InvalidRequestError):
            await self.service.list_payments(mock_store, self.identity, None)

    @pytest.mark.asyncio
    async def test_own_history_sorted_newest_first(self, mock_store):
        cursor = make_cursor([])
        mock_store.payments.find.return_value = cursor

        result = await self.service.list_payments(mock_store, self.identity, "Karim@ZapShift.io")

        assert result == []
        mock_store.payments.find.assert_called_once_with({"userEmail": "Karim@ZapShift.io"})
        cursor.sort.assert_called_once_with("paidAt", DESCENDING)


class TestCreatePayment:

    def setup_method(self):
        self.service = PaymentService()

    def payload(self, **overrides):
        data = {
            "parcelId": str(ObjectId()),
            "amount": 150,
            "userEmail": "karim@zapshift.io",
            "paymentMethod": "card",
        }
        data.update(overrides)
        return PaymentCreate(**data)

    @pytest.mark.asyncio
    async def test_marks_parcel_then_inserts_payment(self, mock_store):
        payload = self.payload(transactionId="pi_3Nabc")

        inserted_id = await self.service.create_payment(mock_store, payload)

        assert ObjectId.is_valid(inserted_id)
        mock_store.parcels.update_one.assert_awaited_once()
        document = mock_store.payments.insert_one.await_args.args[0]
        assert document["transactionId"] == "pi_3Nabc"
        assert document["parcelId"] == payload.parcelId
        assert document["amount"] == 150.0
        assert isinstance(document["paidAt"], datetime)
        assert document["paid_at_string"] == document["paidAt"].isoformat()

    @pytest.mark.asyncio
    async def test_generates_transaction_id(self, mock_store):
        await self.service.create_payment(mock_store, self.payload())

        document = mock_store.payments.insert_one.await_args.args[0]
        assert document["transactionId"].startswith("TXN-")

    @pytest.mark.asyncio
    async def test_unpayable_parcel_writes_no_payment(self, mock_store):
        mock_store.parcels.update_one.return_value = update_result(matched=0, modified=0)

        with pytest.raises(NotFoundError):
            await self.service.create_payment(mock_store, self.payload())
        mock_store.payments.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5])
    async def test_non_positive_amount(self, mock_store, amount):
        with pytest.raises(InvalidRequestError):
            await self.service.create_payment(mock_store, self.payload(amount=amount))
        mock_store.parcels.update_one.assert_not_awaited()

    def test_transaction_id_uses_epoch_millis(self):
        now = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert generate_transaction_id(now) == "TXN-1705320000000"


class TestPaymentIntent:

    @pytest.mark.asyncio
    async def test_amount_is_sent_in_minor_units(self):
        gateway = FakePaymentGateway()

        secret = await PaymentIntentService().create_intent(gateway, 10)

        assert gateway.amounts == [1000]
        assert secret == "pi_1000_secret_test"

    @pytest.mark.asyncio
    async def test_fractional_amount_is_rounded(self):
        gateway = FakePaymentGateway()

        await PaymentIntentService().create_intent(gateway, 19.99)

        assert gateway.amounts == [1999]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -1, 0.001, "10", True, None])
    async def test_invalid_amounts(self, amount):
        gateway = FakePaymentGateway()

        with pytest.raises(InvalidRequestError):
            await PaymentIntentService().create_intent(gateway, amount)
        assert gateway.amounts == []
