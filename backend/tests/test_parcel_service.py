"""
zapShift Backend — Parcel Service Unit Tests
==============================================

What we test:
    ✅ Creation inserts exactly one document with server defaults
    ✅ Email listing filters and sorts by creation_date descending
    ✅ Lookup/delete validate the ID and map misses to NotFoundError
    ✅ mark_paid only flips unpaid parcels; a second call is a 404
"""

import pytest
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from types import SimpleNamespace

from conftest import make_cursor, update_result
from zapshift.exceptions import DatabaseError, InvalidRequestError, NotFoundError
from zapshift.schemas.parcel import ParcelCreate
from zapshift.services.parcel_service import ParcelService


def parcel_payload(**overrides):
    data = {
        "parcelId": "PCL-20240115-0001",
        "senderName": "Karim",
        "receiverName": "Nadia",
        "userEmail": "karim@zapshift.io",
        "weight": 2.5,
    }
    data.update(overrides)
    return ParcelCreate(**data)


class TestCreateParcel:

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_inserts_one_document_with_defaults(self, mock_store):
        inserted_id = await self.service.create_parcel(mock_store, parcel_payload())

        assert ObjectId.is_valid(inserted_id)
        mock_store.parcels.insert_one.assert_awaited_once()
        document = mock_store.parcels.insert_one.await_args.args[0]
        assert document["parcelId"] == "PCL-20240115-0001"
        assert document["weight"] == 2.5
        assert document["isPaid"] is False
        assert document["creation_date"]

    @pytest.mark.asyncio
    async def test_client_cannot_book_a_paid_parcel(self, mock_store):
        await self.service.create_parcel(
            mock_store, parcel_payload(isPaid=True, status="Paid")
        )

        document = mock_store.parcels.insert_one.await_args.args[0]
        assert document["isPaid"] is False
        assert "status" not in document

    @pytest.mark.asyncio
    async def test_other_client_status_is_kept(self, mock_store):
        await self.service.create_parcel(mock_store, parcel_payload(status="pending"))

        assert mock_store.parcels.insert_one.await_args.args[0]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_keeps_client_creation_date(self, mock_store):
        await self.service.create_parcel(
            mock_store, parcel_payload(creation_date="2024-01-15T10:00:00Z")
        )

        document = mock_store.parcels.insert_one.await_args.args[0]
        assert document["creation_date"] == "2024-01-15T10:00:00Z"

    @pytest.mark.asyncio
    async def test_driver_error(self, mock_store):
        mock_store.parcels.insert_one.side_effect = PyMongoError("timeout")

        with pytest.raises(DatabaseError):
            await self.service.create_parcel(mock_store, parcel_payload())


class TestListParcels:

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_by_email_filters_and_sorts_newest_first(self, mock_store):
        cursor = make_cursor([])
        mock_store.parcels.find.return_value = cursor

        result = await self.service.list_parcels_by_email(mock_store, "karim@zapshift.io")

        assert result == []
        mock_store.parcels.find.assert_called_once_with({"userEmail": "karim@zapshift.io"})
        cursor.sort.assert_called_once_with("creation_date", DESCENDING)

    @pytest.mark.asyncio
    async def test_without_email_lists_everything(self, mock_store):
        await self.service.list_parcels_by_email(mock_store, None)

        mock_store.parcels.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_list_all_serializes_ids(self, mock_store):
        oid = ObjectId()
        mock_store.parcels.find.return_value = make_cursor([{"_id": oid, "parcelId": "P1"}])

        assert await self.service.list_parcels(mock_store) == [{"id": str(oid), "parcelId": "P1"}]


class TestParcelById:

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_get_rejects_malformed_id(self, mock_store):
        with pytest.raises(InvalidRequestError):
            await self.service.get_parcel(mock_store, "12345")
        mock_store.parcels.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_missing(self, mock_store):
        with pytest.raises(NotFoundError):
            await self.service.get_parcel(mock_store, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found(self, mock_store):
        mock_store.parcels.delete_one.return_value = SimpleNamespace(deleted_count=0)

        with pytest.raises(NotFoundError):
            await self.service.delete_parcel(mock_store, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_by_object_id(self, mock_store):
        oid = ObjectId()

        await self.service.delete_parcel(mock_store, str(oid))

        mock_store.parcels.delete_one.assert_awaited_once_with({"_id": oid})


class TestMarkPaid:

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_sets_paid_flag_and_status_on_unpaid_parcel(self, mock_store):
        oid = ObjectId()

        await self.service.mark_paid(mock_store, str(oid))

        mock_store.parcels.update_one.assert_awaited_once_with(
            {"_id": oid, "isPaid": {"$ne": True}},
            {"$set": {"isPaid": True, "status": "Paid"}},
        )

    @pytest.mark.asyncio
    async def test_already_paid_is_not_found(self, mock_store):
        mock_store.parcels.update_one.return_value = update_result(matched=0, modified=0)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.mark_paid(mock_store, str(ObjectId()))
        assert "already paid" in exc_info.value.message
