"""
zapShift Backend — Document Store Client
==========================================

What:  The shared MongoDB client, the five named collections, and the
       FastAPI dependency that hands them to route handlers.
Why:   Centralizes all database connection logic in one place.
How:   One AsyncMongoClient is opened in the application lifespan, stored on
       `app.state.store`, and injected per request via `Depends(get_store)`.
Who:   Used by route handlers and guards; services receive the store as an argument.

Connection model:
    The driver keeps its own connection pool, so one client is shared by
    every in-flight request. No multi-document transactions are used;
    services that write twice document what a partial failure leaves behind.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.server_api import ServerApi

from zapshift.config import Settings, settings as default_settings
from zapshift.exceptions import InvalidRequestError, ServiceNotConfiguredError

logger = logging.getLogger(__name__)

COLLECTION_NAMES = ("users", "parcels", "payments", "trackings", "riders")


class DocumentStore:
    """
    Thin binding over a MongoDB database exposing the named collections.

    One attribute per name in COLLECTION_NAMES (users, parcels, payments,
    trackings, riders). Attributes are the driver's collection objects,
    so services call `store.parcels.find_one(...)` exactly as they would
    on pymongo.
    """

    def __init__(self, client: AsyncMongoClient, database_name: str):
        self._client = client
        self.db = client[database_name]
        for name in COLLECTION_NAMES:
            setattr(self, name, self.db[name])

    async def ping(self) -> None:
        """Round-trip to the server. Raises the driver error if unreachable."""
        await self._client.admin.command("ping")

    async def close(self) -> None:
        await self._client.close()


def create_store(config: Optional[Settings] = None) -> DocumentStore:
    """
    Build the DocumentStore for the configured cluster.

    The client is lazy: no network I/O happens until the first operation
    (or `ping()` during startup).
    """
    config = config or default_settings
    client = AsyncMongoClient(
        config.mongodb_uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        serverSelectionTimeoutMS=config.db_server_selection_timeout_ms,
        appname="zapShift",
    )
    logger.info("Document store client created for database '%s'", config.database_name)
    return DocumentStore(client, config.database_name)


def get_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency that provides the shared DocumentStore.

    Tests replace this with `app.dependency_overrides[get_store]`.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ServiceNotConfiguredError(service="document_store")
    return store


# ── Document Helpers ──────────────────────────────────────────────────────

def parse_object_id(value: str, resource: str = "resource") -> ObjectId:
    """
    Convert a path/body identifier into an ObjectId.

    Raises:
        InvalidRequestError: value is not a 24-char hex ObjectId (→ 400)
    """
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidRequestError(
            message=f"Invalid {resource} ID",
            field="id",
            context={"value": str(value)[:64]},
        )
    return ObjectId(value)


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Replace Mongo's `_id` with a string `id` so the document is JSON-safe."""
    doc = dict(document)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_documents(documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in documents]


def exact_match_ci(value: str) -> Dict[str, str]:
    """Case-insensitive whole-value match (emails, districts)."""
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def contains_ci(value: str) -> Dict[str, str]:
    """Case-insensitive substring match with regex metacharacters escaped."""
    return {"$regex": re.escape(value), "$options": "i"}
