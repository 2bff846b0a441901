"""
zapShift Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_store: DocumentStore double whose collections are AsyncMocks
    ├── identity_verifier: accepts tokens shaped "valid:<email>"
    ├── payment_gateway: records minor-unit amounts, returns a fake secret
    ├── auth_headers: builds an Authorization header for an email
    └── test_client: HTTPX AsyncClient wired to a fresh app with the doubles
"""

import os

# Override settings for testing BEFORE any zapshift imports
os.environ["DATABASE_URL"] = "mongodb://localhost:27017"
os.environ["PAYMENT_GATEWAY_KEY"] = ""
os.environ["FB_SERVICE_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from zapshift.database import COLLECTION_NAMES, get_store
from zapshift.dependencies import get_identity_verifier, get_payment_gateway
from zapshift.exceptions import ForbiddenError
from zapshift.services.identity_base import Identity, IdentityVerifier
from zapshift.services.payment_gateway_base import PaymentGateway


# ══════════════════════════════════════════════════════════════════════════
# Store Doubles
# ══════════════════════════════════════════════════════════════════════════

def make_cursor(documents: List[dict]) -> MagicMock:
    """
    A cursor double: sort() and limit() chain, to_list() is awaitable.

    Usage:
        mock_store.parcels.find.return_value = make_cursor([{"_id": ObjectId()}])
    """
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(documents))
    return cursor


def update_result(matched: int = 1, modified: int = 1) -> SimpleNamespace:
    return SimpleNamespace(matched_count=matched, modified_count=modified)


def make_collection() -> MagicMock:
    """
    Default behaviour: nothing found, inserts get a fresh ObjectId, updates
    and deletes hit exactly one document.
    """
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(
        side_effect=lambda *args, **kwargs: SimpleNamespace(inserted_id=ObjectId())
    )
    collection.update_one = AsyncMock(return_value=update_result())
    collection.delete_one = AsyncMock(return_value=SimpleNamespace(deleted_count=1))
    collection.find = MagicMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def mock_store():
    """
    Provides a DocumentStore double.

    Usage:
        async def test_get(mock_store):
            mock_store.parcels.find_one.return_value = {"_id": oid, ...}
            await parcel_service.get_parcel(mock_store, str(oid))
    """
    store = MagicMock()
    for name in COLLECTION_NAMES:
        setattr(store, name, make_collection())
    store.ping = AsyncMock()
    store.close = AsyncMock()
    return store


# ══════════════════════════════════════════════════════════════════════════
# External Service Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeIdentityVerifier(IdentityVerifier):
    """Accepts tokens shaped 'valid:<email>'; rejects everything else with 403."""

    def __init__(self):
        self.tokens_seen: List[str] = []

    async def verify_token(self, token: str) -> Identity:
        self.tokens_seen.append(token)
        if not token.startswith("valid:"):
            raise ForbiddenError()
        email = token.split(":", 1)[1]
        return Identity(uid=f"uid-{email}", email=email, claims={"email": email})


class FakePaymentGateway(PaymentGateway):

    def __init__(self):
        self.amounts: List[int] = []

    async def create_payment_intent(self, amount_minor: int) -> str:
        self.amounts.append(amount_minor)
        return f"pi_{amount_minor}_secret_test"


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def auth_headers():
    def _headers(email: str = "user@zapshift.io") -> Dict[str, str]:
        return {"Authorization": f"Bearer valid:{email}"}
    return _headers


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(mock_store, identity_verifier, payment_gateway):
    """
    HTTPX AsyncClient talking to a fresh app.

    ASGITransport does not run the lifespan, so no real MongoDB, Firebase
    or Stripe client is ever created; the dependency overrides supply the
    doubles instead.
    """
    from zapshift.main import create_app

    app = create_app()
    app.dependency_overrides[get_store] = lambda: mock_store
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
