"""
zapShift Backend — External Gateway Tests
===========================================

What:  Tests for the Stripe payment gateway and the Firebase identity verifier.
How:   The Stripe client and the Firebase `verify_id_token` call are mocked;
       no network traffic.

What we test:
    ✅ Intent parameters (minor units, currency, card only) and client secret
    ✅ Connection errors are retried with the same idempotency key
    ✅ Non-connection Stripe errors are final and become PaymentServiceError
    ✅ Firebase claims become an Identity; rejections become ForbiddenError
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import stripe
from firebase_admin import auth as firebase_auth
from tenacity import wait_none

from zapshift.exceptions import ForbiddenError, InternalError, PaymentServiceError
from zapshift.services.firebase_identity import FirebaseIdentityVerifier
from zapshift.services.stripe_gateway import StripePaymentGateway


def stripe_client(create_async):
    client = MagicMock()
    client.payment_intents.create_async = create_async
    return client


@pytest.fixture
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(StripePaymentGateway._create_with_retry.retry, "wait", wait_none())


class TestStripePaymentGateway:

    @pytest.mark.asyncio
    async def test_creates_card_intent_in_minor_units(self):
        create = AsyncMock(return_value=SimpleNamespace(id="pi_1", client_secret="pi_1_secret"))
        gateway = StripePaymentGateway(stripe_client(create), currency="USD")

        secret = await gateway.create_payment_intent(1000)

        assert secret == "pi_1_secret"
        params = create.await_args.kwargs["params"]
        assert params == {"amount": 1000, "currency": "usd", "payment_method_types": ["card"]}
        assert create.await_args.kwargs["options"]["idempotency_key"]

    @pytest.mark.asyncio
    async def test_connection_error_is_retried_with_same_key(self, no_retry_wait):
        create = AsyncMock(
            side_effect=[
                stripe.APIConnectionError("connection reset"),
                SimpleNamespace(id="pi_2", client_secret="pi_2_secret"),
            ]
        )
        gateway = StripePaymentGateway(stripe_client(create))

        assert await gateway.create_payment_intent(500) == "pi_2_secret"

        keys = {call.kwargs["options"]["idempotency_key"] for call in create.await_args_list}
        assert create.await_count == 2
        assert len(keys) == 1

    @pytest.mark.asyncio
    async def test_persistent_connection_error(self, no_retry_wait):
        create = AsyncMock(side_effect=stripe.APIConnectionError("down"))
        gateway = StripePaymentGateway(stripe_client(create))

        with pytest.raises(PaymentServiceError):
            await gateway.create_payment_intent(500)
        assert create.await_count == StripePaymentGateway._create_with_retry.retry.stop.max_attempt_number

    @pytest.mark.asyncio
    async def test_auth_error_is_not_retried(self, no_retry_wait):
        create = AsyncMock(side_effect=stripe.AuthenticationError("Invalid API Key provided"))
        gateway = StripePaymentGateway(stripe_client(create))

        with pytest.raises(PaymentServiceError) as exc_info:
            await gateway.create_payment_intent(500)
        assert create.await_count == 1
        assert "API Key" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_client_secret(self):
        create = AsyncMock(return_value=SimpleNamespace(id="pi_3", client_secret=None))
        gateway = StripePaymentGateway(stripe_client(create))

        with pytest.raises(PaymentServiceError):
            await gateway.create_payment_intent(500)


class TestFirebaseIdentityVerifier:

    @pytest.mark.asyncio
    async def test_claims_become_identity(self):
        verifier = FirebaseIdentityVerifier(MagicMock())
        claims = {"uid": "abc", "email": "karim@zapshift.io", "email_verified": True}

        with patch(
            "zapshift.services.firebase_identity.auth.verify_id_token", return_value=claims
        ) as mock_verify:
            identity = await verifier.verify_token("id-token")

        assert identity.uid == "abc"
        assert identity.email == "karim@zapshift.io"
        assert identity.claims["email_verified"] is True
        assert mock_verify.call_args.args == ("id-token",)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [firebase_auth.InvalidIdTokenError("bad signature"), ValueError("empty token")],
    )
    async def test_rejections_are_forbidden(self, error):
        verifier = FirebaseIdentityVerifier(MagicMock())

        with patch(
            "zapshift.services.firebase_identity.auth.verify_id_token", side_effect=error
        ):
            with pytest.raises(ForbiddenError):
                await verifier.verify_token("id-token")

    @pytest.mark.asyncio
    async def test_certificate_outage_is_internal_error(self):
        verifier = FirebaseIdentityVerifier(MagicMock())
        outage = firebase_auth.CertificateFetchError("public keys unavailable", cause=None)

        with patch(
            "zapshift.services.firebase_identity.auth.verify_id_token", side_effect=outage
        ):
            with pytest.raises(InternalError):
                await verifier.verify_token("id-token")

    def test_close_deletes_the_app(self):
        app = MagicMock()
        verifier = FirebaseIdentityVerifier(app)

        with patch("zapshift.services.firebase_identity.firebase_admin.delete_app") as mock_delete:
            verifier.close()

        mock_delete.assert_called_once_with(app)
