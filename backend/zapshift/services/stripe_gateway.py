"""
zapShift Backend — Stripe Payment Gateway
===========================================

What:  PaymentGateway implementation using the official Stripe SDK.
How:   A StripeClient with the HTTPX transport exposes `create_async`, so the
       call is awaited instead of blocking the event loop.

Retry Policy:
    Only connection-level failures (stripe.APIConnectionError) are retried.
    Card errors, auth errors and invalid-request errors are final. Every
    intent gets one idempotency key shared by all attempts, so a retry after
    a lost response cannot create a second intent.
"""

import logging
import uuid

import stripe
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from zapshift.config import settings
from zapshift.exceptions import PaymentServiceError
from zapshift.services.payment_gateway_base import PaymentGateway

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):

    def __init__(self, client: stripe.StripeClient, currency: str = "usd"):
        self._client = client
        self.currency = currency.lower()

    @classmethod
    def from_api_key(cls, api_key: str, currency: str = "usd") -> "StripePaymentGateway":
        client = stripe.StripeClient(api_key, http_client=stripe.HTTPXClient())
        logger.info("Stripe payment gateway initialized (currency=%s)", currency.lower())
        return cls(client, currency)

    async def create_payment_intent(self, amount_minor: int) -> str:
        idempotency_key = str(uuid.uuid4())
        try:
            intent = await self._create_with_retry(amount_minor, idempotency_key)
        except stripe.StripeError as e:
            logger.error(
                "Stripe payment intent failed (amount=%d %s): %s",
                amount_minor,
                self.currency,
                str(e),
            )
            raise PaymentServiceError(
                context={"error_type": type(e).__name__, "code": getattr(e, "code", None)}
            )

        if not intent.client_secret:
            raise PaymentServiceError(context={"intent_id": getattr(intent, "id", None)})

        logger.info("Payment intent %s created for %d %s", intent.id, amount_minor, self.currency)
        return intent.client_secret

    @retry(
        retry=retry_if_exception_type(stripe.APIConnectionError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _create_with_retry(self, amount_minor: int, idempotency_key: str):
        return await self._client.payment_intents.create_async(
            params={
                "amount": amount_minor,
                "currency": self.currency,
                "payment_method_types": ["card"],
            },
            options={"idempotency_key": idempotency_key},
        )
