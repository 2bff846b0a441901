"""
zapShift Backend — External Service Wiring
============================================

What:  Builders run once in the lifespan, and FastAPI dependencies that hand
       the resulting objects to routes.
Why:   Routes never import SDK clients directly; tests override
       `get_identity_verifier` / `get_payment_gateway` with fakes.

Missing credentials are not fatal at startup: the builder logs the problem
and returns None, and the dependent route fails with a 500 at call time.
"""

import logging
from typing import Optional

from fastapi import Request

from zapshift.config import Settings
from zapshift.exceptions import ServiceNotConfiguredError
from zapshift.services.identity_base import IdentityVerifier
from zapshift.services.payment_gateway_base import PaymentGateway

logger = logging.getLogger(__name__)


def build_identity_verifier(config: Settings) -> Optional[IdentityVerifier]:
    try:
        info = config.firebase_credentials_info
    except ValueError as e:
        logger.error("Identity verifier disabled: %s", str(e))
        return None
    if info is None:
        logger.warning("Identity verifier disabled: FB_SERVICE_KEY is not set")
        return None

    from zapshift.services.firebase_identity import FirebaseIdentityVerifier

    try:
        return FirebaseIdentityVerifier.from_service_account(info)
    except ValueError as e:
        # Raised by credentials.Certificate for an incomplete service account
        logger.error("Identity verifier disabled: invalid service account: %s", str(e))
        return None


def build_payment_gateway(config: Settings) -> Optional[PaymentGateway]:
    if not config.stripe_secret_key:
        logger.warning("Payment gateway disabled: PAYMENT_GATEWAY_KEY is not set")
        return None

    from zapshift.services.stripe_gateway import StripePaymentGateway

    return StripePaymentGateway.from_api_key(config.stripe_secret_key, config.payment_currency)


def get_identity_verifier(request: Request) -> Optional[IdentityVerifier]:
    """May return None; the identity guard turns that into a 500 only when a token must be checked."""
    return getattr(request.app.state, "identity_verifier", None)


def get_payment_gateway(request: Request) -> PaymentGateway:
    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise ServiceNotConfiguredError(service="payment_gateway")
    return gateway
