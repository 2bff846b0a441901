"""
zapShift Backend — Firebase ID Token Verifier
===============================================

What:  IdentityVerifier backed by the Firebase Admin SDK.
How:   `auth.verify_id_token` checks the signature against Google's public
       certificates and validates expiry, audience and issuer. The SDK call
       is blocking (it may fetch certificates over HTTP), so it runs in
       Starlette's threadpool to keep the event loop free.
When:  Constructed once in the application lifespan when FB_SERVICE_KEY is set.
"""

import logging
from typing import Any, Dict

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.auth import CertificateFetchError
from firebase_admin.exceptions import FirebaseError
from starlette.concurrency import run_in_threadpool

from zapshift.exceptions import ForbiddenError, InternalError
from zapshift.services.identity_base import Identity, IdentityVerifier

logger = logging.getLogger(__name__)


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase Authentication ID tokens for one Firebase app."""

    def __init__(self, firebase_app: firebase_admin.App):
        self._app = firebase_app

    @classmethod
    def from_service_account(
        cls, service_account_info: Dict[str, Any], app_name: str = "zapshift"
    ) -> "FirebaseIdentityVerifier":
        """
        Initialize a named Firebase app from a decoded service account.

        The app is named so close() can delete it and a later lifespan in the
        same process can initialize it again.
        """
        cred = credentials.Certificate(service_account_info)
        firebase_app = firebase_admin.initialize_app(cred, name=app_name)
        logger.info(
            "Firebase identity verifier initialized for project %s",
            service_account_info.get("project_id", "<unknown>"),
        )
        return cls(firebase_app)

    async def verify_token(self, token: str) -> Identity:
        try:
            claims = await run_in_threadpool(auth.verify_id_token, token, app=self._app)
        except CertificateFetchError as e:
            # Provider outage, not a bad token
            logger.error("Could not fetch Firebase public certificates: %s", str(e))
            raise InternalError(context={"error_type": type(e).__name__})
        except (ValueError, FirebaseError) as e:
            # ValueError: empty/malformed token. FirebaseError: invalid,
            # expired or revoked token.
            logger.warning("ID token rejected: %s", type(e).__name__)
            raise ForbiddenError(context={"error_type": type(e).__name__})

        identity = Identity.from_claims(claims)
        logger.debug("ID token verified for uid=%s", identity.uid)
        return identity

    def close(self) -> None:
        firebase_admin.delete_app(self._app)
