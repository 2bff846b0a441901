"""
zapShift Backend — Access Gate
================================

What:  Authentication and role checks applied to selected routes.
How:   An AccessGate is a FastAPI dependency holding an ordered tuple of
       guard coroutines. Each guard receives the shared GuardContext and
       either returns (continue to the next guard) or raises a terminal
       UnauthenticatedError / ForbiddenError.

Guard chain:
    Request → [verify_identity] → [require_admin] → Route Handler
                 401 / 403           403

    verify_identity populates `context.identity`; require_admin reads it and
    refuses to run without it, so the order is enforced at runtime too.

Usage:
    @router.get("/riders/pending")
    async def pending(identity: Identity = Depends(admin_required)): ...
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Request

from zapshift.database import DocumentStore, get_store
from zapshift.dependencies import get_identity_verifier
from zapshift.exceptions import ForbiddenError, ServiceNotConfiguredError, UnauthenticatedError
from zapshift.services.identity_base import Identity, IdentityVerifier
from zapshift.services.user_service import user_service

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass
class GuardContext:
    request: Request
    store: DocumentStore
    verifier: Optional[IdentityVerifier]
    identity: Optional[Identity] = None


Guard = Callable[[GuardContext], Awaitable[None]]


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an `Authorization: Bearer <token>` header.

    Raises:
        UnauthenticatedError: header absent, wrong scheme, or empty token
    """
    if not authorization:
        raise UnauthenticatedError()
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthenticatedError()
    return token


async def verify_identity(context: GuardContext) -> None:
    token = extract_bearer_token(context.request.headers.get("Authorization"))
    if context.verifier is None:
        raise ServiceNotConfiguredError(service="identity_verifier")

    identity = await context.verifier.verify_token(token)
    context.identity = identity
    context.request.state.identity = identity


async def require_admin(context: GuardContext) -> None:
    if context.identity is None:
        # verify_identity did not run first
        raise UnauthenticatedError()
    if not context.identity.email:
        raise ForbiddenError()

    role = await user_service.find_role(context.store, context.identity.email)
    if role != ADMIN_ROLE:
        logger.warning("Non-admin %s refused an admin route", context.identity.email)
        raise ForbiddenError()


class AccessGate:
    """Evaluates guards in order and returns the verified Identity."""

    def __init__(self, *guards: Guard):
        if not guards:
            raise ValueError("AccessGate needs at least one guard")
        self.guards = guards

    async def __call__(
        self,
        request: Request,
        store: DocumentStore = Depends(get_store),
        verifier: Optional[IdentityVerifier] = Depends(get_identity_verifier),
    ) -> Optional[Identity]:
        context = GuardContext(request=request, store=store, verifier=verifier)
        for guard in self.guards:
            await guard(context)
        return context.identity


identity_required = AccessGate(verify_identity)
admin_required = AccessGate(verify_identity, require_admin)
