"""
zapShift Backend — Abstract Identity Verifier Interface
=========================================================

What:  Contract for validating bearer tokens issued by an external identity
       provider, plus the decoded `Identity` handed to downstream handlers.
Why:   The Access Gate only needs "token in, identity out". Keeping the
       provider behind an interface lets tests plug in a fake verifier and
       keeps the Firebase SDK out of the guard logic.
Who:   Implemented by FirebaseIdentityVerifier; called by zapshift.guards.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Identity:
    """
    A verified caller.

    Attributes:
        uid:    Provider user ID (`uid`, falling back to the `sub` claim)
        email:  Email claim; may be None for phone/anonymous sign-ins
        claims: Every decoded claim, for handlers that need more
    """
    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        return cls(
            uid=str(claims.get("uid") or claims.get("sub") or ""),
            email=claims.get("email"),
            claims=dict(claims),
        )


class IdentityVerifier(ABC):
    """
    Abstract interface for server-side ID token verification.

    Contract:
        - verify_token() returns an Identity for a valid, unexpired token
        - any rejection (bad signature, expired, revoked, malformed) raises
          ForbiddenError; provider-specific exceptions never escape
    """

    @abstractmethod
    async def verify_token(self, token: str) -> Identity:
        """
        Validate `token` with the identity provider.

        Raises:
            ForbiddenError: the provider rejected the token (→ 403)
        """
        ...

    def close(self) -> None:
        """Release provider resources on shutdown. Default: nothing to release."""
