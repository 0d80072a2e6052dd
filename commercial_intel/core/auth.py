"""Caller identity resolution for request-scoped handlers."""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Header
from pydantic import BaseModel, Field
from supabase import Client

from commercial_intel.core.database import SupabaseDocumentStore, get_document_store

logger = logging.getLogger(__name__)


class CallerIdentity(BaseModel):
    """Verified caller of a request."""
    uid: str = Field(..., description="Authenticated user id")
    email: Optional[str] = Field(None, description="Email claim, when present")


class ClaimsVerifier:
    """Resolves bearer tokens to callers through Supabase Auth."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            store = get_document_store()
            if not isinstance(store, SupabaseDocumentStore):
                raise ValueError("Supabase client not available for token verification")
            self._client = store.client
        return self._client

    def verify(self, token: str) -> Optional[CallerIdentity]:
        """
        Verify an access token.

        Args:
            token: Raw JWT without the ``Bearer`` prefix

        Returns:
            CallerIdentity, or None when the token is rejected
        """
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            return None

        user = getattr(response, "user", None)
        if user is None:
            return None
        return CallerIdentity(uid=user.id, email=getattr(user, "email", None))


@lru_cache()
def get_claims_verifier() -> ClaimsVerifier:
    """Get the process-wide claims verifier."""
    return ClaimsVerifier()


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer ...`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_caller(authorization: Optional[str] = Header(None)) -> Optional[CallerIdentity]:
    """
    FastAPI dependency returning the verified caller, or None.

    Handlers decide whether an anonymous caller is an error.
    """
    token = bearer_token(authorization)
    if token is None:
        return None
    return get_claims_verifier().verify(token)
