"""Authentication schemas for Supabase JWT tokens."""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class JWTClaims(BaseModel):
    """Decoded JWT claims from a Supabase access token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User email")
    role: str = Field(default="authenticated", description="User role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    iss: str = Field(..., description="Token issuer")

    # Optional Supabase-specific claims
    aud: Optional[str] = Field(None, description="Audience")
    app_metadata: Optional[Dict[str, Any]] = Field(None, description="Application metadata")
    user_metadata: Optional[Dict[str, Any]] = Field(None, description="User metadata")
    session_id: Optional[str] = Field(None, description="Session ID")


class CurrentUser(BaseModel):
    """Current authenticated user information."""

    id: str = Field(..., description="Supabase user ID")
    email: Optional[str] = Field(None, description="User email")
    role: str = Field(default="authenticated", description="User role")


class ActorSession(BaseModel):
    """The acting tailor's credential and identity for one request.

    Passed explicitly to every intake stage: ``access_token`` authorizes
    storage and extraction calls, ``tailor_id`` scopes every written row.
    """

    access_token: str = Field(..., description="Supabase access token (bearer)")
    user: CurrentUser = Field(..., description="Authenticated user")

    @property
    def tailor_id(self) -> UUID:
        return UUID(self.user.id)


__all__ = [
    "JWTClaims",
    "CurrentUser",
    "ActorSession",
]
