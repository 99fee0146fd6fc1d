"""Authentication dependencies for FastAPI routes.

Resolves the bearer token on a request into an ``ActorSession``: the
access token the pipeline forwards to Supabase plus the verified user.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tailormate.core.exceptions import SessionRequiredError
from tailormate.core.jwt import jwt_verifier
from tailormate.schemas.auth import ActorSession, CurrentUser
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def require_session(session: Optional[ActorSession]) -> ActorSession:
    """Return the session, or raise when there is no usable one.

    Raises:
        SessionRequiredError: If the session or its access token is missing
    """
    if session is None or not session.access_token:
        raise SessionRequiredError("No active session")
    if not session.user or not session.user.id:
        raise SessionRequiredError("Not authenticated")
    return session


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> ActorSession:
    """Get the acting tailor's session from the Authorization header.

    Raises:
        HTTPException: If token is missing, invalid, or expired
    """
    if not credentials:
        LOGGER.warning("No authorization credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials

    try:
        claims = await jwt_verifier.verify_token(token)
    except jwt.InvalidTokenError as e:
        LOGGER.warning(f"Invalid token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user = CurrentUser(id=claims.sub, email=claims.email, role=claims.role)
    LOGGER.debug(f"Authenticated user: {user.id}")
    return ActorSession(access_token=token, user=user)
