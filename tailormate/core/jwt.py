"""JWT verification utilities for Supabase authentication.

Supabase signs access tokens either with the project's shared secret
(HS256) or with an asymmetric key published in the project JWKS
(RS256/ES256). Both are accepted here.
"""

from typing import Optional

import jwt

from tailormate.core.config import settings
from tailormate.core.jwks import JWKSService, jwks_service
from tailormate.schemas.auth import JWTClaims
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")
REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss"]


class JWTVerifier:
    """JWT verifier for Supabase access tokens."""

    def __init__(
        self,
        supabase_url: str,
        jwt_secret: str = "",
        jwks: Optional[JWKSService] = None,
    ):
        """Initialize JWT verifier.

        Args:
            supabase_url: Supabase project URL for issuer validation
            jwt_secret: Supabase JWT secret for HS256 verification
            jwks: Key set used for asymmetric tokens
        """
        self.supabase_url = supabase_url.rstrip("/")
        self.expected_issuer = f"{self.supabase_url}/auth/v1"
        self.jwt_secret = jwt_secret
        self.jwks = jwks

    async def verify_token(self, token: str) -> JWTClaims:
        """Verify and decode a Supabase JWT token.

        Args:
            token: JWT access token from Authorization header

        Returns:
            Decoded and validated JWT claims

        Raises:
            jwt.InvalidTokenError: If token is invalid, expired or signed with an unknown key
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.DecodeError as e:
            raise jwt.InvalidTokenError("Malformed token") from e

        alg = header.get("alg")

        if alg == "HS256":
            if not self.jwt_secret:
                raise jwt.InvalidTokenError("HS256 token received but SUPABASE_JWT_SECRET is not configured")
            key = self.jwt_secret
        elif alg in ASYMMETRIC_ALGORITHMS:
            key = await self._resolve_public_key(header.get("kid"))
        else:
            raise jwt.InvalidTokenError(f"Unsupported algorithm: {alg}")

        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[alg],
                audience="authenticated",
                issuer=self.expected_issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            LOGGER.warning(f"Token expired: {e}")
            raise jwt.InvalidTokenError("Token has expired") from e
        except jwt.InvalidIssuerError as e:
            LOGGER.warning(f"Invalid issuer: {e}")
            raise jwt.InvalidTokenError("Invalid token issuer") from e

        return JWTClaims(**payload)

    async def _resolve_public_key(self, kid: Optional[str]):
        if not kid:
            raise jwt.InvalidTokenError("JWT header missing 'kid' (key ID)")
        if self.jwks is None:
            raise jwt.InvalidTokenError("Asymmetric token received but no JWKS is configured")

        try:
            jwk_key = await self.jwks.get_key(kid)
        except RuntimeError as e:
            raise jwt.InvalidTokenError(f"Signing keys unavailable: {e}") from e

        if jwk_key is None:
            raise jwt.InvalidTokenError(f"No matching key found for kid: {kid}")
        return jwt.PyJWK(jwk_key.as_jwk()).key


# Global JWT verifier instance
jwt_verifier = JWTVerifier(
    supabase_url=settings.supabase_url,
    jwt_secret=settings.supabase_jwt_secret,
    jwks=jwks_service,
)
