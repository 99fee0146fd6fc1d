"""JWKS (JSON Web Key Set) service for Supabase JWT verification.

Fetches and caches the project's public signing keys used for
asymmetrically signed (RS256/ES256) access tokens.
"""

import asyncio
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from tailormate.core.config import settings
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class JWKKey(BaseModel):
    """JSON Web Key model (RSA or EC)."""

    model_config = ConfigDict(extra="allow")

    kid: str
    kty: str
    alg: Optional[str] = None
    use: Optional[str] = None
    # RSA
    n: Optional[str] = None
    e: Optional[str] = None
    # EC
    crv: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None

    def as_jwk(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class JWKSResponse(BaseModel):
    """JWKS response model."""

    keys: list[JWKKey]


class JWKSService:
    """Fetches Supabase JWKS keys and caches them in memory with a TTL."""

    def __init__(
        self,
        supabase_url: str,
        cache_ttl: int = 3600,
        timeout: int = 30
    ):
        """Initialize JWKS service.

        Args:
            supabase_url: Supabase project URL
            cache_ttl: Cache time-to-live in seconds
            timeout: HTTP request timeout in seconds
        """
        self.supabase_url = supabase_url.rstrip("/")
        self.jwks_url = f"{self.supabase_url}/auth/v1/.well-known/jwks.json"
        self.cache_ttl = cache_ttl
        self.timeout = timeout

        self._keys_cache: Optional[Dict[str, JWKKey]] = None
        self._cache_timestamp: Optional[float] = None
        self._lock = asyncio.Lock()

    async def get_keys(self) -> Dict[str, JWKKey]:
        """Get JWKS keys, using cache if valid.

        Raises:
            RuntimeError: If keys cannot be fetched
        """
        async with self._lock:
            if self._is_cache_valid():
                return self._keys_cache.copy()

            LOGGER.info("Fetching fresh JWKS keys from Supabase")
            keys = await self._fetch_keys()
            self._keys_cache = keys.copy()
            self._cache_timestamp = time.time()
            return keys

    async def get_key(self, kid: str) -> Optional[JWKKey]:
        """Get a specific key by key ID, or None when the project does not publish it."""
        keys = await self.get_keys()
        return keys.get(kid)

    def _is_cache_valid(self) -> bool:
        if self._keys_cache is None or self._cache_timestamp is None:
            return False
        return time.time() - self._cache_timestamp < self.cache_ttl

    async def _fetch_keys(self) -> Dict[str, JWKKey]:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.jwks_url, timeout=self.timeout)
        except httpx.HTTPError as e:
            LOGGER.error(f"Network error fetching JWKS: {e}")
            raise RuntimeError(f"Failed to fetch JWKS keys: {e}") from e

        if response.status_code != 200:
            raise RuntimeError(f"JWKS endpoint returned {response.status_code}: {response.text}")

        try:
            jwks_response = JWKSResponse(**response.json())
        except ValueError as e:
            LOGGER.error(f"Error parsing JWKS response: {e}")
            raise RuntimeError(f"Invalid JWKS response: {e}") from e

        keys = {key.kid: key for key in jwks_response.keys}
        LOGGER.info(f"Fetched {len(keys)} JWKS keys")
        return keys


# Global JWKS service instance
jwks_service = JWKSService(
    supabase_url=settings.supabase_url,
    cache_ttl=settings.supabase_jwks_cache_ttl,
    timeout=settings.http_timeout,
)
