"""Tests for Supabase access token verification."""

import time
from unittest.mock import AsyncMock, Mock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm

from tailormate.core.auth import require_session
from tailormate.core.exceptions import SessionRequiredError
from tailormate.core.jwks import JWKKey, JWKSService
from tailormate.core.jwt import JWTVerifier
from tailormate.schemas.auth import ActorSession, CurrentUser

SUPABASE_URL = "https://test.supabase.co"
SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


def _claims(**overrides):
    now = int(time.time())
    claims = {
        "sub": "6a0c8f4e-2d1b-4c7a-9e55-0b3f1d2c4a10",
        "email": "atelier@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "iss": f"{SUPABASE_URL}/auth/v1",
        "iat": now,
        "exp": now + 600,
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def verifier():
    return JWTVerifier(supabase_url=SUPABASE_URL + "/", jwt_secret=SECRET)


@pytest.mark.asyncio
async def test_valid_hs256_token(verifier):
    token = jwt.encode(_claims(), SECRET, algorithm="HS256")

    claims = await verifier.verify_token(token)

    assert claims.sub == "6a0c8f4e-2d1b-4c7a-9e55-0b3f1d2c4a10"
    assert claims.email == "atelier@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"exp": int(time.time()) - 10},
        {"iss": "https://other.supabase.co/auth/v1"},
        {"aud": "anon"},
    ],
)
async def test_rejected_claims(verifier, overrides):
    token = jwt.encode(_claims(**overrides), SECRET, algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(token)


@pytest.mark.asyncio
async def test_wrong_secret(verifier):
    token = jwt.encode(_claims(), "another-secret-that-is-long-enough-too", algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(token)


@pytest.mark.asyncio
async def test_malformed_token(verifier):
    with pytest.raises(jwt.InvalidTokenError, match="Malformed"):
        await verifier.verify_token("not-a-jwt")


@pytest.mark.asyncio
async def test_es256_token_verified_against_jwks():
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_jwk = ECAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    jwks = Mock(spec=JWKSService)
    jwks.get_key = AsyncMock(return_value=JWKKey(**{**public_jwk, "kid": "key-1", "alg": "ES256"}))
    verifier = JWTVerifier(supabase_url=SUPABASE_URL, jwks=jwks)

    token = jwt.encode(_claims(), private_key, algorithm="ES256", headers={"kid": "key-1"})
    claims = await verifier.verify_token(token)

    assert claims.role == "authenticated"
    jwks.get_key.assert_awaited_once_with("key-1")


@pytest.mark.asyncio
async def test_es256_unknown_kid():
    private_key = ec.generate_private_key(ec.SECP256R1())
    jwks = Mock(spec=JWKSService)
    jwks.get_key = AsyncMock(return_value=None)
    verifier = JWTVerifier(supabase_url=SUPABASE_URL, jwks=jwks)

    token = jwt.encode(_claims(), private_key, algorithm="ES256", headers={"kid": "rotated"})

    with pytest.raises(jwt.InvalidTokenError, match="No matching key"):
        await verifier.verify_token(token)


@pytest.mark.asyncio
async def test_hs256_without_secret_is_rejected():
    verifier = JWTVerifier(supabase_url=SUPABASE_URL)
    token = jwt.encode(_claims(), SECRET, algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError, match="SUPABASE_JWT_SECRET"):
        await verifier.verify_token(token)


class TestRequireSession:

    def test_returns_usable_session(self, actor_session):
        assert require_session(actor_session) is actor_session

    def test_none_session(self):
        with pytest.raises(SessionRequiredError, match="No active session"):
            require_session(None)

    def test_empty_access_token(self):
        session = ActorSession(access_token="", user=CurrentUser(id="u-1"))

        with pytest.raises(SessionRequiredError):
            require_session(session)
