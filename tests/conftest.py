"""
Shared fixtures for the OIDC cache engine tests.
"""

import base64
import json

import jwt
import pytest

from oidc_cache_engine.authority import Authority, trusted_authorities
from oidc_cache_engine.crypto import DefaultCryptoProvider

AUTHORITY_HOST = "login.example.com"
AUTHORITY_URL = f"https://{AUTHORITY_HOST}/tenant-1"
CLIENT_ID = "client-123"
ID_TOKEN_SIGNING_SECRET = "id-token-signing-secret-for-tests-0123456789"


@pytest.fixture(autouse=True)
def trusted_registry():
    """Trust the test authority host for the duration of each test"""
    trusted_authorities.reset()
    trusted_authorities.initialize([AUTHORITY_HOST])
    yield trusted_authorities
    trusted_authorities.reset()


@pytest.fixture
def crypto():
    return DefaultCryptoProvider()


@pytest.fixture
def authority():
    return Authority(AUTHORITY_URL)


@pytest.fixture
def make_id_token():
    """Build an unsigned-for-our-purposes id token with default claims"""

    def _make(**claims):
        payload = {
            "sub": "sub-1",
            "oid": "oid-1",
            "tid": "tenant-1",
            "preferred_username": "user@example.com",
            "name": "Test User",
        }
        payload.update(claims)
        return jwt.encode(payload, ID_TOKEN_SIGNING_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def make_client_info():
    def _make(uid="uid-1", utid="utid-1"):
        raw = json.dumps({"uid": uid, "utid": utid}).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return _make
