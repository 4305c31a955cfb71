#!/usr/bin/env python3
# MIT License
#
# Copyright (c) 2025 OIDC Cache Engine Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Default crypto provider backed by PyJWT and cryptography.

Proof-of-possession keys live in a TTL cache so abandoned key pairs age out
instead of accumulating for the lifetime of the process.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import json
import logging
import uuid
from typing import Any

import jwt
from cachetools import TTLCache  # type: ignore[import-untyped]
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from ..config import config
from ..errors import SigningKeyNotFoundError

logger = logging.getLogger(__name__)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class DefaultCryptoProvider:
    """CryptoProvider implementation using RSA-2048 keys and RS256 signatures.

    Example:
        crypto = DefaultCryptoProvider()
        kid = await crypto.get_public_key_thumbprint("GET", "https://graph.example.com/me")
        signed = await crypto.sign_jwt({"at": access_token}, kid)
    """

    def __init__(
        self,
        key_ttl: int | None = None,
        max_keys: int | None = None,
        key_size: int | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            key_ttl: Seconds a generated PoP key stays usable (default: config.pop_key_ttl)
            max_keys: Maximum PoP keys kept at once (default: config.pop_key_cache_size)
            key_size: RSA modulus size in bits (default: config.pop_key_size)
        """
        self._key_size = key_size or config.pop_key_size
        self._keys: TTLCache = TTLCache(
            maxsize=max_keys or config.pop_key_cache_size,
            ttl=key_ttl or config.pop_key_ttl,
        )

    def create_new_guid(self) -> str:
        return str(uuid.uuid4())

    def base64_encode(self, value: str) -> str:
        return _b64url(value.encode("utf-8"))

    def base64_decode(self, value: str) -> str:
        # Accept both padded and unpadded input
        padded = value + "=" * (-len(value) % 4)
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")

    async def get_public_key_thumbprint(
        self, resource_request_method: str, resource_request_uri: str
    ) -> str:
        """Generate a new PoP key pair and return its RFC 7638 thumbprint."""
        loop = asyncio.get_event_loop()
        private_key = await loop.run_in_executor(None, self._generate_key)

        public_jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
        kid = self.compute_thumbprint(public_jwk)
        self._keys[kid] = private_key

        logger.debug(
            f"Generated PoP key {kid} for {resource_request_method.upper()} {resource_request_uri}"
        )
        return kid

    async def sign_jwt(self, payload: dict[str, Any], kid: str) -> str:
        private_key = self._keys.get(kid)
        if private_key is None:
            raise SigningKeyNotFoundError(kid)
        return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})

    @staticmethod
    def compute_thumbprint(public_jwk: dict[str, Any]) -> str:
        """RFC 7638 thumbprint of an RSA public JWK."""
        required = {"e": public_jwk["e"], "kty": public_jwk["kty"], "n": public_jwk["n"]}
        canonical = json.dumps(required, separators=(",", ":"), sort_keys=True)
        return _b64url(hashlib.sha256(canonical.encode("utf-8")).digest())

    def _generate_key(self) -> rsa.RSAPrivateKey:
        """Synchronous key generation for executor."""
        return rsa.generate_private_key(public_exponent=65537, key_size=self._key_size)
