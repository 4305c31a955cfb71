"""
Crypto capability consumed by the engine.

Concrete primitives (encoding, key generation, signing) are injected at client
construction; the engine only talks to this protocol.
"""

from __future__ import annotations

from typing import Any, Protocol


class CryptoProvider(Protocol):
    """Crypto capability interface.

    Methods:
        create_new_guid: Random identifier for request state and PoP nonces
        base64_encode: base64url-encode a text payload
        base64_decode: Decode a base64url payload into text
        get_public_key_thumbprint: Create a PoP key pair, return its key id
        sign_jwt: Sign a payload with the PoP key named by kid
    """

    def create_new_guid(self) -> str:
        ...

    def base64_encode(self, value: str) -> str:
        ...

    def base64_decode(self, value: str) -> str:
        ...

    async def get_public_key_thumbprint(
        self, resource_request_method: str, resource_request_uri: str
    ) -> str:
        """Generate a PoP key pair bound to a resource request.

        Returns:
            Key id (JWK thumbprint) of the new public key
        """
        ...

    async def sign_jwt(self, payload: dict[str, Any], kid: str) -> str:
        """Sign a payload with the private key stored under kid.

        Returns:
            Compact JWS string
        """
        ...
