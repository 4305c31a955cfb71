"""
Proof-of-possession token generation.

A PoP access token is presented as a fresh signed JWT that binds the token
secret to the HTTP method and URL of the resource request it accompanies.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from ..account.auth_token import extract_token_claims
from ..errors import TokenClaimsRequiredError
from ..utils.time_utils import now_seconds

if TYPE_CHECKING:
    from .interface import CryptoProvider

logger = logging.getLogger(__name__)

# Key storage location reported in the request confirmation
KEY_STORAGE_LOCATION_SOFTWARE = "sw"


class PopTokenGenerator:
    """Creates PoP request confirmations and signs PoP presentations"""

    def __init__(self, crypto: CryptoProvider) -> None:
        self.crypto = crypto

    async def generate_cnf(self, resource_request_method: str, resource_request_uri: str) -> str:
        """Create a key pair and return the base64url request confirmation (req_cnf).

        Args:
            resource_request_method: HTTP method of the resource request
            resource_request_uri: URL of the resource request

        Returns:
            base64url JSON `{"kid": ..., "xms_ksl": "sw"}`
        """
        kid = await self.crypto.get_public_key_thumbprint(
            resource_request_method, resource_request_uri
        )
        req_cnf = {"kid": kid, "xms_ksl": KEY_STORAGE_LOCATION_SOFTWARE}
        return self.crypto.base64_encode(json.dumps(req_cnf))

    async def sign_pop_token(
        self,
        access_token: str,
        resource_request_method: str | None,
        resource_request_uri: str | None,
    ) -> str:
        """Sign a PoP presentation of access_token for one resource request.

        The key is selected by the `cnf.kid` claim of the access token.

        Raises:
            TokenClaimsRequiredError: If the access token has no cnf.kid claim
        """
        token_claims = extract_token_claims(access_token)
        cnf = token_claims.get("cnf")
        kid = cnf.get("kid") if isinstance(cnf, dict) else None
        if not kid:
            raise TokenClaimsRequiredError()

        url = urlsplit(resource_request_uri or "")
        payload: dict[str, Any] = {
            "at": access_token,
            "ts": now_seconds(),
            "m": (resource_request_method or "").upper(),
            "u": url.netloc,
            "nonce": self.crypto.create_new_guid(),
            "p": url.path,
            "q": [[], url.query],
        }
        logger.debug(f"Signing PoP token with key {kid}")
        return await self.crypto.sign_jwt(payload, kid)
