"""
Decoded identity token.

Claims are read without signature verification. Validating signatures against
the authority keys happens during authority discovery, outside this engine.
"""

from __future__ import annotations

from typing import Any

import jwt

from ..errors import TokenParsingError


def extract_token_claims(raw_token: str) -> dict[str, Any]:
    """Decode the payload of a compact JWT.

    Raises:
        TokenParsingError: If the token is empty or not a decodable JWT
    """
    if not raw_token:
        raise TokenParsingError("Token is empty")
    try:
        claims: dict[str, Any] = jwt.decode(raw_token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        raise TokenParsingError(str(e)) from e
    return claims


class AuthToken:
    """Raw JWT plus its decoded claims"""

    def __init__(self, raw_token: str) -> None:
        self.raw_token = raw_token
        self.claims = extract_token_claims(raw_token)

    def __repr__(self) -> str:
        return f"AuthToken(sub={self.claims.get('sub')!r}, tid={self.claims.get('tid')!r})"
