"""
Caller-facing authentication result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..crypto.pop_token_generator import PopTokenGenerator
from ..request.scope_set import ScopeSet
from ..utils.time_utils import to_datetime

if TYPE_CHECKING:
    from ..account.account_info import AccountInfo
    from ..account.auth_token import AuthToken
    from ..cache.entities import CacheRecord
    from ..crypto.interface import CryptoProvider
    from ..utils.protocol_utils import RequestStateObject


@dataclass(frozen=True)
class AuthenticationResult:
    """Read-only projection of a cache record for the caller.

    Attributes:
        unique_id: oid or sub claim of the identity token
        tenant_id: tid claim of the identity token
        scopes: Scopes the access token was granted for
        account: Account the tokens belong to, None when the record has no account
        id_token: Raw identity token
        id_token_claims: Decoded identity token claims
        access_token: Bearer secret, or a freshly signed PoP presentation
        from_cache: Whether the result was served from the cache
        expires_on: Access token expiry (UTC)
        ext_expires_on: Extended access token expiry (UTC)
        family_id: FOCI family the application belongs to
        token_type: Bearer or pop
        state: Caller state echoed back from the request
    """

    unique_id: str
    tenant_id: str
    scopes: list[str]
    account: AccountInfo | None
    id_token: str
    id_token_claims: dict[str, Any] | None
    access_token: str
    from_cache: bool
    expires_on: datetime | None
    ext_expires_on: datetime | None
    family_id: str | None
    token_type: str
    state: str


async def generate_authentication_result(
    crypto: CryptoProvider,
    cache_record: CacheRecord,
    id_token: AuthToken | None,
    from_cache: bool,
    request_state: RequestStateObject | None = None,
    resource_request_method: str | None = None,
    resource_request_uri: str | None = None,
) -> AuthenticationResult:
    """Build the AuthenticationResult for a cache record.

    A PoP access token is signed for the resource request described by
    resource_request_method and resource_request_uri; every call produces a
    new signature.

    Raises:
        TokenClaimsRequiredError: If a PoP access token lacks cnf.kid
        SigningKeyNotFoundError: If the PoP key is no longer available
    """
    access_token = ""
    scopes: list[str] = []
    expires_on = None
    ext_expires_on = None
    token_type = ""

    cached_access_token = cache_record.access_token
    if cached_access_token:
        if cached_access_token.is_pop:
            pop_token_generator = PopTokenGenerator(crypto)
            access_token = await pop_token_generator.sign_pop_token(
                cached_access_token.secret, resource_request_method, resource_request_uri
            )
        else:
            access_token = cached_access_token.secret
        scopes = ScopeSet.from_string(cached_access_token.target).as_list()
        expires_on = to_datetime(cached_access_token.expires_on)
        ext_expires_on = to_datetime(cached_access_token.extended_expires_on)
        token_type = cached_access_token.token_type

    family_id = None
    if cache_record.app_metadata:
        family_id = cache_record.app_metadata.family_id or None

    claims = id_token.claims if id_token else None
    account = None
    if cache_record.account:
        account = cache_record.account.get_account_info(claims)

    return AuthenticationResult(
        unique_id=(claims.get("oid") or claims.get("sub") or "") if claims else "",
        tenant_id=(claims.get("tid") or "") if claims else "",
        scopes=scopes,
        account=account,
        id_token=id_token.raw_token if id_token else "",
        id_token_claims=claims,
        access_token=access_token,
        from_cache=from_cache,
        expires_on=expires_on,
        ext_expires_on=ext_expires_on,
        family_id=family_id,
        token_type=token_type,
        state=request_state.user_request_state if request_state else "",
    )
