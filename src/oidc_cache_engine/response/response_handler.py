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
Server response to cache orchestration.

ResponseHandler owns the single read-modify-write the engine performs against
the cache for a token response:

1. derive the home account id from client_info
2. decode the identity token and check its nonce
3. parse the request state (expiry baseline and caller state)
4. map the response into a CacheRecord
5. open the persistence window (before_cache_access ... after_cache_access)
6. in a refresh flow, refuse to write for an account no longer in the cache
7. write the record
8. assemble the AuthenticationResult

Steps 1-4 raise before the cache is touched. Steps 6 and 7 run inside one
persistence window whose after-hook fires on every exit path.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ..account.auth_token import AuthToken
from ..account.client_info import build_client_info
from ..cache.persistence import TokenCacheContext
from ..errors import NonceMismatchError
from ..utils.protocol_utils import RequestStateObject, parse_request_state
from .authentication_result import AuthenticationResult, generate_authentication_result
from .cache_record_mapper import CacheEntityMapper
from .validation import validate_authorization_code_response, validate_token_response

if TYPE_CHECKING:
    from ..authority.authority import Authority
    from ..cache.cache_manager import CacheManager
    from ..cache.persistence import CachePlugin, SerializableTokenCache
    from ..crypto.interface import CryptoProvider
    from .server_responses import ServerAuthorizationCodeResponse, ServerTokenResponse

logger = logging.getLogger(__name__)


class ResponseHandler:
    """Validates token responses, caches their credentials and builds results.

    Attributes:
        client_id: Application the credentials are cached for
        cache_storage: Store the CacheRecord is written to
        crypto: Crypto capability (client_info decoding, PoP signing)
        serializable_cache: Cache handed to the persistence plugin
        persistence_plugin: Optional before/after cache access hooks
    """

    def __init__(
        self,
        client_id: str,
        cache_storage: CacheManager,
        crypto: CryptoProvider,
        serializable_cache: SerializableTokenCache | None = None,
        persistence_plugin: CachePlugin | None = None,
    ) -> None:
        self.client_id = client_id
        self.cache_storage = cache_storage
        self.crypto = crypto
        self.serializable_cache = serializable_cache
        self.persistence_plugin = persistence_plugin
        self.mapper = CacheEntityMapper(client_id, crypto)

    def validate_server_authorization_code_response(
        self, response: ServerAuthorizationCodeResponse, cached_state: str
    ) -> None:
        validate_authorization_code_response(response, cached_state, self.crypto)

    def validate_token_response(self, response: ServerTokenResponse) -> None:
        validate_token_response(response)

    async def handle_server_token_response(
        self,
        response: ServerTokenResponse,
        authority: Authority,
        *,
        resource_request_method: str | None = None,
        resource_request_uri: str | None = None,
        cached_nonce: str | None = None,
        cached_state: str | None = None,
        request_scopes: list[str] | None = None,
        obo_assertion: str | None = None,
        handling_refresh_token_response: bool = False,
    ) -> AuthenticationResult | None:
        """Cache the credentials of a validated token response.

        Args:
            response: Token response already checked by validate_token_response
            authority: Authority the request was sent to
            resource_request_method: HTTP method of the next resource request (PoP)
            resource_request_uri: URL of the next resource request (PoP)
            cached_nonce: Nonce sent with the request; checked against the id token
            cached_state: State sent with the request
            request_scopes: Scopes requested, used when the response omits `scope`
            obo_assertion: On-behalf-of assertion the tokens were obtained with
            handling_refresh_token_response: True when the response answers a refresh
                token grant

        Returns:
            The AuthenticationResult, or None when a refresh flow found its account
            removed from the cache and nothing was written

        Raises:
            ClientInfoDecodingError: If client_info is malformed
            TokenParsingError: If the id token cannot be decoded
            NonceMismatchError: If the id token nonce differs from cached_nonce
            InvalidStateError: If cached_state cannot be parsed
            InvalidCacheEnvironmentError: If the authority host is not trusted
            ClientInfoEmptyError: If an AAD authority returned no client_info
        """
        home_account_id = ""
        if response.client_info:
            home_account_id = build_client_info(response.client_info, self.crypto).home_account_id
        else:
            logger.debug("No client info in response")

        id_token = None
        if response.id_token:
            id_token = AuthToken(response.id_token)
            if cached_nonce and id_token.claims.get("nonce") != cached_nonce:
                raise NonceMismatchError()

        if not home_account_id:
            home_account_id = self._degraded_home_account_id(id_token)

        request_state: RequestStateObject | None = None
        if cached_state:
            request_state = parse_request_state(self.crypto, cached_state)

        cache_record = self.mapper.generate_cache_record(
            response,
            id_token,
            authority,
            home_account_id,
            request_state.library_state if request_state else None,
            request_scopes,
            obo_assertion,
        )

        async with self._cache_access():
            # Another caller may have removed the account between lookup and
            # refresh; writing now would resurrect it.
            if handling_refresh_token_response and cache_record.account:
                account_key = cache_record.account.generate_account_key()
                if self.cache_storage.get_account(account_key) is None:
                    logger.warning(
                        "Account used to refresh tokens not in persistence, "
                        "refreshed tokens will not be stored in the cache"
                    )
                    return None
            self.cache_storage.save_cache_record(cache_record)

        return await generate_authentication_result(
            self.crypto,
            cache_record,
            id_token,
            False,
            request_state,
            resource_request_method,
            resource_request_uri,
        )

    @staticmethod
    def _degraded_home_account_id(id_token: AuthToken | None) -> str:
        """Fallback home account id for authorities that send no client_info.

        Uses the sub claim of the identity token. Accounts filed under this id
        cannot be matched with client_info-derived ids.
        """
        sub = id_token.claims.get("sub") if id_token else None
        if not sub:
            logger.warning("Home account id is missing and the id token has no sub claim")
            return ""
        logger.warning("Home account id is missing, falling back to the id token sub claim")
        logger.debug(f"Degraded home account id: {sub}")
        return str(sub)

    @asynccontextmanager
    async def _cache_access(self) -> AsyncIterator[TokenCacheContext | None]:
        """Persistence window around one cache read-modify-write."""
        if not (self.persistence_plugin and self.serializable_cache):
            yield None
            return

        context = TokenCacheContext(self.serializable_cache, True)
        try:
            logger.debug("Persistence enabled, calling before_cache_access")
            await self.persistence_plugin.before_cache_access(context)
            yield context
        finally:
            logger.debug("Persistence enabled, calling after_cache_access")
            await self.persistence_plugin.after_cache_access(context)
