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
Mapping of a validated token response into cache entities.

Pure transformation: no I/O and no cache access. Every slot of the resulting
CacheRecord is optional and only populated when the response carries the
corresponding material.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..authority.authority_type import AuthorityType, ProtocolMode
from ..cache.entities import (
    AccessTokenEntity,
    AccountEntity,
    AppMetadataEntity,
    CacheRecord,
    IdTokenEntity,
    RefreshTokenEntity,
)
from ..errors import ClientInfoEmptyError, InvalidCacheEnvironmentError
from ..request.scope_set import ScopeSet
from ..utils.time_utils import now_seconds

if TYPE_CHECKING:
    from ..account.auth_token import AuthToken
    from ..authority.authority import Authority
    from ..crypto.interface import CryptoProvider
    from ..utils.protocol_utils import LibraryStateObject
    from .server_responses import ServerTokenResponse

logger = logging.getLogger(__name__)


def resolve_cache_environment(authority: Authority) -> str:
    """Cache environment of an authority.

    Raises:
        InvalidCacheEnvironmentError: If the authority host is not trusted
    """
    environment = authority.generate_environment()
    if not environment:
        raise InvalidCacheEnvironmentError()
    return environment


class CacheEntityMapper:
    """Builds cache entities for one client application"""

    def __init__(self, client_id: str, crypto: CryptoProvider) -> None:
        self.client_id = client_id
        self.crypto = crypto

    def generate_account_entity(
        self,
        response: ServerTokenResponse,
        id_token: AuthToken | None,
        authority: Authority,
        obo_assertion: str | None = None,
    ) -> AccountEntity:
        """Build the account entity for a response carrying an identity token.

        Raises:
            ClientInfoEmptyError: If an AAD authority returned no client_info
            InvalidCacheEnvironmentError: If the authority host is not trusted
        """
        environment = resolve_cache_environment(authority)

        # ADFS does not send client_info
        if authority.authority_type == AuthorityType.ADFS:
            logger.debug("Authority type is ADFS, creating ADFS account")
            return AccountEntity.create_generic_account(authority, environment, id_token, obo_assertion)

        # B2C authorities also use the AAD protocol mode
        if not response.client_info and authority.protocol_mode == ProtocolMode.AAD:
            raise ClientInfoEmptyError()

        if response.client_info:
            return AccountEntity.create_account(
                response.client_info, environment, id_token, self.crypto, obo_assertion
            )
        return AccountEntity.create_generic_account(authority, environment, id_token, obo_assertion)

    def generate_cache_record(
        self,
        response: ServerTokenResponse,
        id_token: AuthToken | None,
        authority: Authority,
        home_account_id: str,
        library_state: LibraryStateObject | None = None,
        request_scopes: list[str] | None = None,
        obo_assertion: str | None = None,
    ) -> CacheRecord:
        """Map a token response into a CacheRecord.

        Args:
            response: Validated token response
            id_token: Decoded identity token, if the response carried one
            authority: Authority the request was sent to
            home_account_id: Identifier the credentials are filed under
            library_state: Library state of the request; its timestamp baselines expiry
            request_scopes: Scopes requested, used when the response omits `scope`
            obo_assertion: On-behalf-of assertion the tokens were obtained with

        Raises:
            InvalidCacheEnvironmentError: If the authority host is not trusted
            ClientInfoEmptyError: If an AAD authority returned an id token without client_info
        """
        environment = resolve_cache_environment(authority)

        # non AAD scenarios can have empty realm
        cached_id_token = None
        cached_account = None
        if response.id_token and id_token is not None:
            cached_id_token = IdTokenEntity.create_id_token_entity(
                home_account_id,
                environment,
                response.id_token,
                self.client_id,
                id_token.claims.get("tid") or "",
                obo_assertion,
            )
            cached_account = self.generate_account_entity(response, id_token, authority, obo_assertion)

        cached_access_token = None
        if response.access_token:
            if response.scope:
                response_scopes = ScopeSet.from_string(response.scope)
            else:
                response_scopes = ScopeSet(request_scopes or [])

            baseline = library_state.ts if library_state else now_seconds()
            expires_on = baseline + (response.expires_in or 0)
            extended_expires_on = expires_on + (response.ext_expires_in or 0)

            realm = (id_token.claims.get("tid") or "") if id_token else authority.tenant
            cached_access_token = AccessTokenEntity.create_access_token_entity(
                home_account_id,
                environment,
                response.access_token,
                self.client_id,
                realm,
                response_scopes.print_scopes(),
                expires_on,
                extended_expires_on,
                response.token_type,
                obo_assertion,
            )

        cached_refresh_token = None
        if response.refresh_token:
            cached_refresh_token = RefreshTokenEntity.create_refresh_token_entity(
                home_account_id,
                environment,
                response.refresh_token,
                self.client_id,
                response.foci,
                obo_assertion,
            )

        cached_app_metadata = None
        if response.foci:
            cached_app_metadata = AppMetadataEntity.create_app_metadata_entity(
                self.client_id, environment, response.foci
            )

        return CacheRecord(
            account=cached_account,
            id_token=cached_id_token,
            access_token=cached_access_token,
            refresh_token=cached_refresh_token,
            app_metadata=cached_app_metadata,
        )
