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
Cache entities produced from a token response.

Keys are lowercased, "-"-joined composites:
    account       {home_account_id}-{environment}-{realm}
    credential    {home_account_id}-{environment}-{credential_type}-{client_id|family_id}-{realm}-{target}
    app metadata  appmetadata-{environment}-{client_id}
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import TYPE_CHECKING, Any, TypeVar

from ..account.account_info import AccountInfo
from ..account.client_info import build_client_info
from ..authority.authority_type import AuthorityType
from ..utils.constants import (
    APP_METADATA_KEY_PREFIX,
    CACHE_KEY_SEPARATOR,
    AuthenticationScheme,
    CacheAccountType,
    CredentialType,
)
from ..utils.time_utils import now_seconds

if TYPE_CHECKING:
    from ..account.auth_token import AuthToken
    from ..authority.authority import Authority
    from ..crypto.interface import CryptoProvider

E = TypeVar("E", bound="_SerializableEntity")


def _join_key(*parts: str | None) -> str:
    return CACHE_KEY_SEPARATOR.join(part or "" for part in parts).lower()


class _SerializableEntity:
    """dict conversion shared by all entities"""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]

    @classmethod
    def from_dict(cls: type[E], data: dict[str, Any]) -> E:
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class AccountEntity(_SerializableEntity):
    """Identity bound to an authority realm"""

    home_account_id: str
    environment: str
    realm: str
    local_account_id: str = ""
    username: str = ""
    authority_type: str = CacheAccountType.GENERIC_ACCOUNT_TYPE.value
    name: str | None = None
    client_info: str | None = None
    obo_assertion: str | None = None

    @staticmethod
    def generate_account_cache_key(home_account_id: str, environment: str, realm: str) -> str:
        return _join_key(home_account_id, environment, realm)

    def generate_account_key(self) -> str:
        return self.generate_account_cache_key(self.home_account_id, self.environment, self.realm)

    def get_account_info(self, id_token_claims: dict[str, Any] | None = None) -> AccountInfo:
        return AccountInfo(
            home_account_id=self.home_account_id,
            environment=self.environment,
            tenant_id=self.realm,
            username=self.username,
            local_account_id=self.local_account_id,
            name=self.name,
            id_token_claims=dict(id_token_claims or {}),
        )

    @classmethod
    def create_account(
        cls,
        client_info: str,
        environment: str,
        id_token: AuthToken | None,
        crypto: CryptoProvider,
        obo_assertion: str | None = None,
    ) -> AccountEntity:
        """Build an AAD (MSSTS) account addressed by its client_info."""
        decoded = build_client_info(client_info, crypto)
        claims = id_token.claims if id_token else {}
        emails = claims.get("emails") or []
        return cls(
            home_account_id=decoded.home_account_id,
            environment=environment,
            realm=claims.get("tid") or "",
            local_account_id=claims.get("oid") or claims.get("sub") or "",
            username=claims.get("preferred_username") or (emails[0] if emails else ""),
            authority_type=CacheAccountType.MSSTS_ACCOUNT_TYPE.value,
            name=claims.get("name"),
            client_info=client_info,
            obo_assertion=obo_assertion,
        )

    @classmethod
    def create_generic_account(
        cls,
        authority: Authority,
        environment: str,
        id_token: AuthToken | None,
        obo_assertion: str | None = None,
    ) -> AccountEntity:
        """Build an ADFS or generic OIDC account addressed by the sub claim."""
        claims = id_token.claims if id_token else {}
        if authority.authority_type == AuthorityType.ADFS:
            account_type = CacheAccountType.ADFS_ACCOUNT_TYPE
        else:
            account_type = CacheAccountType.GENERIC_ACCOUNT_TYPE
        # non AAD scenarios can have empty realm
        return cls(
            home_account_id=claims.get("sub") or "",
            environment=environment,
            realm="",
            local_account_id=claims.get("oid") or claims.get("sub") or "",
            username=claims.get("upn") or "",
            authority_type=account_type.value,
            name=claims.get("name") or "",
            obo_assertion=obo_assertion,
        )


@dataclass
class CredentialEntity(_SerializableEntity):
    """Fields shared by every stored credential"""

    home_account_id: str
    environment: str
    credential_type: str
    client_id: str
    secret: str
    realm: str = ""
    target: str = ""
    family_id: str | None = None
    obo_assertion: str | None = None

    def generate_credential_key(self) -> str:
        client_or_family_id = self.client_id
        if self.credential_type == CredentialType.REFRESH_TOKEN.value and self.family_id:
            client_or_family_id = self.family_id
        return _join_key(
            self.home_account_id,
            self.environment,
            self.credential_type,
            client_or_family_id,
            self.realm,
            self.target,
        )


@dataclass
class IdTokenEntity(CredentialEntity):
    @classmethod
    def create_id_token_entity(
        cls,
        home_account_id: str,
        environment: str,
        id_token: str,
        client_id: str,
        tenant_id: str,
        obo_assertion: str | None = None,
    ) -> IdTokenEntity:
        return cls(
            home_account_id=home_account_id,
            environment=environment,
            credential_type=CredentialType.ID_TOKEN.value,
            client_id=client_id,
            secret=id_token,
            realm=tenant_id,
            obo_assertion=obo_assertion,
        )


@dataclass
class AccessTokenEntity(CredentialEntity):
    cached_at: int = 0
    expires_on: int = 0
    extended_expires_on: int = 0
    token_type: str = AuthenticationScheme.BEARER.value

    @property
    def is_pop(self) -> bool:
        return self.token_type.lower() == AuthenticationScheme.POP.value

    @classmethod
    def create_access_token_entity(
        cls,
        home_account_id: str,
        environment: str,
        access_token: str,
        client_id: str,
        tenant_id: str,
        scopes: str,
        expires_on: int,
        extended_expires_on: int,
        token_type: str | None = None,
        obo_assertion: str | None = None,
    ) -> AccessTokenEntity:
        token_type = token_type or AuthenticationScheme.BEARER.value
        if token_type.lower() == AuthenticationScheme.POP.value:
            credential_type = CredentialType.ACCESS_TOKEN_WITH_AUTH_SCHEME
        else:
            credential_type = CredentialType.ACCESS_TOKEN
        return cls(
            home_account_id=home_account_id,
            environment=environment,
            credential_type=credential_type.value,
            client_id=client_id,
            secret=access_token,
            realm=tenant_id,
            target=scopes,
            obo_assertion=obo_assertion,
            cached_at=now_seconds(),
            expires_on=expires_on,
            extended_expires_on=extended_expires_on,
            token_type=token_type,
        )


@dataclass
class RefreshTokenEntity(CredentialEntity):
    @classmethod
    def create_refresh_token_entity(
        cls,
        home_account_id: str,
        environment: str,
        refresh_token: str,
        client_id: str,
        family_id: str | None = None,
        obo_assertion: str | None = None,
    ) -> RefreshTokenEntity:
        return cls(
            home_account_id=home_account_id,
            environment=environment,
            credential_type=CredentialType.REFRESH_TOKEN.value,
            client_id=client_id,
            secret=refresh_token,
            family_id=family_id or None,
            obo_assertion=obo_assertion,
        )


@dataclass
class AppMetadataEntity(_SerializableEntity):
    """Family-of-client-ids membership of an application in an environment"""

    client_id: str
    environment: str
    family_id: str | None = None

    def generate_app_metadata_key(self) -> str:
        return _join_key(APP_METADATA_KEY_PREFIX, self.environment, self.client_id)

    @classmethod
    def create_app_metadata_entity(
        cls, client_id: str, environment: str, family_id: str | None = None
    ) -> AppMetadataEntity:
        return cls(client_id=client_id, environment=environment, family_id=family_id or None)


@dataclass
class CacheRecord:
    """Entities derived from a single server response, written as one unit"""

    account: AccountEntity | None = None
    id_token: IdTokenEntity | None = None
    access_token: AccessTokenEntity | None = None
    refresh_token: RefreshTokenEntity | None = None
    app_metadata: AppMetadataEntity | None = None


@dataclass
class ServerTelemetryEntity(_SerializableEntity):
    """Failures accumulated since the last acknowledged telemetry header"""

    failed_requests: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    cache_hits: int = 0
