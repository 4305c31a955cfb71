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
Cache store abstraction.

CacheManager defines the storage primitives a concrete store must provide and
implements the record-level operations on top of them. InMemoryCacheManager is
the default store; TokenCache layers JSON serialization over it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..request.scope_set import ScopeSet
from ..utils.constants import CredentialType
from .entities import (
    AccessTokenEntity,
    AccountEntity,
    AppMetadataEntity,
    CacheRecord,
    CredentialEntity,
    ServerTelemetryEntity,
)

logger = logging.getLogger(__name__)

_ACCESS_TOKEN_TYPES = (
    CredentialType.ACCESS_TOKEN.value,
    CredentialType.ACCESS_TOKEN_WITH_AUTH_SCHEME.value,
)


class CacheManager(ABC):
    """Storage primitives plus record-level cache operations"""

    @abstractmethod
    def set_account(self, account: AccountEntity) -> None: ...

    @abstractmethod
    def get_account(self, account_key: str) -> AccountEntity | None: ...

    @abstractmethod
    def set_credential(self, credential: CredentialEntity) -> None: ...

    @abstractmethod
    def get_credential(self, credential_key: str) -> CredentialEntity | None: ...

    @abstractmethod
    def set_app_metadata(self, app_metadata: AppMetadataEntity) -> None: ...

    @abstractmethod
    def get_app_metadata(self, app_metadata_key: str) -> AppMetadataEntity | None: ...

    @abstractmethod
    def set_server_telemetry(self, key: str, entity: ServerTelemetryEntity) -> None: ...

    @abstractmethod
    def get_server_telemetry(self, key: str) -> ServerTelemetryEntity | None: ...

    @abstractmethod
    def remove_item(self, key: str) -> bool: ...

    @abstractmethod
    def get_keys(self) -> list[str]: ...

    @abstractmethod
    def clear(self) -> None: ...

    def save_cache_record(self, cache_record: CacheRecord) -> None:
        """Write every populated slot of a record.

        Access tokens first evict cached access tokens of the same account,
        environment, credential type, client and realm whose scopes intersect
        the new ones.
        """
        if cache_record.account:
            self.set_account(cache_record.account)
        if cache_record.id_token:
            self.set_credential(cache_record.id_token)
        if cache_record.access_token:
            self.save_access_token(cache_record.access_token)
        if cache_record.refresh_token:
            self.set_credential(cache_record.refresh_token)
        if cache_record.app_metadata:
            self.set_app_metadata(cache_record.app_metadata)

    def save_access_token(self, access_token: AccessTokenEntity) -> None:
        new_scopes = ScopeSet.from_string(access_token.target)
        for cached in self.get_access_tokens():
            if (
                cached.home_account_id == access_token.home_account_id
                and cached.environment == access_token.environment
                and cached.client_id == access_token.client_id
                and cached.credential_type == access_token.credential_type
                and cached.realm == access_token.realm
                and ScopeSet.from_string(cached.target).intersects(new_scopes)
            ):
                self.remove_item(cached.generate_credential_key())
        self.set_credential(access_token)

    def get_all_accounts(self) -> list[AccountEntity]:
        accounts = []
        for key in self.get_keys():
            account = self.get_account(key)
            if account:
                accounts.append(account)
        return accounts

    def get_access_tokens(self) -> list[AccessTokenEntity]:
        tokens = []
        for key in self.get_keys():
            credential = self.get_credential(key)
            if isinstance(credential, AccessTokenEntity) and credential.credential_type in _ACCESS_TOKEN_TYPES:
                tokens.append(credential)
        return tokens

    def get_credentials_for_account(self, account: AccountEntity) -> list[CredentialEntity]:
        credentials = []
        for key in self.get_keys():
            credential = self.get_credential(key)
            if (
                credential
                and credential.home_account_id == account.home_account_id
                and credential.environment == account.environment
            ):
                credentials.append(credential)
        return credentials

    def remove_account(self, account_key: str) -> bool:
        """Remove an account and every credential issued to it.

        Returns:
            True if the account existed
        """
        account = self.get_account(account_key)
        if not account:
            return False
        for credential in self.get_credentials_for_account(account):
            self.remove_item(credential.generate_credential_key())
        removed = self.remove_item(account_key)
        logger.debug(f"Removed account {account_key} from cache")
        return removed


class InMemoryCacheManager(CacheManager):
    """Process-local store keyed by the entity cache keys"""

    def __init__(self) -> None:
        self._accounts: dict[str, AccountEntity] = {}
        self._credentials: dict[str, CredentialEntity] = {}
        self._app_metadata: dict[str, AppMetadataEntity] = {}
        self._telemetry: dict[str, ServerTelemetryEntity] = {}

    def set_account(self, account: AccountEntity) -> None:
        self._accounts[account.generate_account_key()] = account

    def get_account(self, account_key: str) -> AccountEntity | None:
        return self._accounts.get(account_key)

    def set_credential(self, credential: CredentialEntity) -> None:
        self._credentials[credential.generate_credential_key()] = credential

    def get_credential(self, credential_key: str) -> CredentialEntity | None:
        return self._credentials.get(credential_key)

    def set_app_metadata(self, app_metadata: AppMetadataEntity) -> None:
        self._app_metadata[app_metadata.generate_app_metadata_key()] = app_metadata

    def get_app_metadata(self, app_metadata_key: str) -> AppMetadataEntity | None:
        return self._app_metadata.get(app_metadata_key)

    def set_server_telemetry(self, key: str, entity: ServerTelemetryEntity) -> None:
        self._telemetry[key] = entity

    def get_server_telemetry(self, key: str) -> ServerTelemetryEntity | None:
        return self._telemetry.get(key)

    def remove_item(self, key: str) -> bool:
        removed = False
        for store in (self._accounts, self._credentials, self._app_metadata, self._telemetry):
            if store.pop(key, None) is not None:
                removed = True
        return removed

    def get_keys(self) -> list[str]:
        return [
            *self._accounts,
            *self._credentials,
            *self._app_metadata,
            *self._telemetry,
        ]

    def clear(self) -> None:
        self._accounts.clear()
        self._credentials.clear()
        self._app_metadata.clear()
        self._telemetry.clear()
