"""
Serializable in-memory token cache.

Serialized layout:
    {
        "Account": {key: {...}},
        "IdToken": {key: {...}},
        "AccessToken": {key: {...}},
        "RefreshToken": {key: {...}},
        "AppMetadata": {key: {...}}
    }
Server telemetry state is process-local and never serialized.
"""

import json
import logging
from typing import Any

from ..utils.constants import CredentialType
from .cache_manager import InMemoryCacheManager
from .entities import (
    AccessTokenEntity,
    AccountEntity,
    AppMetadataEntity,
    CredentialEntity,
    IdTokenEntity,
    RefreshTokenEntity,
)

logger = logging.getLogger(__name__)

_SECTION_BY_CREDENTIAL_TYPE = {
    CredentialType.ID_TOKEN.value: "IdToken",
    CredentialType.ACCESS_TOKEN.value: "AccessToken",
    CredentialType.ACCESS_TOKEN_WITH_AUTH_SCHEME.value: "AccessToken",
    CredentialType.REFRESH_TOKEN.value: "RefreshToken",
}

_ENTITY_BY_SECTION: dict[str, type[CredentialEntity]] = {
    "IdToken": IdTokenEntity,
    "AccessToken": AccessTokenEntity,
    "RefreshToken": RefreshTokenEntity,
}


class TokenCache(InMemoryCacheManager):
    """InMemoryCacheManager with JSON export/import and change tracking"""

    def __init__(self) -> None:
        super().__init__()
        self.has_changed = False

    def set_account(self, account: AccountEntity) -> None:
        super().set_account(account)
        self.has_changed = True

    def set_credential(self, credential: CredentialEntity) -> None:
        super().set_credential(credential)
        self.has_changed = True

    def set_app_metadata(self, app_metadata: AppMetadataEntity) -> None:
        super().set_app_metadata(app_metadata)
        self.has_changed = True

    def remove_item(self, key: str) -> bool:
        persisted = key not in self._telemetry
        removed = super().remove_item(key)
        if removed and persisted:
            self.has_changed = True
        return removed

    def serialize(self) -> str:
        """Export accounts, credentials and app metadata as a JSON document."""
        document: dict[str, dict[str, Any]] = {
            "Account": {},
            "IdToken": {},
            "AccessToken": {},
            "RefreshToken": {},
            "AppMetadata": {},
        }
        for key, account in self._accounts.items():
            document["Account"][key] = account.to_dict()
        for key, credential in self._credentials.items():
            section = _SECTION_BY_CREDENTIAL_TYPE.get(credential.credential_type)
            if section:
                document[section][key] = credential.to_dict()
        for key, app_metadata in self._app_metadata.items():
            document["AppMetadata"][key] = app_metadata.to_dict()
        return json.dumps(document, indent=2, ensure_ascii=False)

    def deserialize(self, cache: str) -> None:
        """Replace the cache contents with a document produced by serialize().

        Raises:
            ValueError: If the document is not valid JSON
        """
        document = json.loads(cache) if cache else {}

        self._accounts.clear()
        self._credentials.clear()
        self._app_metadata.clear()

        for data in (document.get("Account") or {}).values():
            InMemoryCacheManager.set_account(self, AccountEntity.from_dict(data))
        for section, entity_cls in _ENTITY_BY_SECTION.items():
            for data in (document.get(section) or {}).values():
                InMemoryCacheManager.set_credential(self, entity_cls.from_dict(data))
        for data in (document.get("AppMetadata") or {}).values():
            InMemoryCacheManager.set_app_metadata(self, AppMetadataEntity.from_dict(data))

        self.has_changed = False
        logger.debug(
            f"Token cache loaded: {len(self._accounts)} accounts, "
            f"{len(self._credentials)} credentials, {len(self._app_metadata)} app metadata"
        )
