"""Cache entities, stores and persistence hooks"""

from .cache_manager import CacheManager, InMemoryCacheManager
from .entities import (
    AccessTokenEntity,
    AccountEntity,
    AppMetadataEntity,
    CacheRecord,
    CredentialEntity,
    IdTokenEntity,
    RefreshTokenEntity,
    ServerTelemetryEntity,
)
from .file_plugin import FilePersistencePlugin
from .persistence import CachePlugin, SerializableTokenCache, TokenCacheContext
from .token_cache import TokenCache

__all__ = [
    "AccessTokenEntity",
    "AccountEntity",
    "AppMetadataEntity",
    "CacheManager",
    "CachePlugin",
    "CacheRecord",
    "CredentialEntity",
    "FilePersistencePlugin",
    "IdTokenEntity",
    "InMemoryCacheManager",
    "RefreshTokenEntity",
    "SerializableTokenCache",
    "ServerTelemetryEntity",
    "TokenCache",
    "TokenCacheContext",
]
