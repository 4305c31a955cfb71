"""
OIDC Cache Engine
Validation of OAuth2/OIDC server responses and caching of the credentials they carry

Logging goes to stderr; the level is controlled by OIDC_ENGINE_LOG_LEVEL.
Token material is never logged above DEBUG.
"""

import logging
import sys

from .config import config

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

from .account import AccountInfo, AuthToken, ClientInfo  # noqa: E402
from .authority import Authority, AuthorityType, ProtocolMode, trusted_authorities  # noqa: E402
from .cache import (  # noqa: E402
    CacheManager,
    CachePlugin,
    CacheRecord,
    FilePersistencePlugin,
    InMemoryCacheManager,
    TokenCache,
    TokenCacheContext,
)
from .client import (  # noqa: E402
    BaseClient,
    ClientConfiguration,
    LibraryInfo,
    TokenClient,
    build_client_configuration,
)
from .crypto import CryptoProvider, DefaultCryptoProvider, PopTokenGenerator  # noqa: E402
from .errors import (  # noqa: E402
    AuthError,
    ClientAuthError,
    ClientConfigurationError,
    InteractionRequiredAuthError,
    ServerError,
)
from .network import HttpxNetworkModule, NetworkManager, NetworkModule  # noqa: E402
from .request import ScopeSet  # noqa: E402
from .response import (  # noqa: E402
    AuthenticationResult,
    ResponseHandler,
    ServerAuthorizationCodeResponse,
    ServerTokenResponse,
)
from .telemetry import ServerTelemetryManager, ServerTelemetryRequest  # noqa: E402

__all__ = [
    "AccountInfo",
    "AuthError",
    "AuthToken",
    "AuthenticationResult",
    "Authority",
    "AuthorityType",
    "BaseClient",
    "CacheManager",
    "CachePlugin",
    "CacheRecord",
    "ClientAuthError",
    "ClientConfiguration",
    "ClientConfigurationError",
    "ClientInfo",
    "CryptoProvider",
    "DefaultCryptoProvider",
    "FilePersistencePlugin",
    "HttpxNetworkModule",
    "InMemoryCacheManager",
    "InteractionRequiredAuthError",
    "LibraryInfo",
    "NetworkManager",
    "NetworkModule",
    "PopTokenGenerator",
    "ProtocolMode",
    "ResponseHandler",
    "ScopeSet",
    "ServerAuthorizationCodeResponse",
    "ServerError",
    "ServerTelemetryManager",
    "ServerTelemetryRequest",
    "ServerTokenResponse",
    "TokenCache",
    "TokenCacheContext",
    "TokenClient",
    "build_client_configuration",
    "config",
    "trusted_authorities",
]
