"""
Protocol constants shared across the engine.
"""

from enum import Enum

URL_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=utf-8"

# Separators
RESOURCE_DELIM = "|"
CLIENT_INFO_SEPARATOR = "."
CACHE_KEY_SEPARATOR = "-"

APP_METADATA_KEY_PREFIX = "appmetadata"
SERVER_TELEMETRY_KEY_PREFIX = "server-telemetry"


class HeaderNames:
    """HTTP header names sent to the token endpoint"""

    CONTENT_TYPE = "Content-Type"
    X_CLIENT_CURR_TELEM = "x-client-current-telemetry"
    X_CLIENT_LAST_TELEM = "x-client-last-telemetry"
    X_MS_LIB_CAPABILITY = "x-ms-lib-capability"
    X_MS_LIB_CAPABILITY_VALUE = "retry-after, h429"


class LibraryHeaderNames:
    """Client identification headers"""

    X_CLIENT_SKU = "x-client-SKU"
    X_CLIENT_VER = "x-client-VER"
    X_CLIENT_OS = "x-client-OS"
    X_CLIENT_CPU = "x-client-CPU"


class CredentialType(str, Enum):
    """Credential kinds stored in the cache"""

    ID_TOKEN = "IdToken"
    ACCESS_TOKEN = "AccessToken"
    ACCESS_TOKEN_WITH_AUTH_SCHEME = "AccessToken_With_AuthScheme"
    REFRESH_TOKEN = "RefreshToken"


class CacheAccountType(str, Enum):
    """Account kinds stored in the cache"""

    MSSTS_ACCOUNT_TYPE = "MSSTS"
    ADFS_ACCOUNT_TYPE = "ADFS"
    GENERIC_ACCOUNT_TYPE = "Generic"


class AuthenticationScheme(str, Enum):
    """Access token presentation schemes"""

    BEARER = "Bearer"
    POP = "pop"
