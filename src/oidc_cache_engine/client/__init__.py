"""Client configuration and token endpoint clients"""

from .base_client import BaseClient
from .configuration import (
    ClientConfiguration,
    LibraryInfo,
    build_client_configuration,
    default_library_info,
)
from .token_client import TokenClient

__all__ = [
    "BaseClient",
    "ClientConfiguration",
    "LibraryInfo",
    "TokenClient",
    "build_client_configuration",
    "default_library_info",
]
