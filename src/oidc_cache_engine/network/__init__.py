"""HTTP transport capability"""

from .network_manager import (
    HttpxNetworkModule,
    NetworkManager,
    NetworkModule,
    NetworkRequestOptions,
    NetworkResponse,
)

__all__ = [
    "HttpxNetworkModule",
    "NetworkManager",
    "NetworkModule",
    "NetworkRequestOptions",
    "NetworkResponse",
]
