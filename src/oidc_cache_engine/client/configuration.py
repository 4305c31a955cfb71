"""
Per-client configuration.

Capabilities (crypto, storage, network, persistence) are injected here; any
that are omitted fall back to the engine defaults.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from ..authority.authority import Authority
from ..authority.authority_type import ProtocolMode
from ..cache.cache_manager import CacheManager, InMemoryCacheManager
from ..cache.persistence import CachePlugin, SerializableTokenCache
from ..config import config
from ..crypto.default_crypto import DefaultCryptoProvider
from ..crypto.interface import CryptoProvider
from ..network.network_manager import HttpxNetworkModule, NetworkModule
from ..telemetry.server_telemetry import ServerTelemetryManager


def _package_version() -> str:
    try:
        return version("oidc-cache-engine")
    except PackageNotFoundError:
        return "0.0.0"


@dataclass(frozen=True)
class LibraryInfo:
    """Client identification sent in the x-client-* headers"""

    sku: str
    version: str
    os: str
    cpu: str


def default_library_info() -> LibraryInfo:
    return LibraryInfo(
        sku=config.library_sku,
        version=_package_version(),
        os=platform.system(),
        cpu=platform.machine(),
    )


@dataclass
class ClientConfiguration:
    """Everything a client needs to request tokens and process responses.

    One of known_authorities or cloud_discovery_metadata is required: the
    trusted authority registry is the only source of cache environments.
    """

    client_id: str
    authority: Authority
    crypto_interface: CryptoProvider = field(default_factory=DefaultCryptoProvider)
    storage_interface: CacheManager = field(default_factory=InMemoryCacheManager)
    network_interface: NetworkModule = field(default_factory=HttpxNetworkModule)
    server_telemetry_manager: ServerTelemetryManager | None = None
    library_info: LibraryInfo = field(default_factory=default_library_info)
    known_authorities: list[str] = field(default_factory=list)
    cloud_discovery_metadata: str | None = None
    serializable_cache: SerializableTokenCache | None = None
    persistence_plugin: CachePlugin | None = None
    send_library_headers: bool = field(default_factory=lambda: config.send_library_headers)
    send_telemetry_headers: bool = field(default_factory=lambda: config.send_telemetry_headers)


def build_client_configuration(
    client_id: str,
    authority: str | Authority,
    protocol_mode: ProtocolMode = ProtocolMode.AAD,
    **overrides: Any,
) -> ClientConfiguration:
    """Build a ClientConfiguration from a client id and an authority URL.

    Args:
        client_id: Application (client) id
        authority: Authority URL or an already parsed Authority
        protocol_mode: Protocol mode used when authority is a URL
        **overrides: Any other ClientConfiguration field

    Example:
        configuration = build_client_configuration(
            "my-client-id",
            "https://login.example.com/common",
            known_authorities=["login.example.com"],
        )
    """
    if isinstance(authority, str):
        authority = Authority(authority, protocol_mode=protocol_mode)
    return ClientConfiguration(client_id=client_id, authority=authority, **overrides)
