"""
Authority: the identity provider endpoint a client talks to.

Only the parts of an authority the response pipeline needs are modeled here:
its host, tenant, type and protocol mode, plus the cache environment derived
from the trusted authority registry.

Endpoint and instance discovery are not performed, so a client must be
configured with known_authorities or cloud_discovery_metadata. Without them
the registry stays empty, generate_environment() returns "" for every host,
and handling any token response fails with InvalidCacheEnvironmentError.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from ..errors import ClientConfigurationError
from .authority_type import AuthorityType, ProtocolMode
from .trusted_authority import TrustedAuthorityRegistry, trusted_authorities


class Authority:
    """Parsed authority URL.

    Example:
        authority = Authority("https://login.example.com/contoso.onmicrosoft.com")
        authority.tenant            # "contoso.onmicrosoft.com"
        authority.generate_environment()  # preferred cache host, "" if untrusted
    """

    def __init__(
        self,
        authority_url: str,
        protocol_mode: ProtocolMode = ProtocolMode.AAD,
        registry: TrustedAuthorityRegistry | None = None,
    ) -> None:
        components = urlsplit(authority_url)
        if components.scheme != "https" or not components.netloc:
            raise ClientConfigurationError(
                "url_parse_error", f"Authority must be an https URL, got {authority_url!r}"
            )

        self.canonical_authority = authority_url if authority_url.endswith("/") else f"{authority_url}/"
        self.protocol_mode = protocol_mode
        self._components = components
        self._path_segments = [segment for segment in components.path.split("/") if segment]
        self._registry = registry or trusted_authorities

    @property
    def host_name_and_port(self) -> str:
        return self._components.netloc.lower()

    @property
    def tenant(self) -> str:
        return self._path_segments[0] if self._path_segments else ""

    @property
    def authority_type(self) -> AuthorityType:
        if self.tenant.lower() == "adfs":
            return AuthorityType.ADFS
        return AuthorityType.DEFAULT

    def generate_environment(self) -> str:
        """Cache environment for this authority.

        Returns:
            The preferred cache alias of the authority host, or an empty string
            when the host is not in the trusted authority registry
        """
        metadata = self._registry.get_cloud_discovery_metadata(self.host_name_and_port)
        return metadata.preferred_cache if metadata else ""

    def __repr__(self) -> str:
        return (
            f"Authority({self.canonical_authority!r}, type={self.authority_type.value}, "
            f"protocol={self.protocol_mode.value})"
        )
