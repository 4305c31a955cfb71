"""
Tests for the authority model and the trusted authority registry.
"""

import json

import pytest

from oidc_cache_engine.authority import (
    Authority,
    AuthorityType,
    ProtocolMode,
    TrustedAuthorityRegistry,
)
from oidc_cache_engine.errors import (
    ClientConfigurationError,
    InvalidCloudDiscoveryMetadataError,
    KnownAuthoritiesConflictError,
)

DISCOVERY_DOCUMENT = json.dumps(
    {
        "tenant_discovery_endpoint": "https://login.cloud.example/common/.well-known/openid-configuration",
        "metadata": [
            {
                "preferred_network": "login.cloud.example",
                "preferred_cache": "login.cache.example",
                "aliases": ["login.cloud.example", "login.legacy.example"],
            }
        ],
    }
)


class TestTrustedAuthorityRegistry:
    """Test registry initialization and lookups"""

    @pytest.fixture
    def registry(self):
        return TrustedAuthorityRegistry()

    def test_known_authorities(self, registry):
        assert registry.initialize(["https://login.one.example/tenant", "login.two.example"])

        assert registry.is_initialized
        assert registry.is_trusted("LOGIN.ONE.EXAMPLE")
        assert registry.get_cloud_discovery_metadata("login.two.example").preferred_cache == "login.two.example"
        assert sorted(registry.trusted_host_list) == ["login.one.example", "login.two.example"]

    def test_discovery_metadata_aliases(self, registry):
        registry.initialize(cloud_discovery_metadata=DISCOVERY_DOCUMENT)

        metadata = registry.get_cloud_discovery_metadata("login.legacy.example")
        assert metadata.preferred_cache == "login.cache.example"
        assert metadata.preferred_network == "login.cloud.example"

    def test_initialized_once(self, registry):
        assert registry.initialize(["login.one.example"])
        assert not registry.initialize(["login.two.example"])

        assert not registry.is_trusted("login.two.example")

    def test_empty_configuration_leaves_registry_unset(self, registry):
        assert not registry.initialize([], None)
        assert not registry.is_initialized

        assert registry.initialize(["login.one.example"])

    def test_conflicting_sources(self, registry):
        with pytest.raises(KnownAuthoritiesConflictError):
            registry.initialize(["login.one.example"], DISCOVERY_DOCUMENT)

    def test_conflicting_sources_ignored_once_initialized(self, registry):
        registry.initialize(["login.one.example"])

        assert not registry.initialize(["login.two.example"], DISCOVERY_DOCUMENT)
        assert registry.trusted_host_list == ["login.one.example"]

    def test_malformed_document(self, registry):
        with pytest.raises(InvalidCloudDiscoveryMetadataError):
            registry.initialize(cloud_discovery_metadata='{"metadata": [{"aliases": []}]}')

    def test_reset(self, registry):
        registry.initialize(["login.one.example"])
        registry.reset()

        assert not registry.is_initialized


class TestAuthority:
    """Test authority URL parsing"""

    def test_parts(self, authority):
        assert authority.host_name_and_port == "login.example.com"
        assert authority.tenant == "tenant-1"
        assert authority.authority_type == AuthorityType.DEFAULT
        assert authority.protocol_mode == ProtocolMode.AAD
        assert authority.canonical_authority == "https://login.example.com/tenant-1/"

    def test_adfs(self):
        authority = Authority("https://login.example.com/adfs")

        assert authority.authority_type == AuthorityType.ADFS

    def test_environment_of_trusted_host(self, authority):
        assert authority.generate_environment() == "login.example.com"

    def test_environment_of_untrusted_host(self):
        authority = Authority("https://login.untrusted.example/tenant-1")

        assert authority.generate_environment() == ""

    def test_environment_from_private_registry(self):
        registry = TrustedAuthorityRegistry()
        registry.initialize(cloud_discovery_metadata=DISCOVERY_DOCUMENT)

        authority = Authority("https://login.legacy.example/common", registry=registry)

        assert authority.generate_environment() == "login.cache.example"

    @pytest.mark.parametrize("url", ["http://login.example.com/tenant", "not a url"])
    def test_rejects_non_https(self, url):
        with pytest.raises(ClientConfigurationError):
            Authority(url)
