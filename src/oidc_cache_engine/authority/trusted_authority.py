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
Process-wide registry of trusted authority hosts.

The registry is populated exactly once, from the first client configuration
that supplies known authorities or a cloud discovery metadata document. After
that it only serves read-only lookups; later initialization attempts are
logged and ignored.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from ..errors import InvalidCloudDiscoveryMetadataError, KnownAuthoritiesConflictError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloudDiscoveryMetadata:
    """Aliases of one cloud instance and its preferred hosts"""

    preferred_network: str
    preferred_cache: str
    aliases: tuple[str, ...]


def _host_of(authority: str) -> str:
    if "://" in authority:
        return urlsplit(authority).netloc.lower()
    return authority.strip("/").lower()


class TrustedAuthorityRegistry:
    """Alias-to-metadata lookup shared by every client in the process"""

    def __init__(self) -> None:
        self._metadata: dict[str, CloudDiscoveryMetadata] = {}
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return bool(self._metadata)

    @property
    def trusted_host_list(self) -> list[str]:
        return list(self._metadata)

    def initialize(
        self,
        known_authorities: list[str] | None = None,
        cloud_discovery_metadata: str | None = None,
    ) -> bool:
        """Populate the registry from client configuration.

        Args:
            known_authorities: Authority URLs or hosts trusted as-is
            cloud_discovery_metadata: JSON document with a `metadata` list of
                `{preferred_network, preferred_cache, aliases}` entries

        Returns:
            True if this call populated the registry, False if it was already populated

        Raises:
            KnownAuthoritiesConflictError: If both sources are supplied to an empty registry
            InvalidCloudDiscoveryMetadataError: If the metadata document is malformed
        """
        known_authorities = known_authorities or []

        with self._lock:
            if self._metadata:
                logger.debug("Trusted authorities already initialized, ignoring configuration")
                return False

            if known_authorities and cloud_discovery_metadata:
                raise KnownAuthoritiesConflictError()

            entries: list[CloudDiscoveryMetadata] = []
            for authority in known_authorities:
                host = _host_of(authority)
                entries.append(CloudDiscoveryMetadata(host, host, (host,)))

            if cloud_discovery_metadata:
                entries.extend(self._parse_metadata_document(cloud_discovery_metadata))

            for entry in entries:
                for alias in entry.aliases:
                    self._metadata[alias.lower()] = entry

        if entries:
            logger.info(f"Trusted authorities initialized: {sorted(self._metadata)}")
        return bool(entries)

    def get_cloud_discovery_metadata(self, host: str) -> CloudDiscoveryMetadata | None:
        return self._metadata.get(host.lower())

    def is_trusted(self, host: str) -> bool:
        return host.lower() in self._metadata

    def reset(self) -> None:
        """Clear the registry. Intended for test isolation only."""
        with self._lock:
            self._metadata.clear()

    @staticmethod
    def _parse_metadata_document(document: str) -> list[CloudDiscoveryMetadata]:
        try:
            parsed: dict[str, Any] = json.loads(document)
            return [
                CloudDiscoveryMetadata(
                    preferred_network=item["preferred_network"],
                    preferred_cache=item["preferred_cache"],
                    aliases=tuple(item["aliases"]),
                )
                for item in parsed["metadata"]
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidCloudDiscoveryMetadataError(str(e)) from e


# Global registry instance
trusted_authorities = TrustedAuthorityRegistry()
