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
Base client: token endpoint invocation shared by every grant flow.
"""

from __future__ import annotations

import logging

from ..authority.trusted_authority import trusted_authorities
from ..network.network_manager import NetworkManager, NetworkRequestOptions, NetworkResponse
from ..utils.constants import URL_FORM_CONTENT_TYPE, HeaderNames, LibraryHeaderNames
from .configuration import ClientConfiguration

logger = logging.getLogger(__name__)


class BaseClient:
    """Holds the capabilities of one client and posts to its token endpoint.

    Attributes:
        config: The client configuration
        crypto_utils: Crypto capability
        cache_manager: Credential store
        network_client: Raw NetworkModule
        network_manager: NetworkManager wrapping network_client
        server_telemetry_manager: Optional telemetry manager
        authority: Authority requests are sent to
    """

    def __init__(self, configuration: ClientConfiguration) -> None:
        self.config = configuration
        self.logger = logger.getChild(type(self).__name__)
        self.crypto_utils = configuration.crypto_interface
        self.cache_manager = configuration.storage_interface
        self.network_client = configuration.network_interface
        self.network_manager = NetworkManager(self.network_client)
        self.server_telemetry_manager = configuration.server_telemetry_manager
        self.authority = configuration.authority

        trusted_authorities.initialize(
            configuration.known_authorities, configuration.cloud_discovery_metadata
        )

    def create_default_token_request_headers(self) -> dict[str, str]:
        headers = {HeaderNames.CONTENT_TYPE: URL_FORM_CONTENT_TYPE}
        if self.config.send_library_headers:
            headers.update(self.create_default_library_headers())

        if self.config.send_telemetry_headers and self.server_telemetry_manager:
            headers[HeaderNames.X_CLIENT_CURR_TELEM] = (
                self.server_telemetry_manager.generate_current_request_header_value()
            )
            headers[HeaderNames.X_CLIENT_LAST_TELEM] = (
                self.server_telemetry_manager.generate_last_request_header_value()
            )
            headers[HeaderNames.X_MS_LIB_CAPABILITY] = HeaderNames.X_MS_LIB_CAPABILITY_VALUE
        return headers

    def create_default_library_headers(self) -> dict[str, str]:
        library_info = self.config.library_info
        return {
            LibraryHeaderNames.X_CLIENT_SKU: library_info.sku,
            LibraryHeaderNames.X_CLIENT_VER: library_info.version,
            LibraryHeaderNames.X_CLIENT_OS: library_info.os,
            LibraryHeaderNames.X_CLIENT_CPU: library_info.cpu,
        }

    async def execute_post_to_token_endpoint(
        self, token_endpoint: str, query_string: str, headers: dict[str, str]
    ) -> NetworkResponse:
        """POST an encoded request body to the token endpoint.

        Telemetry is cleared once the server has accepted the headers, which
        is any response other than a throttle (429) or a server error (5xx).

        Raises:
            NetworkError: If the transport fails
        """
        response = await self.network_manager.send_post_request(
            token_endpoint, NetworkRequestOptions(headers=headers, body=query_string)
        )

        if self.server_telemetry_manager and response.status < 500 and response.status != 429:
            self.server_telemetry_manager.clear_telemetry_cache()

        return response
