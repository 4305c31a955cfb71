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
Server telemetry headers.

Each token request reports the current call (api id, force-refresh flag) and
the failures accumulated since the server last acknowledged a telemetry
header. The accumulated state lives in the cache manager so that it survives
across requests of the same client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..cache.cache_manager import CacheManager
from ..cache.entities import ServerTelemetryEntity
from ..config import config
from ..utils.constants import CACHE_KEY_SEPARATOR, SERVER_TELEMETRY_KEY_PREFIX

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2
CATEGORY_SEPARATOR = "|"
VALUE_SEPARATOR = ","
OVERFLOW_TRUE = "1"
OVERFLOW_FALSE = "0"
UNKNOWN_ERROR = "unknown_error"


@dataclass(frozen=True)
class ServerTelemetryRequest:
    """Identity of the request being reported"""

    client_id: str
    api_id: int
    correlation_id: str
    force_refresh: bool = False


class ServerTelemetryManager:
    """Builds telemetry headers and tracks failed requests"""

    def __init__(self, request: ServerTelemetryRequest, cache_manager: CacheManager) -> None:
        self.cache_manager = cache_manager
        self.api_id = request.api_id
        self.correlation_id = request.correlation_id
        self.force_refresh = request.force_refresh
        self.telemetry_cache_key = (
            f"{SERVER_TELEMETRY_KEY_PREFIX}{CACHE_KEY_SEPARATOR}{request.client_id}"
        )

    def generate_current_request_header_value(self) -> str:
        force_refresh = 1 if self.force_refresh else 0
        request = f"{self.api_id}{VALUE_SEPARATOR}{force_refresh}"
        return CATEGORY_SEPARATOR.join([str(SCHEMA_VERSION), request, ""])

    def generate_last_request_header_value(self) -> str:
        last_requests = self.get_last_requests()
        max_errors = self.max_errors_to_send(last_requests)
        failed_requests = VALUE_SEPARATOR.join(last_requests.failed_requests[: 2 * max_errors])
        errors = VALUE_SEPARATOR.join(last_requests.errors[:max_errors])
        overflow = OVERFLOW_TRUE if len(last_requests.errors) > max_errors else OVERFLOW_FALSE
        return CATEGORY_SEPARATOR.join(
            [str(SCHEMA_VERSION), str(last_requests.cache_hits), failed_requests, errors, overflow]
        )

    def cache_failed_request(self, error: Exception) -> None:
        """Record a failed request so the next header reports it."""
        last_requests = self.get_last_requests()
        last_requests.failed_requests.extend([str(self.api_id), self.correlation_id])

        suberror = getattr(error, "suberror", "")
        error_code = getattr(error, "error_code", "")
        if suberror:
            last_requests.errors.append(suberror)
        elif error_code:
            last_requests.errors.append(error_code)
        elif str(error):
            last_requests.errors.append(str(error))
        else:
            last_requests.errors.append(UNKNOWN_ERROR)

        self.cache_manager.set_server_telemetry(self.telemetry_cache_key, last_requests)

    def increment_cache_hits(self) -> int:
        last_requests = self.get_last_requests()
        last_requests.cache_hits += 1
        self.cache_manager.set_server_telemetry(self.telemetry_cache_key, last_requests)
        return last_requests.cache_hits

    def get_last_requests(self) -> ServerTelemetryEntity:
        cached = self.cache_manager.get_server_telemetry(self.telemetry_cache_key)
        return cached or ServerTelemetryEntity()

    def clear_telemetry_cache(self) -> None:
        """Drop the failures reported in the last header.

        Errors that did not fit in the header stay cached for the next request.
        """
        last_requests = self.get_last_requests()
        errors_flushed = self.max_errors_to_send(last_requests)
        if errors_flushed == len(last_requests.errors):
            self.cache_manager.remove_item(self.telemetry_cache_key)
        else:
            remaining = ServerTelemetryEntity(
                failed_requests=last_requests.failed_requests[2 * errors_flushed :],
                errors=last_requests.errors[errors_flushed:],
                cache_hits=0,
            )
            self.cache_manager.set_server_telemetry(self.telemetry_cache_key, remaining)
        logger.debug(f"Server telemetry cache cleared, {errors_flushed} errors flushed")

    @staticmethod
    def max_errors_to_send(last_requests: ServerTelemetryEntity) -> int:
        """Number of cached errors that fit in one last-request header"""
        max_errors = 0
        data_size = 0
        for i, error_code in enumerate(last_requests.errors):
            api_id = last_requests.failed_requests[2 * i] if 2 * i < len(last_requests.failed_requests) else ""
            correlation_id = (
                last_requests.failed_requests[2 * i + 1]
                if 2 * i + 1 < len(last_requests.failed_requests)
                else ""
            )
            # Separators: "," between api id and correlation id, "," between
            # failed requests and "," between errors
            data_size += len(api_id) + len(correlation_id) + len(error_code) + 3
            if data_size >= config.telemetry_max_last_header_bytes:
                break
            max_errors += 1
        return max_errors
