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
Configuration module for the OIDC cache engine
Centralizes engine-wide defaults and environment variables
"""

import os
from dataclasses import dataclass, field
from typing import Any


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class EngineConfig:
    """Engine-wide defaults shared by every client configuration"""

    # Library identification sent in x-client-* headers
    library_sku: str = field(
        default_factory=lambda: os.getenv("OIDC_ENGINE_SKU", "oidc-cache-engine.python")
    )

    # Header toggles for the token endpoint request
    send_library_headers: bool = field(
        default_factory=lambda: _env_flag("OIDC_ENGINE_SEND_LIBRARY_HEADERS", "true")
    )
    send_telemetry_headers: bool = field(
        default_factory=lambda: _env_flag("OIDC_ENGINE_SEND_TELEMETRY_HEADERS", "true")
    )

    # Network Configuration
    http_timeout: float = field(
        default_factory=lambda: float(os.getenv("OIDC_ENGINE_HTTP_TIMEOUT", "10.0"))
    )

    # Proof-of-possession key store
    pop_key_ttl: int = field(
        default_factory=lambda: int(os.getenv("OIDC_ENGINE_POP_KEY_TTL", "86400"))
    )
    pop_key_cache_size: int = field(
        default_factory=lambda: int(os.getenv("OIDC_ENGINE_POP_KEY_CACHE_SIZE", "32"))
    )
    pop_key_size: int = 2048

    # Server telemetry
    telemetry_max_last_header_bytes: int = 330

    # Logging
    log_level: str = field(
        default_factory=lambda: os.getenv("OIDC_ENGINE_LOG_LEVEL", "WARNING").upper()
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary"""
        return {
            "library_sku": self.library_sku,
            "send_library_headers": self.send_library_headers,
            "send_telemetry_headers": self.send_telemetry_headers,
            "http_timeout": self.http_timeout,
            "pop_key_ttl": self.pop_key_ttl,
            "pop_key_cache_size": self.pop_key_cache_size,
            "log_level": self.log_level,
        }


# Global configuration instance
config = EngineConfig()
