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
File-backed persistence plugin for the token cache.
"""

import asyncio
import logging
from pathlib import Path

from .persistence import TokenCacheContext

logger = logging.getLogger(__name__)


class FilePersistencePlugin:
    """
    Persists a serializable token cache to a JSON file.

    before_cache_access loads the file into the cache; after_cache_access
    writes the cache back when the access reported a change. Writes go to a
    temp file first and are renamed into place.
    """

    def __init__(self, cache_path: str | Path | None = None):
        """
        Initialize the plugin.

        Args:
            cache_path: File holding the serialized cache
        """
        if cache_path:
            self.cache_path = Path(cache_path)
        else:
            self.cache_path = Path.home() / ".oidc-cache-engine" / "token_cache.json"

        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self._write_lock = asyncio.Lock()
        logger.info(f"Token cache persistence initialized at: {self.cache_path}")

    async def before_cache_access(self, context: TokenCacheContext) -> None:
        if not self.cache_path.exists():
            logger.debug("No persisted token cache found, starting empty")
            return

        loop = asyncio.get_event_loop()
        data = await loop.run_in_executor(None, self._read_cache_file)
        context.token_cache.deserialize(data)
        logger.debug(f"Token cache loaded from {self.cache_path}")

    async def after_cache_access(self, context: TokenCacheContext) -> None:
        if not context.cache_has_changed:
            return

        async with self._write_lock:
            data = context.token_cache.serialize()
            temp_path = self.cache_path.with_suffix(".tmp")

            # Run file I/O in executor to avoid blocking
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, self._write_cache_file, temp_path, data)

            # Atomic rename
            await loop.run_in_executor(None, temp_path.replace, self.cache_path)

            logger.debug(f"Token cache written to {self.cache_path}")

    def _read_cache_file(self) -> str:
        """Synchronous file read for executor."""
        with open(self.cache_path, encoding="utf-8") as f:
            return f.read()

    def _write_cache_file(self, path: Path, data: str) -> None:
        """Synchronous file write for executor."""
        with open(path, "w", encoding="utf-8") as f:
            f.write(data)
