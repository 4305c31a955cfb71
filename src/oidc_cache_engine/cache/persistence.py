"""
Persistence hooks around cache access.

A CachePlugin is notified before and after every read-modify-write the engine
performs against a SerializableTokenCache. The pair is always matched: the
after-hook runs on success, early return and error alike.
"""

from __future__ import annotations

from typing import Protocol


class SerializableTokenCache(Protocol):
    """A cache store that can be exported to and restored from a string"""

    def serialize(self) -> str:
        ...

    def deserialize(self, cache: str) -> None:
        ...


class TokenCacheContext:
    """Handed to both plugin hooks of one cache access.

    Attributes:
        token_cache: The serializable cache being accessed
        has_changed: Whether the access may have modified the cache
    """

    def __init__(self, token_cache: SerializableTokenCache, has_changed: bool) -> None:
        self.token_cache = token_cache
        self.has_changed = has_changed

    @property
    def cache_has_changed(self) -> bool:
        return self.has_changed


class CachePlugin(Protocol):
    """Persistence plugin interface.

    Methods:
        before_cache_access: Load external state into context.token_cache
        after_cache_access: Persist context.token_cache if it changed
    """

    async def before_cache_access(self, context: TokenCacheContext) -> None:
        ...

    async def after_cache_access(self, context: TokenCacheContext) -> None:
        ...
