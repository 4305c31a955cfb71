"""
Scope set abstraction.

Scopes keep their original casing and insertion order; comparisons are
case-insensitive.
"""

from __future__ import annotations

from collections.abc import Iterable


class ScopeSet:
    """Ordered, de-duplicated collection of OAuth scopes"""

    def __init__(self, scopes: Iterable[str]) -> None:
        self._scopes: dict[str, str] = {}
        for scope in scopes:
            trimmed = scope.strip() if scope else ""
            if trimmed and trimmed.lower() not in self._scopes:
                self._scopes[trimmed.lower()] = trimmed

    @classmethod
    def from_string(cls, scope_string: str | None) -> ScopeSet:
        """Parse a space-delimited scope string"""
        return cls((scope_string or "").split(" "))

    def contains_scope(self, scope: str) -> bool:
        return bool(scope) and scope.strip().lower() in self._scopes

    def intersects(self, other: ScopeSet) -> bool:
        return any(key in self._scopes for key in other._scopes)

    def as_list(self) -> list[str]:
        return list(self._scopes.values())

    def print_scopes(self) -> str:
        """Space-delimited representation, as stored in the cache target field"""
        return " ".join(self._scopes.values())

    def __len__(self) -> int:
        return len(self._scopes)

    def __iter__(self):
        return iter(self._scopes.values())

    def __repr__(self) -> str:
        return f"ScopeSet({self.as_list()!r})"
