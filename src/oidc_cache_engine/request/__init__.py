"""Request-side helpers"""

from .scope_set import ScopeSet

__all__ = ["ScopeSet"]
