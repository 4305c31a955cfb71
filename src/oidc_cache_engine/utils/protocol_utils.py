"""
Request state helpers.

The state parameter sent to the authorization server carries a library-owned
prefix (a random id plus the request timestamp) and an optional caller-owned
suffix, separated by RESOURCE_DELIM. The library prefix binds the response to
the request (CSRF protection) and baselines token expiration timestamps.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from ..errors import InvalidStateError
from .constants import RESOURCE_DELIM
from .time_utils import now_seconds

if TYPE_CHECKING:
    from ..crypto.interface import CryptoProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryStateObject:
    """Library-owned part of the state parameter"""

    id: str
    ts: int
    meta: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestStateObject:
    """Parsed state parameter: the caller's state plus the library state"""

    user_request_state: str
    library_state: LibraryStateObject


def generate_library_state(crypto: CryptoProvider, meta: dict[str, str] | None = None) -> str:
    """Build the base64url-encoded library state for a new request."""
    library_state: dict[str, Any] = {"id": crypto.create_new_guid(), "ts": now_seconds()}
    if meta:
        library_state["meta"] = meta
    return crypto.base64_encode(json.dumps(library_state))


def set_request_state(
    crypto: CryptoProvider,
    user_state: str | None = None,
    meta: dict[str, str] | None = None,
) -> str:
    """Build the state parameter for a new request.

    Args:
        crypto: Crypto capability used for the guid and base64 encoding
        user_state: Optional caller state echoed back in the result
        meta: Optional library metadata stored alongside the id and timestamp

    Returns:
        `<library_state>` or `<library_state>|<user_state>`
    """
    library_state = generate_library_state(crypto, meta)
    return f"{library_state}{RESOURCE_DELIM}{user_state}" if user_state else library_state


def parse_request_state(crypto: CryptoProvider, state: str) -> RequestStateObject:
    """Parse a state parameter produced by set_request_state.

    Raises:
        InvalidStateError: If the state is empty or cannot be decoded
    """
    if not state:
        raise InvalidStateError(state, "Null, undefined or empty state")

    try:
        library_part, _, user_part = unquote(state).partition(RESOURCE_DELIM)
        decoded = json.loads(crypto.base64_decode(library_part))
        library_state = LibraryStateObject(
            id=str(decoded["id"]),
            ts=int(decoded["ts"]),
            meta=dict(decoded.get("meta") or {}),
        )
    except (ValueError, KeyError, TypeError) as e:
        logger.debug(f"Failed to parse request state: {e}")
        raise InvalidStateError(state, str(e)) from e

    return RequestStateObject(user_request_state=user_part, library_state=library_state)
