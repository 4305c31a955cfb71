"""
Wire payloads returned by the authorization server.

Empty strings are normalized to None so that absence has a single
representation; unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import InvalidResponseFieldError


def _text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _integer(payload: dict[str, Any], key: str) -> int | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    # Some servers send "3599.0"
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidResponseFieldError(key, value) from e


@dataclass(frozen=True)
class ServerTokenResponse:
    """Token endpoint response"""

    access_token: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None
    client_info: str | None = None
    token_type: str | None = None
    scope: str | None = None
    expires_in: int | None = None
    ext_expires_in: int | None = None
    foci: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_codes: list[str] | None = None
    suberror: str | None = None
    timestamp: str | None = None
    correlation_id: str | None = None
    trace_id: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.error or self.error_description or self.suberror)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ServerTokenResponse:
        """Build a response from the decoded JSON body.

        Raises:
            InvalidResponseFieldError: If expires_in / ext_expires_in are not numbers
        """
        error_codes = payload.get("error_codes")
        return cls(
            access_token=_text(payload, "access_token"),
            id_token=_text(payload, "id_token"),
            refresh_token=_text(payload, "refresh_token"),
            client_info=_text(payload, "client_info"),
            token_type=_text(payload, "token_type"),
            scope=_text(payload, "scope"),
            expires_in=_integer(payload, "expires_in"),
            ext_expires_in=_integer(payload, "ext_expires_in"),
            foci=_text(payload, "foci"),
            error=_text(payload, "error"),
            error_description=_text(payload, "error_description"),
            error_codes=[str(code) for code in error_codes] if error_codes else None,
            suberror=_text(payload, "suberror"),
            timestamp=_text(payload, "timestamp"),
            correlation_id=_text(payload, "correlation_id"),
            trace_id=_text(payload, "trace_id"),
        )


@dataclass(frozen=True)
class ServerAuthorizationCodeResponse:
    """Authorization endpoint redirect parameters"""

    code: str | None = None
    state: str | None = None
    client_info: str | None = None
    error: str | None = None
    error_description: str | None = None
    suberror: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.error or self.error_description or self.suberror)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ServerAuthorizationCodeResponse:
        return cls(
            code=_text(payload, "code"),
            state=_text(payload, "state"),
            client_info=_text(payload, "client_info"),
            error=_text(payload, "error"),
            error_description=_text(payload, "error_description"),
            suberror=_text(payload, "suberror"),
        )
