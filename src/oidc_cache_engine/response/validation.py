"""
Stateless validation of server responses.

Nothing here touches the cache: every check either passes silently or raises
a classified error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote

from ..account.client_info import build_client_info
from ..errors import InteractionRequiredAuthError, ServerError, StateMismatchError

if TYPE_CHECKING:
    from ..crypto.interface import CryptoProvider
    from .server_responses import ServerAuthorizationCodeResponse, ServerTokenResponse

logger = logging.getLogger(__name__)


def _raise_if_interaction_required(
    error: str | None, error_description: str | None, suberror: str | None
) -> None:
    if InteractionRequiredAuthError.is_interaction_required_error(error, error_description, suberror):
        raise InteractionRequiredAuthError(error or "", error_description or "", suberror or "")


def validate_authorization_code_response(
    response: ServerAuthorizationCodeResponse,
    cached_state: str,
    crypto: CryptoProvider,
) -> None:
    """Validate the parameters returned to the redirect URI.

    Args:
        response: Parsed authorization code response
        cached_state: State sent with the authorization request
        crypto: Crypto capability used to decode client_info

    Raises:
        StateMismatchError: If the returned state differs from cached_state
        InteractionRequiredAuthError: If the server asks for user interaction
        ServerError: For any other server error
        ClientInfoDecodingError: If client_info is present but malformed
    """
    if unquote(response.state or "") != unquote(cached_state or ""):
        logger.warning("Authorization code response state does not match the cached state")
        raise StateMismatchError()

    if response.has_error:
        _raise_if_interaction_required(response.error, response.error_description, response.suberror)
        raise ServerError(response.error or "", response.error_description or "", response.suberror or "")

    if response.client_info:
        build_client_info(response.client_info, crypto)


def validate_token_response(response: ServerTokenResponse) -> None:
    """Raise the classified server error carried by a token response, if any.

    Raises:
        InteractionRequiredAuthError: If the server asks for user interaction
        ServerError: For any other server error
    """
    if not response.has_error:
        return

    _raise_if_interaction_required(response.error, response.error_description, response.suberror)

    error_codes = ",".join(response.error_codes or [])
    message = (
        f"{error_codes} - [{response.timestamp or ''}]: {response.error_description or ''} "
        f"- Correlation ID: {response.correlation_id or ''} - Trace ID: {response.trace_id or ''}"
    )
    raise ServerError(response.error or "", message, response.suberror or "")
