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
Error taxonomy for the OIDC cache engine.

Client-side validation failures derive from ClientAuthError and are raised
before any cache mutation. Errors echoed back by the authorization server
derive from ServerError; InteractionRequiredAuthError marks the subset that
requires the caller to prompt the user again.
"""

from __future__ import annotations

# Server error codes that signal a user interaction is required
INTERACTION_REQUIRED_ERROR_CODES = (
    "interaction_required",
    "consent_required",
    "login_required",
)

# Server suberror codes that signal a user interaction is required
INTERACTION_REQUIRED_SUBERRORS = (
    "message_only",
    "additional_action",
    "basic_action",
    "user_password_expired",
    "consent_required",
)


class AuthError(Exception):
    """Base exception for all engine errors.

    Attributes:
        error_code: Short machine-readable code
        error_message: Human-readable description
        suberror: Optional server-provided suberror code
    """

    def __init__(self, error_code: str = "", error_message: str = "", suberror: str = "") -> None:
        self.error_code = error_code or ""
        self.error_message = error_message or ""
        self.suberror = suberror or ""
        message = f"{self.error_code}: {self.error_message}" if self.error_message else self.error_code
        super().__init__(message)


# ========================================
# Client Errors
# ========================================


class ClientAuthError(AuthError):
    """Base exception for failures detected on the client side."""


class StateMismatchError(ClientAuthError):
    """Returned state does not match the state sent with the request."""

    def __init__(self) -> None:
        super().__init__(
            "state_mismatch",
            "State mismatch error. Please check your network. "
            "Continued requests may cause cache overflow.",
        )


class NonceMismatchError(ClientAuthError):
    """Identity token nonce does not match the nonce sent with the request."""

    def __init__(self) -> None:
        super().__init__(
            "nonce_mismatch",
            "Nonce mismatch error. This may be caused by a race condition in concurrent requests.",
        )


class InvalidCacheEnvironmentError(ClientAuthError):
    """The authority could not be mapped to a cache environment."""

    def __init__(self) -> None:
        super().__init__(
            "invalid_cache_environment",
            "The cached token key is not a valid environment.",
        )


class ClientInfoEmptyError(ClientAuthError):
    """An AAD response arrived without client_info."""

    def __init__(self) -> None:
        super().__init__(
            "client_info_empty_error",
            "The client info was empty. Make sure you're using the correct authority "
            "and that client_info is requested from the server.",
        )


class ClientInfoDecodingError(ClientAuthError):
    """The client_info payload could not be decoded."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            "client_info_decoding_error",
            f"The client info could not be parsed/decoded correctly. Failed with error: {detail}",
        )


class InvalidStateError(ClientAuthError):
    """The state parameter is empty or was not produced by set_request_state."""

    def __init__(self, state: str = "", detail: str = "") -> None:
        message = "State was not the expected format."
        if state:
            message += f" Given state: {state}"
        if detail:
            message += f" Failed with error: {detail}"
        super().__init__("invalid_state", message)


class TokenParsingError(ClientAuthError):
    """A JWT could not be decoded."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            "token_parsing_error",
            f"Token cannot be parsed. Failed with error: {detail}",
        )


class InvalidResponseFieldError(ClientAuthError):
    """A server response field has a value of the wrong type."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(
            "invalid_response_field",
            f"Server response field {field} has an invalid value: {value!r}",
        )


class TokenClaimsRequiredError(ClientAuthError):
    """A proof-of-possession token lacks the cnf.kid claim needed to sign it."""

    def __init__(self) -> None:
        super().__init__(
            "token_claims_cnf_required_for_signedjwt",
            "Cannot generate a POP jwt if the token_claims are not populated",
        )


class SigningKeyNotFoundError(ClientAuthError):
    """No proof-of-possession key is stored for the requested key id."""

    def __init__(self, kid: str) -> None:
        super().__init__(
            "signing_key_not_found",
            f"No signing key found in the key store for kid {kid}",
        )


class NetworkError(ClientAuthError):
    """The transport failed before a response was received."""

    def __init__(self, endpoint: str, detail: str = "") -> None:
        super().__init__(
            "network_error",
            f"Network request failed. Endpoint: {endpoint}. Failed with error: {detail}",
        )


# ========================================
# Server Errors
# ========================================


class ServerError(AuthError):
    """Error returned by the authorization server."""


class InteractionRequiredAuthError(ServerError):
    """Server error that can only be resolved by prompting the user."""

    @staticmethod
    def is_interaction_required_error(
        error_code: str | None = None,
        error_description: str | None = None,
        suberror: str | None = None,
    ) -> bool:
        """Check whether a server error triple has an interaction-required signature.

        Args:
            error_code: The server `error` value
            error_description: The server `error_description` value
            suberror: The server `suberror` value

        Returns:
            True when the code or suberror is a known interaction-required value,
            or when the description mentions one of the known error codes
        """
        if error_code and error_code in INTERACTION_REQUIRED_ERROR_CODES:
            return True
        if suberror and suberror in INTERACTION_REQUIRED_SUBERRORS:
            return True
        if error_description:
            return any(code in error_description for code in INTERACTION_REQUIRED_ERROR_CODES)
        return False


# ========================================
# Configuration Errors
# ========================================


class ClientConfigurationError(AuthError):
    """The client configuration is invalid."""


class KnownAuthoritiesConflictError(ClientConfigurationError):
    """Both known authorities and cloud discovery metadata were configured."""

    def __init__(self) -> None:
        super().__init__(
            "invalid_known_authorities",
            "known_authorities and cloud_discovery_metadata cannot both be provided. "
            "Provide cloud_discovery_metadata for AAD, known_authorities otherwise.",
        )


class InvalidCloudDiscoveryMetadataError(ClientConfigurationError):
    """The cloud discovery metadata document could not be parsed."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            "invalid_cloud_discovery_metadata",
            f"Invalid cloud_discovery_metadata provided. Must be a JSON object with a "
            f"metadata list. Failed with error: {detail}",
        )
