"""
Tests for authorization code and token response validation.
"""

import pytest

from oidc_cache_engine.errors import (
    ClientAuthError,
    ClientInfoDecodingError,
    InteractionRequiredAuthError,
    InvalidResponseFieldError,
    ServerError,
    StateMismatchError,
)
from oidc_cache_engine.response import (
    ServerAuthorizationCodeResponse,
    ServerTokenResponse,
    validate_authorization_code_response,
    validate_token_response,
)


class TestAuthorizationCodeResponse:
    """Test validate_authorization_code_response"""

    def test_state_mismatch(self, crypto):
        response = ServerAuthorizationCodeResponse(code="code", state="xyz")

        with pytest.raises(StateMismatchError):
            validate_authorization_code_response(response, "abc", crypto)

    def test_state_compared_url_decoded(self, crypto):
        response = ServerAuthorizationCodeResponse(code="code", state="abc%7Cuser")

        validate_authorization_code_response(response, "abc|user", crypto)

    def test_state_checked_before_error(self, crypto):
        response = ServerAuthorizationCodeResponse(state="xyz", error="login_required")

        with pytest.raises(StateMismatchError):
            validate_authorization_code_response(response, "abc", crypto)

    def test_interaction_required(self, crypto):
        response = ServerAuthorizationCodeResponse(
            state="abc", error="interaction_required", error_description="User must sign in"
        )

        with pytest.raises(InteractionRequiredAuthError) as exc_info:
            validate_authorization_code_response(response, "abc", crypto)

        assert exc_info.value.error_code == "interaction_required"
        assert exc_info.value.error_message == "User must sign in"

    def test_other_server_error(self, crypto):
        response = ServerAuthorizationCodeResponse(
            state="abc", error="access_denied", error_description="User cancelled"
        )

        with pytest.raises(ServerError) as exc_info:
            validate_authorization_code_response(response, "abc", crypto)

        assert not isinstance(exc_info.value, InteractionRequiredAuthError)
        assert exc_info.value.error_code == "access_denied"

    def test_malformed_client_info(self, crypto):
        response = ServerAuthorizationCodeResponse(code="code", state="abc", client_info="bm90LWpzb24")

        with pytest.raises(ClientInfoDecodingError):
            validate_authorization_code_response(response, "abc", crypto)

    def test_valid_response(self, crypto, make_client_info):
        response = ServerAuthorizationCodeResponse.from_dict(
            {"code": "code", "state": "abc", "client_info": make_client_info()}
        )

        validate_authorization_code_response(response, "abc", crypto)


class TestTokenResponse:
    """Test validate_token_response"""

    def test_no_error_is_noop(self):
        validate_token_response(ServerTokenResponse(access_token="at"))

    def test_interaction_required_by_suberror(self):
        response = ServerTokenResponse(
            error="invalid_grant", error_description="expired", suberror="user_password_expired"
        )

        with pytest.raises(InteractionRequiredAuthError) as exc_info:
            validate_token_response(response)

        assert exc_info.value.suberror == "user_password_expired"

    def test_server_error_message(self):
        response = ServerTokenResponse.from_dict(
            {
                "error": "invalid_request",
                "error_description": "Bad request",
                "error_codes": [90014, 50001],
                "timestamp": "2024-01-01 00:00:00Z",
                "correlation_id": "corr-1",
                "trace_id": "trace-1",
            }
        )

        with pytest.raises(ServerError) as exc_info:
            validate_token_response(response)

        assert exc_info.value.error_code == "invalid_request"
        assert exc_info.value.error_message == (
            "90014,50001 - [2024-01-01 00:00:00Z]: Bad request "
            "- Correlation ID: corr-1 - Trace ID: trace-1"
        )


class TestServerTokenResponse:
    """Test ServerTokenResponse parsing"""

    def test_empty_strings_become_none(self):
        response = ServerTokenResponse.from_dict({"access_token": "at", "id_token": "", "foci": ""})

        assert response.access_token == "at"
        assert response.id_token is None
        assert response.foci is None
        assert not response.has_error

    def test_expiry_parsed_as_int(self):
        response = ServerTokenResponse.from_dict({"expires_in": "3600", "ext_expires_in": 7200})

        assert response.expires_in == 3600
        assert response.ext_expires_in == 7200

    def test_float_formatted_expiry(self):
        response = ServerTokenResponse.from_dict({"expires_in": "3599.0", "ext_expires_in": 86399.0})

        assert response.expires_in == 3599
        assert response.ext_expires_in == 86399

    @pytest.mark.parametrize("value", ["soon", [3600], "inf"])
    def test_invalid_expiry(self, value):
        with pytest.raises(InvalidResponseFieldError) as exc_info:
            ServerTokenResponse.from_dict({"expires_in": value})

        assert isinstance(exc_info.value, ClientAuthError)
        assert exc_info.value.error_code == "invalid_response_field"
