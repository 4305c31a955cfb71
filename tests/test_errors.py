"""
Tests for the error taxonomy and interaction-required classification.
"""

import pytest

from oidc_cache_engine.errors import (
    AuthError,
    ClientAuthError,
    ClientConfigurationError,
    InteractionRequiredAuthError,
    KnownAuthoritiesConflictError,
    NonceMismatchError,
    ServerError,
    StateMismatchError,
)


class TestInteractionRequiredClassification:
    """Test is_interaction_required_error"""

    @pytest.mark.parametrize("code", ["interaction_required", "consent_required", "login_required"])
    def test_known_error_codes(self, code):
        assert InteractionRequiredAuthError.is_interaction_required_error(code, "", "")

    @pytest.mark.parametrize(
        "suberror",
        ["message_only", "additional_action", "basic_action", "user_password_expired", "consent_required"],
    )
    def test_known_suberrors(self, suberror):
        assert InteractionRequiredAuthError.is_interaction_required_error("invalid_grant", "", suberror)

    def test_description_mentions_error_code(self):
        assert InteractionRequiredAuthError.is_interaction_required_error(
            "invalid_grant", "AADSTS50076: login_required due to policy", ""
        )

    def test_plain_error_is_not_interaction_required(self):
        assert not InteractionRequiredAuthError.is_interaction_required_error(
            "invalid_grant", "The refresh token has expired", "bad_token"
        )

    def test_empty_triple(self):
        assert not InteractionRequiredAuthError.is_interaction_required_error(None, None, None)


class TestErrorHierarchy:
    """Test error classes and their fields"""

    def test_interaction_required_is_server_error(self):
        error = InteractionRequiredAuthError("login_required", "please sign in", "basic_action")
        assert isinstance(error, ServerError)
        assert isinstance(error, AuthError)
        assert error.error_code == "login_required"
        assert error.suberror == "basic_action"
        assert str(error) == "login_required: please sign in"

    def test_client_errors_carry_codes(self):
        assert StateMismatchError().error_code == "state_mismatch"
        assert NonceMismatchError().error_code == "nonce_mismatch"
        assert isinstance(StateMismatchError(), ClientAuthError)

    def test_configuration_error(self):
        error = KnownAuthoritiesConflictError()
        assert isinstance(error, ClientConfigurationError)
        assert not isinstance(error, ClientAuthError)
        assert error.error_code == "invalid_known_authorities"

    def test_none_fields_normalized(self):
        error = ServerError(None, None, None)
        assert error.error_code == ""
        assert error.error_message == ""
        assert error.suberror == ""
