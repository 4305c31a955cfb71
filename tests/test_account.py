"""
Tests for client_info decoding and identity token parsing.
"""

import pytest

from oidc_cache_engine.account import AuthToken, ClientInfo, build_client_info, extract_token_claims
from oidc_cache_engine.errors import ClientInfoDecodingError, ClientInfoEmptyError, TokenParsingError


class TestClientInfo:
    """Test build_client_info"""

    def test_decodes_uid_and_utid(self, crypto, make_client_info):
        client_info = build_client_info(make_client_info("u", "t"), crypto)

        assert client_info == ClientInfo(uid="u", utid="t")
        assert client_info.home_account_id == "u.t"

    def test_empty_raises(self, crypto):
        with pytest.raises(ClientInfoEmptyError):
            build_client_info("", crypto)

    def test_not_json_raises(self, crypto):
        with pytest.raises(ClientInfoDecodingError):
            build_client_info(crypto.base64_encode("not json"), crypto)

    def test_json_array_raises(self, crypto):
        with pytest.raises(ClientInfoDecodingError):
            build_client_info(crypto.base64_encode("[1, 2]"), crypto)

    def test_missing_half_gives_empty_home_account_id(self, crypto):
        client_info = build_client_info(crypto.base64_encode('{"uid": "u"}'), crypto)

        assert client_info.home_account_id == ""


class TestAuthToken:
    """Test identity token decoding"""

    def test_claims_decoded(self, make_id_token):
        token = AuthToken(make_id_token(nonce="n-1"))

        assert token.claims["sub"] == "sub-1"
        assert token.claims["nonce"] == "n-1"
        assert "sub-1" in repr(token)

    def test_empty_token(self):
        with pytest.raises(TokenParsingError):
            extract_token_claims("")

    def test_garbage_token(self):
        with pytest.raises(TokenParsingError):
            AuthToken("not-a-jwt")
