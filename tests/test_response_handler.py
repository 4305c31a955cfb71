"""
Tests for ResponseHandler orchestration.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from oidc_cache_engine.cache import AccountEntity, TokenCache, TokenCacheContext
from oidc_cache_engine.errors import ClientInfoDecodingError, NonceMismatchError, TokenClaimsRequiredError
from oidc_cache_engine.response import ResponseHandler, ServerTokenResponse
from oidc_cache_engine.utils.protocol_utils import set_request_state

CLIENT_ID = "client-123"


@pytest.fixture
def token_cache():
    return TokenCache()


@pytest.fixture
def plugin():
    plugin = Mock()
    plugin.before_cache_access = AsyncMock()
    plugin.after_cache_access = AsyncMock()
    return plugin


@pytest.fixture
def handler(token_cache, crypto, plugin):
    return ResponseHandler(CLIENT_ID, token_cache, crypto, token_cache, plugin)


@pytest.fixture
def token_response(make_id_token, make_client_info):
    return ServerTokenResponse(
        access_token="at",
        id_token=make_id_token(nonce="nonce-1"),
        refresh_token="rt",
        client_info=make_client_info(),
        scope="openid User.Read",
        expires_in=3600,
        token_type="Bearer",
    )


class TestHandleServerTokenResponse:
    """Test handle_server_token_response"""

    @pytest.mark.asyncio
    async def test_caches_and_returns_result(self, handler, token_cache, token_response, authority, crypto):
        state = set_request_state(crypto, "user-state")

        result = await handler.handle_server_token_response(
            token_response, authority, cached_nonce="nonce-1", cached_state=state
        )

        assert result.access_token == "at"
        assert result.scopes == ["openid", "User.Read"]
        assert result.state == "user-state"
        assert result.from_cache is False
        assert result.account.home_account_id == "uid-1.utid-1"
        assert result.unique_id == "oid-1"
        assert result.tenant_id == "tenant-1"
        assert token_cache.get_account("uid-1.utid-1-login.example.com-tenant-1") is not None
        assert len(token_cache.get_access_tokens()) == 1

    @pytest.mark.asyncio
    async def test_plugin_hooks_share_context(self, handler, plugin, token_cache, token_response, authority):
        await handler.handle_server_token_response(token_response, authority)

        plugin.before_cache_access.assert_awaited_once()
        plugin.after_cache_access.assert_awaited_once()
        before_context = plugin.before_cache_access.await_args.args[0]
        after_context = plugin.after_cache_access.await_args.args[0]
        assert isinstance(before_context, TokenCacheContext)
        assert before_context is after_context
        assert before_context.token_cache is token_cache
        assert before_context.cache_has_changed

    @pytest.mark.asyncio
    async def test_nonce_mismatch_touches_nothing(self, handler, plugin, token_cache, token_response, authority):
        with pytest.raises(NonceMismatchError):
            await handler.handle_server_token_response(token_response, authority, cached_nonce="other")

        plugin.before_cache_access.assert_not_awaited()
        plugin.after_cache_access.assert_not_awaited()
        assert token_cache.get_keys() == []

    @pytest.mark.asyncio
    async def test_malformed_client_info_touches_nothing(self, handler, plugin, token_cache, authority):
        response = ServerTokenResponse(access_token="at", client_info="bm90LWpzb24")

        with pytest.raises(ClientInfoDecodingError):
            await handler.handle_server_token_response(response, authority)

        plugin.before_cache_access.assert_not_awaited()
        assert token_cache.get_keys() == []

    @pytest.mark.asyncio
    async def test_refresh_for_removed_account(self, handler, plugin, token_cache, token_response, authority):
        result = await handler.handle_server_token_response(
            token_response, authority, handling_refresh_token_response=True
        )

        assert result is None
        assert token_cache.get_keys() == []
        plugin.before_cache_access.assert_awaited_once()
        plugin.after_cache_access.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refresh_for_cached_account(self, handler, token_cache, token_response, authority):
        token_cache.set_account(
            AccountEntity(
                home_account_id="uid-1.utid-1", environment="login.example.com", realm="tenant-1"
            )
        )

        result = await handler.handle_server_token_response(
            token_response, authority, handling_refresh_token_response=True
        )

        assert result is not None
        assert len(token_cache.get_access_tokens()) == 1

    @pytest.mark.asyncio
    async def test_after_hook_runs_when_write_fails(self, crypto, plugin, token_response, authority):
        storage = Mock()
        storage.save_cache_record.side_effect = RuntimeError("disk full")
        handler = ResponseHandler(CLIENT_ID, storage, crypto, TokenCache(), plugin)

        with pytest.raises(RuntimeError):
            await handler.handle_server_token_response(token_response, authority)

        plugin.after_cache_access.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_after_hook_runs_when_before_hook_fails(self, handler, plugin, token_response, authority):
        plugin.before_cache_access.side_effect = OSError("unreadable")

        with pytest.raises(OSError):
            await handler.handle_server_token_response(token_response, authority)

        plugin.after_cache_access.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_without_plugin(self, token_cache, crypto, token_response, authority):
        handler = ResponseHandler(CLIENT_ID, token_cache, crypto)

        result = await handler.handle_server_token_response(token_response, authority)

        assert result.access_token == "at"

    @pytest.mark.asyncio
    async def test_access_token_only(self, token_cache, crypto, authority):
        handler = ResponseHandler(CLIENT_ID, token_cache, crypto)
        response = ServerTokenResponse(access_token="at", scope="User.Read", expires_in=60)

        result = await handler.handle_server_token_response(response, authority)

        assert result.account is None
        assert result.scopes == ["User.Read"]
        assert result.id_token == ""
        assert token_cache.get_all_accounts() == []
        assert len(token_cache.get_access_tokens()) == 1

    @pytest.mark.asyncio
    async def test_pop_signing_failure_after_write(self, handler, plugin, token_cache, make_id_token, authority):
        # Access token without a cnf claim cannot be bound to a key
        response = ServerTokenResponse(
            access_token=make_id_token(), scope="User.Read", expires_in=3600, token_type="pop"
        )

        with pytest.raises(TokenClaimsRequiredError):
            await handler.handle_server_token_response(
                response,
                authority,
                resource_request_method="GET",
                resource_request_uri="https://api.example.com/me",
            )

        tokens = token_cache.get_access_tokens()
        assert [token.credential_type for token in tokens] == ["AccessToken_With_AuthScheme"]
        plugin.before_cache_access.assert_awaited_once()
        plugin.after_cache_access.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sub_fallback_without_client_info(self, token_cache, crypto, make_id_token):
        from oidc_cache_engine.authority import Authority, ProtocolMode

        authority = Authority("https://login.example.com/tenant-1", protocol_mode=ProtocolMode.OIDC)
        handler = ResponseHandler(CLIENT_ID, token_cache, crypto)
        response = ServerTokenResponse(access_token="at", id_token=make_id_token(), scope="openid")

        result = await handler.handle_server_token_response(response, authority)

        assert result.account.home_account_id == "sub-1"
        assert token_cache.get_access_tokens()[0].home_account_id == "sub-1"


class TestValidationDelegates:
    def test_token_response_without_error(self, handler):
        handler.validate_token_response(ServerTokenResponse(access_token="at"))

    def test_authorization_code_response(self, handler):
        from oidc_cache_engine.errors import StateMismatchError
        from oidc_cache_engine.response import ServerAuthorizationCodeResponse

        with pytest.raises(StateMismatchError):
            handler.validate_server_authorization_code_response(
                ServerAuthorizationCodeResponse(state="xyz"), "abc"
            )
