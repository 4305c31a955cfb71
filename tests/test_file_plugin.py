"""
Tests for file-backed token cache persistence.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from oidc_cache_engine.cache import (
    AccountEntity,
    FilePersistencePlugin,
    TokenCache,
    TokenCacheContext,
)
from oidc_cache_engine.response import ResponseHandler, ServerTokenResponse


class TestFilePersistencePlugin:
    """Test FilePersistencePlugin hooks"""

    @pytest.fixture
    def cache_path(self, tmp_path):
        return tmp_path / "cache" / "token_cache.json"

    @pytest.fixture
    def plugin(self, cache_path):
        return FilePersistencePlugin(cache_path)

    def test_initialization_creates_directory(self, plugin, cache_path):
        assert plugin.cache_path == cache_path
        assert cache_path.parent.is_dir()

    def test_default_cache_path(self):
        with patch.object(Path, "mkdir") as mock_mkdir:
            plugin = FilePersistencePlugin()

            assert plugin.cache_path == Path.home() / ".oidc-cache-engine" / "token_cache.json"
            mock_mkdir.assert_called_once_with(parents=True, exist_ok=True)

    @pytest.mark.asyncio
    async def test_write_then_load(self, plugin, cache_path):
        cache = TokenCache()
        cache.set_account(AccountEntity(home_account_id="home", environment="env", realm="realm"))

        await plugin.after_cache_access(TokenCacheContext(cache, True))

        assert cache_path.exists()
        assert not cache_path.with_suffix(".tmp").exists()
        assert "home-env-realm" in json.loads(cache_path.read_text())["Account"]

        restored = TokenCache()
        await plugin.before_cache_access(TokenCacheContext(restored, True))

        assert restored.get_account("home-env-realm").home_account_id == "home"

    @pytest.mark.asyncio
    async def test_unchanged_context_not_written(self, plugin, cache_path):
        await plugin.after_cache_access(TokenCacheContext(TokenCache(), False))

        assert not cache_path.exists()

    @pytest.mark.asyncio
    async def test_missing_file_leaves_cache_empty(self, plugin):
        cache = TokenCache()

        await plugin.before_cache_access(TokenCacheContext(cache, True))

        assert cache.get_keys() == []

    @pytest.mark.asyncio
    async def test_response_handler_persists(self, plugin, cache_path, crypto, authority):
        cache = TokenCache()
        handler = ResponseHandler("client-123", cache, crypto, cache, plugin)
        response = ServerTokenResponse(access_token="at", scope="User.Read", expires_in=60)

        await handler.handle_server_token_response(response, authority)

        document = json.loads(cache_path.read_text())
        assert len(document["AccessToken"]) == 1
