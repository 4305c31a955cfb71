"""
Token client: posts a grant to the token endpoint and caches the result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from ..errors import ServerError
from ..response.response_handler import ResponseHandler
from ..response.server_responses import ServerTokenResponse
from .base_client import BaseClient
from .configuration import ClientConfiguration

if TYPE_CHECKING:
    from ..authority.authority import Authority
    from ..response.authentication_result import AuthenticationResult

logger = logging.getLogger(__name__)


class TokenClient(BaseClient):
    """Acquires tokens for any grant whose request body the caller assembles"""

    def __init__(self, configuration: ClientConfiguration) -> None:
        super().__init__(configuration)
        self.response_handler = ResponseHandler(
            configuration.client_id,
            self.cache_manager,
            self.crypto_utils,
            configuration.serializable_cache,
            configuration.persistence_plugin,
        )

    async def acquire_token(
        self,
        token_endpoint: str,
        request_body: dict[str, str],
        *,
        authority: Authority | None = None,
        scopes: list[str] | None = None,
        cached_nonce: str | None = None,
        cached_state: str | None = None,
        handling_refresh_token_response: bool = False,
        resource_request_method: str | None = None,
        resource_request_uri: str | None = None,
        obo_assertion: str | None = None,
    ) -> AuthenticationResult | None:
        """Redeem a grant at the token endpoint.

        Args:
            token_endpoint: Token endpoint URL
            request_body: Form parameters of the grant (grant_type, code, ...)
            authority: Authority the tokens are issued by (default: the configured one)
            scopes: Requested scopes
            cached_nonce: Nonce sent with the authorization request
            cached_state: State sent with the authorization request
            handling_refresh_token_response: True for refresh token grants
            resource_request_method: HTTP method of the next resource request (PoP)
            resource_request_uri: URL of the next resource request (PoP)
            obo_assertion: On-behalf-of assertion

        Returns:
            The AuthenticationResult, or None when a refreshed account was
            removed from the cache in the meantime

        Raises:
            NetworkError: If the transport fails
            InteractionRequiredAuthError: If the server asks for user interaction
            ServerError: For any other server error, or a non-2xx status without one
            ClientAuthError: If the response fails client-side validation
        """
        headers = self.create_default_token_request_headers()
        response = await self.execute_post_to_token_endpoint(
            token_endpoint, urlencode(request_body), headers
        )

        token_response = ServerTokenResponse.from_dict(response.body)
        try:
            self.response_handler.validate_token_response(token_response)
            # Gateway pages (502/503 HTML) carry no OAuth error fields
            if not 200 <= response.status < 300:
                raise ServerError(
                    f"http_error_{response.status}",
                    f"Token endpoint returned HTTP {response.status} without an error payload",
                )
        except ServerError as e:
            self.logger.info(f"Token endpoint returned {e.error_code} (status {response.status})")
            if self.server_telemetry_manager:
                self.server_telemetry_manager.cache_failed_request(e)
            raise

        return await self.response_handler.handle_server_token_response(
            token_response,
            authority or self.authority,
            resource_request_method=resource_request_method,
            resource_request_uri=resource_request_uri,
            cached_nonce=cached_nonce,
            cached_state=cached_state,
            request_scopes=scopes,
            obo_assertion=obo_assertion,
            handling_refresh_token_response=handling_refresh_token_response,
        )
