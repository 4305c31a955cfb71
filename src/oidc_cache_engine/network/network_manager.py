"""
Network capability and the manager the engine talks to.

The engine never retries: a failed transport call surfaces as NetworkError and
any retry policy belongs to the NetworkModule implementation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from ..config import config
from ..errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass
class NetworkRequestOptions:
    """Headers and pre-encoded body of an outgoing request"""

    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class NetworkResponse:
    """Parsed response of the authorization server.

    Attributes:
        headers: Response headers
        body: Decoded JSON body (empty dict for non-JSON bodies)
        status: HTTP status code
    """

    headers: dict[str, str]
    body: dict[str, Any]
    status: int


class NetworkModule(Protocol):
    """HTTP transport capability"""

    async def send_get_request_async(
        self, url: str, options: NetworkRequestOptions | None = None
    ) -> NetworkResponse:
        ...

    async def send_post_request_async(
        self, url: str, options: NetworkRequestOptions | None = None
    ) -> NetworkResponse:
        ...


class HttpxNetworkModule:
    """NetworkModule implementation on top of httpx.AsyncClient.

    Example:
        async with httpx.AsyncClient() as client:
            network = HttpxNetworkModule(client)
            response = await network.send_post_request_async(token_url, options)
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None) -> None:
        """Initialize the module.

        Args:
            client: Shared AsyncClient; a private one is created lazily when omitted
            timeout: Request timeout in seconds (default: config.http_timeout)
        """
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout or config.http_timeout

    async def send_get_request_async(
        self, url: str, options: NetworkRequestOptions | None = None
    ) -> NetworkResponse:
        options = options or NetworkRequestOptions()
        response = await self._get_client().get(url, headers=options.headers)
        return self._to_network_response(response)

    async def send_post_request_async(
        self, url: str, options: NetworkRequestOptions | None = None
    ) -> NetworkResponse:
        options = options or NetworkRequestOptions()
        response = await self._get_client().post(url, content=options.body, headers=options.headers)
        return self._to_network_response(response)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @staticmethod
    def _to_network_response(response: httpx.Response) -> NetworkResponse:
        try:
            body = response.json()
        except ValueError:
            logger.debug(f"Non-JSON response body from {response.request.url}")
            body = {}
        if not isinstance(body, dict):
            body = {}
        return NetworkResponse(headers=dict(response.headers), body=body, status=response.status_code)


class NetworkManager:
    """Wraps a NetworkModule and converts transport failures into NetworkError"""

    def __init__(self, network_client: NetworkModule) -> None:
        self.network_client = network_client

    async def send_post_request(
        self, token_endpoint: str, options: NetworkRequestOptions
    ) -> NetworkResponse:
        try:
            response = await self.network_client.send_post_request_async(token_endpoint, options)
        except httpx.HTTPError as e:
            logger.warning(f"POST to {token_endpoint} failed: {e}")
            raise NetworkError(token_endpoint, str(e)) from e

        logger.debug(f"POST to {token_endpoint} returned status {response.status}")
        return response
