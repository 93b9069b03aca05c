"""HTTP client implementation for the Routing Gateway.

Conforms to HttpClientProtocol while using httpx for the actual HTTP
operations. Transport failures surface as httpx exceptions; callers decide
how to classify them.
"""

from __future__ import annotations

import httpx

from routing_gateway_service.protocols import HttpClientProtocol


class GatewayHttpClient(HttpClientProtocol):
    """Thin wrapper over a shared httpx.AsyncClient returning raw responses."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize the HTTP client.

        Args:
            client: The underlying httpx AsyncClient to use
        """
        self._client = client

    async def send_request(
        self,
        method: str,
        url: str,
        *,
        headers: list[tuple[str, str]] | None = None,
        content: bytes | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        """Send one request and return the response with its body read.

        Args:
            method: HTTP method
            url: Fully-qualified target URL, query string included
            headers: Header pairs, repeated names allowed (optional)
            content: Raw body bytes; None sends no body (optional)
            json: JSON body, used when content is None (optional)

        Returns:
            Raw httpx Response object
        """
        request = self._client.build_request(
            method=method,
            url=url,
            headers=headers,
            content=content,
            json=json,
        )
        return await self._client.send(request)
