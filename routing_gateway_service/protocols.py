"""
Protocols for the Routing Gateway Service.

Defines the interfaces used for dependency injection. The gateway pipeline
depends on these protocols, not on concrete implementations.
"""

from __future__ import annotations

from typing import Protocol

import httpx
from prometheus_client import Counter, Histogram

from routing_gateway_service.models.gateway_models import (
    AuthError,
    Credential,
    ForwardError,
    GatewayResponse,
    Identity,
    InboundRequest,
    OutboundRequest,
)
from routing_gateway_service.route_table import RouteDefinition, RouteTarget
from routing_service_libs.result import Result


class HttpClientProtocol(Protocol):
    """Protocol for the outbound HTTP client."""

    async def send_request(
        self,
        method: str,
        url: str,
        *,
        headers: list[tuple[str, str]] | None = None,
        content: bytes | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        """Send one request and return the fully read response."""
        ...


class MetricsProtocol(Protocol):
    """Protocol for metrics collection matching GatewayMetrics."""

    @property
    def http_requests_total(self) -> Counter: ...

    @property
    def http_request_duration_seconds(self) -> Histogram: ...

    @property
    def downstream_service_calls_total(self) -> Counter: ...

    @property
    def downstream_service_call_duration_seconds(self) -> Histogram: ...

    @property
    def auth_validations_total(self) -> Counter: ...

    @property
    def api_errors_total(self) -> Counter: ...


class AuthGateProtocol(Protocol):
    """Validates a caller credential against the authentication backend."""

    async def authenticate(
        self, credential: Credential | None, correlation_id: str | None = None
    ) -> Result[Identity, AuthError]: ...


class RequestRewriterProtocol(Protocol):
    """Derives the outbound request for a route from the inbound request."""

    def rewrite(
        self,
        inbound: InboundRequest,
        route: RouteDefinition,
        target: RouteTarget,
        identity: Identity | None = None,
    ) -> OutboundRequest: ...


class ForwarderProtocol(Protocol):
    """Dispatches an outbound request to its backend."""

    async def forward(
        self, outbound: OutboundRequest, target: RouteTarget
    ) -> Result[GatewayResponse, ForwardError]: ...
