"""Dependency injection providers for the Routing Gateway Service.

APP scope holds everything built once per process (settings, route table,
shared HTTP client, pipeline components). REQUEST scope captures the inbound
request as an immutable value.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from uuid import UUID, uuid4

import httpx
from dishka import Provider, Scope, from_context, provide
from fastapi import Request
from prometheus_client import REGISTRY, CollectorRegistry

from routing_gateway_service.app.metrics import GatewayMetrics
from routing_gateway_service.config import Settings, settings
from routing_gateway_service.implementations.auth_gate import AuthGate
from routing_gateway_service.implementations.forwarder import Forwarder
from routing_gateway_service.implementations.gateway_handler import GatewayHandler
from routing_gateway_service.implementations.http_client import GatewayHttpClient
from routing_gateway_service.implementations.request_rewriter import RequestRewriter
from routing_gateway_service.models.gateway_models import InboundRequest
from routing_gateway_service.protocols import (
    AuthGateProtocol,
    ForwarderProtocol,
    HttpClientProtocol,
    MetricsProtocol,
    RequestRewriterProtocol,
)
from routing_gateway_service.route_table import RouteTable


class GatewayProvider(Provider):
    scope = Scope.APP

    @provide
    def get_config(self) -> Settings:
        return settings

    @provide
    def provide_route_table(self, config: Settings) -> RouteTable:
        return RouteTable.from_settings(config)

    @provide
    async def get_http_client(self, config: Settings) -> AsyncIterator[HttpClientProtocol]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.HTTP_CLIENT_TIMEOUT_SECONDS,
                connect=config.HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS,
            )
        ) as httpx_client:
            yield GatewayHttpClient(httpx_client)

    @provide
    def provide_metrics(self) -> MetricsProtocol:
        return GatewayMetrics()

    @provide
    def provide_registry(self, metrics: MetricsProtocol) -> CollectorRegistry:
        # Depending on metrics registers the gateway collectors before the first scrape.
        return REGISTRY


class PipelineProvider(Provider):
    """Wires the authentication and forwarding pipeline from its protocols."""

    scope = Scope.APP

    @provide
    def provide_auth_gate(
        self,
        http_client: HttpClientProtocol,
        route_table: RouteTable,
        config: Settings,
        metrics: MetricsProtocol,
    ) -> AuthGateProtocol:
        return AuthGate(http_client, route_table, config, metrics)

    @provide
    def provide_rewriter(self, config: Settings) -> RequestRewriterProtocol:
        return RequestRewriter(config)

    @provide
    def provide_forwarder(
        self, http_client: HttpClientProtocol, metrics: MetricsProtocol
    ) -> ForwarderProtocol:
        return Forwarder(http_client, metrics)

    @provide
    def provide_gateway_handler(
        self,
        auth_gate: AuthGateProtocol,
        rewriter: RequestRewriterProtocol,
        forwarder: ForwarderProtocol,
        route_table: RouteTable,
        config: Settings,
        metrics: MetricsProtocol,
    ) -> GatewayHandler:
        return GatewayHandler(auth_gate, rewriter, forwarder, route_table, config, metrics)


class RequestContextProvider(Provider):
    """Request-scoped provider capturing the inbound call.

    The correlation ID comes from request state (set by CorrelationIDMiddleware).
    """

    request = from_context(provides=Request, scope=Scope.REQUEST)

    @provide(scope=Scope.REQUEST)
    def provide_correlation_id(self, request: Request) -> UUID:
        return getattr(request.state, "correlation_id", uuid4())

    @provide(scope=Scope.REQUEST)
    async def provide_inbound_request(
        self, request: Request, correlation_id: UUID
    ) -> InboundRequest:
        body = await request.body()
        return InboundRequest(
            method=request.method,
            path=request.url.path,
            query_params=tuple(request.query_params.multi_items()),
            headers=tuple(request.headers.items()),
            body=body or None,
            correlation_id=correlation_id,
        )
