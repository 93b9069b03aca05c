"""Test providers for Routing Gateway Service tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide
from prometheus_client import CollectorRegistry

from routing_gateway_service.app.metrics import GatewayMetrics
from routing_gateway_service.config import Settings
from routing_gateway_service.implementations.http_client import GatewayHttpClient
from routing_gateway_service.protocols import HttpClientProtocol, MetricsProtocol
from routing_gateway_service.route_table import RouteTable

LOGIN_URL = "http://login.test"
CUSTOMER_URL = "http://customer.test"
MORTGAGE_URL = "http://mortgage.test"
PRODUCT_URL = "http://product.test"
DEBIT_INSTRUCTION_URL = "http://debit-instruction.test"


def create_test_settings() -> Settings:
    return Settings(
        SERVICE_NAME="routing_gateway_service_test",
        LOGIN_SERVICE_URL=LOGIN_URL,
        CUSTOMER_SERVICE_URL=CUSTOMER_URL,
        MORTGAGE_SERVICE_URL=MORTGAGE_URL,
        PRODUCT_SERVICE_URL=PRODUCT_URL,
        DEBIT_INSTRUCTION_SERVICE_URL=DEBIT_INSTRUCTION_URL,
    )


class InfrastructureTestProvider(Provider):
    """
    Test provider for infrastructure dependencies.

    Mirrors GatewayProvider, with fixed backend URLs for respx mocking and
    an isolated Prometheus registry per container.
    """

    scope = Scope.APP

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or create_test_settings()
        self.registry = CollectorRegistry()

    @provide
    def get_config(self) -> Settings:
        return self.settings

    @provide
    def provide_route_table(self, config: Settings) -> RouteTable:
        return RouteTable.from_settings(config)

    @provide
    async def get_http_client(self) -> AsyncIterator[HttpClientProtocol]:
        """Provide real HTTP client for tests that use respx mocking."""
        async with httpx.AsyncClient() as client:
            yield GatewayHttpClient(client)

    @provide
    def provide_metrics(self) -> MetricsProtocol:
        return GatewayMetrics(registry=self.registry)

    @provide
    def provide_registry(self, metrics: MetricsProtocol) -> CollectorRegistry:
        return self.registry
