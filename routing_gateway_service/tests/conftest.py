"""
Shared fixtures for Routing Gateway Service tests.

The app under test runs with the production pipeline providers and a test
infrastructure provider; backend services are mocked with respx.
"""

from __future__ import annotations

import pytest
from dishka import make_async_container
from dishka.integrations.fastapi import FastapiProvider
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry

from routing_gateway_service.app.di import PipelineProvider, RequestContextProvider
from routing_gateway_service.app.main import create_app
from routing_gateway_service.app.metrics import GatewayMetrics
from routing_gateway_service.config import Settings
from routing_gateway_service.route_table import RouteTable
from routing_gateway_service.tests.test_provider import (
    InfrastructureTestProvider,
    create_test_settings,
)


@pytest.fixture
def test_settings() -> Settings:
    return create_test_settings()


@pytest.fixture
def route_table(test_settings: Settings) -> RouteTable:
    return RouteTable.from_settings(test_settings)


@pytest.fixture
def metrics() -> GatewayMetrics:
    """GatewayMetrics bound to an isolated registry."""
    return GatewayMetrics(registry=CollectorRegistry())


@pytest.fixture
async def container(test_settings: Settings):
    container = make_async_container(
        InfrastructureTestProvider(test_settings),
        PipelineProvider(),
        RequestContextProvider(),
        FastapiProvider(),
    )
    yield container
    await container.close()


@pytest.fixture
async def client(container):
    app = create_app(container)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
