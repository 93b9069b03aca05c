"""Startup setup for the Routing Gateway Service."""

from __future__ import annotations

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from routing_gateway_service.app.di import GatewayProvider, PipelineProvider, RequestContextProvider
from routing_service_libs.logging_utils import create_service_logger

logger = create_service_logger("routing_gateway.startup")


def create_di_container() -> AsyncContainer:
    """Create and configure the DI container."""
    try:
        logger.info("Creating DI container...")
        container = make_async_container(
            GatewayProvider(),
            PipelineProvider(),
            RequestContextProvider(),
            FastapiProvider(),
        )
        logger.info("DI container created successfully")
        return container
    except Exception as e:
        logger.critical(f"Failed to create DI container: {e}", exc_info=True)
        raise


def setup_dependency_injection(app: FastAPI, container: AsyncContainer) -> None:
    """Setup Dishka integration with FastAPI."""
    try:
        logger.info("Setting up dependency injection...")
        setup_dishka(container, app)
        app.state.di_container = container
        logger.info("Dependency injection setup completed")
    except Exception as e:
        logger.critical(f"Failed to setup dependency injection: {e}", exc_info=True)
        raise


async def shutdown_services(app: FastAPI) -> None:
    """Close the DI container, releasing the shared HTTP client."""
    container: AsyncContainer | None = getattr(app.state, "di_container", None)
    if container is not None:
        await container.close()
    logger.info("Routing Gateway Service shutdown completed")
