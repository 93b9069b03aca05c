"""Health and metrics routes for the Routing Gateway Service."""

from __future__ import annotations

from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from routing_gateway_service.config import Settings
from routing_gateway_service.route_table import RouteTable
from routing_service_libs.logging_utils import create_service_logger

router = APIRouter(tags=["Health"])
logger = create_service_logger("routing_gateway.routers.health")


@router.get("/healthz")
@inject
async def health_check(
    config: FromDishka[Settings],
    route_table: FromDishka[RouteTable],
) -> dict[str, str | dict]:
    """Report liveness and the configured backend addresses."""
    logger.debug("Health check requested")
    return {
        "service": config.SERVICE_NAME,
        "status": "healthy",
        "message": "Routing Gateway Service is healthy",
        "version": "1.0.0",
        "checks": {"service_responsive": True},
        "dependencies": {
            service.value: {
                "base_url": target.base_url,
                "note": "Availability checked on request",
            }
            for service, target in route_table.targets.items()
        },
        "environment": config.ENVIRONMENT.value,
    }


@router.get("/metrics", response_class=PlainTextResponse)
@inject
async def metrics(registry: FromDishka[CollectorRegistry]):
    """Prometheus metrics endpoint."""
    try:
        metrics_data = generate_latest(registry)
        return PlainTextResponse(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return PlainTextResponse(content="Error generating metrics", status_code=500)
