from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routing_gateway_service.app.startup_setup import (
    create_di_container,
    setup_dependency_injection,
    shutdown_services,
)
from routing_gateway_service.config import settings
from routing_service_libs.error_handling.fastapi import (
    register_error_handlers as register_fastapi_error_handlers,
)
from routing_service_libs.logging_utils import configure_service_logging

from ..routers import login_routes, service_routes
from ..routers.health_routes import router as health_router
from .middleware import CorrelationIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await shutdown_services(app)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    configure_service_logging(
        settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT.value,
        log_level=settings.LOG_LEVEL,
    )

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version="1.0.0",
        description=(
            "Routing Gateway - authenticates callers against the login service and "
            "forwards requests to the customer, mortgage, product and debit "
            "instruction services"
        ),
        docs_url="/docs" if settings.is_development() else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development() else None,
        lifespan=lifespan,
    )

    register_fastapi_error_handlers(app, service_name=settings.SERVICE_NAME)

    # Correlation ID must be early in chain
    app.add_middleware(CorrelationIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.include_router(health_router, tags=["Health"])
    app.include_router(login_routes.router, tags=["Login"])
    app.include_router(service_routes.router, tags=["Routing"])

    setup_dependency_injection(app, container or create_di_container())

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "routing_gateway_service.app.main:create_app",
        factory=True,
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        reload=settings.is_development(),
        log_level=settings.LOG_LEVEL.lower(),
    )
