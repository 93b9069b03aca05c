"""FastAPI exception handlers rendering GatewayError and unexpected failures."""

from __future__ import annotations

from uuid import UUID, uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from routing_service_libs.logging_utils import create_service_logger

from .error_models import ErrorCode
from .gateway_error import GatewayError, create_error_detail

logger = create_service_logger("routing_service_libs.error_handling")


def _correlation_id(request: Request) -> UUID:
    correlation_id = getattr(request.state, "correlation_id", None)
    return correlation_id if isinstance(correlation_id, UUID) else uuid4()


def register_error_handlers(app: FastAPI, service_name: str = "routing-gateway-service") -> None:
    """Render GatewayError as its ErrorDetail and anything else as a generic 500."""

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        logger.warning(
            "Request failed with gateway error",
            error_code=exc.error_code.value,
            operation=exc.error_detail.operation,
            error_message=exc.error_detail.message,
        )
        return JSONResponse(
            status_code=exc.status_code, content=exc.error_detail.to_response_body()
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        detail = create_error_detail(
            ErrorCode.UNKNOWN_ERROR,
            "Internal server error",
            service=service_name,
            operation=f"{request.method.lower()}_{request.url.path.strip('/') or 'root'}",
            correlation_id=_correlation_id(request),
        )
        return JSONResponse(status_code=500, content=detail.to_response_body())
