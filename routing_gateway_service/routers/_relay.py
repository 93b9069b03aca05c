"""Conversion of pipeline responses into Starlette responses."""

from __future__ import annotations

from starlette.responses import Response

from routing_gateway_service.models.gateway_models import GatewayResponse


def to_response(gateway_response: GatewayResponse) -> Response:
    """Build the caller-facing response, keeping repeated headers such as Set-Cookie."""
    response = Response(content=gateway_response.body, status_code=gateway_response.status_code)
    for name, value in gateway_response.headers:
        response.headers.append(name, value)
    return response
