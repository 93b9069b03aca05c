"""Login route: exchanges username/password for a session at the login service."""

from __future__ import annotations

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter
from starlette.responses import Response

from routing_gateway_service.implementations.gateway_handler import GatewayHandler
from routing_gateway_service.models.gateway_models import InboundRequest
from routing_gateway_service.route_table import LOGIN_ROUTE

from ._relay import to_response

router = APIRouter()


@router.post(
    "/login",
    summary="Login",
    description="Exchange username and password for a session at the login service",
    response_description="Login service response, relayed unchanged",
    responses={
        200: {"description": "Login succeeded; session issued by the login service"},
        401: {
            "description": "Credentials missing or rejected",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "error_code": "AUTHENTICATION_ERROR",
                            "message": "Authentication details missing",
                            "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                            "service": "routing-gateway-service",
                            "operation": "login",
                            "details": {"error_type": "MissingCredential"},
                        }
                    }
                }
            },
        },
        503: {"description": "Login service unreachable"},
    },
)
@inject
async def login(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    """
    Forward a `{username, password}` body to the login service.

    Both fields must be present and non-empty; otherwise the gateway answers
    401 without contacting the login service. A successful login response
    (status, headers, body) is relayed to the caller unchanged.
    """
    return to_response(await handler.handle(LOGIN_ROUTE, inbound))
