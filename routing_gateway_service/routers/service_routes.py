"""
Authenticated routes forwarded to the customer, mortgage, product and
debit instruction services.

Each endpoint requires `Authorization: Bearer <token>`. The token is
validated by the login service on every call and the resolved customerId
is injected according to the route definition.
"""

from __future__ import annotations

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter
from starlette.responses import Response

from routing_gateway_service.implementations.gateway_handler import GatewayHandler
from routing_gateway_service.models.gateway_models import InboundRequest
from routing_gateway_service.route_table import (
    CUSTOMER_ROUTE,
    GET_DEBIT_INSTRUCTION_ROUTE,
    MORTGAGES_ROUTE,
    PRODUCT_ROUTE,
    PUT_DEBIT_INSTRUCTION_ROUTE,
)

from ._relay import to_response

router = APIRouter()

_AUTH_RESPONSES: dict[int | str, dict] = {
    401: {"description": "Bearer token missing or rejected"},
    503: {"description": "Login service unreachable"},
    500: {"description": "Backend service could not be reached"},
}
_QUERY_RESPONSES: dict[int | str, dict] = {
    **_AUTH_RESPONSES,
    400: {"description": "Required query parameter mortgageId missing"},
}


@router.get(
    "/customer",
    summary="Customer details",
    description="Forward to the customer service with the caller's customerId header",
    responses=_AUTH_RESPONSES,
)
@inject
async def route_to_customer_service(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    return to_response(await handler.handle(CUSTOMER_ROUTE, inbound))


@router.get(
    "/mortgages",
    summary="Customer mortgages",
    description="Forward to the mortgage service with the caller's customerId header",
    responses=_AUTH_RESPONSES,
)
@inject
async def route_to_mortgage_service(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    return to_response(await handler.handle(MORTGAGES_ROUTE, inbound))


@router.get(
    "/product",
    summary="Mortgage product",
    description="Forward to the product service; requires the mortgageId query parameter",
    responses=_QUERY_RESPONSES,
)
@inject
async def route_to_product_service(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    """No identity is injected for product lookups; the token is still validated."""
    return to_response(await handler.handle(PRODUCT_ROUTE, inbound))


@router.get(
    "/debitinstruction",
    summary="Debit instruction",
    description=(
        "Forward to the debit instruction service with customerId and mortgageId "
        "as query parameters"
    ),
    responses=_QUERY_RESPONSES,
)
@inject
async def route_to_debit_instruction_service(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    return to_response(await handler.handle(GET_DEBIT_INSTRUCTION_ROUTE, inbound))


@router.put(
    "/debitinstruction",
    summary="Update debit instruction",
    description=(
        "Forward a `{debInstructSelectedDay: int}` body to the debit instruction "
        "service with customerId and mortgageId as query parameters"
    ),
    responses={**_QUERY_RESPONSES, 400: {"description": "mortgageId or body invalid"}},
)
@inject
async def route_to_update_debit_instruction_service(
    inbound: FromDishka[InboundRequest],
    handler: FromDishka[GatewayHandler],
) -> Response:
    """The body is validated here but forwarded byte for byte."""
    return to_response(await handler.handle(PUT_DEBIT_INSTRUCTION_ROUTE, inbound))
