"""Construction of the outbound request for a matched route.

The outbound request is a new immutable value derived from the inbound one:
the route owns method and path, inbound query parameters and headers are
carried over in their original order, and identity fields are appended.
"""

from __future__ import annotations

from urllib.parse import urlencode

from routing_gateway_service.config import Settings
from routing_gateway_service.implementations.header_utils import NON_FORWARDED_HEADERS
from routing_gateway_service.models.gateway_models import (
    Identity,
    InboundRequest,
    OutboundRequest,
    Pairs,
)
from routing_gateway_service.protocols import RequestRewriterProtocol
from routing_gateway_service.route_table import RouteDefinition, RouteTarget
from routing_service_libs.logging_utils import create_service_logger, mask_header_pairs

logger = create_service_logger("routing_gateway.request_rewriter")

CORRELATION_HEADER = "X-Correlation-ID"


class RequestRewriter(RequestRewriterProtocol):
    """Builds OutboundRequest values from InboundRequest values."""

    def __init__(self, settings: Settings) -> None:
        self._identity_name = settings.IDENTITY_HEADER_NAME

    def rewrite(
        self,
        inbound: InboundRequest,
        route: RouteDefinition,
        target: RouteTarget,
        identity: Identity | None = None,
    ) -> OutboundRequest:
        query_params = self._merge_query(inbound, route, identity)
        headers = self._copy_headers(inbound, route, identity)

        url = f"{target.base_url}{route.path}"
        if query_params:
            url = f"{url}?{urlencode(query_params)}"

        outbound = OutboundRequest(
            method=route.method,
            url=url,
            path=route.path,
            query_params=query_params,
            headers=headers,
            body=inbound.body if inbound.body else None,
        )
        logger.debug(
            "Outbound request prepared",
            backend=target.service.value,
            outbound_path=route.path,
            headers=mask_header_pairs(headers),
        )
        return outbound

    def _merge_query(
        self, inbound: InboundRequest, route: RouteDefinition, identity: Identity | None
    ) -> Pairs:
        # Resource parameters such as mortgageId are already part of the
        # inbound query (the handler rejects requests lacking them), so only
        # the identity is appended here.
        merged = list(inbound.query_params)
        if identity is not None and identity.customer_id and route.identity_query:
            merged.append((self._identity_name, identity.customer_id))
        return tuple(merged)

    def _copy_headers(
        self,
        inbound: InboundRequest,
        route: RouteDefinition,
        identity: Identity | None,
    ) -> Pairs:
        # The credential stays at the gateway; backends trust the injected identity.
        dropped = NON_FORWARDED_HEADERS | {"authorization", CORRELATION_HEADER.lower()}
        customer_id = None
        if identity is not None and route.identity_header:
            customer_id = identity.customer_id
        if customer_id:
            dropped = dropped | {self._identity_name.lower()}

        headers: list[tuple[str, str]] = []
        for name, value in inbound.headers:
            if name.lower() in dropped:
                continue
            headers.append((name, value))

        if customer_id:
            headers.append((self._identity_name, customer_id))
        headers.append((CORRELATION_HEADER, str(inbound.correlation_id)))
        return tuple(headers)
