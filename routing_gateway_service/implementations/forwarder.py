"""Dispatch of outbound requests to backend services.

Backend responses are relayed unchanged apart from connection-scoped
headers. A 401 from a backend is attributed to the forwarding hop; 5xx
responses and transport failures are reported without backend detail.
"""

from __future__ import annotations

import httpx

from routing_gateway_service.implementations.header_utils import relayable_headers
from routing_gateway_service.models.gateway_models import (
    ForwardError,
    ForwardErrorKind,
    GatewayResponse,
    OutboundRequest,
)
from routing_gateway_service.protocols import (
    ForwarderProtocol,
    HttpClientProtocol,
    MetricsProtocol,
)
from routing_gateway_service.route_table import RouteTarget
from routing_service_libs.logging_utils import create_service_logger, mask_header_pairs
from routing_service_libs.result import Result

logger = create_service_logger("routing_gateway.forwarder")


class Forwarder(ForwarderProtocol):
    """Sends one request per call to the target backend and classifies the outcome."""

    def __init__(self, http_client: HttpClientProtocol, metrics: MetricsProtocol) -> None:
        self._http_client = http_client
        self._metrics = metrics

    async def forward(
        self, outbound: OutboundRequest, target: RouteTarget
    ) -> Result[GatewayResponse, ForwardError]:
        path = outbound.path
        logger.info(
            "Preparing to forward request",
            backend=target.service.value,
            outbound_method=outbound.method,
            outbound_path=path,
            headers=mask_header_pairs(outbound.headers),
        )

        try:
            with self._metrics.downstream_service_call_duration_seconds.labels(
                service=target.service.value, method=outbound.method, endpoint=path
            ).time():
                response = await self._http_client.send_request(
                    outbound.method,
                    outbound.url,
                    headers=list(outbound.headers),
                    content=outbound.body,
                )
        except httpx.HTTPError as e:
            logger.error(
                f"Unexpected error while forwarding request to path: {path}: {e!r}",
            )
            self._record(target, outbound, "transport_error")
            return Result.err(
                ForwardError(
                    kind=ForwardErrorKind.UNEXPECTED_FORWARDING_ERROR,
                    status_code=500,
                    path=path,
                    message="Unexpected error during request forwarding",
                )
            )

        status_code = response.status_code
        self._record(target, outbound, str(status_code))
        logger.info(f"Request forwarded to path: {path} with response status: {status_code}")

        if status_code == 401:
            return Result.err(
                ForwardError(
                    kind=ForwardErrorKind.FORWARDING_UNAUTHORIZED,
                    status_code=401,
                    path=path,
                    message=f"Unauthorized request when forwarding to {path}",
                )
            )
        if status_code >= 500:
            logger.error(f"Error forwarding request to path: {path}. Status: {status_code}")
            return Result.err(
                ForwardError(
                    kind=ForwardErrorKind.FORWARDING_FAILED,
                    status_code=status_code,
                    path=path,
                    message=f"Request forwarding to {path} failed",
                )
            )

        return Result.ok(
            GatewayResponse(
                status_code=status_code,
                headers=relayable_headers(response),
                body=response.content,
            )
        )

    def _record(self, target: RouteTarget, outbound: OutboundRequest, status: str) -> None:
        self._metrics.downstream_service_calls_total.labels(
            service=target.service.value,
            method=outbound.method,
            endpoint=outbound.path,
            status_code=status,
        ).inc()
