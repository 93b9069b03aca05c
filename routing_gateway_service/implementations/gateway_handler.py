"""Per-request orchestration: authenticate, rewrite, forward, relay.

Each request moves through Received -> Authenticating -> Authenticated ->
Forwarding and ends either Responded (backend response relayed) or Rejected
(synthesized error response). At most two backend calls are made, one after
the other: the login service, then the target backend.
"""

from __future__ import annotations

import json
from time import perf_counter

from pydantic import ValidationError

from routing_gateway_service.config import Settings
from routing_gateway_service.implementations.auth_gate import (
    credential_from_headers,
    credential_from_login_body,
)
from routing_gateway_service.models.gateway_models import (
    AuthError,
    AuthErrorKind,
    ForwardError,
    ForwardErrorKind,
    GatewayResponse,
    Identity,
    InboundRequest,
)
from routing_gateway_service.protocols import (
    AuthGateProtocol,
    ForwarderProtocol,
    MetricsProtocol,
    RequestRewriterProtocol,
)
from routing_gateway_service.route_table import AuthMode, RouteDefinition, RouteTable
from routing_service_libs.error_handling import ErrorCode, create_error_detail
from routing_service_libs.logging_utils import create_service_logger

logger = create_service_logger("routing_gateway.gateway_handler")

AUTH_ERROR_CODES: dict[AuthErrorKind, ErrorCode] = {
    AuthErrorKind.MISSING_CREDENTIAL: ErrorCode.AUTHENTICATION_ERROR,
    AuthErrorKind.INVALID_CREDENTIALS: ErrorCode.AUTHENTICATION_ERROR,
    AuthErrorKind.INVALID_TOKEN: ErrorCode.AUTHENTICATION_ERROR,
    AuthErrorKind.AUTH_BACKEND_ERROR: ErrorCode.EXTERNAL_SERVICE_ERROR,
    AuthErrorKind.AUTH_BACKEND_UNAVAILABLE: ErrorCode.SERVICE_UNAVAILABLE,
}

FORWARD_ERROR_CODES: dict[ForwardErrorKind, ErrorCode] = {
    ForwardErrorKind.FORWARDING_UNAUTHORIZED: ErrorCode.AUTHENTICATION_ERROR,
    ForwardErrorKind.FORWARDING_FAILED: ErrorCode.EXTERNAL_SERVICE_ERROR,
    ForwardErrorKind.UNEXPECTED_FORWARDING_ERROR: ErrorCode.UNKNOWN_ERROR,
}


class GatewayHandler:
    """Drives one request through the authentication and forwarding pipeline."""

    def __init__(
        self,
        auth_gate: AuthGateProtocol,
        rewriter: RequestRewriterProtocol,
        forwarder: ForwarderProtocol,
        route_table: RouteTable,
        settings: Settings,
        metrics: MetricsProtocol,
    ) -> None:
        self._auth_gate = auth_gate
        self._rewriter = rewriter
        self._forwarder = forwarder
        self._route_table = route_table
        self._service_name = settings.SERVICE_NAME
        self._metrics = metrics

    async def handle(self, route: RouteDefinition, inbound: InboundRequest) -> GatewayResponse:
        logger.info(f"Routing service call attempt to {route.backend.value} service")
        started = perf_counter()
        response = await self._handle(route, inbound)
        self._metrics.http_request_duration_seconds.labels(
            method=route.method, endpoint=route.path
        ).observe(perf_counter() - started)
        self._metrics.http_requests_total.labels(
            method=route.method, endpoint=route.path, http_status=str(response.status_code)
        ).inc()
        return response

    async def _handle(self, route: RouteDefinition, inbound: InboundRequest) -> GatewayResponse:
        rejection = self._validate(route, inbound)
        if rejection is not None:
            return rejection

        correlation_id = str(inbound.correlation_id)

        if route.auth is AuthMode.LOGIN:
            credential = credential_from_login_body(inbound.body)
            login = await self._auth_gate.authenticate(credential, correlation_id)
            if login.is_err:
                return self._reject_auth(route, inbound, login.error)
            session = login.value.session
            if session is None:
                return self._reject_auth(
                    route,
                    inbound,
                    AuthError(
                        kind=AuthErrorKind.AUTH_BACKEND_ERROR,
                        status_code=502,
                        message="Error during login",
                        reason="missing_session",
                    ),
                )
            return session

        identity: Identity | None = None
        if route.auth is AuthMode.BEARER:
            authenticated = await self._auth_gate.authenticate(
                credential_from_headers(inbound.headers), correlation_id
            )
            if authenticated.is_err:
                return self._reject_auth(route, inbound, authenticated.error)
            identity = authenticated.value

        target = self._route_table.target_for(route.backend)
        outbound = self._rewriter.rewrite(inbound, route, target, identity)
        forwarded = await self._forwarder.forward(outbound, target)
        if forwarded.is_err:
            return self._reject_forward(route, inbound, forwarded.error)
        return forwarded.value

    def _validate(self, route: RouteDefinition, inbound: InboundRequest) -> GatewayResponse | None:
        missing = [name for name in route.required_query if not inbound.query(name)]
        if missing:
            return self._error_response(
                route,
                inbound,
                status_code=400,
                error_code=ErrorCode.VALIDATION_ERROR,
                message=f"Required query parameter missing: {', '.join(missing)}",
                error_type="MissingParameter",
                missing_parameters=missing,
            )

        if route.body_model is not None:
            try:
                route.body_model.model_validate_json(inbound.body or b"")
            except ValidationError as e:
                return self._error_response(
                    route,
                    inbound,
                    status_code=400,
                    error_code=ErrorCode.VALIDATION_ERROR,
                    message="Request body is missing or invalid",
                    error_type="InvalidBody",
                    fields=sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()}),
                )
        return None

    def _reject_auth(
        self, route: RouteDefinition, inbound: InboundRequest, error: AuthError
    ) -> GatewayResponse:
        return self._error_response(
            route,
            inbound,
            status_code=error.status_code,
            error_code=AUTH_ERROR_CODES[error.kind],
            message=error.message,
            error_type=error.kind.value,
            reason=error.reason,
        )

    def _reject_forward(
        self, route: RouteDefinition, inbound: InboundRequest, error: ForwardError
    ) -> GatewayResponse:
        return self._error_response(
            route,
            inbound,
            status_code=error.status_code,
            error_code=FORWARD_ERROR_CODES[error.kind],
            message=error.message,
            error_type=error.kind.value,
            path=error.path,
        )

    def _error_response(
        self,
        route: RouteDefinition,
        inbound: InboundRequest,
        *,
        status_code: int,
        error_code: ErrorCode,
        message: str,
        error_type: str,
        **details: object,
    ) -> GatewayResponse:
        logger.warning(
            f"Request rejected: {message}",
            route=route.name,
            status_code=status_code,
            error_type=error_type,
        )
        self._metrics.api_errors_total.labels(endpoint=route.path, error_type=error_type).inc()
        detail = create_error_detail(
            error_code,
            message,
            service=self._service_name,
            operation=route.name,
            correlation_id=inbound.correlation_id,
            error_type=error_type,
            **details,
        )
        return GatewayResponse(
            status_code=status_code,
            headers=(("content-type", "application/json"),),
            body=json.dumps(detail.to_response_body()).encode(),
        )
