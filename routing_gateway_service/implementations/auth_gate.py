"""Credential validation against the login service.

Every call re-validates with exactly one request to the login service; no
result is cached between requests. Expected failures are returned as
AuthError values, never raised.
"""

from __future__ import annotations

import json

import httpx
from pydantic import ValidationError

from routing_gateway_service.config import Settings
from routing_gateway_service.implementations.header_utils import relayable_headers
from routing_gateway_service.models.gateway_models import (
    AuthError,
    AuthErrorKind,
    BearerToken,
    Credential,
    GatewayResponse,
    Identity,
    Pairs,
    UsernamePassword,
    first_value,
)
from routing_gateway_service.models.schemas import LoginRequest
from routing_gateway_service.protocols import AuthGateProtocol, HttpClientProtocol, MetricsProtocol
from routing_gateway_service.route_table import BackendService, RouteTable
from routing_service_libs.logging_utils import create_service_logger
from routing_service_libs.result import Result

logger = create_service_logger("routing_gateway.auth_gate")


def credential_from_headers(headers: Pairs) -> BearerToken | None:
    """Extract a bearer token from the Authorization header, if well-formed."""
    authorization = first_value(headers, "authorization", case_sensitive=False)
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return BearerToken(parts[1])


def credential_from_login_body(body: bytes | None) -> UsernamePassword | None:
    """Parse a ``{username, password}`` login body; None when unreadable."""
    if not body:
        return None
    try:
        login = LoginRequest.model_validate_json(body)
    except ValidationError:
        return None
    return UsernamePassword(username=login.username or "", password=login.password or "")


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class AuthGate(AuthGateProtocol):
    """Resolves a caller Identity from a bearer token or username/password."""

    def __init__(
        self,
        http_client: HttpClientProtocol,
        route_table: RouteTable,
        settings: Settings,
        metrics: MetricsProtocol,
    ) -> None:
        self._http_client = http_client
        self._login_target = route_table.target_for(BackendService.LOGIN)
        self._settings = settings
        self._metrics = metrics

    async def authenticate(
        self, credential: Credential | None, correlation_id: str | None = None
    ) -> Result[Identity, AuthError]:
        if credential is None:
            logger.warning("Credential missing in request")
            return self._fail(
                "none",
                AuthError(
                    kind=AuthErrorKind.MISSING_CREDENTIAL,
                    status_code=401,
                    message="Authentication details missing",
                    reason="missing_credential",
                ),
            )
        if isinstance(credential, BearerToken):
            return await self._validate_token(credential, correlation_id)
        return await self._login(credential, correlation_id)

    async def _validate_token(
        self, credential: BearerToken, correlation_id: str | None
    ) -> Result[Identity, AuthError]:
        url = f"{self._login_target.base_url}{self._settings.AUTH_VALIDATE_PATH}"
        headers = [("Authorization", f"Bearer {credential.token}")]
        if correlation_id:
            headers.append(("X-Correlation-ID", correlation_id))

        try:
            response = await self._http_client.send_request("POST", url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Login service unreachable during token validation: {e!r}")
            return self._fail("bearer", self._unavailable())

        if response.status_code == 401:
            logger.warning("Token rejected by login service")
            return self._fail(
                "bearer",
                AuthError(
                    kind=AuthErrorKind.INVALID_TOKEN,
                    status_code=401,
                    message="Invalid JWT",
                    reason="invalid_token",
                ),
            )
        if not _is_success(response.status_code):
            logger.error(
                f"Error during JWT validation. Status: {response.status_code}",
            )
            return self._fail("bearer", self._backend_error(response.status_code, "JWT validation"))

        customer_id = self._customer_id_from(response)
        if not customer_id:
            logger.error("Login service accepted token without returning a customerId")
            return self._fail("bearer", self._backend_error(502, "JWT validation"))

        self._metrics.auth_validations_total.labels(
            credential_type="bearer", outcome="success"
        ).inc()
        logger.debug("Token validated", customer_id=customer_id)
        return Result.ok(Identity(customer_id=customer_id))

    async def _login(
        self, credential: UsernamePassword, correlation_id: str | None
    ) -> Result[Identity, AuthError]:
        if not credential.username or not credential.password:
            logger.warning("Authentication details missing in login request.")
            return self._fail(
                "password",
                AuthError(
                    kind=AuthErrorKind.MISSING_CREDENTIAL,
                    status_code=401,
                    message="Authentication details missing",
                    reason="missing_username_or_password",
                ),
            )

        logger.info(f"Login service call attempt with username: {credential.username}")
        url = f"{self._login_target.base_url}{self._settings.AUTH_LOGIN_PATH}"
        headers = [("X-Correlation-ID", correlation_id)] if correlation_id else None

        try:
            response = await self._http_client.send_request(
                "POST",
                url,
                headers=headers,
                json={"username": credential.username, "password": credential.password},
            )
        except httpx.HTTPError as e:
            logger.error(f"Login service unreachable during login: {e!r}")
            return self._fail("password", self._unavailable())

        logger.info(f"Login service responded with status: {response.status_code}")
        if response.status_code == 401:
            return self._fail(
                "password",
                AuthError(
                    kind=AuthErrorKind.INVALID_CREDENTIALS,
                    status_code=401,
                    message="Invalid credentials",
                    reason="invalid_credentials",
                ),
            )
        if not _is_success(response.status_code):
            return self._fail("password", self._backend_error(response.status_code, "login"))

        self._metrics.auth_validations_total.labels(
            credential_type="password", outcome="success"
        ).inc()
        session = GatewayResponse(
            status_code=response.status_code,
            headers=relayable_headers(response),
            body=response.content,
        )
        return Result.ok(Identity(customer_id=self._customer_id_from(response), session=session))

    def _customer_id_from(self, response: httpx.Response) -> str | None:
        header_name = self._settings.IDENTITY_HEADER_NAME
        customer_id = response.headers.get(header_name)
        if customer_id:
            return customer_id
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if isinstance(payload, dict):
            value = payload.get(header_name)
            if value is not None and str(value):
                return str(value)
        return None

    def _backend_error(self, status_code: int, operation: str) -> AuthError:
        return AuthError(
            kind=AuthErrorKind.AUTH_BACKEND_ERROR,
            status_code=status_code,
            message=f"Error during {operation}",
            reason="auth_backend_error",
        )

    def _unavailable(self) -> AuthError:
        return AuthError(
            kind=AuthErrorKind.AUTH_BACKEND_UNAVAILABLE,
            status_code=503,
            message="Authentication service unavailable",
            reason="auth_backend_unreachable",
        )

    def _fail(self, credential_type: str, error: AuthError) -> Result[Identity, AuthError]:
        self._metrics.auth_validations_total.labels(
            credential_type=credential_type, outcome=error.kind.value
        ).inc()
        return Result.err(error)
