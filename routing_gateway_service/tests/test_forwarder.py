"""Tests for dispatching outbound requests and classifying backend outcomes."""

from __future__ import annotations

import httpx
import pytest
import structlog
from structlog.testing import capture_logs

from routing_gateway_service.app.metrics import GatewayMetrics
from routing_gateway_service.implementations import forwarder as forwarder_module
from routing_gateway_service.implementations.forwarder import Forwarder
from routing_gateway_service.implementations.http_client import GatewayHttpClient
from routing_gateway_service.models.gateway_models import ForwardErrorKind, OutboundRequest
from routing_gateway_service.route_table import BackendService, RouteTable

CUSTOMER_URL = "http://customer.test/customer"


@pytest.fixture
async def forwarder(metrics: GatewayMetrics):
    async with httpx.AsyncClient() as client:
        yield Forwarder(GatewayHttpClient(client), metrics)


@pytest.fixture
def customer_target(route_table: RouteTable):
    return route_table.target_for(BackendService.CUSTOMER)


def _outbound(**kwargs) -> OutboundRequest:
    kwargs.setdefault("method", "GET")
    kwargs.setdefault("url", CUSTOMER_URL)
    kwargs.setdefault("path", "/customer")
    kwargs.setdefault("headers", (("customerId", "c-1"),))
    return OutboundRequest(**kwargs)


class TestForwarder:
    async def test_success_relayed_unchanged(self, forwarder, customer_target, respx_mock):
        route = respx_mock.get(CUSTOMER_URL).mock(
            return_value=httpx.Response(
                200,
                content=b'{"name": "Ann"}',
                headers={
                    "Content-Type": "application/json",
                    "X-Backend": "customer",
                    "Connection": "close",
                },
            )
        )

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_ok
        response = result.value
        assert response.status_code == 200
        assert response.body == b'{"name": "Ann"}'
        assert response.header("x-backend") == "customer"
        assert response.header("connection") is None
        assert route.calls.last.request.headers["customerId"] == "c-1"

    async def test_client_error_statuses_relayed(self, forwarder, customer_target, respx_mock):
        respx_mock.get(CUSTOMER_URL).mock(
            return_value=httpx.Response(404, json={"message": "no such customer"})
        )

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_ok
        assert result.value.status_code == 404
        assert b"no such customer" in result.value.body

    async def test_backend_unauthorized(self, forwarder, customer_target, respx_mock):
        respx_mock.get(CUSTOMER_URL).mock(return_value=httpx.Response(401))

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_err
        assert result.error.kind is ForwardErrorKind.FORWARDING_UNAUTHORIZED
        assert result.error.status_code == 401
        assert result.error.path == "/customer"

    @pytest.mark.parametrize("status_code", [500, 502, 503])
    async def test_backend_server_error_keeps_status(
        self, forwarder, customer_target, respx_mock, status_code
    ):
        respx_mock.get(CUSTOMER_URL).mock(
            return_value=httpx.Response(status_code, text="db password leaked in trace")
        )

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_err
        assert result.error.kind is ForwardErrorKind.FORWARDING_FAILED
        assert result.error.status_code == status_code
        assert "leaked" not in result.error.message

    async def test_transport_failure(self, forwarder, customer_target, respx_mock):
        respx_mock.get(CUSTOMER_URL).mock(side_effect=httpx.ConnectError("refused"))

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_err
        assert result.error.kind is ForwardErrorKind.UNEXPECTED_FORWARDING_ERROR
        assert result.error.status_code == 500

    async def test_timeout_is_transport_failure(self, forwarder, customer_target, respx_mock):
        respx_mock.get(CUSTOMER_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        result = await forwarder.forward(_outbound(), customer_target)

        assert result.is_err
        assert result.error.kind is ForwardErrorKind.UNEXPECTED_FORWARDING_ERROR

    async def test_put_body_sent_byte_for_byte(self, forwarder, route_table, respx_mock):
        url = "http://debit-instruction.test/debitinstruction?mortgageId=m-1&customerId=c-1"
        body = b'{"debInstructSelectedDay":  3}'
        route = respx_mock.put(url).mock(return_value=httpx.Response(204))

        result = await forwarder.forward(
            _outbound(method="PUT", url=url, path="/debitinstruction", body=body),
            route_table.target_for(BackendService.DEBIT_INSTRUCTION),
        )

        assert result.is_ok
        assert result.value.status_code == 204
        assert route.calls.last.request.content == body

    async def test_downstream_calls_counted(self, forwarder, customer_target, metrics, respx_mock):
        respx_mock.get(CUSTOMER_URL).mock(return_value=httpx.Response(200))

        await forwarder.forward(_outbound(), customer_target)

        counter = metrics.downstream_service_calls_total.labels(
            service="customer", method="GET", endpoint="/customer", status_code="200"
        )
        assert counter._value.get() == 1

    async def test_authorization_masked_in_logs(
        self, forwarder, customer_target, respx_mock, monkeypatch
    ):
        respx_mock.get(CUSTOMER_URL).mock(return_value=httpx.Response(200))

        with capture_logs() as logs:
            monkeypatch.setattr(forwarder_module, "logger", structlog.get_logger())
            await forwarder.forward(
                _outbound(headers=(("Authorization", "Bearer secret-token"),)),
                customer_target,
            )

        assert logs
        assert all("secret-token" not in str(entry) for entry in logs)
        prepared = next(e for e in logs if e["event"] == "Preparing to forward request")
        assert ("Authorization", "***") in prepared["headers"]
